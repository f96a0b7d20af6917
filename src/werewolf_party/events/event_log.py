"""Chronological event log of a single session."""

from datetime import datetime
from typing import Optional, TypeVar

import yaml
from pydantic import BaseModel, Field

from .game_events import GameEvent
from .event_formatter import EventFormatter

E = TypeVar("E", bound=GameEvent)


class EventLog(BaseModel):
    """Append-only list of events in the order they happened."""

    game_id: str = Field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))
    channel_id: str = ""
    events: list[GameEvent] = Field(default_factory=list)
    names: dict[str, str] = Field(default_factory=dict)  # participant id -> display name

    def append(self, event: E) -> E:
        self.events.append(event)
        return event

    def since(self, index: int) -> list[GameEvent]:
        """Events recorded at or after position `index`."""
        return self.events[index:]

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, event_type)]

    def last(self, event_type: type[E]) -> Optional[E]:
        for event in reversed(self.events):
            if isinstance(event, event_type):
                return event
        return None

    def __len__(self) -> int:
        return len(self.events)

    def describe(self, include_private: bool = False) -> str:
        """Format the log as one line per event."""
        formatter = EventFormatter(self.names)
        lines = [f"Game {self.game_id} ({self.channel_id})"]
        for event in self.events:
            if event.private_to is not None and not include_private:
                continue
            text = formatter.format(event) or str(event)
            lines.append(f"  [{event.phase.value} {event.night}] {text}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    def to_yaml(self, include_private: bool = False) -> str:
        """Serialize the event log to YAML string."""
        records = []
        for event in self.events:
            if event.private_to is not None and not include_private:
                continue
            data = {"type": type(event).__name__}
            data.update(event.model_dump(mode="json"))
            records.append(data)

        payload = {
            "game_id": self.game_id,
            "channel_id": self.channel_id,
            "names": dict(self.names),
            "events": records,
        }
        return yaml.safe_dump(payload, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def save_to_file(self, filepath: str, include_private: bool = False) -> None:
        """Serialize the event log to a YAML file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.to_yaml(include_private=include_private))
