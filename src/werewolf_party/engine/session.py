"""Session state for one channel's game."""

import asyncio
import random
from typing import Optional, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from werewolf_party.engine.actions import ActionKind, Potion
from werewolf_party.events import EventLog, GameEvent, Phase, Winner
from werewolf_party.models.player import Player
from werewolf_party.models.role import Role

E = TypeVar("E", bound=GameEvent)


class ChemistryDuel(BaseModel):
    """Pending chemistry duel."""

    chemist_id: str
    target_id: str
    poison_is_a: bool  # hidden; which option is the poison
    choice: Optional[Potion] = None
    resolved: bool = False


class HunterRevenge(BaseModel):
    """Pending last shot of a dead Hunter."""

    hunter_id: str
    options: list[str] = Field(default_factory=list)
    resolved: bool = False


class Session(BaseModel):
    """Represents the current state of one channel's game.

    Mutated only by the phase controller's handlers, which run on a single
    event loop, so no locking is needed.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str = Field(default_factory=lambda: uuid4().hex[:8])
    channel_id: str
    host_id: Optional[str] = None
    phase: Phase = Phase.LOBBY
    night: int = 0  # night counter; day N follows night N

    players: dict[str, Player] = Field(default_factory=dict)  # join order

    # Phase-instance submissions
    votes: dict[str, str] = Field(default_factory=dict)  # voter -> target
    night_actions: dict[str, dict[ActionKind, str]] = Field(default_factory=dict)  # actor -> kind -> target

    # Sub-protocol and transient night state
    pending_chemistry: Optional[ChemistryDuel] = None
    pending_revenge: dict[str, HunterRevenge] = Field(default_factory=dict)
    revenge_queue: list[str] = Field(default_factory=list)  # dead Hunters awaiting a prompt
    frozen: set[str] = Field(default_factory=set)
    frenzy_next_night: bool = False  # armed by a WolfCub death
    frenzy_tonight: bool = False  # carried over when the next night starts
    phase_resolved: bool = False

    winner: Optional[Winner] = None
    events: EventLog = Field(default_factory=EventLog)

    rng: random.Random = Field(default_factory=random.Random, exclude=True)
    timers: dict[str, asyncio.Task] = Field(default_factory=dict, exclude=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_player(self, participant_id: str) -> Optional[Player]:
        return self.players.get(participant_id)

    def is_alive(self, participant_id: Optional[str]) -> bool:
        player = self.players.get(participant_id) if participant_id is not None else None
        return player is not None and player.is_alive

    def alive_players(self) -> list[Player]:
        """Living players in join order."""
        return [p for p in self.players.values() if p.is_alive]

    def alive_ids(self) -> list[str]:
        return [p.participant_id for p in self.alive_players()]

    def alive_wolves(self) -> list[Player]:
        return [p for p in self.alive_players() if p.is_wolf_team]

    def alive_non_wolves(self) -> list[Player]:
        return [p for p in self.alive_players() if not p.is_wolf_team]

    def living_by_role(self, role: Role) -> list[Player]:
        return [p for p in self.alive_players() if p.role == role]

    def night_target(self, actor_id: str, kind: ActionKind) -> Optional[str]:
        """Target an actor submitted for `kind` this night, if any."""
        return self.night_actions.get(actor_id, {}).get(kind)

    def name_of(self, participant_id: str) -> str:
        player = self.players.get(participant_id)
        return player.name if player else participant_id

    # ------------------------------------------------------------------
    # Event recording
    # ------------------------------------------------------------------

    def record(self, event: E) -> E:
        """Stamp an event with the current cycle/phase and append it."""
        event.night = self.night
        if "phase" not in event.model_fields_set:
            event.phase = self.phase
        return self.events.append(event)
