"""Day resolution: vote tally, lynch, and Gunner shots."""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel, Field

from werewolf_party.config import GameSettings
from werewolf_party.engine.deaths import kill
from werewolf_party.engine.session import Session
from werewolf_party.engine.victory import evaluate_winner
from werewolf_party.events import (
    DeathCause,
    GameEvent,
    GunnerShot,
    Lynch,
    NoLynch,
    NoLynchReason,
    VoteTally,
    Winner,
)
from werewolf_party.models.role import Role

logger = logging.getLogger(__name__)


class DayOutcome(BaseModel):
    """Result of a day resolution or a Gunner shot."""

    events: list[GameEvent] = Field(default_factory=list)
    lynched: Optional[str] = None
    winner: Optional[Winner] = None


class DayResolver:
    """Resolves the day vote.

    Strict plurality: exactly one target with the most votes is lynched; any
    tie at the top (including nobody voting) lynches nobody. A lynched
    Tanner wins alone, before team counts are considered.
    """

    def __init__(self, settings: Optional[GameSettings] = None):
        self.settings = settings or GameSettings()

    def tally(self, session: Session) -> dict[str, int]:
        """Vote counts for targets that are still alive."""
        counts = Counter(
            target for target in session.votes.values()
            if session.is_alive(target)
        )
        return dict(counts)

    def resolve(self, session: Session) -> DayOutcome:
        start = len(session.events)
        counts = self.tally(session)
        session.record(VoteTally(votes=dict(session.votes), counts=counts))

        victim_id = self._plurality(counts)
        if victim_id is None:
            reason = NoLynchReason.NO_VOTES if not counts else NoLynchReason.TIE
            session.record(NoLynch(reason=reason))
            return DayOutcome(
                events=session.events.since(start),
                winner=evaluate_winner(session.players.values()),
            )

        victim = session.players[victim_id]
        session.record(Lynch(victim=victim_id, role=victim.role))
        kill(session, victim_id, DeathCause.LYNCH)

        if victim.role == Role.TANNER:
            winner: Optional[Winner] = Winner.TANNER
        else:
            winner = evaluate_winner(session.players.values())

        logger.info(
            "Day %d resolved in channel %s: lynched %s (winner=%s)",
            session.night, session.channel_id, victim.name, winner.value if winner else None,
        )
        return DayOutcome(events=session.events.since(start), lynched=victim_id, winner=winner)

    def shoot(self, session: Session, gunner_id: str, target_id: str) -> DayOutcome:
        """Apply a validated Gunner shot."""
        start = len(session.events)
        gunner = session.players[gunner_id]
        gunner.bullets -= 1
        session.record(GunnerShot(actor=gunner_id, target=target_id, bullets_left=gunner.bullets))
        kill(session, target_id, DeathCause.GUNNER, killer_id=gunner_id)
        return DayOutcome(
            events=session.events.since(start),
            winner=evaluate_winner(session.players.values()),
        )

    @staticmethod
    def _plurality(counts: dict[str, int]) -> Optional[str]:
        if not counts:
            return None
        top = max(counts.values())
        leaders = [target for target, n in counts.items() if n == top]
        return leaders[0] if len(leaders) == 1 else None
