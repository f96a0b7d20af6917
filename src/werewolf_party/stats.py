"""Per-participant game statistics handed to a persistence collaborator."""

from typing import Iterable, Optional, Protocol

from pydantic import BaseModel

from werewolf_party.engine.session import Session
from werewolf_party.events import Lynch, Winner
from werewolf_party.models.role import Role, Team


class PlayerStats(BaseModel):
    """Statistics for one participant; accumulates across games."""

    participant_id: str
    name: str
    games_played: int = 0
    wins: int = 0
    kills: int = 0


class StatsSink(Protocol):
    """Receives the per-participant records of a finished session."""

    def record_game(self, records: list[PlayerStats]) -> None:
        ...


def is_winner(role: Role, team: Team, winner: Winner, lynched_tanner: bool = False) -> bool:
    """Whether a holder of `role` (on `team`) shares the win."""
    if winner == Winner.TANNER:
        return role == Role.TANNER and lynched_tanner
    if winner == Winner.WOLVES:
        return team == Team.WOLF
    return team == Team.VILLAGE


def session_records(session: Session, winner: Winner) -> list[PlayerStats]:
    """Build one record per participant, judged by final roles."""
    lynched = {e.victim for e in session.events.of_type(Lynch)}
    return [
        PlayerStats(
            participant_id=player.participant_id,
            name=player.name,
            games_played=1,
            wins=int(is_winner(player.role, player.team, winner, player.participant_id in lynched)),
            kills=player.kills,
        )
        for player in session.players.values()
    ]


class MemoryStatsStore:
    """Accumulates records in memory."""

    def __init__(self):
        self._stats: dict[str, PlayerStats] = {}

    def record_game(self, records: Iterable[PlayerStats]) -> None:
        for record in records:
            current = self._stats.get(record.participant_id)
            if current is None:
                self._stats[record.participant_id] = record.model_copy()
                continue
            current.name = record.name
            current.games_played += record.games_played
            current.wins += record.wins
            current.kills += record.kills

    def get(self, participant_id: str) -> Optional[PlayerStats]:
        return self._stats.get(participant_id)

    def leaderboard(self, limit: int = 10) -> list[PlayerStats]:
        """Most wins first, then most kills."""
        ranked = sorted(self._stats.values(), key=lambda s: (-s.wins, -s.kills, s.name))
        return ranked[:limit]
