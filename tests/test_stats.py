"""Tests for end-of-game statistics."""

import random

from werewolf_party.engine import Session
from werewolf_party.engine.deaths import kill
from werewolf_party.events import DeathCause, Lynch, Phase, Winner
from werewolf_party.models import Player, Role, Team
from werewolf_party.stats import MemoryStatsStore, PlayerStats, is_winner, session_records


def make_session(roles: list[Role]) -> Session:
    session = Session(channel_id="test", rng=random.Random(0))
    for i, role in enumerate(roles):
        pid = f"p{i}"
        session.players[pid] = Player(participant_id=pid, name=f"Player{i}", role=role)
    session.phase = Phase.DAY
    session.night = 1
    return session


class TestIsWinner:

    def test_village_win(self) -> None:
        assert is_winner(Role.SEER, Team.VILLAGE, Winner.VILLAGE)
        assert not is_winner(Role.WEREWOLF, Team.WOLF, Winner.VILLAGE)
        assert not is_winner(Role.TANNER, Team.SOLO, Winner.VILLAGE)

    def test_wolf_win(self) -> None:
        assert is_winner(Role.LYCAN, Team.WOLF, Winner.WOLVES)
        assert not is_winner(Role.VILLAGER, Team.VILLAGE, Winner.WOLVES)

    def test_tanner_win_needs_the_lynch(self) -> None:
        assert is_winner(Role.TANNER, Team.SOLO, Winner.TANNER, lynched_tanner=True)
        assert not is_winner(Role.TANNER, Team.SOLO, Winner.TANNER, lynched_tanner=False)
        assert not is_winner(Role.VILLAGER, Team.VILLAGE, Winner.TANNER)


class TestSessionRecords:

    def test_records_judge_final_roles(self) -> None:
        session = make_session([Role.WEREWOLF, Role.CURSED, Role.VILLAGER, Role.VILLAGER])
        session.players["p1"].role = Role.WEREWOLF  # converted during the game
        kill(session, "p2", DeathCause.WOLF_ATTACK, killer_id="p0")

        records = {r.participant_id: r for r in session_records(session, Winner.WOLVES)}

        assert records["p0"].wins == 1
        assert records["p0"].kills == 1
        assert records["p1"].wins == 1
        assert records["p2"].wins == 0
        assert all(r.games_played == 1 for r in records.values())

    def test_tanner_record(self) -> None:
        session = make_session([Role.WEREWOLF, Role.TANNER, Role.VILLAGER, Role.VILLAGER])
        session.record(Lynch(victim="p1", role=Role.TANNER))
        kill(session, "p1", DeathCause.LYNCH)

        records = {r.participant_id: r for r in session_records(session, Winner.TANNER)}

        assert records["p1"].wins == 1
        assert sum(r.wins for r in records.values()) == 1


class TestMemoryStatsStore:

    def test_accumulates_across_games(self) -> None:
        store = MemoryStatsStore()
        store.record_game([PlayerStats(participant_id="u1", name="Alice", games_played=1, wins=1, kills=2)])
        store.record_game([PlayerStats(participant_id="u1", name="Alice", games_played=1, wins=0, kills=1)])

        stats = store.get("u1")
        assert stats.games_played == 2
        assert stats.wins == 1
        assert stats.kills == 3

    def test_unknown_participant(self) -> None:
        assert MemoryStatsStore().get("nobody") is None

    def test_leaderboard_order(self) -> None:
        store = MemoryStatsStore()
        store.record_game([
            PlayerStats(participant_id="u1", name="Alice", games_played=1, wins=1, kills=0),
            PlayerStats(participant_id="u2", name="Bob", games_played=1, wins=2, kills=0),
            PlayerStats(participant_id="u3", name="Carol", games_played=1, wins=1, kills=3),
        ])
        assert [s.name for s in store.leaderboard()] == ["Bob", "Carol", "Alice"]
        assert len(store.leaderboard(limit=1)) == 1
