"""Tests for DayResolver: tally, lynch, Tanner and Gunner shots."""

import random

from werewolf_party.engine import DayResolver, Session
from werewolf_party.events import (
    Death,
    DeathCause,
    FrenzyArmed,
    GunnerShot,
    Lynch,
    NoLynch,
    NoLynchReason,
    Phase,
    VoteTally,
    Winner,
)
from werewolf_party.models import Player, Role


def make_day(roles: list[Role], votes: dict[str, str] | None = None) -> Session:
    """Create a day-phase session; player i is 'p{i}' with roles[i]."""
    session = Session(channel_id="test", rng=random.Random(0))
    for i, role in enumerate(roles):
        pid = f"p{i}"
        session.players[pid] = Player(participant_id=pid, name=f"Player{i}", role=role)
    session.phase = Phase.DAY
    session.night = 1
    session.votes = dict(votes or {})
    return session


class TestTally:
    """Tests for vote counting."""

    def test_counts_per_target(self) -> None:
        session = make_day([Role.WEREWOLF] + [Role.VILLAGER] * 4, {"p0": "p1", "p2": "p1", "p3": "p0"})
        assert DayResolver().tally(session) == {"p1": 2, "p0": 1}

    def test_votes_for_dead_targets_are_ignored(self) -> None:
        session = make_day([Role.WEREWOLF] + [Role.VILLAGER] * 4, {"p0": "p1", "p2": "p1", "p3": "p4"})
        session.players["p1"].is_alive = False
        assert DayResolver().tally(session) == {"p4": 1}


class TestLynch:
    """Tests for day resolution."""

    def test_plurality_is_lynched(self) -> None:
        session = make_day(
            [Role.WEREWOLF, Role.WEREWOLF] + [Role.VILLAGER] * 5,
            {"p2": "p0", "p3": "p0", "p4": "p0", "p0": "p2", "p1": "p2"},
        )

        outcome = DayResolver().resolve(session)

        assert outcome.lynched == "p0"
        assert not session.players["p0"].is_alive
        death = session.events.last(Death)
        assert death.cause == DeathCause.LYNCH
        assert death.role == Role.WEREWOLF
        assert outcome.winner is None

    def test_tie_lynches_nobody(self) -> None:
        session = make_day(
            [Role.WEREWOLF, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER],
            {"p0": "p1", "p1": "p1", "p2": "p0", "p3": "p0"},
        )

        outcome = DayResolver().resolve(session)

        assert outcome.lynched is None
        assert session.events.last(NoLynch).reason == NoLynchReason.TIE
        assert all(p.is_alive for p in session.players.values())

    def test_no_votes(self) -> None:
        session = make_day([Role.WEREWOLF] + [Role.VILLAGER] * 4)

        outcome = DayResolver().resolve(session)

        assert outcome.lynched is None
        assert session.events.last(NoLynch).reason == NoLynchReason.NO_VOTES
        tally = session.events.last(VoteTally)
        assert tally.votes == {}

    def test_lynching_last_wolf_wins_for_village(self) -> None:
        session = make_day([Role.WEREWOLF] + [Role.VILLAGER] * 4, {"p1": "p0", "p2": "p0"})

        outcome = DayResolver().resolve(session)

        assert outcome.winner == Winner.VILLAGE

    def test_lynched_tanner_wins_alone(self) -> None:
        session = make_day(
            [Role.WEREWOLF, Role.TANNER, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER],
            {"p0": "p1", "p2": "p1", "p3": "p1"},
        )

        outcome = DayResolver().resolve(session)

        assert outcome.winner == Winner.TANNER
        assert session.events.last(Lynch).role == Role.TANNER

    def test_lynched_wolf_cub_arms_frenzy(self) -> None:
        session = make_day(
            [Role.WOLF_CUB, Role.WEREWOLF] + [Role.VILLAGER] * 5,
            {"p2": "p0", "p3": "p0"},
        )

        DayResolver().resolve(session)

        assert session.frenzy_next_night
        assert session.events.last(FrenzyArmed).actor == "p0"

    def test_lynched_hunter_queues_last_shot(self) -> None:
        session = make_day(
            [Role.WEREWOLF, Role.HUNTER] + [Role.VILLAGER] * 4,
            {"p0": "p1", "p2": "p1"},
        )

        DayResolver().resolve(session)

        assert session.revenge_queue == ["p1"]


class TestGunner:
    """Tests for Gunner shots."""

    def test_shot_kills_and_spends_bullet(self) -> None:
        session = make_day([Role.WEREWOLF, Role.GUNNER] + [Role.VILLAGER] * 4)
        session.players["p1"].bullets = 2

        outcome = DayResolver().shoot(session, "p1", "p0")

        assert not session.players["p0"].is_alive
        assert session.players["p1"].bullets == 1
        assert session.players["p1"].kills == 1
        assert session.events.last(GunnerShot).bullets_left == 1
        assert session.events.last(Death).cause == DeathCause.GUNNER
        assert outcome.winner == Winner.VILLAGE
