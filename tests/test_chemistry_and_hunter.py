"""Tests for the chemistry duel and the Hunter's last shot."""

import random

from werewolf_party.engine import Potion, Session
from werewolf_party.engine.chemistry import cancel_duel, open_duel, resolve_duel
from werewolf_party.engine.hunter import drain_revenge_queue, open_revenge, resolve_revenge
from werewolf_party.engine.deaths import kill
from werewolf_party.events import (
    ChemistryCancelled,
    ChemistryOpened,
    Death,
    DeathCause,
    HunterRevengeShot,
    Phase,
    RevengeRequested,
)
from werewolf_party.models import Player, Role


def make_session(roles: list[Role], phase: Phase = Phase.NIGHT) -> Session:
    session = Session(channel_id="test", rng=random.Random(3))
    for i, role in enumerate(roles):
        pid = f"p{i}"
        session.players[pid] = Player(participant_id=pid, name=f"Player{i}", role=role)
    session.phase = phase
    session.night = 1
    return session


class TestChemistryDuel:
    """Tests for duel resolution."""

    def make(self) -> Session:
        return make_session([Role.WEREWOLF, Role.CHEMIST, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER])

    def test_open_records_event(self) -> None:
        session = self.make()
        duel = open_duel(session, "p1", "p2")
        assert session.pending_chemistry is duel
        assert not duel.resolved
        assert session.events.last(ChemistryOpened).target == "p2"

    def test_target_picks_poison(self) -> None:
        session = self.make()
        duel = open_duel(session, "p1", "p2")
        duel.poison_is_a = True

        event = resolve_duel(session, Potion.A)

        assert event.target_poisoned
        assert not event.forced
        assert not session.players["p2"].is_alive
        assert session.players["p1"].is_alive
        assert session.players["p1"].kills == 1

    def test_chemist_drinks_poison(self) -> None:
        session = self.make()
        duel = open_duel(session, "p1", "p2")
        duel.poison_is_a = True

        event = resolve_duel(session, Potion.B)

        assert not event.target_poisoned
        assert session.players["p2"].is_alive
        assert not session.players["p1"].is_alive
        assert session.events.last(Death).cause == DeathCause.CHEMISTRY

    def test_resolves_only_once(self) -> None:
        session = self.make()
        open_duel(session, "p1", "p2")

        first = resolve_duel(session, forced=True)
        second = resolve_duel(session, Potion.A)

        assert first is not None
        assert first.forced
        assert second is None
        assert len(session.events.of_type(Death)) == 1

    def test_dead_party_cancels(self) -> None:
        session = self.make()
        open_duel(session, "p1", "p2")
        kill(session, "p2", DeathCause.WOLF_ATTACK)

        assert resolve_duel(session, Potion.A) is None
        assert session.events.last(ChemistryCancelled) is not None
        assert session.players["p1"].is_alive

    def test_cancel(self) -> None:
        session = self.make()
        open_duel(session, "p1", "p2")
        cancel_duel(session)

        assert session.pending_chemistry.resolved
        assert resolve_duel(session, Potion.A) is None


class TestHunterRevenge:
    """Tests for the dead Hunter's shot."""

    def make(self) -> Session:
        session = make_session([Role.WEREWOLF, Role.HUNTER, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER])
        kill(session, "p1", DeathCause.LYNCH)
        return session

    def test_death_queues_revenge_once(self) -> None:
        session = self.make()
        assert session.revenge_queue == ["p1"]
        assert session.players["p1"].revenge_triggered

    def test_drain_opens_prompt(self) -> None:
        session = self.make()

        opened = drain_revenge_queue(session)

        assert [r.hunter_id for r in opened] == ["p1"]
        assert session.revenge_queue == []
        assert set(opened[0].options) == {"p0", "p2", "p3", "p4"}
        assert session.events.last(RevengeRequested).actor == "p1"

    def test_chosen_target_dies(self) -> None:
        session = self.make()
        drain_revenge_queue(session)

        shot = resolve_revenge(session, "p1", "p0")

        assert shot.target == "p0"
        assert not shot.random_pick
        assert not session.players["p0"].is_alive
        assert session.events.last(Death).cause == DeathCause.HUNTER_REVENGE
        assert session.players["p1"].kills == 1

    def test_timeout_picks_random_living_target(self) -> None:
        session = self.make()
        drain_revenge_queue(session)

        shot = resolve_revenge(session, "p1")

        assert shot.random_pick
        assert shot.target in {"p0", "p2", "p3", "p4"}
        assert not session.players[shot.target].is_alive

    def test_fires_once(self) -> None:
        session = self.make()
        drain_revenge_queue(session)
        resolve_revenge(session, "p1", "p0")

        assert resolve_revenge(session, "p1", "p2") is None
        assert session.players["p2"].is_alive
        assert len(session.events.of_type(HunterRevengeShot)) == 1

    def test_no_prompt_without_targets(self) -> None:
        session = make_session([Role.HUNTER, Role.WEREWOLF])
        kill(session, "p1", DeathCause.LYNCH)
        kill(session, "p0", DeathCause.LYNCH)

        assert open_revenge(session, "p0") is None
