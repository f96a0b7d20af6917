"""Tests for ActionCollector submission validation."""

import random

import pytest

from werewolf_party.engine import ActionCollector, ActionKind, RejectReason, Session
from werewolf_party.engine.chemistry import open_duel
from werewolf_party.engine.deaths import kill
from werewolf_party.engine.hunter import drain_revenge_queue
from werewolf_party.events import DeathCause, Phase
from werewolf_party.models import Player, Role

TABLE = [
    Role.WEREWOLF,        # p0
    Role.SNOW_WOLF,       # p1
    Role.SEER,            # p2
    Role.GUARDIAN_ANGEL,  # p3
    Role.CHEMIST,         # p4
    Role.GUNNER,          # p5
    Role.VILLAGER,        # p6
    Role.VILLAGER,        # p7
]


def make_session(phase: Phase = Phase.NIGHT, roles: list[Role] = TABLE) -> Session:
    session = Session(channel_id="test", rng=random.Random(1))
    for i, role in enumerate(roles):
        pid = f"p{i}"
        session.players[pid] = Player(participant_id=pid, name=f"Player{i}", role=role)
    for player in session.players.values():
        if player.role == Role.GUNNER:
            player.bullets = 2
    session.phase = phase
    session.night = 1
    return session


class TestNightSubmission:
    """Tests for night action validation."""

    def test_wolf_vote_accepted(self) -> None:
        session = make_session()
        result = ActionCollector(session).submit_night_action("p0", ActionKind.WOLF_VOTE, "p6")
        assert result.accepted
        assert session.night_target("p0", ActionKind.WOLF_VOTE) == "p6"

    def test_resubmission_overwrites(self) -> None:
        session = make_session()
        collector = ActionCollector(session)
        collector.submit_night_action("p0", ActionKind.WOLF_VOTE, "p6")
        collector.submit_night_action("p0", ActionKind.WOLF_VOTE, "p7")
        assert session.night_target("p0", ActionKind.WOLF_VOTE) == "p7"

    def test_seer_inspects_once(self) -> None:
        session = make_session()
        collector = ActionCollector(session)
        assert collector.submit_night_action("p2", ActionKind.INSPECT, "p0").accepted

        result = collector.submit_night_action("p2", ActionKind.INSPECT, "p1")

        assert result.reason == RejectReason.ALREADY_USED
        assert session.night_target("p2", ActionKind.INSPECT) == "p0"

    @pytest.mark.parametrize("actor,kind,target,reason", [
        ("p6", ActionKind.WOLF_VOTE, "p7", RejectReason.WRONG_ROLE),
        ("p0", ActionKind.INSPECT, "p7", RejectReason.WRONG_ROLE),
        ("p2", ActionKind.INSPECT, "p2", RejectReason.SELF_TARGET),
        ("p2", ActionKind.INSPECT, "ghost", RejectReason.TARGET_UNKNOWN),
        ("stranger", ActionKind.WOLF_VOTE, "p7", RejectReason.NOT_PARTICIPANT),
        ("p2", ActionKind.DAY_VOTE, "p7", RejectReason.WRONG_PHASE),
    ])
    def test_rejections(self, actor: str, kind: ActionKind, target: str, reason: RejectReason) -> None:
        session = make_session()
        result = ActionCollector(session).submit_night_action(actor, kind, target)
        assert not result.accepted
        assert result.reason == reason
        assert session.night_actions == {}

    def test_dead_actor_rejected(self) -> None:
        session = make_session()
        kill(session, "p2", DeathCause.WOLF_ATTACK)
        result = ActionCollector(session).submit_night_action("p2", ActionKind.INSPECT, "p0")
        assert result.reason == RejectReason.ACTOR_DEAD

    def test_dead_target_rejected(self) -> None:
        session = make_session()
        kill(session, "p7", DeathCause.WOLF_ATTACK)
        result = ActionCollector(session).submit_night_action("p0", ActionKind.WOLF_VOTE, "p7")
        assert result.reason == RejectReason.TARGET_DEAD

    def test_wrong_phase(self) -> None:
        session = make_session(Phase.DAY)
        result = ActionCollector(session).submit_night_action("p0", ActionKind.WOLF_VOTE, "p6")
        assert result.reason == RejectReason.WRONG_PHASE

    def test_hungover_wolf_cannot_vote(self) -> None:
        session = make_session()
        session.players["p0"].hangover = True
        result = ActionCollector(session).submit_night_action("p0", ActionKind.WOLF_VOTE, "p6")
        assert result.reason == RejectReason.HANGOVER

    def test_immune_player_cannot_be_frozen(self) -> None:
        session = make_session()
        session.players["p2"].freeze_immunity = 1
        collector = ActionCollector(session)

        result = collector.submit_night_action("p1", ActionKind.FREEZE, "p2")

        assert result.reason == RejectReason.TARGET_IMMUNE
        assert "p2" not in [p.participant_id for p in collector.night_options("p1", ActionKind.FREEZE)]


class TestNightCompletion:
    """Tests for early night completion."""

    def test_complete_once_every_expected_action_is_in(self) -> None:
        session = make_session()
        collector = ActionCollector(session)
        submissions = [
            ("p0", ActionKind.WOLF_VOTE, "p6"),
            ("p1", ActionKind.WOLF_VOTE, "p6"),
            ("p1", ActionKind.FREEZE, "p3"),
            ("p2", ActionKind.INSPECT, "p0"),
            ("p3", ActionKind.PROTECT, "p6"),
        ]
        for actor, kind, target in submissions:
            assert collector.submit_night_action(actor, kind, target).accepted
            assert not collector.night_complete()

        collector.submit_night_action("p4", ActionKind.VISIT, "p7")

        assert collector.night_complete()

    def test_hungover_wolves_are_not_expected(self) -> None:
        session = make_session(roles=[Role.WEREWOLF, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER, Role.VILLAGER])
        session.players["p0"].hangover = True
        assert ActionCollector(session).night_complete()

    def test_expected_pairs(self) -> None:
        session = make_session()
        expected = ActionCollector(session).expected_night_actions()
        assert ("p1", ActionKind.FREEZE) in expected
        assert ("p1", ActionKind.WOLF_VOTE) in expected
        assert ("p5", ActionKind.WOLF_VOTE) not in expected
        assert len(expected) == 6


class TestDayVotes:
    """Tests for day votes and Gunner validation."""

    def test_vote_and_turnout(self) -> None:
        session = make_session(Phase.DAY)
        collector = ActionCollector(session)
        assert collector.submit_vote("p6", "p0").accepted
        assert collector.submit_vote("p6", "p1").accepted
        assert session.votes == {"p6": "p1"}
        assert collector.turnout() == (1, 8)
        assert not collector.day_complete()

    def test_day_complete(self) -> None:
        session = make_session(Phase.DAY)
        collector = ActionCollector(session)
        for pid in session.alive_ids():
            collector.submit_vote(pid, "p0")
        assert collector.day_complete()

    def test_self_vote_allowed(self) -> None:
        session = make_session(Phase.DAY)
        assert ActionCollector(session).submit_vote("p6", "p6").accepted

    def test_vote_at_night_rejected(self) -> None:
        session = make_session()
        assert ActionCollector(session).submit_vote("p6", "p0").reason == RejectReason.WRONG_PHASE

    def test_gunner_checks(self) -> None:
        session = make_session(Phase.DAY)
        collector = ActionCollector(session)
        assert collector.check_gunner_shot("p5", "p0").accepted
        assert collector.check_gunner_shot("p6", "p0").reason == RejectReason.WRONG_ROLE
        assert collector.check_gunner_shot("p5", "p5").reason == RejectReason.SELF_TARGET
        session.players["p5"].bullets = 0
        assert collector.check_gunner_shot("p5", "p0").reason == RejectReason.NO_BULLETS


class TestSubProtocolChoices:
    """Tests for potion and revenge choice validation."""

    def test_potion_parsing(self) -> None:
        session = make_session()
        open_duel(session, "p4", "p7")
        collector = ActionCollector(session)

        result, potion = collector.parse_potion("p7", " b ")
        assert result.accepted
        assert potion.value == "B"

        result, potion = collector.parse_potion("p7", "C")
        assert result.reason == RejectReason.INVALID_CHOICE
        assert potion is None

    def test_potion_from_someone_else(self) -> None:
        session = make_session()
        open_duel(session, "p4", "p7")
        result, _ = ActionCollector(session).parse_potion("p6", "A")
        assert result.reason == RejectReason.NO_PENDING_CHOICE

    def test_stale_potion_rejected(self) -> None:
        session = make_session()
        duel = open_duel(session, "p4", "p7")
        duel.resolved = True
        result, _ = ActionCollector(session).parse_potion("p7", "A")
        assert result.reason == RejectReason.NO_PENDING_CHOICE

    def test_revenge_choice(self) -> None:
        session = make_session(Phase.DAY, roles=[Role.WEREWOLF, Role.HUNTER, Role.VILLAGER, Role.VILLAGER])
        kill(session, "p1", DeathCause.LYNCH)
        drain_revenge_queue(session)
        collector = ActionCollector(session)

        assert collector.check_revenge_choice("p1", "p0").accepted
        assert collector.check_revenge_choice("p1", "p1").reason == RejectReason.SELF_TARGET
        assert collector.check_revenge_choice("p2", "p0").reason == RejectReason.NO_PENDING_CHOICE
