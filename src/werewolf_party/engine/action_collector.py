"""Action collection: validate and record per-phase submissions."""

import logging
from typing import Optional

from werewolf_party.engine.actions import (
    ABILITY_ACTIONS,
    NIGHT_KINDS,
    ActionKind,
    Potion,
    RejectReason,
    SubmissionResult,
)
from werewolf_party.engine.session import Session
from werewolf_party.events import Phase
from werewolf_party.models.player import Player
from werewolf_party.models.role import Role, role_info

logger = logging.getLogger(__name__)


def can_submit(player: Player, kind: ActionKind) -> bool:
    """Whether a player's role grants a night action kind."""
    if kind == ActionKind.WOLF_VOTE:
        return player.is_wolf_team
    ability = role_info(player.role).ability
    return ability is not None and ABILITY_ACTIONS.get(ability) == kind


class ActionCollector:
    """Records at most one current action per actor and kind.

    Resubmission overwrites the previous target, except for one-shot kinds
    (Seer inspection, Chemist visit) which reject a second submission.
    A rejected submission never mutates the session.
    """

    one_shot_kinds = frozenset({ActionKind.INSPECT, ActionKind.VISIT})

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Night
    # ------------------------------------------------------------------

    def submit_night_action(
        self,
        actor_id: str,
        kind: ActionKind,
        target_id: str,
    ) -> SubmissionResult:
        """Validate and record a night action."""
        if kind not in NIGHT_KINDS:
            return self._reject(RejectReason.WRONG_PHASE, f"{kind.value} is not a night action")
        if self.session.phase != Phase.NIGHT:
            return self._reject(RejectReason.WRONG_PHASE, "Night actions are only accepted at night")

        rejection = self._check_actor(actor_id)
        if rejection:
            return rejection
        actor = self.session.players[actor_id]

        if not can_submit(actor, kind):
            return self._reject(RejectReason.WRONG_ROLE, f"Your role cannot use {kind.value}")
        if kind == ActionKind.WOLF_VOTE and actor.hangover:
            return self._reject(RejectReason.HANGOVER, "You are hungover and cannot attack tonight")

        rejection = self._check_target(actor_id, target_id, allow_self=False)
        if rejection:
            return rejection

        if kind in self.one_shot_kinds and self.session.night_target(actor_id, kind) is not None:
            return self._reject(RejectReason.ALREADY_USED, "You already acted tonight")
        if kind == ActionKind.FREEZE and self.session.players[target_id].freeze_immunity > 0:
            return self._reject(RejectReason.TARGET_IMMUNE, "That player cannot be frozen tonight")

        self.session.night_actions.setdefault(actor_id, {})[kind] = target_id
        return SubmissionResult.ok(f"You chose {self.session.name_of(target_id)}")

    def expected_night_actions(self) -> set[tuple[str, ActionKind]]:
        """(actor, kind) pairs that must be in before the night can end early."""
        expected: set[tuple[str, ActionKind]] = set()
        for player in self.session.alive_players():
            pid = player.participant_id
            if not self._has_any_target(pid):
                continue
            if player.is_wolf_team and not player.hangover:
                expected.add((pid, ActionKind.WOLF_VOTE))
            ability = role_info(player.role).ability
            if ability is not None:
                kind = ABILITY_ACTIONS[ability]
                if self.night_options(pid, kind):
                    expected.add((pid, kind))
        return expected

    def night_complete(self) -> bool:
        """Every expected action is in and no chemistry duel is still open."""
        duel = self.session.pending_chemistry
        if duel is not None and not duel.resolved:
            return False
        return all(
            self.session.night_target(actor, kind) is not None
            for actor, kind in self.expected_night_actions()
        )

    def night_options(self, actor_id: str, kind: ActionKind) -> list[Player]:
        """Living players the actor may target with `kind`."""
        options = [p for p in self.session.alive_players() if p.participant_id != actor_id]
        if kind == ActionKind.FREEZE:
            options = [p for p in options if p.freeze_immunity == 0]
        return options

    # ------------------------------------------------------------------
    # Day
    # ------------------------------------------------------------------

    def submit_vote(self, voter_id: str, target_id: str) -> SubmissionResult:
        """Record a day vote, overwriting the voter's previous vote."""
        if self.session.phase != Phase.DAY:
            return self._reject(RejectReason.WRONG_PHASE, "Voting is only open during the day")

        rejection = self._check_actor(voter_id) or self._check_target(voter_id, target_id, allow_self=True)
        if rejection:
            return rejection

        self.session.votes[voter_id] = target_id
        return SubmissionResult.ok(f"You voted for {self.session.name_of(target_id)}")

    def check_gunner_shot(self, actor_id: str, target_id: str) -> SubmissionResult:
        """Validate a Gunner shot without applying it."""
        if self.session.phase != Phase.DAY:
            return self._reject(RejectReason.WRONG_PHASE, "The Gunner can only shoot during the day")

        rejection = self._check_actor(actor_id)
        if rejection:
            return rejection
        actor = self.session.players[actor_id]
        if actor.role != Role.GUNNER:
            return self._reject(RejectReason.WRONG_ROLE, "You are not the Gunner")
        if actor.bullets <= 0:
            return self._reject(RejectReason.NO_BULLETS, "You are out of bullets")

        return self._check_target(actor_id, target_id, allow_self=False) or SubmissionResult.ok()

    def day_complete(self) -> bool:
        """Every living participant has a vote in."""
        alive = self.session.alive_ids()
        return bool(alive) and all(pid in self.session.votes for pid in alive)

    def turnout(self) -> tuple[int, int]:
        """(voted, alive) counts among living participants."""
        alive = self.session.alive_ids()
        voted = sum(1 for pid in alive if pid in self.session.votes)
        return voted, len(alive)

    # ------------------------------------------------------------------
    # Sub-protocol choices
    # ------------------------------------------------------------------

    def check_revenge_choice(self, actor_id: str, target_id: str) -> SubmissionResult:
        pending = self.session.pending_revenge.get(actor_id)
        if pending is None or pending.resolved:
            return self._reject(RejectReason.NO_PENDING_CHOICE, "Your shot is no longer valid")
        if target_id not in self.session.players:
            return self._reject(RejectReason.TARGET_UNKNOWN, "Unknown target")
        if target_id == actor_id:
            return self._reject(RejectReason.SELF_TARGET, "You cannot shoot yourself")
        if not self.session.is_alive(target_id):
            return self._reject(RejectReason.TARGET_DEAD, "Target is already dead")
        return SubmissionResult.ok()

    def parse_potion(self, actor_id: str, choice: str) -> tuple[SubmissionResult, Optional[Potion]]:
        duel = self.session.pending_chemistry
        if duel is None or duel.resolved:
            return self._reject(RejectReason.NO_PENDING_CHOICE, "That potion choice has expired"), None
        if duel.target_id != actor_id:
            return self._reject(RejectReason.NO_PENDING_CHOICE, "This choice is not yours"), None
        try:
            potion = Potion(str(choice).strip().upper())
        except ValueError:
            return self._reject(RejectReason.INVALID_CHOICE, "Choose potion A or B"), None
        return SubmissionResult.ok(f"You drink potion {potion.value}"), potion

    # ------------------------------------------------------------------
    # Shared checks
    # ------------------------------------------------------------------

    def _check_actor(self, actor_id: str) -> Optional[SubmissionResult]:
        actor = self.session.get_player(actor_id)
        if actor is None:
            return self._reject(RejectReason.NOT_PARTICIPANT, "You are not in this game")
        if not actor.is_alive:
            return self._reject(RejectReason.ACTOR_DEAD, "You are dead")
        return None

    def _check_target(self, actor_id: str, target_id: str, allow_self: bool) -> Optional[SubmissionResult]:
        if target_id not in self.session.players:
            return self._reject(RejectReason.TARGET_UNKNOWN, "Unknown target")
        if not self.session.is_alive(target_id):
            return self._reject(RejectReason.TARGET_DEAD, "Target is not alive")
        if not allow_self and target_id == actor_id:
            return self._reject(RejectReason.SELF_TARGET, "You cannot target yourself")
        return None

    def _has_any_target(self, actor_id: str) -> bool:
        return any(p.participant_id != actor_id for p in self.session.alive_players())

    def _reject(self, reason: RejectReason, message: str) -> SubmissionResult:
        logger.debug("Rejected submission in channel %s: %s", self.session.channel_id, reason.value)
        return SubmissionResult.reject(reason, message)
