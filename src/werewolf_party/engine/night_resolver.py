"""Night action resolution - applies accumulated night actions in a fixed order."""

import logging
from collections import Counter
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from werewolf_party.config import GameSettings
from werewolf_party.engine.actions import ActionKind
from werewolf_party.engine.chemistry import cancel_duel, resolve_duel
from werewolf_party.engine.deaths import kill
from werewolf_party.engine.session import Session
from werewolf_party.engine.victory import evaluate_winner
from werewolf_party.events import (
    AttackBlocked,
    ConversionCause,
    Converted,
    DeathCause,
    DrunkBlock,
    Frozen,
    GameEvent,
    GuardianBlocked,
    HunterRetaliation,
    NoAttack,
    NoAttackReason,
    Protected,
    SeerBlocked,
    SeerVision,
    Winner,
    WolfAttack,
)
from werewolf_party.models.player import Player
from werewolf_party.models.role import Role, seer_view

logger = logging.getLogger(__name__)


class AttackResult(str, Enum):
    """How a single wolf attack on one victim played out."""

    NONE = "NONE"
    PROTECTED = "PROTECTED"
    CONVERTED = "CONVERTED"
    DRUNK = "DRUNK"
    HUNTER_SURVIVED = "HUNTER_SURVIVED"
    HUNTER_DIED = "HUNTER_DIED"
    KILLED = "KILLED"


class NightOutcome(BaseModel):
    """Result of resolving one night."""

    events: list[GameEvent] = Field(default_factory=list)
    winner: Optional[Winner] = None


def pick_majority(targets: list[str], rng) -> Optional[str]:
    """Most-voted target, ties broken uniformly at random."""
    if not targets:
        return None
    tally = Counter(targets)
    top = max(tally.values())
    candidates = [t for t in tally if tally[t] == top]
    if len(candidates) == 1:
        return candidates[0]
    return rng.choice(candidates)


class NightResolver:
    """Computes the outcome of a night from the collected actions.

    Resolution order:
    1. Freeze (SnowWolf) - nullifies the frozen player's actions
    2. Seer visions are delivered (after freezing)
    3. Guardian protection, with the risk of guarding a wolf
    4. Pending chemistry duel is forced to a result
    5. Wolf attack on the majority target (plus a frenzy victim)
    6. Hangovers that skipped this night wear off
    7. Win check
    """

    def __init__(self, settings: Optional[GameSettings] = None):
        self.settings = settings or GameSettings()

    def resolve(self, session: Session) -> NightOutcome:
        """Apply the night to the session.

        Args:
            session: Session in the night phase with its collected actions.

        Returns:
            NightOutcome with every event recorded during resolution and the
            winner, if the night decided the game.
        """
        start = len(session.events)

        self._tick_immunity(session)
        self._apply_freeze(session)
        self._deliver_visions(session)
        protected_id = self._apply_protection(session)
        self._force_chemistry(session)

        hungover = [p for p in session.alive_wolves() if p.hangover]
        self._wolf_attack(session, protected_id)
        for wolf in hungover:
            wolf.hangover = False

        winner = evaluate_winner(session.players.values())
        logger.info(
            "Night %d resolved in channel %s (winner=%s)",
            session.night, session.channel_id, winner.value if winner else None,
        )
        return NightOutcome(events=session.events.since(start), winner=winner)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _tick_immunity(self, session: Session) -> None:
        for player in session.players.values():
            if player.freeze_immunity > 0:
                player.freeze_immunity -= 1

    def _apply_freeze(self, session: Session) -> None:
        for snow in session.living_by_role(Role.SNOW_WOLF):
            target_id = session.night_target(snow.participant_id, ActionKind.FREEZE)
            if target_id is None or not session.is_alive(target_id):
                continue
            if target_id in session.frozen:
                continue
            session.frozen.add(target_id)
            session.players[target_id].freeze_immunity = 1
            session.night_actions.pop(target_id, None)
            session.record(Frozen(actor=snow.participant_id, target=target_id))

    def _deliver_visions(self, session: Session) -> None:
        for seer in session.living_by_role(Role.SEER):
            seer_id = seer.participant_id
            if seer_id in session.frozen:
                session.record(SeerBlocked(actor=seer_id, private_to=seer_id))
                continue
            target_id = session.night_target(seer_id, ActionKind.INSPECT)
            if target_id is None:
                continue
            target = session.players[target_id]
            session.record(SeerVision(
                actor=seer_id,
                target=target_id,
                seen_as=seer_view(target.role),
                private_to=seer_id,
            ))

    def _apply_protection(self, session: Session) -> Optional[str]:
        protected_id: Optional[str] = None
        for guardian in session.living_by_role(Role.GUARDIAN_ANGEL):
            guardian_id = guardian.participant_id
            if guardian_id in session.frozen:
                session.record(GuardianBlocked(actor=guardian_id))
                continue
            target_id = session.night_target(guardian_id, ActionKind.PROTECT)
            if target_id is None or not session.is_alive(target_id):
                continue

            # First guardian found decides; duplicates only exist via forced roles
            if protected_id is None:
                protected_id = target_id
            session.record(Protected(actor=guardian_id, target=target_id))

            if session.players[target_id].is_wolf_team:
                if session.rng.random() < self.settings.guardian_death_chance:
                    kill(session, guardian_id, DeathCause.GUARDIAN_RISK)
        return protected_id

    def _force_chemistry(self, session: Session) -> None:
        duel = session.pending_chemistry
        if duel is None or duel.resolved:
            return
        if duel.chemist_id in session.frozen:
            cancel_duel(session)
            return
        resolve_duel(session, forced=True)

    def _wolf_attack(self, session: Session, protected_id: Optional[str]) -> None:
        frenzy = session.frenzy_tonight
        session.frenzy_tonight = False

        attackers = [
            p for p in session.alive_wolves()
            if not p.hangover and p.participant_id not in session.frozen
        ]
        if not attackers:
            session.record(NoAttack(reason=NoAttackReason.NO_ATTACKERS))
            return

        votes: list[tuple[str, str]] = []
        for wolf in attackers:
            target_id = session.night_target(wolf.participant_id, ActionKind.WOLF_VOTE)
            if target_id is not None and session.is_alive(target_id):
                votes.append((wolf.participant_id, target_id))

        victim_id = pick_majority([target for _, target in votes], session.rng)
        if victim_id is None:
            session.record(NoAttack(reason=NoAttackReason.NO_VOTES))
            return

        voters = [voter for voter, target in votes if target == victim_id]
        attacker_id = self._choose_attacker(session, voters, attackers)
        session.record(WolfAttack(victim=victim_id, attacker=attacker_id, voters=voters))

        result = self._attack(
            session, victim_id, protected_id, len(attackers), attacker_id,
            frenzy=frenzy, first=True,
        )
        if not frenzy or result == AttackResult.DRUNK:
            return

        pool = [pid for pid in session.alive_ids() if pid != victim_id]
        if not pool:
            return
        second_id = session.rng.choice(pool)
        session.record(WolfAttack(victim=second_id, attacker=attacker_id, frenzy=True))
        self._attack(
            session, second_id, protected_id, len(attackers), attacker_id,
            frenzy=frenzy, first=False,
        )

    def _choose_attacker(
        self,
        session: Session,
        voters: list[str],
        attackers: list[Player],
    ) -> str:
        """Wolf credited with the attack: AlphaWolf voter, else a random voter."""
        for alpha in session.living_by_role(Role.ALPHA_WOLF):
            if alpha.participant_id in voters:
                return alpha.participant_id
        if voters:
            return session.rng.choice(voters)
        return session.rng.choice(attackers).participant_id

    def _attack(
        self,
        session: Session,
        victim_id: str,
        protected_id: Optional[str],
        attacker_count: int,
        attacker_id: str,
        frenzy: bool,
        first: bool,
    ) -> AttackResult:
        victim = session.get_player(victim_id)
        if victim is None or not victim.is_alive:
            return AttackResult.NONE

        if victim_id == protected_id:
            session.record(AttackBlocked(victim=victim_id))
            return AttackResult.PROTECTED

        if victim.role == Role.CURSED:
            victim.role = Role.WEREWOLF
            session.record(Converted(target=victim_id, previous_role=Role.CURSED, cause=ConversionCause.CURSED))
            return AttackResult.CONVERTED

        if victim.role == Role.DRUNK:
            apply_hangover = not (frenzy and first)
            if apply_hangover:
                session.players[attacker_id].hangover = True
            session.record(DrunkBlock(
                victim=victim_id,
                attacker=attacker_id,
                hangover_applied=apply_hangover,
                frenzy_cancelled=frenzy and first,
            ))
            return AttackResult.DRUNK

        if victim.role == Role.HUNTER:
            return self._attack_hunter(session, victim, attacker_count, attacker_id)

        if session.living_by_role(Role.ALPHA_WOLF):
            if session.rng.random() < self.settings.alpha_bite_chance:
                previous = victim.role
                victim.role = Role.WEREWOLF
                session.record(Converted(target=victim_id, previous_role=previous, cause=ConversionCause.ALPHA_BITE))
                return AttackResult.CONVERTED

        kill(session, victim_id, DeathCause.WOLF_ATTACK, killer_id=attacker_id)
        return AttackResult.KILLED

    def _attack_hunter(
        self,
        session: Session,
        hunter: Player,
        attacker_count: int,
        attacker_id: str,
    ) -> AttackResult:
        hunter_id = hunter.participant_id
        chance = self.settings.hunter_success_chance(attacker_count)
        success = session.rng.random() < chance

        if not success:
            session.record(HunterRetaliation(actor=hunter_id, success=False))
            kill(session, hunter_id, DeathCause.WOLF_ATTACK, killer_id=attacker_id)
            return AttackResult.HUNTER_DIED

        wolves = [w.participant_id for w in session.alive_wolves() if w.participant_id not in session.frozen]
        shot_wolf = session.rng.choice(wolves) if wolves else None
        survived = attacker_count == 1
        session.record(HunterRetaliation(actor=hunter_id, success=True, wolf=shot_wolf, survived=survived))
        if shot_wolf is not None:
            kill(session, shot_wolf, DeathCause.HUNTER_RETALIATION, killer_id=hunter_id)

        if survived:
            return AttackResult.HUNTER_SURVIVED
        kill(session, hunter_id, DeathCause.WOLF_ATTACK, killer_id=attacker_id)
        return AttackResult.HUNTER_DIED
