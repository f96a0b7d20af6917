"""Chemistry duel: the visited player picks a potion, the Chemist drinks the other."""

import logging
from typing import Optional

from werewolf_party.engine.actions import Potion
from werewolf_party.engine.deaths import kill
from werewolf_party.engine.session import ChemistryDuel, Session
from werewolf_party.events import (
    ChemistryCancelled,
    ChemistryOpened,
    ChemistryResolved,
    DeathCause,
)

logger = logging.getLogger(__name__)


def open_duel(session: Session, chemist_id: str, target_id: str) -> ChemistryDuel:
    """Start a duel, hiding which potion is the poison."""
    duel = ChemistryDuel(
        chemist_id=chemist_id,
        target_id=target_id,
        poison_is_a=session.rng.random() < 0.5,
    )
    session.pending_chemistry = duel
    session.record(ChemistryOpened(actor=chemist_id, target=target_id))
    return duel


def resolve_duel(
    session: Session,
    choice: Optional[Potion] = None,
    forced: bool = False,
) -> Optional[ChemistryResolved]:
    """Resolve the pending duel once.

    Args:
        session: Session holding the pending duel.
        choice: The target's potion, or None to pick at random for them.
        forced: True when resolved by timeout or by the night ending.

    Returns:
        The ChemistryResolved event, or None if there was nothing to resolve
        (no duel, already resolved, or one party already dead).
    """
    duel = session.pending_chemistry
    if duel is None or duel.resolved:
        return None

    duel.choice = choice or session.rng.choice([Potion.A, Potion.B])
    duel.resolved = True

    if not session.is_alive(duel.chemist_id) or not session.is_alive(duel.target_id):
        session.record(ChemistryCancelled(actor=duel.chemist_id, target=duel.target_id))
        return None

    target_poisoned = (duel.choice == Potion.A) == duel.poison_is_a
    event = session.record(ChemistryResolved(
        actor=duel.chemist_id,
        target=duel.target_id,
        choice=duel.choice.value,
        target_poisoned=target_poisoned,
        forced=forced,
    ))
    if target_poisoned:
        kill(session, duel.target_id, DeathCause.CHEMISTRY, killer_id=duel.chemist_id)
    else:
        kill(session, duel.chemist_id, DeathCause.CHEMISTRY)
    logger.debug("Chemistry duel resolved in channel %s (forced=%s)", session.channel_id, forced)
    return event


def cancel_duel(session: Session) -> None:
    """Void a pending duel without effect."""
    duel = session.pending_chemistry
    if duel is None or duel.resolved:
        return
    duel.resolved = True
    session.record(ChemistryCancelled(actor=duel.chemist_id, target=duel.target_id))
