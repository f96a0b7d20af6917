"""Hunter's last shot after death."""

from typing import Optional

from werewolf_party.engine.deaths import kill
from werewolf_party.engine.session import HunterRevenge, Session
from werewolf_party.events import DeathCause, HunterRevengeShot, RevengeRequested


def open_revenge(session: Session, hunter_id: str) -> Optional[HunterRevenge]:
    """Offer a dead Hunter the last shot.

    Returns:
        The pending revenge, or None when nobody is left to shoot.
    """
    options = [pid for pid in session.alive_ids() if pid != hunter_id]
    if not options:
        return None
    pending = HunterRevenge(hunter_id=hunter_id, options=options)
    session.pending_revenge[hunter_id] = pending
    session.record(RevengeRequested(actor=hunter_id, options=options))
    return pending


def drain_revenge_queue(session: Session) -> list[HunterRevenge]:
    """Open a revenge for every Hunter that died since the last drain."""
    opened = []
    while session.revenge_queue:
        pending = open_revenge(session, session.revenge_queue.pop(0))
        if pending is not None:
            opened.append(pending)
    return opened


def resolve_revenge(
    session: Session,
    hunter_id: str,
    target_id: Optional[str] = None,
) -> Optional[HunterRevengeShot]:
    """Fire the Hunter's shot once.

    Args:
        session: Session holding the pending revenge.
        hunter_id: The dead Hunter.
        target_id: Chosen target, or None to pick a random living player.

    Returns:
        The shot event, or None if the revenge was already resolved or no
        target remains.
    """
    pending = session.pending_revenge.get(hunter_id)
    if pending is None or pending.resolved:
        return None
    pending.resolved = True

    random_pick = target_id is None or not session.is_alive(target_id) or target_id == hunter_id
    if random_pick:
        candidates = [pid for pid in session.alive_ids() if pid != hunter_id]
        if not candidates:
            return None
        target_id = session.rng.choice(candidates)

    shot = session.record(HunterRevengeShot(actor=hunter_id, target=target_id, random_pick=random_pick))
    kill(session, target_id, DeathCause.HUNTER_REVENGE, killer_id=hunter_id)
    return shot
