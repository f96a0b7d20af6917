"""Death application with role-conditioned follow-up effects.

Every kill, whatever its cause, goes through kill() so the WolfCub frenzy
and the Hunter's last shot chain identically for night attacks, lynches,
gunner shots, chemistry and Hunter shots.
"""

import logging
from typing import Optional

from werewolf_party.engine.session import Session
from werewolf_party.events import Death, DeathCause, FrenzyArmed
from werewolf_party.models.role import Role

logger = logging.getLogger(__name__)


def kill(
    session: Session,
    victim_id: str,
    cause: DeathCause,
    killer_id: Optional[str] = None,
) -> Optional[Death]:
    """Kill a living player and record the death.

    Args:
        session: The session to mutate.
        victim_id: Participant to kill.
        cause: Why they die.
        killer_id: Participant credited with the kill, if any.

    Returns:
        The recorded Death, or None if the victim was not alive.
    """
    victim = session.get_player(victim_id)
    if victim is None or not victim.is_alive:
        return None

    victim.is_alive = False
    if killer_id is not None and killer_id in session.players:
        session.players[killer_id].kills += 1

    death = session.record(Death(
        victim=victim_id,
        role=victim.role,
        cause=cause,
        killer=killer_id,
    ))
    logger.debug("%s died (%s) in channel %s", victim.name, cause.value, session.channel_id)

    if victim.role == Role.WOLF_CUB:
        session.frenzy_next_night = True
        session.record(FrenzyArmed(actor=victim_id))

    if victim.role == Role.HUNTER and not victim.revenge_triggered:
        victim.revenge_triggered = True
        session.revenge_queue.append(victim_id)

    return death
