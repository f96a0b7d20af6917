"""Win evaluation over living team counts."""

from typing import Iterable, Optional

from werewolf_party.events import Winner
from werewolf_party.models.player import Player


def evaluate_winner(players: Iterable[Player]) -> Optional[Winner]:
    """Return the winning team, or None while the game goes on.

    Victory conditions (checked in order):
    - No living wolf-team member: village wins.
    - No living non-wolf: wolves win.
    - Wolves at least as many as everyone else: wolves win.

    The Tanner counts as a non-wolf here; the Tanner's own lynch win is
    decided by the day resolver before this is consulted.
    """
    wolves = 0
    others = 0
    for player in players:
        if not player.is_alive:
            continue
        if player.is_wolf_team:
            wolves += 1
        else:
            others += 1

    if wolves == 0:
        return Winner.VILLAGE
    if others == 0:
        return Winner.WOLVES
    if wolves >= others:
        return Winner.WOLVES
    return None
