"""Role pool construction and assignment."""

import random
from typing import Sequence

from werewolf_party.models.player import Player
from werewolf_party.models.role import Role

# (role, minimum player count), appended in this order
SPECIALIST_THRESHOLDS: list[tuple[Role, int]] = [
    (Role.SEER, 6),
    (Role.GUARDIAN_ANGEL, 7),
    (Role.HUNTER, 8),
    (Role.GUNNER, 9),
    (Role.CHEMIST, 10),
]

DISGUISE_THRESHOLDS: list[tuple[Role, int]] = [
    (Role.WOLF_MAN, 8),
    (Role.CURSED, 9),
    (Role.DRUNK, 10),
    (Role.TANNER, 10),
]

# (role, minimum player count, minimum wolf count)
WOLF_VARIETY_THRESHOLDS: list[tuple[Role, int, int]] = [
    (Role.ALPHA_WOLF, 7, 2),
    (Role.WOLF_CUB, 8, 2),
    (Role.SNOW_WOLF, 10, 3),
    (Role.LYCAN, 9, 2),
]


def wolf_count_for(player_count: int) -> int:
    """Roughly a quarter of the table, at least one."""
    return max(1, player_count // 4)


def build_role_pool(player_count: int, rng: random.Random) -> list[Role]:
    """Build a shuffled list of exactly `player_count` roles.

    Args:
        player_count: Number of joined participants.
        rng: random.Random instance for reproducible shuffling.

    Returns:
        List of roles, one per seat, in random order.
    """
    wolf_count = wolf_count_for(player_count)

    wolf_bag = [Role.WEREWOLF]
    for role, min_players, min_wolves in WOLF_VARIETY_THRESHOLDS:
        if player_count >= min_players and wolf_count >= min_wolves:
            wolf_bag.append(role)
    while len(wolf_bag) < wolf_count:
        wolf_bag.append(Role.WEREWOLF)
    rng.shuffle(wolf_bag)

    roles = wolf_bag[:wolf_count]
    for role, min_players in SPECIALIST_THRESHOLDS + DISGUISE_THRESHOLDS:
        if player_count >= min_players:
            roles.append(role)
    while len(roles) < player_count:
        roles.append(Role.VILLAGER)

    rng.shuffle(roles)
    return roles[:player_count]


def assign_roles(
    players: Sequence[Player],
    rng: random.Random,
    gunner_bullets: int = 2,
) -> None:
    """Assign roles to players in join order and reset ability state.

    A player's forced_role, when set, overwrites the slot drawn from the
    pool. Overrides are not rebalanced: forcing can produce duplicate
    specialists or a table without wolves.
    """
    roles = build_role_pool(len(players), rng)
    for player, role in zip(players, roles):
        player.role = player.forced_role or role
        player.is_alive = True
        player.bullets = gunner_bullets if player.role == Role.GUNNER else 0
        player.freeze_immunity = 0
        player.hangover = False
        player.revenge_triggered = False
        player.kills = 0
