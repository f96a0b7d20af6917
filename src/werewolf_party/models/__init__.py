"""Models package."""

from werewolf_party.models.role import (
    Role,
    Team,
    NightAbility,
    RoleInfo,
    ROLE_CATALOG,
    WOLF_TEAM_ROLES,
    role_info,
    team_of,
    is_wolf_team,
    seer_view,
    parse_role,
    describe_roles,
)
from werewolf_party.models.player import Player
from werewolf_party.models.role_pool import (
    build_role_pool,
    assign_roles,
    wolf_count_for,
)

__all__ = [
    "Role",
    "Team",
    "NightAbility",
    "RoleInfo",
    "ROLE_CATALOG",
    "WOLF_TEAM_ROLES",
    "role_info",
    "team_of",
    "is_wolf_team",
    "seer_view",
    "parse_role",
    "describe_roles",
    "Player",
    "build_role_pool",
    "assign_roles",
    "wolf_count_for",
]
