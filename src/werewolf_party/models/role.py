"""Role catalog: identities, team affiliation and night abilities."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Team(str, Enum):
    """Teams used by the win evaluator."""

    WOLF = "wolf"
    VILLAGE = "village"
    SOLO = "solo"  # Tanner


class NightAbility(str, Enum):
    """Role-specific night abilities.

    The pack vote is not listed here: every wolf-team member votes on the
    night attack by virtue of its team, independently of its ability tag.
    """

    FREEZE = "FREEZE"
    INSPECT = "INSPECT"
    PROTECT = "PROTECT"
    VISIT = "VISIT"


class Role(str, Enum):
    """Player roles in the game."""

    # Wolf team
    WEREWOLF = "Werewolf"
    ALPHA_WOLF = "AlphaWolf"
    WOLF_CUB = "WolfCub"
    SNOW_WOLF = "SnowWolf"
    LYCAN = "Lycan"

    # Village specialists
    SEER = "Seer"
    GUARDIAN_ANGEL = "GuardianAngel"
    HUNTER = "Hunter"
    GUNNER = "Gunner"
    CHEMIST = "Chemist"

    # Village disguises (and the solo Tanner)
    WOLF_MAN = "WolfMan"
    CURSED = "Cursed"
    DRUNK = "Drunk"
    TANNER = "Tanner"

    VILLAGER = "Villager"


class RoleInfo(BaseModel):
    """Static description of a role."""

    role: Role
    team: Team
    seen_as: Role  # what a Seer inspection reports
    ability: Optional[NightAbility] = None
    description: str = ""


def _info(
    role: Role,
    team: Team,
    description: str,
    seen_as: Optional[Role] = None,
    ability: Optional[NightAbility] = None,
) -> RoleInfo:
    return RoleInfo(
        role=role,
        team=team,
        seen_as=seen_as or role,
        ability=ability,
        description=description,
    )


ROLE_CATALOG: dict[Role, RoleInfo] = {
    info.role: info
    for info in [
        _info(
            Role.WEREWOLF, Team.WOLF,
            "Votes each night with the pack on one victim to attack.",
        ),
        _info(
            Role.ALPHA_WOLF, Team.WOLF,
            "Votes with the pack. While alive, an ordinary attack victim has a "
            "20% chance to turn into a Werewolf instead of dying.",
        ),
        _info(
            Role.WOLF_CUB, Team.WOLF,
            "Votes with the pack. If the cub dies, the pack takes two victims "
            "the following night.",
        ),
        _info(
            Role.SNOW_WOLF, Team.WOLF,
            "Votes with the pack and freezes one player each night. A frozen "
            "player's night action fails; they cannot be frozen the next night.",
            ability=NightAbility.FREEZE,
        ),
        _info(
            Role.LYCAN, Team.WOLF,
            "A werewolf that the Seer sees as a Villager.",
            seen_as=Role.VILLAGER,
        ),
        _info(
            Role.SEER, Team.VILLAGE,
            "Inspects one player each night and learns their role.",
            ability=NightAbility.INSPECT,
        ),
        _info(
            Role.GUARDIAN_ANGEL, Team.VILLAGE,
            "Protects one player each night from the wolf attack. Protecting a "
            "wolf carries a 50% chance of dying.",
            ability=NightAbility.PROTECT,
        ),
        _info(
            Role.HUNTER, Team.VILLAGE,
            "When attacked may shoot back (30% plus 20% per extra wolf). On "
            "death gets one last shot at any living player.",
        ),
        _info(
            Role.GUNNER, Team.VILLAGE,
            "Has two bullets and may shoot a player during the day.",
        ),
        _info(
            Role.CHEMIST, Team.VILLAGE,
            "Visits one player each night. The visitor picks one of two "
            "potions, the Chemist drinks the other; one of them is poison.",
            ability=NightAbility.VISIT,
        ),
        _info(
            Role.WOLF_MAN, Team.VILLAGE,
            "A plain villager that the Seer sees as a Werewolf.",
            seen_as=Role.WEREWOLF,
        ),
        _info(
            Role.CURSED, Team.VILLAGE,
            "Turns into a Werewolf instead of dying when attacked by wolves.",
        ),
        _info(
            Role.DRUNK, Team.VILLAGE,
            "An attack on the Drunk fails and the attacking wolf skips its "
            "next attack.",
        ),
        _info(
            Role.TANNER, Team.SOLO,
            "Wins alone, and immediately, if lynched by the day vote.",
        ),
        _info(
            Role.VILLAGER, Team.VILLAGE,
            "No ability; discusses and votes.",
        ),
    ]
}

WOLF_TEAM_ROLES = frozenset(r for r, info in ROLE_CATALOG.items() if info.team == Team.WOLF)


def role_info(role: Role) -> RoleInfo:
    """Look up the catalog entry for a role."""
    return ROLE_CATALOG[role]


def team_of(role: Role) -> Team:
    return ROLE_CATALOG[role].team


def is_wolf_team(role: Role) -> bool:
    return role in WOLF_TEAM_ROLES


def seer_view(role: Role) -> Role:
    """Role reported to a Seer inspecting a holder of `role`."""
    return ROLE_CATALOG[role].seen_as


def parse_role(name: str) -> Role:
    """Parse a role name case-insensitively.

    Raises:
        ValueError: If the name matches no role.
    """
    wanted = name.strip().casefold()
    for role in Role:
        if role.value.casefold() == wanted or role.name.casefold() == wanted:
            return role
    raise ValueError(f"Unknown role: {name!r}")


def describe_roles() -> str:
    """Render the catalog as a team-grouped listing."""
    headings = {
        Team.WOLF: "Wolf team",
        Team.VILLAGE: "Village team",
        Team.SOLO: "Solo",
    }
    lines: list[str] = []
    for team, heading in headings.items():
        lines.append(heading)
        for info in ROLE_CATALOG.values():
            if info.team == team:
                lines.append(f"- {info.role.value}: {info.description}")
        lines.append("")
    return "\n".join(lines).rstrip()
