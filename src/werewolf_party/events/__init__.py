"""Events package."""

from werewolf_party.events.game_events import (
    # Base
    GameEvent,
    # Enums
    Phase,
    DeathCause,
    Winner,
    ConversionCause,
    NoAttackReason,
    NoLynchReason,
    # Lifecycle
    RolesAssigned,
    PhaseStarted,
    GameOver,
    SessionStopped,
    # Night
    Frozen,
    SeerVision,
    SeerBlocked,
    Protected,
    GuardianBlocked,
    ChemistryOpened,
    ChemistryResolved,
    ChemistryCancelled,
    WolfAttack,
    NoAttack,
    AttackBlocked,
    Converted,
    DrunkBlock,
    HunterRetaliation,
    FrenzyArmed,
    # Day
    VoteTally,
    Lynch,
    NoLynch,
    GunnerShot,
    # Deaths
    Death,
    RevengeRequested,
    HunterRevengeShot,
)
from werewolf_party.events.event_formatter import EventFormatter
from werewolf_party.events.event_log import EventLog

__all__ = [
    "GameEvent",
    "Phase",
    "DeathCause",
    "Winner",
    "ConversionCause",
    "NoAttackReason",
    "NoLynchReason",
    "RolesAssigned",
    "PhaseStarted",
    "GameOver",
    "SessionStopped",
    "Frozen",
    "SeerVision",
    "SeerBlocked",
    "Protected",
    "GuardianBlocked",
    "ChemistryOpened",
    "ChemistryResolved",
    "ChemistryCancelled",
    "WolfAttack",
    "NoAttack",
    "AttackBlocked",
    "Converted",
    "DrunkBlock",
    "HunterRetaliation",
    "FrenzyArmed",
    "VoteTally",
    "Lynch",
    "NoLynch",
    "GunnerShot",
    "Death",
    "RevengeRequested",
    "HunterRevengeShot",
    "EventFormatter",
    "EventLog",
]
