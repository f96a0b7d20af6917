"""Werewolf party game engine for group chats.

A PhaseController runs one session per channel: it assigns roles, collects
private night actions and public day votes through a Transport, resolves
each phase and announces the results until one side wins.
"""

from werewolf_party.engine import PhaseController, SubmissionResult, RejectReason, ActionKind
from werewolf_party.config import GameSettings, load_settings
from werewolf_party.errors import WerewolfPartyError, LobbyError, DeliveryFailed
from werewolf_party.models import Role, Team
from werewolf_party.stats import MemoryStatsStore, PlayerStats
from werewolf_party.transport import ChoiceOption, Interaction, Prompt, Transport, dispatch_choice

__version__ = "0.1.0"

__all__ = [
    "PhaseController",
    "SubmissionResult",
    "RejectReason",
    "ActionKind",
    "GameSettings",
    "load_settings",
    "WerewolfPartyError",
    "LobbyError",
    "DeliveryFailed",
    "Role",
    "Team",
    "MemoryStatsStore",
    "PlayerStats",
    "ChoiceOption",
    "Interaction",
    "Prompt",
    "Transport",
    "dispatch_choice",
]
