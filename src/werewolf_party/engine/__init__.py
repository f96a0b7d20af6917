"""Engine package - session state, resolution and orchestration."""

from .actions import (
    ActionKind,
    Potion,
    RejectReason,
    SubmissionResult,
)
from .session import ChemistryDuel, HunterRevenge, Session
from .action_collector import ActionCollector
from .victory import evaluate_winner
from .deaths import kill
from .night_resolver import NightResolver, NightOutcome, AttackResult
from .day_resolver import DayResolver, DayOutcome
from .controller import PhaseController

__all__ = [
    "ActionKind",
    "Potion",
    "RejectReason",
    "SubmissionResult",
    "ChemistryDuel",
    "HunterRevenge",
    "Session",
    "ActionCollector",
    "evaluate_winner",
    "kill",
    "NightResolver",
    "NightOutcome",
    "AttackResult",
    "DayResolver",
    "DayOutcome",
    "PhaseController",
]
