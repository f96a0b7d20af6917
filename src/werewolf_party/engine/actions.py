"""Action kinds and submission results."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from werewolf_party.models.role import NightAbility


class ActionKind(str, Enum):
    """Closed set of submittable actions."""

    WOLF_VOTE = "wolf"
    FREEZE = "snow"
    INSPECT = "seer"
    PROTECT = "guardian"
    VISIT = "chemist"
    DAY_VOTE = "vote"


NIGHT_KINDS = frozenset({
    ActionKind.WOLF_VOTE,
    ActionKind.FREEZE,
    ActionKind.INSPECT,
    ActionKind.PROTECT,
    ActionKind.VISIT,
})

# Night ability tag -> the action kind it unlocks
ABILITY_ACTIONS: dict[NightAbility, ActionKind] = {
    NightAbility.FREEZE: ActionKind.FREEZE,
    NightAbility.INSPECT: ActionKind.INSPECT,
    NightAbility.PROTECT: ActionKind.PROTECT,
    NightAbility.VISIT: ActionKind.VISIT,
}


class Potion(str, Enum):
    """The two unlabeled chemistry options."""

    A = "A"
    B = "B"


class RejectReason(str, Enum):
    """Why a submission was refused."""

    NO_SESSION = "NO_SESSION"
    NOT_PARTICIPANT = "NOT_PARTICIPANT"
    WRONG_PHASE = "WRONG_PHASE"
    ACTOR_DEAD = "ACTOR_DEAD"
    WRONG_ROLE = "WRONG_ROLE"
    TARGET_UNKNOWN = "TARGET_UNKNOWN"
    TARGET_DEAD = "TARGET_DEAD"
    SELF_TARGET = "SELF_TARGET"
    ALREADY_USED = "ALREADY_USED"
    NO_BULLETS = "NO_BULLETS"
    HANGOVER = "HANGOVER"
    TARGET_IMMUNE = "TARGET_IMMUNE"
    NO_PENDING_CHOICE = "NO_PENDING_CHOICE"
    INVALID_CHOICE = "INVALID_CHOICE"
    NOT_HOST = "NOT_HOST"


class SubmissionResult(BaseModel):
    """Outcome of a submission, reported back to the submitter."""

    accepted: bool
    reason: Optional[RejectReason] = None
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "SubmissionResult":
        return cls(accepted=True, message=message)

    @classmethod
    def reject(cls, reason: RejectReason, message: str = "") -> "SubmissionResult":
        return cls(accepted=False, reason=reason, message=message or reason.value)
