"""Event types for game logging."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from werewolf_party.models.role import Role


class Phase(str, Enum):
    """Session phases."""

    LOBBY = "lobby"
    NIGHT = "night"
    DAY = "day"
    ENDED = "ended"


class DeathCause(str, Enum):
    """Cause of death."""

    WOLF_ATTACK = "WOLF_ATTACK"
    GUARDIAN_RISK = "GUARDIAN_RISK"
    CHEMISTRY = "CHEMISTRY"
    HUNTER_RETALIATION = "HUNTER_RETALIATION"
    HUNTER_REVENGE = "HUNTER_REVENGE"
    LYNCH = "LYNCH"
    GUNNER = "GUNNER"


class Winner(str, Enum):
    """Who won the session."""

    VILLAGE = "Villagers"
    WOLVES = "Werewolves"
    TANNER = "Tanner"


class ConversionCause(str, Enum):
    CURSED = "CURSED"
    ALPHA_BITE = "ALPHA_BITE"


class NoAttackReason(str, Enum):
    NO_ATTACKERS = "NO_ATTACKERS"
    NO_VOTES = "NO_VOTES"


class NoLynchReason(str, Enum):
    NO_VOTES = "NO_VOTES"
    TIE = "TIE"


class GameEvent(BaseModel):
    """Base class for all game events."""

    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())
    night: int = 0  # cycle number; day N follows night N
    phase: Phase = Phase.NIGHT
    private_to: Optional[str] = None  # participant id for private events

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(night={self.night}, phase={self.phase.value})"


# ============================================================================
# Session lifecycle
# ============================================================================


class RolesAssigned(GameEvent):
    """Secret role table at game start."""

    phase: Phase = Phase.LOBBY
    roles: dict[str, Role]
    forced: list[str] = Field(default_factory=list)  # ids whose role was forced


class PhaseStarted(GameEvent):
    """A night or day began."""

    alive: list[str] = Field(default_factory=list)


class GameOver(GameEvent):
    """The session ended with a winner."""

    phase: Phase = Phase.ENDED
    winner: Winner
    roles: dict[str, Role] = Field(default_factory=dict)
    alive: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"GameOver(winner={self.winner.value})"


class SessionStopped(GameEvent):
    """The host stopped the session."""

    phase: Phase = Phase.ENDED
    stopped_by: Optional[str] = None


# ============================================================================
# Night events
# ============================================================================


class Frozen(GameEvent):
    """SnowWolf froze a player for the night."""

    actor: str
    target: str


class SeerVision(GameEvent):
    """Seer inspection result (private)."""

    actor: str
    target: str
    seen_as: Role


class SeerBlocked(GameEvent):
    """A frozen Seer's vision failed (private)."""

    actor: str


class Protected(GameEvent):
    """GuardianAngel protection."""

    actor: str
    target: str


class GuardianBlocked(GameEvent):
    """A frozen GuardianAngel's protection failed."""

    actor: str


class ChemistryOpened(GameEvent):
    """Chemist visited a target; the target must choose a potion."""

    actor: str
    target: str


class ChemistryResolved(GameEvent):
    """Outcome of a chemistry duel."""

    actor: str  # chemist
    target: str
    choice: str  # "A" or "B"
    target_poisoned: bool
    forced: bool = False


class ChemistryCancelled(GameEvent):
    """A pending duel was voided (frozen chemist or a dead party)."""

    actor: str
    target: str


class WolfAttack(GameEvent):
    """The pack's resolved attack on one victim."""

    victim: str
    attacker: str
    voters: list[str] = Field(default_factory=list)
    frenzy: bool = False  # True for the second victim of a frenzy night


class NoAttack(GameEvent):
    reason: NoAttackReason


class AttackBlocked(GameEvent):
    """Attack victim survived because they were protected."""

    victim: str


class Converted(GameEvent):
    """A player turned into a Werewolf instead of dying."""

    target: str
    previous_role: Role
    cause: ConversionCause


class DrunkBlock(GameEvent):
    """Attack on a Drunk failed."""

    victim: str
    attacker: str
    hangover_applied: bool
    frenzy_cancelled: bool = False


class HunterRetaliation(GameEvent):
    """Attacked Hunter's roll against the pack."""

    actor: str
    success: bool
    wolf: Optional[str] = None
    survived: bool = False


class FrenzyArmed(GameEvent):
    """WolfCub died; the pack takes two victims next night."""

    actor: str


# ============================================================================
# Day events
# ============================================================================


class VoteTally(GameEvent):
    """All votes at day resolution."""

    phase: Phase = Phase.DAY
    votes: dict[str, str] = Field(default_factory=dict)  # voter -> target
    counts: dict[str, int] = Field(default_factory=dict)


class Lynch(GameEvent):
    phase: Phase = Phase.DAY
    victim: str
    role: Role


class NoLynch(GameEvent):
    phase: Phase = Phase.DAY
    reason: NoLynchReason


class GunnerShot(GameEvent):
    phase: Phase = Phase.DAY
    actor: str
    target: str
    bullets_left: int


# ============================================================================
# Deaths and sub-protocols (any phase)
# ============================================================================


class Death(GameEvent):
    """Single death with its cause and revealed role."""

    victim: str
    role: Role
    cause: DeathCause
    killer: Optional[str] = None

    def __str__(self) -> str:
        return f"Death(victim={self.victim}, role={self.role.value}, cause={self.cause.value})"


class RevengeRequested(GameEvent):
    """A dead Hunter was offered the last shot."""

    actor: str
    options: list[str] = Field(default_factory=list)


class HunterRevengeShot(GameEvent):
    """Hunter's last shot."""

    actor: str
    target: str
    random_pick: bool = False
