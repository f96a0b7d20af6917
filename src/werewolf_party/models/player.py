"""Player model."""

from typing import Optional
from pydantic import BaseModel

from werewolf_party.models.role import Role, Team, is_wolf_team, team_of


class Player(BaseModel):
    """A participant of a session.

    Uses participant_id (the chat user id) as primary identifier.
    Name is stored for display purposes.
    """

    participant_id: str
    name: str
    role: Role = Role.VILLAGER  # placeholder until roles are assigned
    is_alive: bool = True

    # Ability state
    bullets: int = 0  # Gunner
    freeze_immunity: int = 0  # nights left during which SnowWolf cannot freeze
    hangover: bool = False  # skips the next wolf attack
    revenge_triggered: bool = False  # Hunter last shot is one-shot

    # Lobby-only override, applied at role assignment
    forced_role: Optional[Role] = None

    kills: int = 0

    @property
    def team(self) -> Team:
        return team_of(self.role)

    @property
    def is_wolf_team(self) -> bool:
        return is_wolf_team(self.role)

    def to_dict(self) -> dict:
        """Convert to dictionary, hiding secret info."""
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "is_alive": self.is_alive,
        }
