"""Game settings: deadlines, probabilities and table limits."""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field


class GameSettings(BaseModel):
    """Tunable constants of a session.

    Durations are in seconds.
    """

    min_players: int = Field(default=5, ge=1)

    night_seconds: float = Field(default=120.0, gt=0)
    day_seconds: float = Field(default=180.0, gt=0)
    hunter_seconds: float = Field(default=30.0, gt=0)
    chemist_seconds: float = Field(default=45.0, gt=0)

    gunner_bullets: int = Field(default=2, ge=0)
    guardian_death_chance: float = Field(default=0.5, ge=0, le=1)
    alpha_bite_chance: float = Field(default=0.2, ge=0, le=1)
    hunter_base_chance: float = Field(default=0.3, ge=0, le=1)
    hunter_per_wolf_chance: float = Field(default=0.2, ge=0, le=1)

    def scaled(self, factor: float) -> "GameSettings":
        """Copy with every deadline multiplied by `factor`."""
        return self.model_copy(update={
            "night_seconds": self.night_seconds * factor,
            "day_seconds": self.day_seconds * factor,
            "hunter_seconds": self.hunter_seconds * factor,
            "chemist_seconds": self.chemist_seconds * factor,
        })

    def hunter_success_chance(self, attacker_count: int) -> float:
        """Chance that an attacked Hunter kills a wolf."""
        extra = max(0, attacker_count - 1)
        return min(1.0, self.hunter_base_chance + self.hunter_per_wolf_chance * extra)


def load_settings(path: Optional[Union[str, Path]] = None) -> GameSettings:
    """Load settings from a YAML file; defaults when path is None.

    Raises:
        pydantic.ValidationError: If the file holds invalid values.
    """
    if path is None:
        return GameSettings()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return GameSettings.model_validate(data)
