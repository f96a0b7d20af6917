"""Stub players that answer prompts with random valid picks.

Useful for:
- Simulated games from the command line
- Integration tests (full game flow without real chat users)
"""

import random
from typing import Optional

from werewolf_party.transport import Interaction, Prompt


class StubPlayer:
    """Answers any prompt by picking one of its options at random.

    Avoids targeting itself where that would be pointless, holds fire as
    Gunner most days, and sometimes stays silent to exercise deadlines.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        skip_chance: float = 0.0,
        shoot_chance: float = 0.3,
    ):
        """Initialize stub player.

        Args:
            seed: Seed for this player's own random source.
            skip_chance: Probability of ignoring a prompt entirely.
            shoot_chance: Probability of using a Gunner prompt.
        """
        self.rng = random.Random(seed)
        self.skip_chance = skip_chance
        self.shoot_chance = shoot_chance

    def choose(self, prompt: Prompt, participant_id: Optional[str] = None) -> Optional[str]:
        """Pick an option value, or None to stay silent."""
        if self.rng.random() < self.skip_chance:
            return None
        if prompt.interaction == Interaction.GUNNER and self.rng.random() >= self.shoot_chance:
            return None

        values = [opt.value for opt in prompt.options]
        if prompt.interaction != Interaction.CHEMISTRY:
            values = [v for v in values if v != participant_id] or values
        if not values:
            return None
        return self.rng.choice(values)

    def think_time(self, upper: float) -> float:
        """Random delay before answering."""
        return self.rng.uniform(0, upper)


def create_stub_player(seed: Optional[int] = None, skip_chance: float = 0.0) -> StubPlayer:
    """Factory function to create a stub player."""
    return StubPlayer(seed=seed, skip_chance=skip_chance)
