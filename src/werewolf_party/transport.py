"""Messaging transport interface.

The engine never talks to a chat platform directly. It posts channel-wide
and private messages through a Transport, optionally attaching a Prompt
(a set of selectable options). The transport reports a participant's pick
back through dispatch_choice().
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol

from pydantic import BaseModel, Field

from werewolf_party.engine.actions import ActionKind, SubmissionResult

if TYPE_CHECKING:
    from werewolf_party.engine.controller import PhaseController


class Interaction(str, Enum):
    """What a prompt's options feed into."""

    NIGHT_ACTION = "night_action"
    VOTE = "vote"
    GUNNER = "gunner"
    REVENGE = "revenge"
    CHEMISTRY = "chemistry"


class ChoiceOption(BaseModel):
    label: str
    value: str


class Prompt(BaseModel):
    """Selectable options attached to a message."""

    interaction: Interaction
    kind: Optional[ActionKind] = None  # for NIGHT_ACTION prompts
    options: list[ChoiceOption] = Field(default_factory=list)


class Transport(Protocol):
    """A chat platform adapter.

    send_private raises werewolf_party.errors.DeliveryFailed when the
    participant cannot be reached.
    """

    async def broadcast(
        self,
        channel_id: str,
        text: str,
        prompt: Optional[Prompt] = None,
    ) -> None:
        """Post a message to the whole channel."""
        ...

    async def send_private(
        self,
        participant_id: str,
        text: str,
        prompt: Optional[Prompt] = None,
    ) -> None:
        """Post a message to one participant."""
        ...


async def dispatch_choice(
    controller: "PhaseController",
    participant_id: str,
    prompt: Prompt,
    value: str,
) -> SubmissionResult:
    """Route a participant's pick to the matching controller operation."""
    if prompt.interaction == Interaction.NIGHT_ACTION:
        if prompt.kind is None:
            raise ValueError("Night action prompt without an action kind")
        return await controller.submit_night_action(participant_id, prompt.kind, value)
    if prompt.interaction == Interaction.VOTE:
        return await controller.submit_vote(participant_id, value)
    if prompt.interaction == Interaction.GUNNER:
        return await controller.submit_gunner_shot(participant_id, value)
    if prompt.interaction == Interaction.REVENGE:
        return await controller.submit_hunter_revenge_choice(participant_id, value)
    return await controller.submit_chemist_choice(participant_id, value)
