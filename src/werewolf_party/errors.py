"""Exceptions."""


class WerewolfPartyError(Exception):
    """Base class for errors raised by this package."""


class LobbyError(WerewolfPartyError):
    """Raised for invalid lobby operations.

    Examples: joining twice, starting below the minimum player count,
    forcing a role after the game started.
    """


class DeliveryFailed(WerewolfPartyError):
    """Raised by a transport when a participant cannot be reached privately."""

    def __init__(self, participant_id: str, detail: str = ""):
        self.participant_id = participant_id
        msg = f"Cannot reach participant {participant_id}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
