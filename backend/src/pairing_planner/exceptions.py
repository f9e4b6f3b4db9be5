"""Exceptions raised by the pairing planner core."""


class PairingPlannerError(Exception):
    """Base exception for all pairing planner errors.

    The HTTP layer converts every subclass into a client error with a readable
    ``detail`` message, so the message should make sense to an end user.
    """


# ========== Roster Exceptions ==========


class RosterError(PairingPlannerError):
    """Base exception for player/opponent roster errors."""


class DuplicateIdentifierError(RosterError):
    """Raised when a name is already used by another player or opponent."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A player named '{name}' already exists")


class UnknownIdentifierError(RosterError):
    """Raised when a name is not part of the roster."""

    def __init__(self, name: str, side: str = "player"):
        self.name = name
        self.side = side
        super().__init__(f"Unknown {side} '{name}'")


class InvalidIdentifierError(RosterError):
    """Raised when a name is blank."""


# ========== Rating Exceptions ==========


class InvalidRatingError(PairingPlannerError):
    """Raised when a rating write falls outside the allowed range."""

    def __init__(self, value, low: int, high: int):
        self.value = value
        super().__init__(f"Rating must be an integer between {low} and {high}, got {value!r}")


# ========== Protocol Exceptions ==========


class ProtocolError(PairingPlannerError):
    """Base exception for pairing protocol errors."""


class InvalidSelectionError(ProtocolError):
    """Raised when a selection breaks the protocol rules."""


class IncompleteStepError(ProtocolError):
    """Raised when advancing past a step whose slots are not all filled."""
