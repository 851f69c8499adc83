"""
Custom exceptions.

Every error raised on purpose by this project derives from GameError, so the layers above
(service, API) can catch a single top-level type.
"""


class GameError(Exception):
    """Base class for all errors raised by the rules engine and the layers around it."""


class InvalidNotationError(GameError, ValueError):
    """Malformed algebraic square or move text (untrusted input from users / AI adapters)."""


class InvalidPositionError(GameError, ValueError):
    """Malformed board placement string."""


class InvariantViolationError(GameError):
    """The position breaks an invariant of the variant (ex. a side without a king)."""


class GameStateError(GameError):
    """Operation is not allowed given the current state of the game."""


class IllegalMoveError(GameError):
    """A move was rejected by the engine. Raised by the service layer only."""


class InvalidRequestError(GameError):
    """Request data did not pass validation. Not a ValueError: pydantic lets it propagate unwrapped."""


class RepositoryError(GameError):
    """Record could not be found / stored."""


class ConfigurationError(GameError):
    """Settings could not be parsed."""
