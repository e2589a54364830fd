"""Error types raised by the scheduling engine."""


class InvalidInputError(ValueError):
    """Raised when an engine operation receives malformed input.

    Always raised before any state is changed.
    """

    pass


class NotFoundError(LookupError):
    """Raised when an operation references something that no longer exists."""

    pass


class ExerciseNotFoundError(NotFoundError):
    """Raised when an exercise is not found."""

    pass


class AttemptNotFoundError(NotFoundError):
    """Raised when no study session matches the request."""

    pass
