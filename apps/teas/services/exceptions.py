"""Domain-specific exceptions for teas services."""


class TeasServiceError(Exception):
    """Base exception for teas services."""
    pass


class TeaNotFoundError(TeasServiceError):
    """Raised when tea does not exist."""
    pass


class InvalidTeaRatingError(TeasServiceError):
    """Raised when aggregate values are out of range."""
    pass
