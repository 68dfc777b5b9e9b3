"""Custom exception hierarchy for the knot puzzle solver."""


class KangourouError(Exception):
    """Base exception for solver failures."""


class InvalidInput(KangourouError):
    """Raised when a board or piece-count request is malformed."""


class ValidationError(KangourouError):
    """Raised when a solution fails the tiling integrity checks."""
