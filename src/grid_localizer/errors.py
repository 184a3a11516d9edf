class InvalidGrid(ValueError):
    """Raised when a grid is empty, ragged, has bad values or the wrong shape."""


class DegenerateDistribution(ValueError):
    """Raised when a grid carries no probability mass and cannot be normalized."""
