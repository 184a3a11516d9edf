import numpy as np

from .errors import InvalidGrid, DegenerateDistribution


CLOSE_ENOUGH_TOLERANCE = 1e-4


def _as_2d(grid, dtype):
    try:
        arr = np.array(grid, dtype=dtype)
    except ValueError as e:
        # ragged nested lists end up here
        raise InvalidGrid(f"grid is not rectangular: {e}") from e

    if arr.ndim != 2:
        raise InvalidGrid(f"expected a 2D grid, got {arr.ndim} dimension(s)")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidGrid("grid is empty")
    return arr


def as_belief_grid(grid):
    """
    Copy a grid of probabilities into a float ndarray, checking that it is
    non-empty, rectangular, finite and non-negative.
    """
    arr = _as_2d(grid, float)
    if not np.all(np.isfinite(arr)):
        raise InvalidGrid("belief grid contains NaN or infinite values")
    if np.any(arr < 0):
        raise InvalidGrid("belief grid contains negative values")
    return arr


def as_color_grid(grid):
    """Copy a grid of color symbols into a str ndarray."""
    arr = _as_2d(grid, str)
    if np.any(np.char.str_len(arr) != 1):
        raise InvalidGrid("every cell of a color grid must be a single character")
    return arr


def zeros(height, width):
    '''
    Creates a grid of zeros, e.g. zeros(2, 3) gives

    0.0  0.0  0.0
    0.0  0.0  0.0

    :param height: number of rows, must be positive.
    :param width: number of columns, must be positive.
    :return: A height x width float ndarray.
    '''
    if height <= 0 or width <= 0:
        raise InvalidGrid(f"grid dimensions must be positive, got {height}x{width}")
    return np.zeros((height, width), dtype=float)


def normalize(grid):
    '''
    Scales a grid of unnormalized probabilities so that it sums to one.

    :param grid: A 2D grid of non-negative numbers.
    :return: A new grid whose entries sum to 1.
    '''
    grid = as_belief_grid(grid)
    peak = np.max(grid)
    if peak <= 0:
        raise DegenerateDistribution("cannot normalize a grid with zero total probability")
    # scale by the peak first so that summing huge entries cannot overflow
    scaled = grid / peak
    return scaled / np.sum(scaled)


def grids_close_enough(g1, g2, tolerance=CLOSE_ENOUGH_TOLERANCE):
    """True when both grids have the same shape and every entry is within tolerance."""
    a = np.asarray(g1, dtype=float)
    b = np.asarray(g2, dtype=float)
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) <= tolerance))


def scalars_close_enough(v1, v2, tolerance=CLOSE_ENOUGH_TOLERANCE):
    return abs(v2 - v1) <= tolerance
