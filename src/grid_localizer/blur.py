import logging

import numpy as np

from .grid_math import as_belief_grid, normalize, zeros

logger = logging.getLogger(__name__)


def blur_window(blurring):
    """
    3x3 window of weights spreading probability from a cell to its neighbours.

    Example for blurring = 0.12:

        0.01  0.02  0.01
        0.02  0.88  0.02
        0.01  0.02  0.01
    """
    if not 0.0 <= blurring <= 1.0:
        raise ValueError(f"blurring must be within [0, 1], got {blurring}")

    center_prob = 1.0 - blurring
    corner_prob = blurring / 12.0
    adjacent_prob = blurring / 6.0

    return np.array([
        [corner_prob, adjacent_prob, corner_prob],
        [adjacent_prob, center_prob, adjacent_prob],
        [corner_prob, adjacent_prob, corner_prob],
    ])


def blur(grid, blurring):
    '''
    Blurs (and normalizes) a grid of probabilities by spreading the probability
    of each cell over a 3x3 window of cells. The world is cyclic: probability
    spills over from the right edge to the left one and from the bottom to the top.

    :param grid: A 2D grid of unnormalized probabilities.
    :param blurring: How much probability spills over to the neighbours, in [0, 1].
                     0.0 means no blurring.
    :return: A new normalized grid.
    '''
    grid = as_belief_grid(grid)
    window = blur_window(blurring)
    nrows, ncols = grid.shape
    new_grid = zeros(nrows, ncols)

    # Rolling the whole grid by (dy, dx) sends cell (i, j) to
    # ((i + dy) % nrows, (j + dx) % ncols), which also covers grids
    # smaller than the window: they simply receive several contributions.
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            mult = window[dy + 1, dx + 1]
            if mult == 0:
                continue
            new_grid += mult * np.roll(grid, shift=(dy, dx), axis=(0, 1))

    logger.debug("Blurred %dx%d grid with blurring=%.3f", nrows, ncols, blurring)
    return normalize(new_grid)
