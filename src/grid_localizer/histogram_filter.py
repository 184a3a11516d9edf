import logging

import numpy as np

from .blur import blur
from .config import FilterConfig
from .errors import InvalidGrid, DegenerateDistribution
from .grid_math import as_belief_grid, as_color_grid, normalize, zeros

logger = logging.getLogger(__name__)


def initialize_beliefs(grid):
    '''
    Initializes a grid of beliefs to a uniform distribution.

    :param grid: The HxW colormap of the robot's world, e.g.

                 g g g
                 g r g
                 g g g

    :return: A HxW ndarray where every cell holds 1 / (H * W).
    '''
    height, width = as_color_grid(grid).shape
    area = height * width
    return np.full((height, width), 1.0 / area)


def move(dy, dx, beliefs, blurring):
    '''
    Implements robot motion by shifting the beliefs by the intended (dy, dx),
    wrapping around the edges of the world, and then blurring them to model
    motion noise.

    A localized robot with the beliefs

        0.00  0.00  0.00
        0.00  1.00  0.00
        0.00  0.00  0.00

    ends up, for dy = dx = 1 and blurring = 0, with

        0.00  0.00  0.00
        0.00  0.00  0.00
        0.00  0.00  1.00

    :param dy: The intended change in row. Any sign or magnitude.
    :param dx: The intended change in column. Any sign or magnitude.
    :param beliefs: The HxW prior belief.
    :param blurring: How noisy the motion is, 0.0 for noiseless motion.
    :return: The normalized HxW belief after moving.
    '''
    beliefs = as_belief_grid(beliefs)
    nrows, ncols = beliefs.shape
    new_beliefs = zeros(nrows, ncols)

    for r in range(nrows):
        for c in range(ncols):
            # python's % is already non-negative for a positive modulus
            nr, nc = (r + dy) % nrows, (c + dx) % ncols
            new_beliefs[nr, nc] = beliefs[r, c]

    logger.debug("Moved beliefs by (dy=%d, dx=%d)", dy, dx)
    return blur(new_beliefs, blurring)


def sense(color, grid, beliefs, p_hit, p_miss):
    '''
    Implements robot sensing by reweighting the beliefs with the likelihood of
    observing `color` in every cell.

    :param color: The color the robot sensed at its location.
    :param grid: The HxW colormap of the world.
    :param beliefs: The HxW prior belief.
    :param p_hit: Relative likelihood of a correct observation.
    :param p_miss: Relative likelihood of an incorrect observation. Only the
                   ratio p_hit / p_miss matters.
    :return: The normalized HxW posterior belief.
    '''
    grid = as_color_grid(grid)
    beliefs = as_belief_grid(beliefs)
    if grid.shape != beliefs.shape:
        raise InvalidGrid(f"colormap shape {grid.shape} does not match belief shape {beliefs.shape}")
    if p_hit < 0 or p_miss < 0:
        raise ValueError(f"p_hit and p_miss must be non-negative, got {p_hit}, {p_miss}")

    likelihood = np.where(grid == color, p_hit, p_miss)
    new_beliefs = beliefs * likelihood

    if np.sum(new_beliefs) <= 0:
        raise DegenerateDistribution(
            f"observation {color!r} has zero likelihood under the current belief "
            f"(p_hit={p_hit}, p_miss={p_miss})")

    logger.debug("Sensed %r (p_hit=%.3f, p_miss=%.3f)", color, p_hit, p_miss)
    return normalize(new_beliefs)


def most_likely_cell(beliefs):
    """(row, col) of the highest belief, first one in row-major order on ties."""
    beliefs = as_belief_grid(beliefs)
    r, c = np.unravel_index(np.argmax(beliefs), beliefs.shape)
    return int(r), int(c)


class HistogramFilter(object):
    """
    Class HistogramFilter implements the Bayes Filter on a cyclic, colored grid world.
    """

    def __init__(self, cmap, config=None):
        self.cmap = as_color_grid(cmap)
        self.config = config if config is not None else FilterConfig()

    @property
    def shape(self):
        return self.cmap.shape

    def initialize_beliefs(self):
        return initialize_beliefs(self.cmap)

    def move(self, belief, dy, dx, blurring=None):
        if blurring is None:
            blurring = self.config.blurring
        return move(dy, dx, belief, blurring)

    def sense(self, belief, observation, p_hit=None, p_miss=None):
        if p_hit is None:
            p_hit = self.config.p_hit
        if p_miss is None:
            p_miss = self.config.p_miss
        return sense(observation, self.cmap, belief, p_hit, p_miss)

    def histogram_filter(self, belief, action, observation):
        '''
        Takes in a prior belief distribution, an action and an observation, and
        returns the posterior belief distribution according to the Bayes Filter.

        :param belief: An HxW numpy ndarray representing the prior belief.
        :param action: The (dy, dx) displacement, or None to stay in place without blurring.
        :param observation: The sensed color, or None when nothing was sensed.
        :return: The posterior distribution.
        '''
        if action is not None:
            dy, dx = action
            belief = self.move(belief, dy, dx)
        if observation is not None:
            belief = self.sense(belief, observation)
        if action is None and observation is None:
            belief = normalize(belief)
        return belief
