import numpy as np
import pytest

from grid_localizer.histogram_filter import (
    HistogramFilter,
    initialize_beliefs,
    move,
    sense,
    most_likely_cell,
)
from grid_localizer.config import FilterConfig
from grid_localizer.grid_math import normalize, grids_close_enough
from grid_localizer.errors import InvalidGrid, DegenerateDistribution


class TestBeliefUpdates:

    def setup_method(self):
        self.cmap = np.array([['r', 'g'], ['g', 'g']])
        self.spike = np.zeros((3, 3))
        self.spike[1, 1] = 1.0

    def test_uniform_initial_belief(self):
        """Every cell starts with 1 / area"""
        cmap = np.array([['r', 'g', 'b'], ['g', 'g', 'r']])
        belief = initialize_beliefs(cmap)
        assert belief.shape == (2, 3)
        assert np.allclose(belief, 1.0 / 6)
        assert np.isclose(np.sum(belief), 1.0)

    def test_noiseless_move(self):
        """A spike at (1, 1) moved by (1, 1) ends up at (2, 2)"""
        new_belief = move(1, 1, self.spike, 0.0)
        expected = np.zeros((3, 3))
        expected[2, 2] = 1.0
        assert grids_close_enough(new_belief, expected)

    def test_move_wraps_around(self):
        belief = np.zeros((3, 4))
        belief[0, 0] = 1.0
        new_belief = move(-1, -1, belief, 0.0)
        assert np.isclose(new_belief[2, 3], 1.0)

    def test_move_with_large_displacement(self):
        belief = np.zeros((3, 4))
        belief[1, 2] = 1.0
        new_belief = move(7, -9, belief, 0.0)
        assert np.isclose(new_belief[(1 + 7) % 3, (2 - 9) % 4], 1.0)

    def test_move_on_non_square_grid(self):
        belief = np.zeros((2, 5))
        belief[1, 4] = 1.0
        new_belief = move(1, 2, belief, 0.0)
        assert np.isclose(new_belief[0, 1], 1.0)

    def test_noiseless_round_trip(self):
        rng = np.random.default_rng(1)
        belief = normalize(rng.random((4, 6)))
        for dy, dx in [(1, 0), (-2, 3), (5, -7), (0, 0)]:
            back = move(dy, dx, move(-dy, -dx, belief, 0.0), 0.0)
            assert grids_close_enough(back, belief)

    def test_move_with_blur(self):
        """Motion noise spreads the moved spike over its neighbours"""
        new_belief = move(0, 1, self.spike, 0.12)
        assert np.isclose(new_belief[1, 2], 0.88)
        assert np.isclose(new_belief[1, 0], 0.02)
        assert np.isclose(np.sum(new_belief), 1.0)

    def test_move_does_not_mutate_input(self):
        original = self.spike.copy()
        move(1, 1, self.spike, 0.2)
        assert np.array_equal(self.spike, original)

    def test_sense_does_not_mutate_input(self):
        belief = np.array([[0.1, 0.2], [0.3, 0.4]])
        original_belief = belief.copy()
        original_cmap = self.cmap.copy()
        sense('r', self.cmap, belief, 0.6, 0.2)
        assert np.array_equal(belief, original_belief)
        assert np.array_equal(self.cmap, original_cmap)

    def test_sense(self):
        """Sensing red in [[r, g], [g, g]] with 0.6 / 0.2"""
        belief = initialize_beliefs(self.cmap)
        new_belief = sense('r', self.cmap, belief, 0.6, 0.2)
        assert np.isclose(new_belief[0, 0], 0.5)
        assert np.isclose(new_belief[0, 1], 1.0 / 6)
        assert np.isclose(new_belief[1, 0], 1.0 / 6)
        assert np.isclose(new_belief[1, 1], 1.0 / 6)

    def test_sense_with_equal_likelihoods_is_a_no_op(self):
        belief = np.array([[0.1, 0.2], [0.3, 0.2]])
        new_belief = sense('r', self.cmap, belief, 0.4, 0.4)
        assert grids_close_enough(new_belief, normalize(belief))

    def test_sense_accepts_nested_lists(self):
        new_belief = sense('g', [['r', 'g'], ['g', 'g']], [[0.25, 0.25], [0.25, 0.25]], 1.0, 0.0)
        assert grids_close_enough(new_belief, [[0.0, 1 / 3], [1 / 3, 1 / 3]])

    def test_sense_shape_mismatch(self):
        with pytest.raises(InvalidGrid):
            sense('r', self.cmap, np.ones((3, 3)) / 9, 0.6, 0.2)

    def test_sense_negative_likelihood(self):
        belief = initialize_beliefs(self.cmap)
        with pytest.raises(ValueError):
            sense('r', self.cmap, belief, -0.6, 0.2)

    def test_sense_unknown_color_without_miss_probability(self):
        belief = initialize_beliefs(self.cmap)
        with pytest.raises(DegenerateDistribution):
            sense('b', self.cmap, belief, 0.6, 0.0)

    def test_most_likely_cell(self):
        belief = np.array([[0.1, 0.5], [0.3, 0.1]])
        assert most_likely_cell(belief) == (0, 1)

    def test_most_likely_cell_ties_pick_first(self):
        assert most_likely_cell(np.ones((2, 2)) / 4) == (0, 0)


class TestHistogramFilter:

    def setup_method(self):
        self.colormap = np.array([
            ['r', 'g', 'g'],
            ['g', 'b', 'g'],
            ['g', 'g', 'r'],
        ])
        self.filter = HistogramFilter(self.colormap, FilterConfig(blurring=0.1, p_hit=0.9, p_miss=0.1))

    def test_normalization(self):
        """Test that belief always sums to 1"""
        belief = self.filter.initialize_beliefs()
        new_belief = self.filter.histogram_filter(belief, (1, 0), 'g')
        assert np.isclose(np.sum(new_belief), 1.0)

    def test_default_config(self):
        hf = HistogramFilter(self.colormap)
        assert hf.config == FilterConfig()
        assert hf.shape == (3, 3)

    def test_unique_color_localizes(self):
        """Seeing the only blue cell makes it the most likely position"""
        belief = self.filter.initialize_beliefs()
        new_belief = self.filter.histogram_filter(belief, None, 'b')
        assert most_likely_cell(new_belief) == (1, 1)
        assert new_belief[1, 1] > 0.5

    def test_action_uncertainty(self):
        """Test that action has inherent uncertainty"""
        belief = np.zeros((3, 3))
        belief[0, 0] = 1.0
        new_belief = self.filter.move(belief, 0, 1)
        assert new_belief[0, 1] > new_belief[0, 0]
        assert new_belief[0, 0] > 0

    def test_per_call_overrides(self):
        belief = np.zeros((3, 3))
        belief[0, 0] = 1.0
        new_belief = self.filter.move(belief, 0, 1, blurring=0.0)
        assert np.isclose(new_belief[0, 1], 1.0)

        uniform = self.filter.initialize_beliefs()
        same = self.filter.sense(uniform, 'r', p_hit=1.0, p_miss=1.0)
        assert grids_close_enough(same, uniform)

    def test_no_action_no_observation(self):
        belief = np.array([[2.0, 0, 0], [0, 0, 0], [0, 0, 2.0]])
        new_belief = self.filter.histogram_filter(belief, None, None)
        assert np.isclose(new_belief[0, 0], 0.5)

    def test_tracking_a_robot(self):
        """Moving along the top row and sensing the true colors converges"""
        belief = self.filter.initialize_beliefs()
        belief = self.filter.histogram_filter(belief, None, 'r')
        # true position (0, 0) -> (1, 0) -> (1, 1)
        belief = self.filter.histogram_filter(belief, (1, 0), 'g')
        belief = self.filter.histogram_filter(belief, (0, 1), 'b')
        assert most_likely_cell(belief) == (1, 1)

    def test_filter_rejects_invalid_map(self):
        with pytest.raises(InvalidGrid):
            HistogramFilter([['r', 'g'], ['g']])
