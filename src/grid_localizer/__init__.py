from .errors import InvalidGrid, DegenerateDistribution
from .grid_math import (
    CLOSE_ENOUGH_TOLERANCE,
    zeros,
    normalize,
    grids_close_enough,
    scalars_close_enough,
)
from .blur import blur, blur_window
from .histogram_filter import (
    HistogramFilter,
    initialize_beliefs,
    move,
    sense,
    most_likely_cell,
)
from .config import FilterConfig, Step, Scenario, load_scenario
from .maps import read_map

__all__ = [
    "CLOSE_ENOUGH_TOLERANCE",
    "DegenerateDistribution",
    "FilterConfig",
    "HistogramFilter",
    "InvalidGrid",
    "Scenario",
    "Step",
    "blur",
    "blur_window",
    "grids_close_enough",
    "initialize_beliefs",
    "load_scenario",
    "most_likely_cell",
    "move",
    "normalize",
    "read_map",
    "scalars_close_enough",
    "sense",
    "zeros",
]
