import logging

from .grid_math import as_color_grid
from .errors import InvalidGrid

logger = logging.getLogger(__name__)


def read_line(line):
    """
    Parse one line of map data such as "r g g b" into its cell colors.
    Only the first character of every token is kept.
    """
    return [token[0] for token in line.split()]


def read_map(file_name):
    '''
    Loads a colormap from a text file holding one row of space separated
    color tokens per line. Blank lines are ignored.

    :param file_name: Path to the map file.
    :return: A HxW ndarray of single character colors.
    '''
    rows = []
    with open(file_name, 'r') as f:
        for line in f:
            row = read_line(line)
            if row:
                rows.append(row)

    if not rows:
        raise InvalidGrid(f"map {file_name} is empty")

    widths = {len(row) for row in rows}
    if len(widths) > 1:
        raise InvalidGrid(f"map {file_name} has rows of different widths {sorted(widths)}")

    cmap = as_color_grid(rows)
    logger.info("Loaded %dx%d map from %s", cmap.shape[0], cmap.shape[1], file_name)
    return cmap
