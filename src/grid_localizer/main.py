import os
import logging

import click
import matplotlib.pyplot as plt

from .config import FilterConfig, load_scenario
from .histogram_filter import HistogramFilter, most_likely_cell
from .maps import read_map
from .visualizer import format_grid, plot_belief_evolution

logger = logging.getLogger(__name__)


def run_scenario(cmap, steps, config=None):
    """
    Runs a scripted sequence of moves and senses through the histogram filter,
    starting from a uniform belief.

    Returns the list of beliefs, the initial one first, so that beliefs[i + 1]
    is the belief after steps[i].
    """
    hf = HistogramFilter(cmap, config if config is not None else FilterConfig())
    belief = hf.initialize_beliefs()
    beliefs = [belief]

    for i, step in enumerate(steps):
        if step.kind == 'move':
            belief = hf.move(belief, step.dy, step.dx, blurring=step.blurring)
        else:
            belief = hf.sense(belief, step.color, p_hit=step.p_hit, p_miss=step.p_miss)
        beliefs.append(belief)

        r, c = most_likely_cell(belief)
        logger.info("Step %d: %s -> most likely cell (%d, %d) with p=%.3f",
                    i + 1, _describe(step), r, c, belief[r, c])

    return beliefs


def _describe(step):
    if step.kind == 'move':
        return f"move (dy={step.dy}, dx={step.dx})"
    return f"sense {step.color!r}"


@click.command()
@click.option('--scenario', required=True, help='scenario YAML with the map, filter parameters and steps', type=str)
@click.option('--map', 'map_file', default=None, help='map file overriding the one named by the scenario', type=str)
@click.option('--log_dir', default='logs', help='directory to save plots', type=str)
@click.option('--visualize', is_flag=True, help='whether to save the belief evolution plot')
def main(scenario, map_file, log_dir, visualize):
    # Run python -m grid_localizer.main --help to see how to provide command line arguments
    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    sc = load_scenario(scenario)
    cmap = read_map(map_file if map_file is not None else sc.map_path)

    logger.info("> Running %d steps with %s", len(sc.steps), sc.filter)
    beliefs = run_scenario(cmap, sc.steps, sc.filter)

    final = beliefs[-1]
    r, c = most_likely_cell(final)
    click.echo(format_grid(final))
    click.echo(f"Most likely cell: ({r}, {c}) with p={final[r, c]:.3f}")

    if visualize:
        os.makedirs(log_dir, exist_ok=True)
        fig = plot_belief_evolution(beliefs, cmap, list(sc.steps))
        out_path = os.path.join(log_dir, 'belief_evolution.png')
        logger.info("> Saving belief evolution plot in %s", out_path)
        fig.savefig(out_path)
        plt.close(fig)


if __name__ == '__main__':
    main()
