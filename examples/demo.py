import os
import numpy as np

from grid_localizer import FilterConfig, HistogramFilter, most_likely_cell, read_map
from grid_localizer.visualizer import BeliefVisualizer, format_grid, plot_belief_evolution
from grid_localizer.config import Step

MAP_FILE = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'maps', 'm1.txt')


def simple_demo():
    """
    Simple demonstration of the histogram filter
    """
    colormap = read_map(MAP_FILE)
    filter = HistogramFilter(colormap, FilterConfig(blurring=0.12, p_hit=3.0, p_miss=1.0))

    # Start with uniform belief
    belief = filter.initialize_beliefs()

    # The robot starts at (0, 0) and walks around a square
    actions = [(0, 1), (1, 0), (0, -1), (-1, 0)]
    observations = ['g', 'g', 'g', 'r']

    beliefs = [belief]
    steps = []

    print("Initial belief (uniform):")
    print(format_grid(belief))
    print()

    belief = filter.sense(belief, 'r')
    beliefs.append(belief)
    steps.append(Step(kind='sense', color='r'))

    for i, ((dy, dx), obs) in enumerate(zip(actions, observations)):
        belief = filter.move(belief, dy, dx)
        beliefs.append(belief)
        steps.append(Step(kind='move', dy=dy, dx=dx))

        belief = filter.sense(belief, obs)
        beliefs.append(belief)
        steps.append(Step(kind='sense', color=obs))

        print(f"Step {i+1}: Action={(dy, dx)}, Observation={obs}")
        print(f"Max belief at position: {most_likely_cell(belief)}")
        print(f"Max belief value: {np.max(belief):.3f}")
        print()

    fig = plot_belief_evolution(beliefs, colormap, steps)
    fig.savefig('belief_evolution.png')
    print("Saved belief evolution to belief_evolution.png")


def interactive_demo():
    """
    Interactive demonstration where user can input actions
    """
    colormap = read_map(MAP_FILE)
    filter = HistogramFilter(colormap)
    visualizer = BeliefVisualizer(colormap)

    # The simulated robot knows where it really is, the filter does not
    true_pos = (0, 0)
    belief = filter.initialize_beliefs()
    visualizer.update_belief(belief)

    print("Interactive Histogram Filter Demo")
    print("Actions: u=up, d=down, l=left, r=right, q=quit")
    print("The robot will observe the color at its new position")
    print()

    action_map = {
        'u': (-1, 0),
        'd': (1, 0),
        'l': (0, -1),
        'r': (0, 1)
    }

    nrows, ncols = colormap.shape
    while True:
        action_input = input("Enter action (u/d/l/r/q): ").lower()

        if action_input == 'q':
            break

        if action_input not in action_map:
            print("Invalid action. Use u/d/l/r/q")
            continue

        dy, dx = action_map[action_input]
        true_pos = ((true_pos[0] + dy) % nrows, (true_pos[1] + dx) % ncols)
        observation = colormap[true_pos]

        belief = filter.histogram_filter(belief, (dy, dx), observation)
        visualizer.update_belief(belief)

        print(f"Action: {(dy, dx)}, Observation: {observation}")
        print(f"True position: {true_pos}, most likely position: {most_likely_cell(belief)}")
        print(f"Confidence: {np.max(belief):.3f}")
        print()

    visualizer.show()


def noise_analysis():
    """
    Analyze how different sensor accuracies affect localization
    """
    colormap = read_map(MAP_FILE)

    for p_hit in [10.0, 5.0, 3.0, 1.5, 1.0]:
        filter = HistogramFilter(colormap, FilterConfig(p_hit=p_hit, p_miss=1.0))
        print(f"p_hit / p_miss: {p_hit}")

        belief = filter.initialize_beliefs()
        belief = filter.sense(belief, 'r')
        actions = [(0, 1), (0, 1), (1, 0), (1, 0)]
        observations = ['g', 'g', 'r', 'g']

        for action, obs in zip(actions, observations):
            belief = filter.histogram_filter(belief, action, obs)

        print(f"Final maximum belief: {np.max(belief):.3f} at {most_likely_cell(belief)}")
        print()


if __name__ == "__main__":
    print("Running simple demo...")
    simple_demo()

    print("\n" + "="*50 + "\n")

    print("Running noise analysis...")
    noise_analysis()

    print("\n" + "="*50 + "\n")

    # Uncomment to run interactive demo
    # print("Starting interactive demo...")
    # interactive_demo()
