import numpy as np
import matplotlib.pyplot as plt

from .grid_math import as_color_grid


def format_grid(grid, precision=2):
    """
    Render a belief grid or a colormap as text, one row per line.
    """
    arr = np.asarray(grid)
    lines = []
    for row in arr:
        if arr.dtype.kind in ('U', 'S', 'O'):
            lines.append(" ".join(str(cell) for cell in row))
        else:
            lines.append("  ".join(f"{cell:.{precision}f}" for cell in row))
    return "\n".join(lines)


def _color_indices(cmap):
    # matplotlib needs numbers, so each distinct color symbol gets an index
    colors, indices = np.unique(cmap, return_inverse=True)
    return indices.reshape(cmap.shape), colors


class BeliefVisualizer:
    def __init__(self, cmap):
        self.cmap = as_color_grid(cmap)
        self.fig, (self.ax1, self.ax2) = plt.subplots(1, 2, figsize=(12, 5))

        # Setup colormap display
        indices, colors = _color_indices(self.cmap)
        self.ax1.imshow(indices, cmap='tab10', vmin=0, vmax=9)
        for (r, c), color in np.ndenumerate(self.cmap):
            self.ax1.text(c, r, color, ha='center', va='center', fontsize=8)
        self.ax1.set_title('Environment Map')
        self.ax1.set_xlabel('Column')
        self.ax1.set_ylabel('Row')

        # Setup belief display
        self.belief_img = self.ax2.imshow(np.zeros(self.cmap.shape, dtype=float),
                                          cmap='hot', vmin=0, vmax=1)
        self.ax2.set_title('Belief Distribution')
        self.ax2.set_xlabel('Column')
        self.ax2.set_ylabel('Row')
        plt.colorbar(self.belief_img, ax=self.ax2)

    def update_belief(self, belief):
        self.belief_img.set_data(belief)
        self.belief_img.set_clim(vmin=0, vmax=max(np.max(belief), 1e-12))
        self.fig.canvas.draw()

    def show(self):
        plt.show()

    def save_frame(self, filename):
        self.fig.savefig(filename, dpi=150, bbox_inches='tight')

    def close(self):
        plt.close(self.fig)


def plot_belief_evolution(beliefs, cmap, steps=None):
    """
    Plot the evolution of belief over multiple timesteps

    Args:
        beliefs: List of belief arrays, the initial belief first
        cmap: The environment map
        steps: List of the Step objects that produced beliefs[1:] (optional)
    """
    cmap = as_color_grid(cmap)
    n_steps = len(beliefs)
    ncols = max((n_steps + 1) // 2, 1)
    fig, axes = plt.subplots(2, ncols, figsize=(15, 8), squeeze=False)
    axes = axes.flatten()
    vmax = max(float(np.max(beliefs)), 1e-12)

    for i, belief in enumerate(beliefs):
        ax = axes[i]
        ax.imshow(belief, cmap='hot', vmin=0, vmax=vmax)
        ax.set_title(f'Step {i}')
        if cmap.size <= 100:
            for (r, c), color in np.ndenumerate(cmap):
                ax.text(c, r, color, ha='center', va='center', fontsize=6, color='cyan')

        if steps and 0 < i <= len(steps):
            step = steps[i - 1]
            if step.kind == 'move':
                label = f"Move: ({step.dy}, {step.dx})"
            else:
                label = f"Sense: {step.color}"
            ax.text(0.5, -0.1, label, ha='center',
                    transform=ax.transAxes, fontsize=8)

    # Hide unused subplots
    for i in range(n_steps, len(axes)):
        axes[i].axis('off')

    plt.tight_layout()
    return fig
