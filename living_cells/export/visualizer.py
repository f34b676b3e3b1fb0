"""Visualization and export for Living Cells simulation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.plane import GridIndex, Plane

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Visualizer:
    """
    Draws cell positions on the world plane using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    COLORS = {
        'background': '#0B0C10',
        'border': '#C5C6C7',
        'alive': '#00FFFF',   # Cyan
        'dead': '#7F8C8D',    # Gray
        'slot': '#45A29E',   # Teal outline
    }

    def __init__(self, plane: Plane):
        self.plane = plane
        self.frames: List[Image.Image] = []

    def _split_by_state(self, state: "SimulationState"):
        """Return (alive_xy, dead_xy) arrays of shape (n, 2)."""
        alive = [(c.x, c.y) for c in state.cells if c.state == 'alive']
        dead = [(c.x, c.y) for c in state.cells if c.state != 'alive']
        return (np.array(alive, dtype=np.float64).reshape(-1, 2),
                np.array(dead, dtype=np.float64).reshape(-1, 2))

    def _occupied_slots(self, state: "SimulationState") -> np.ndarray:
        """World centres of the grid slots the step was decided on, shape (n, 2)."""
        rows, cols = np.nonzero(state.grid_occupancy >= 0)
        centres = [self.plane.to_world(GridIndex(int(gx), int(gy)))
                   for gy, gx in zip(rows, cols)]
        return np.array(centres, dtype=np.float64).reshape(-1, 2)

    def _create_figure(self, state: "SimulationState") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        W, H = self.plane.half_width, self.plane.half_height
        aspect = W / H
        fig_height = 5
        fig_width = max(6, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        ax.set_facecolor(self.COLORS['background'])

        # Occupancy layer underneath, one square per taken slot
        slots = self._occupied_slots(state)
        if len(slots):
            ax.scatter(slots[:, 0], slots[:, 1], s=20, marker='s',
                       facecolors='none', edgecolors=self.COLORS['slot'],
                       linewidths=0.5)

        alive, dead = self._split_by_state(state)
        if len(dead):
            ax.scatter(dead[:, 0], dead[:, 1], s=6, marker='s',
                       color=self.COLORS['dead'], label='Dead')
        if len(alive):
            ax.scatter(alive[:, 0], alive[:, 1], s=6, marker='s',
                       color=self.COLORS['alive'], label='Alive')

        ax.set_title(f'Step {state.step} | Alive: {len(alive)} | '
                     f'Moved: {int(state.metrics.get("moved", 0))}')
        ax.set_xlabel('X')
        ax.set_ylabel('Y')

        # World bounds, origin at the centre
        ax.set_xlim(-W, W)
        ax.set_ylim(-H, H)
        ax.set_aspect('equal')
        for spine in ax.spines.values():
            spine.set_color(self.COLORS['border'])

        if len(alive) or len(dead):
            ax.legend(loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        self.frames.clear()
