"""Summary report generation for Living Cells simulation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Reporter:
    """Accumulates per-step metrics and formats the closing report."""

    def __init__(self, config_path: Optional[str], seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.step_metrics: List[Dict] = []
        self.total_moves = 0
        self.total_blocked = 0
        self.total_cancelled = 0
        self.peak_overlaps = 0
        self.peak_crowded = 0
        self.still_steps = 0

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per step."""
        metrics = state.metrics
        self.step_metrics.append(metrics.copy())

        moved = int(metrics.get('moved', 0))
        self.total_moves += moved
        self.total_blocked += int(metrics.get('blocked', 0))
        self.total_cancelled += int(metrics.get('cancelled', 0))
        self.peak_overlaps = max(self.peak_overlaps, int(metrics.get('overlaps', 0)))
        self.peak_crowded = max(self.peak_crowded, int(metrics.get('crowded', 0)))

        # Nobody moved although some cells are still alive
        if moved == 0 and metrics.get('alive_cells', 0) > 0:
            self.still_steps += 1

    def generate_summary(self, final_state: "SimulationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics
        total_cells = int(metrics.get('total_cells', 0))
        alive = int(metrics.get('alive_cells', 0))
        attempts = self.total_moves + self.total_blocked
        success_pct = (self.total_moves / attempts * 100) if attempts > 0 else 0

        lines = [
            "",
            "=" * 80,
            "                    LIVING CELLS SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(built-in defaults)'}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Total Steps:           {final_state.step}",
            f"Cells Alive:           {alive} / {total_cells}",
            f"Moves Committed:       {self.total_moves} ({success_pct:.1f}% of attempts)",
            f"Moves Blocked:         {self.total_blocked}",
            f"Looks Cancelled:       {self.total_cancelled}",
            f"Density:               {metrics.get('density', 0):.4f} cells/slot",
            "",
            "COLLISION APPROXIMATION",
            "-" * 40,
            f"[{'X' if self.peak_overlaps > 0 else ' '}] Peak Overlapping Cells: {self.peak_overlaps}",
            f"[{'X' if self.peak_crowded > 0 else ' '}] Peak Crowded Cells:     {self.peak_crowded}",
            f"[{'X' if self.still_steps > 0 else ' '}] Steps Without Movement: {self.still_steps}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'simulation_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
