"""State snapshot dataclasses for the Living Cells simulation."""

from dataclasses import dataclass
from typing import List, Dict
import numpy as np


@dataclass(frozen=True)
class CellSnapshot:
    """Immutable snapshot of a cell at a given time step."""
    cell_id: int
    x: float
    y: float
    state: str   # "alive", "dead"
    action: str  # "idle", "look:forward", "go:left", ...


@dataclass
class SimulationState:
    """Complete snapshot of simulation state at a given time step."""
    step: int
    cells: List[CellSnapshot]
    grid_occupancy: np.ndarray  # Occupancy layer the step was decided on
    metrics: Dict[str, float]   # moved, blocked, overlaps, ...

    def to_csv_rows(self) -> List[Dict]:
        """Convert to CSV-compatible format."""
        return [
            {
                "step": self.step,
                "cell_id": c.cell_id,
                "x": c.x,
                "y": c.y,
                "state": c.state,
                "action": c.action
            }
            for c in self.cells
        ]
