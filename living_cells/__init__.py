"""Living Cells: random walkers with one-step collision avoidance."""

__version__ = "0.1.0"
