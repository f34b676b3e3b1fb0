"""Per-step cell log in CSV form."""

import csv
from dataclasses import fields
from pathlib import Path
from typing import IO, Optional, TYPE_CHECKING

from ..model.state import CellSnapshot

if TYPE_CHECKING:
    from ..model.state import SimulationState

# step first, then one column per snapshot field
FIELDNAMES = ['step'] + [f.name for f in fields(CellSnapshot)]


class CSVWriter:
    """
    Streams SimulationState.to_csv_rows() into one file, a step at a time.

    The header is written when the file is opened; append() opens it on
    first use. Rows are flushed after every step so an interrupted run
    still leaves a readable log.
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self._handle: Optional[IO[str]] = None
        self._writer: Optional[csv.DictWriter] = None
        self.steps_written = 0

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.output_path.open('w', newline='')
        self._writer = csv.DictWriter(self._handle, fieldnames=FIELDNAMES)
        self._writer.writeheader()

    def append(self, state: "SimulationState") -> None:
        if not self.is_open:
            self.open()
        self._writer.writerows(state.to_csv_rows())
        self._handle.flush()
        self.steps_written += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._writer = None

    def __enter__(self) -> "CSVWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
