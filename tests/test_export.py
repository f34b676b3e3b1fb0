from __future__ import annotations

import csv
from dataclasses import fields
from pathlib import Path

import numpy as np
from PIL import Image

from living_cells.export.csv_writer import FIELDNAMES, CSVWriter
from living_cells.export.reporter import Reporter
from living_cells.export.visualizer import Visualizer
from living_cells.model.state import CellSnapshot, SimulationState


def _state(step, moved=0, blocked=0, overlaps=0, alive=2):
    cells = [
        CellSnapshot(cell_id=0, x=1.0, y=-2.0, state="alive", action="look:left"),
        CellSnapshot(cell_id=1, x=-5.0, y=3.0, state="alive" if alive > 1 else "dead", action="idle"),
    ]
    metrics = {
        'alive_cells': alive,
        'total_cells': 2,
        'moved': moved,
        'blocked': blocked,
        'cancelled': 0,
        'overlaps': overlaps,
        'crowded': 0,
        'density': 0.01,
    }
    return SimulationState(step=step, cells=cells,
                           grid_occupancy=np.full((10, 20), -1, dtype=np.int32),
                           metrics=metrics)


def test_csv_writer_logs_every_cell_per_step(tmp_path):
    path = tmp_path / "nested" / "log.csv"
    with CSVWriter(path) as writer:
        writer.append(_state(1))
        writer.append(_state(2))

    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 4
    assert list(rows[0].keys()) == ['step', 'cell_id', 'x', 'y', 'state', 'action']
    assert rows[0]['action'] == 'look:left'
    assert rows[3]['step'] == '2'
    assert rows[3]['cell_id'] == '1'


def test_csv_writer_opens_lazily(tmp_path):
    writer = CSVWriter(tmp_path / "lazy.csv")
    writer.append(_state(1))
    writer.close()

    assert (tmp_path / "lazy.csv").read_text().startswith("step,cell_id")


def test_reporter_accumulates_and_formats(tmp_path):
    reporter = Reporter("configs/default.yaml", 42)
    reporter.update(_state(1, moved=0))
    reporter.update(_state(2, moved=3, blocked=1, overlaps=2))
    final = _state(3, moved=1, alive=1)
    reporter.update(final)

    assert reporter.total_moves == 4
    assert reporter.total_blocked == 1
    assert reporter.peak_overlaps == 2
    assert reporter.still_steps == 1

    report = reporter.generate_summary(final, Path(tmp_path), True, False, False)
    assert "LIVING CELLS SIMULATION REPORT" in report
    assert "Random Seed: 42" in report
    assert "Cells Alive:           1 / 2" in report
    assert "Moves Committed:       4 (80.0% of attempts)" in report
    assert "[X] Peak Overlapping Cells: 2" in report
    assert "Snapshot:   (disabled)" in report


def test_reporter_without_config_path(tmp_path):
    reporter = Reporter(None, None)
    report = reporter.generate_summary(_state(1), Path(tmp_path), False, False, False)

    assert "(built-in defaults)" in report
    assert "None (random)" in report


def test_visualizer_snapshot_and_gif(tmp_path, small_plane):
    visualizer = Visualizer(small_plane)
    visualizer.buffer_frame(_state(1))
    visualizer.buffer_frame(_state(2, alive=1))

    visualizer.save_snapshot(_state(2), tmp_path / "final.png")
    visualizer.generate_gif(tmp_path / "run.gif", fps=5)

    assert len(visualizer.frames) == 2
    assert (tmp_path / "final.png").stat().st_size > 0
    with Image.open(tmp_path / "run.gif") as gif:
        assert gif.n_frames == 2

    visualizer.clear_frames()
    visualizer.generate_gif(tmp_path / "none.gif")
    assert not (tmp_path / "none.gif").exists()


def test_csv_header_follows_snapshot_fields():
    assert FIELDNAMES == ['step'] + [f.name for f in fields(CellSnapshot)]
    assert set(_state(1).to_csv_rows()[0]) == set(FIELDNAMES)


def test_csv_writer_counts_steps_and_closes_once(tmp_path):
    writer = CSVWriter(tmp_path / "log.csv")
    assert not writer.is_open

    writer.append(_state(1))
    writer.append(_state(2))
    writer.close()
    writer.close()

    assert writer.steps_written == 2
    assert not writer.is_open


def test_visualizer_maps_occupied_slots_to_world(small_plane):
    state = _state(1)
    state.grid_occupancy[5, 10] = 0   # centre slot
    state.grid_occupancy[0, 0] = 1    # lower-left corner
    visualizer = Visualizer(small_plane)

    slots = {tuple(p) for p in visualizer._occupied_slots(state)}

    assert slots == {(0.0, 0.0), (-10.0, -5.0)}
    assert visualizer._occupied_slots(_state(1)).shape == (0, 2)
