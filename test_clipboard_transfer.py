import os
import subprocess
from unittest.mock import patch

import pytest

from clipboard_transfer import (
    apply_at_top_left,
    apply_to_selection,
    build_clipboard_text,
    copy_selection,
    copy_to_system_clipboard,
    parse_clipboard_text,
    read_system_clipboard,
)
from curve_table import CurveDataTable
from motor_model import Voltage
from selection_model import CellPosition
from undo_stack import UndoStack


def _table(lock_continuous=False, undo=True):
    voltage = Voltage(48.0, max_speed=5000.0)
    voltage.add_series("Peak", 1.0)
    cont = voltage.add_series("Continuous", 2.0)
    cont.locked = lock_continuous
    stack = UndoStack() if undo else None
    table = CurveDataTable(undo_stack=stack)
    table.current_voltage = voltage
    return table, voltage.curves[0], cont, stack


# ---------- parsing ----------
def test_parse_drops_blank_lines_and_splits_tabs():
    block = parse_clipboard_text("1\t2\r\n\r\n3\t4\n")
    assert block.rows == [["1", "2"], ["3", "4"]]
    assert (block.row_count, block.column_count) == (2, 2)


@pytest.mark.parametrize("text", [None, "", "  \n\t\n"])
def test_parse_empty_text(text):
    assert parse_clipboard_text(text) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5", 5.0),
        ("\t5\t", 5.0),
        ("5\t6", None),
        ("5\n6", None),
        ("abc", None),
    ],
)
def test_scalar_detection(text, expected):
    assert parse_clipboard_text(text).scalar == expected


# ---------- copy ----------
def test_copy_rectangle_includes_axis_columns():
    table, peak, _, _ = _table()
    table.selection.select_rectangular_range((10, 0), (11, 3))

    text = copy_selection(table)

    assert text == os.linesep.join(
        ["10\t500\t1.00\t2.00", "11\t550\t1.00\t2.00"]
    )


def test_copy_leaves_holes_empty():
    table, _, _, _ = _table()
    text = build_clipboard_text(table, [(0, 2), (1, 3)])
    assert text.split(os.linesep) == ["1.00\t", "\t2.00"]


def test_copy_empty_selection():
    table, _, _, _ = _table()
    assert copy_selection(table) == ""
    with pytest.raises(TypeError):
        build_clipboard_text(table, None)


# ---------- paste ----------
def test_paste_block_at_top_left():
    table, peak, cont, stack = _table()

    assert apply_at_top_left(table, (0, 2), "1.11\t2.22\n3.33\t4.44")

    assert peak.torques[:2] == [1.11, 3.33]
    assert cont.torques[:2] == [2.22, 4.44]
    assert stack.undo_depth == 1

    stack.undo()
    assert peak.torques[:2] == [1.0, 1.0]
    assert cont.torques[:2] == [2.0, 2.0]


def test_paste_that_does_not_fit_writes_nothing():
    table, peak, cont, stack = _table()

    assert not apply_at_top_left(table, (100, 3), "1.11\t2.22\n3.33\t4.44")

    assert cont.points[100].torque == 2.0
    assert stack.undo_depth == 0


def test_paste_skips_axis_locked_and_garbage_cells():
    table, peak, cont, _ = _table(lock_continuous=True)

    assert not apply_at_top_left(table, (5, 1), "999\tx\t8")

    assert peak.points[5].torque == 1.0
    assert cont.points[5].torque == 2.0
    assert table.display_rpm_at(5) == 250

    assert apply_at_top_left(table, (5, 1), "999\t7\t8")
    assert peak.points[5].torque == 7.0


def test_scalar_paste_broadcasts_to_selection():
    table, peak, cont, stack = _table()
    table.selection.replace([(0, 2), (3, 2), (3, 3)], CellPosition(0, 2))

    assert apply_to_selection(table, "4.5\n")

    assert peak.points[0].torque == 4.5
    assert peak.points[3].torque == 4.5
    assert cont.points[3].torque == 4.5
    assert peak.points[1].torque == 1.0
    assert stack.undo_depth == 1


def test_block_paste_anchors_at_selection_corner():
    table, peak, cont, _ = _table()
    table.selection.replace([(4, 3), (2, 2)], CellPosition(4, 3))

    assert apply_to_selection(table, "5\t6")

    assert peak.points[2].torque == 5.0
    assert cont.points[2].torque == 6.0


def test_paste_needs_a_selection():
    table, _, _, _ = _table()
    assert not apply_to_selection(table, "1")


def test_copy_then_paste_moves_values():
    table, peak, cont, _ = _table(undo=False)
    peak.points[0].torque = 3.25
    cont.points[0].torque = 6.5
    table.selection.select_rectangular_range((0, 2), (0, 3))
    text = copy_selection(table)

    table.selection.select_cell(50, 2)
    assert apply_to_selection(table, text)

    assert peak.points[50].torque == 3.25
    assert cont.points[50].torque == 6.5


def test_paste_at_own_top_left_restores_copied_block():
    table, peak, cont, stack = _table()
    originals = {3: (1.25, 2.5), 4: (1.75, 3.0), 5: (2.25, 3.5)}
    for row, (p, c) in originals.items():
        peak.points[row].torque = p
        cont.points[row].torque = c
    cells = [CellPosition(r, c) for r in range(3, 6) for c in (2, 3)]
    text = build_clipboard_text(table, cells)

    for row in originals:
        peak.points[row].torque = 9.0
        cont.points[row].torque = 9.0

    assert apply_at_top_left(table, (3, 2), text)

    for row, (p, c) in originals.items():
        assert peak.points[row].torque == p
        assert cont.points[row].torque == c
    assert stack.undo_depth == 1


# ---------- system clipboard ----------
def test_copy_to_system_clipboard_runs_command():
    with patch("subprocess.run") as run:
        assert copy_to_system_clipboard("1\t2", ["fake-clip"])
        assert run.call_args.args[0] == ["fake-clip"]
        assert run.call_args.kwargs.get("input") == "1\t2"
        assert run.call_args.kwargs.get("text") is True


def test_system_clipboard_failures_are_reported():
    with patch("subprocess.run", side_effect=FileNotFoundError("nope")):
        assert not copy_to_system_clipboard("x", ["missing"])
        assert read_system_clipboard(["missing"]) is None

    with patch(
        "subprocess.run", side_effect=subprocess.CalledProcessError(1, ["clip"])
    ):
        assert read_system_clipboard(["clip"]) is None


def test_read_system_clipboard_returns_stdout():
    with patch("subprocess.run") as run:
        run.return_value = subprocess.CompletedProcess(["clip"], 0, stdout="7.5\n")
        assert read_system_clipboard(["clip"]) == "7.5\n"


def test_no_command_configured():
    with patch("subprocess.run") as run:
        assert not copy_to_system_clipboard("x", None)
        assert read_system_clipboard([]) is None
        run.assert_not_called()
