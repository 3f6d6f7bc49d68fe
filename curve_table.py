# ~/Apps/torquegrid/curve_table.py
import logging
from typing import Callable

import pandas as pd

from cell_coercion import format_rpm, format_torque, values_differ
from commands import EditPointCommand, OverrideTorqueCellsCommand, TorqueTarget
from config_paths import WRITE_EPSILON_DEFAULT
from editing_coordinator import EditingCoordinator, PointSelection
from motor_model import Curve, Voltage
from selection_model import CellPosition, SelectionModel

logger = logging.getLogger(__name__)

# column 0 is percent, column 1 is RPM; curves start here
FIRST_SERIES_COLUMN = 2


class CurveDataTable:
    """Grid projection of one voltage: %, RPM, then one torque column per curve.

    Reads through to the voltage on every access, so the grid shape always
    follows the current curve list and point count.
    """

    def __init__(self, undo_stack=None, coordinator: EditingCoordinator | None = None, epsilon: float = WRITE_EPSILON_DEFAULT):
        self.epsilon = epsilon
        self._voltage: Voltage | None = None
        self._undo_stack = None
        self._coordinator: EditingCoordinator | None = None
        self._syncing = False

        self.data_changed_listeners: list[Callable[[], None]] = []
        self.selection_changed_listeners: list[Callable[[], None]] = []

        self.selection = SelectionModel(lambda: self.row_count, lambda: self.column_count)
        self.selection.listeners.append(self._on_selection_changed)

        self.undo_stack = undo_stack
        self.coordinator = coordinator

    def detach(self):
        """Stop listening to the undo stack and the coordinator."""
        self.undo_stack = None
        self.coordinator = None

    # ---------- voltage / projection ----------
    @property
    def current_voltage(self) -> Voltage | None:
        return self._voltage

    @current_voltage.setter
    def current_voltage(self, voltage: Voltage | None):
        if voltage is self._voltage:
            return
        self._voltage = voltage
        self.selection.clear_selection()
        self._fire_data_changed()

    def refresh(self):
        """Call after the curve list or point count of the voltage changed."""
        self.prune_selection()
        self._fire_data_changed()

    def prune_selection(self):
        rows, cols = self.row_count, self.column_count
        kept = {c for c in self.selection.selected_cells if c.row < rows and c.column < cols}
        if kept != self.selection.selected_cells:
            anchor = self.selection.anchor
            if anchor is not None and anchor not in kept:
                anchor = min(kept) if kept else None
            self.selection.replace(kept, anchor)

    @property
    def series_columns(self) -> list[Curve]:
        if self._voltage is None:
            return []
        return list(self._voltage.curves)

    @property
    def row_count(self) -> int:
        if self._voltage is None:
            return 0
        return self._voltage.point_count

    @property
    def column_count(self) -> int:
        return FIRST_SERIES_COLUMN + len(self.series_columns)

    def get_series_for_column(self, column: int) -> Curve | None:
        if column < FIRST_SERIES_COLUMN:
            return None
        series = self.series_columns
        idx = column - FIRST_SERIES_COLUMN
        if idx < len(series):
            return series[idx]
        return None

    def get_column_for_series(self, curve: Curve) -> int:
        for idx, candidate in enumerate(self.series_columns):
            if candidate is curve:
                return FIRST_SERIES_COLUMN + idx
        return -1

    def get_series_name_for_column(self, column: int) -> str | None:
        curve = self.get_series_for_column(column)
        return curve.name if curve is not None else None

    def get_column_index_for_series(self, name: str) -> int:
        for idx, curve in enumerate(self.series_columns):
            if curve.name == name:
                return FIRST_SERIES_COLUMN + idx
        return -1

    def _find_series(self, name: str) -> Curve | None:
        if self._voltage is None:
            return None
        return self._voltage.get_series_by_name(name)

    def is_series_locked(self, name: str) -> bool:
        curve = self._find_series(name)
        return curve.locked if curve is not None else False

    # ---------- cell reads ----------
    def percent_at(self, row: int) -> int:
        series = self.series_columns
        if series and 0 <= row < len(series[0].points):
            return series[0].points[row].percent
        return row

    def display_rpm_at(self, row: int) -> int:
        series = self.series_columns
        if series and 0 <= row < len(series[0].points):
            return series[0].points[row].display_rpm
        return 0

    def get_torque(self, row: int, name: str) -> float:
        curve = self._find_series(name)
        if curve is not None and 0 <= row < len(curve.points):
            return curve.points[row].torque
        return 0.0

    def cell_text(self, row: int, column: int) -> str:
        if row < 0 or row >= self.row_count:
            return ""
        if column == 0:
            return str(self.percent_at(row))
        if column == 1:
            return format_rpm(self.display_rpm_at(row))
        curve = self.get_series_for_column(column)
        if curve is None or row >= len(curve.points):
            return ""
        return format_torque(curve.points[row].torque)

    def to_frame(self) -> pd.DataFrame:
        """Snapshot of the grid values, one DataFrame column per grid column."""
        n = self.row_count
        columns = [
            [self.percent_at(r) for r in range(n)],
            [self.display_rpm_at(r) for r in range(n)],
        ]
        for curve in self.series_columns:
            torques = [p.torque for p in curve.points[:n]]
            columns.append(torques + [float("nan")] * (n - len(torques)))
        # curve names may repeat the axis labels
        frame = pd.DataFrame(dict(enumerate(columns)))
        frame.columns = ["%", "RPM"] + [curve.name for curve in self.series_columns]
        return frame

    # ---------- write gating ----------
    def writable_series_at(self, cell: CellPosition) -> Curve | None:
        """Curve behind a cell if torque may be written there, else None."""
        if self._voltage is None:
            return None
        if cell.row < 0 or cell.row >= self.row_count:
            return None
        curve = self.get_series_for_column(cell.column)
        if curve is None or curve.locked:
            return None
        if cell.row >= len(curve.points):
            return None
        return curve

    def can_write_cell(self, cell: CellPosition, value: float) -> bool:
        cell = CellPosition(*cell)
        curve = self.writable_series_at(cell)
        if curve is None:
            return False
        return values_differ(curve.points[cell.row].torque, value, self.epsilon)

    def try_set_torque_at_cell(self, cell: CellPosition, value: float) -> bool:
        cell = CellPosition(*cell)
        if not self.can_write_cell(cell, value):
            return False
        curve = self.get_series_for_column(cell.column)
        curve.points[cell.row].torque = value
        return True

    # ---------- edits ----------
    def update_torque(self, row: int, series_name: str, value: float) -> bool:
        curve = self._find_series(series_name)
        if curve is None:
            return False
        cell = CellPosition(row, self.get_column_for_series(curve))
        if not self.can_write_cell(cell, value):
            return False
        if self.undo_stack is None:
            curve.points[row].torque = value
            self._fire_data_changed()
        else:
            command = EditPointCommand(curve, row, curve.points[row].rpm, value)
            self.undo_stack.push_and_execute(command)
        return True

    def apply_torque_to_cells(self, cells, value: float) -> bool:
        if cells is None:
            raise TypeError("cells is required")
        changed = False
        for cell in cells:
            if self.try_set_torque_at_cell(cell, value):
                changed = True
        if changed:
            self._fire_data_changed()
        return changed

    def snapshot_torques(self, cells) -> dict[CellPosition, float]:
        originals = {}
        for cell in cells:
            cell = CellPosition(*cell)
            curve = self.writable_series_at(cell)
            if curve is not None:
                originals[cell] = curve.points[cell.row].torque
        return originals

    def collect_override_targets(self, original_values, new_value: float) -> list[TorqueTarget]:
        targets = []
        for cell, old_torque in original_values.items():
            cell = CellPosition(*cell)
            curve = self.writable_series_at(cell)
            if curve is None:
                continue
            if not values_differ(old_torque, new_value, self.epsilon):
                continue
            targets.append(TorqueTarget(curve, cell.row, old_torque, new_value))
        return targets

    def try_commit_override_with_undo(self, original_values, new_value: float) -> bool:
        if original_values is None:
            raise TypeError("original_values is required")
        if self._voltage is None or self.row_count == 0 or not self.series_columns:
            return False
        if not original_values:
            return False
        if self.undo_stack is None:
            return self.apply_torque_to_cells(list(original_values), new_value)

        targets = self.collect_override_targets(original_values, new_value)
        if not targets:
            return False
        self.undo_stack.push_and_execute(OverrideTorqueCellsCommand(targets))
        return True

    def commit_torque_writes(self, writes) -> bool:
        """Apply (cell, value) pairs as a single change; one undo step when undoable."""
        if self.undo_stack is None:
            changed = False
            for cell, value in writes:
                if self.try_set_torque_at_cell(cell, value):
                    changed = True
            if changed:
                self._fire_data_changed()
            return changed

        pending: dict[CellPosition, TorqueTarget] = {}
        for cell, value in writes:
            cell = CellPosition(*cell)
            curve = self.writable_series_at(cell)
            if curve is None:
                continue
            old = curve.points[cell.row].torque
            if not values_differ(old, value, self.epsilon):
                pending.pop(cell, None)
                continue
            pending[cell] = TorqueTarget(curve, cell.row, old, value)
        if not pending:
            return False
        targets = [pending[cell] for cell in sorted(pending)]
        self.undo_stack.push_and_execute(OverrideTorqueCellsCommand(targets))
        return True

    def apply_override_value(self, value: float) -> bool:
        cells = self.selection.sorted_cells()
        if not cells:
            return False
        if self.undo_stack is None:
            return self.apply_torque_to_cells(cells, value)
        return self.try_commit_override_with_undo(self.snapshot_torques(cells), value)

    def clear_selected_torque_cells(self) -> bool:
        return self.apply_override_value(0.0)

    # ---------- undo stack ----------
    @property
    def undo_stack(self):
        return self._undo_stack

    @undo_stack.setter
    def undo_stack(self, undo_stack):
        if undo_stack is self._undo_stack:
            return
        if self._undo_stack is not None:
            self._undo_stack.listeners.remove(self._on_undo_stack_changed)
        self._undo_stack = undo_stack
        if undo_stack is not None:
            undo_stack.listeners.append(self._on_undo_stack_changed)

    def _on_undo_stack_changed(self):
        # every stack change may have edited curve data
        self.refresh()

    # ---------- coordinator sync ----------
    @property
    def coordinator(self) -> EditingCoordinator | None:
        return self._coordinator

    @coordinator.setter
    def coordinator(self, coordinator: EditingCoordinator | None):
        if coordinator is self._coordinator:
            return
        if self._coordinator is not None:
            self._coordinator.listeners.remove(self._on_coordinator_changed)
        self._coordinator = coordinator
        if coordinator is not None:
            coordinator.listeners.append(self._on_coordinator_changed)

    def logical_selection(self) -> list[PointSelection]:
        points = []
        for cell in self.selection.sorted_cells():
            if cell.column < FIRST_SERIES_COLUMN or cell.row < 0:
                continue
            curve = self.get_series_for_column(cell.column)
            if curve is None or cell.row >= len(curve.points):
                continue
            points.append(PointSelection(curve, cell.row))
        return points

    def _push_selection_to_coordinator(self):
        if self._coordinator is None:
            return
        self._syncing = True
        try:
            points = self.logical_selection()
            if points:
                self._coordinator.set_selection(points)
            else:
                self._coordinator.clear_selection()
        finally:
            self._syncing = False

    def _on_coordinator_changed(self):
        if self._syncing or self._coordinator is None or self._voltage is None:
            return
        cells = set()
        for point in self._coordinator.selected_points:
            column = self.get_column_for_series(point.curve)
            if column < 0:
                continue
            if point.index < 0 or point.index >= self.row_count:
                continue
            cells.add(CellPosition(point.index, column))
        anchor = min(cells) if cells else None
        self._syncing = True
        try:
            self.selection.replace(cells, anchor)
        finally:
            self._syncing = False

    def _on_selection_changed(self):
        for listener in list(self.selection_changed_listeners):
            listener()
        if not self._syncing:
            self._push_selection_to_coordinator()

    def _fire_data_changed(self):
        for listener in list(self.data_changed_listeners):
            listener()
