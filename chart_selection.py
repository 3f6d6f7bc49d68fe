import logging
from typing import Callable

from commands import EditPointCommand
from editing_coordinator import EditingCoordinator, PointSelection
from motor_model import Voltage

logger = logging.getLogger(__name__)


class ChartSelection:
    """Chart-side view of the shared point selection.

    Knows nothing about grid columns; it reads and drives the coordinator in
    (curve, index) terms only. Drawing is left to whatever renders the chart.
    """

    def __init__(self, coordinator: EditingCoordinator, undo_stack=None):
        self.coordinator = coordinator
        self.undo_stack = undo_stack
        self.current_voltage: Voltage | None = None
        self.highlighted_indices: dict[str, list[int]] = {}
        self.data_changed_listeners: list[Callable[[], None]] = []
        self.highlight_listeners: list[Callable[[], None]] = []
        coordinator.listeners.append(self._on_coordinator_changed)
        self._on_coordinator_changed()

    def detach(self):
        if self._on_coordinator_changed in self.coordinator.listeners:
            self.coordinator.listeners.remove(self._on_coordinator_changed)

    def _on_coordinator_changed(self):
        highlighted: dict[str, set[int]] = {}
        for point in self.coordinator.selected_points:
            if point.index < 0:
                continue
            highlighted.setdefault(point.curve.name, set()).add(point.index)
        self.highlighted_indices = {
            name: sorted(indices) for name, indices in highlighted.items()
        }
        for listener in list(self.highlight_listeners):
            listener()

    def is_point_highlighted(self, series_name: str, index: int) -> bool:
        return index in self.highlighted_indices.get(series_name, ())

    def _find(self, series_name: str):
        if self.current_voltage is None:
            return None
        return self.current_voltage.get_series_by_name(series_name)

    def handle_point_click(self, series_name: str, index: int, modifier: str | None = None):
        """ctrl toggles the point, shift adds it, no modifier replaces the selection."""
        curve = self._find(series_name)
        if curve is None or index < 0 or index >= len(curve.points):
            return
        point = PointSelection(curve, index)
        if modifier == "ctrl":
            self.coordinator.toggle_selection(point)
        elif modifier == "shift":
            self.coordinator.add_to_selection([point])
        else:
            self.coordinator.set_selection([point])

    def set_series_visibility(self, series_name: str, visible: bool):
        curve = self._find(series_name)
        if curve is not None:
            curve.visible = bool(visible)

    def is_series_visible(self, series_name: str) -> bool:
        curve = self._find(series_name)
        return curve.visible if curve is not None else True

    def update_data_point(self, series_name: str, index: int, rpm: float, torque: float) -> bool:
        curve = self._find(series_name)
        if curve is None or index < 0 or index >= len(curve.points):
            return False
        if curve.locked:
            logger.debug("Ignoring chart edit on locked curve '%s'", series_name)
            return False
        if self.undo_stack is None:
            curve.points[index].rpm = rpm
            curve.points[index].torque = torque
        else:
            self.undo_stack.push_and_execute(EditPointCommand(curve, index, rpm, torque))
        for listener in list(self.data_changed_listeners):
            listener()
        return True
