from typing import Callable, NamedTuple

from motor_model import Curve


class PointSelection(NamedTuple):
    curve: Curve
    index: int


class EditingCoordinator:
    """Logical (curve, point index) selection shared by the grid and the chart."""

    def __init__(self):
        self._points: list[PointSelection] = []
        self.listeners: list[Callable[[], None]] = []

    @property
    def selected_points(self) -> tuple[PointSelection, ...]:
        return tuple(self._points)

    def is_selected(self, curve: Curve, index: int) -> bool:
        return PointSelection(curve, index) in self._points

    def set_selection(self, points):
        if points is None:
            raise TypeError("points is required")
        self._points = []
        for point in points:
            point = PointSelection(*point)
            if point not in self._points:
                self._points.append(point)
        self._notify()

    def add_to_selection(self, points):
        if points is None:
            raise TypeError("points is required")
        changed = False
        for point in points:
            point = PointSelection(*point)
            if point not in self._points:
                self._points.append(point)
                changed = True
        if changed:
            self._notify()

    def toggle_selection(self, point):
        point = PointSelection(*point)
        if point in self._points:
            self._points.remove(point)
        else:
            self._points.append(point)
        self._notify()

    def clear_selection(self):
        if not self._points:
            return
        self._points = []
        self._notify()

    def _notify(self):
        for listener in list(self.listeners):
            listener()
