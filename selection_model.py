from typing import Callable, NamedTuple


class CellPosition(NamedTuple):
    row: int
    column: int


def _rectangle(a: CellPosition, b: CellPosition) -> set[CellPosition]:
    r0, r1 = sorted((a.row, b.row))
    c0, c1 = sorted((a.column, b.column))
    return {
        CellPosition(r, c) for r in range(r0, r1 + 1) for c in range(c0, c1 + 1)
    }


class SelectionModel:
    """Selected grid cells plus the anchor used for range operations.

    Grid bounds are read from the providers on every call, since the grid
    can change shape between operations.
    """

    def __init__(self, row_count_provider: Callable[[], int], column_count_provider: Callable[[], int]):
        self._row_count = row_count_provider
        self._column_count = column_count_provider
        self.selected_cells: set[CellPosition] = set()
        self.anchor: CellPosition | None = None
        self.listeners: list[Callable[[], None]] = []

    @property
    def row_count(self) -> int:
        return self._row_count()

    @property
    def column_count(self) -> int:
        return self._column_count()

    # ---------- queries ----------
    def is_selected(self, row: int, column: int) -> bool:
        return CellPosition(row, column) in self.selected_cells

    def bounds(self):
        """(min_row, max_row, min_col, max_col) of the selection, or None."""
        if not self.selected_cells:
            return None
        rows = [c.row for c in self.selected_cells]
        cols = [c.column for c in self.selected_cells]
        return min(rows), max(rows), min(cols), max(cols)

    def sorted_cells(self) -> list[CellPosition]:
        return sorted(self.selected_cells)

    def __len__(self):
        return len(self.selected_cells)

    # ---------- selection algebra ----------
    def select_cell(self, row: int, column: int):
        cell = CellPosition(row, column)
        self.selected_cells = {cell}
        self.anchor = cell
        self._notify()

    def toggle_cell(self, row: int, column: int):
        cell = CellPosition(row, column)
        if cell in self.selected_cells:
            self.selected_cells.discard(cell)
        else:
            self.selected_cells.add(cell)
            self.anchor = cell
        self._notify()

    def select_range(self, row: int, column: int):
        if self.anchor is None:
            self.select_cell(row, column)
            return
        self.selected_cells = _rectangle(self.anchor, CellPosition(row, column))
        self._notify()

    def add_to_selection(self, row: int, column: int):
        cell = CellPosition(row, column)
        if cell not in self.selected_cells:
            self.selected_cells.add(cell)
            self.anchor = cell
        self._notify()

    def select_rectangular_range(self, start: CellPosition, end: CellPosition):
        start = CellPosition(*start)
        self.selected_cells = _rectangle(start, CellPosition(*end))
        self.anchor = start
        self._notify()

    def extend_selection(self, row_delta: int, column_delta: int):
        if not self.selected_cells:
            return
        min_row, max_row, min_col, max_col = self.bounds()
        if row_delta < 0 and min_row > 0:
            self.selected_cells |= {CellPosition(min_row - 1, c) for c in range(min_col, max_col + 1)}
        elif row_delta > 0 and max_row < self.row_count - 1:
            self.selected_cells |= {CellPosition(max_row + 1, c) for c in range(min_col, max_col + 1)}
        elif column_delta < 0 and min_col > 0:
            self.selected_cells |= {CellPosition(r, min_col - 1) for r in range(min_row, max_row + 1)}
        elif column_delta > 0 and max_col < self.column_count - 1:
            self.selected_cells |= {CellPosition(r, max_col + 1) for r in range(min_row, max_row + 1)}
        self._notify()

    def extend_selection_to_end(self, row_delta: int, column_delta: int):
        if not self.selected_cells:
            return
        min_row, max_row, min_col, max_col = self.bounds()
        if row_delta < 0:
            rows, cols = range(0, min_row), range(min_col, max_col + 1)
        elif row_delta > 0:
            rows, cols = range(max_row + 1, self.row_count), range(min_col, max_col + 1)
        elif column_delta < 0:
            rows, cols = range(min_row, max_row + 1), range(0, min_col)
        elif column_delta > 0:
            rows, cols = range(min_row, max_row + 1), range(max_col + 1, self.column_count)
        else:
            rows, cols = (), ()
        self.selected_cells |= {CellPosition(r, c) for r in rows for c in cols}
        self._notify()

    def move_selection(self, row_delta: int, column_delta: int):
        if not self.selected_cells:
            if self.row_count > 0 and self.column_count > 0:
                self.select_cell(0, 0)
            return
        reference = self.anchor if self.anchor is not None else self.sorted_cells()[0]
        new_row = max(0, min(reference.row + row_delta, max(0, self.row_count - 1)))
        new_col = max(0, min(reference.column + column_delta, max(0, self.column_count - 1)))
        self.select_cell(new_row, new_col)

    def clear_selection(self):
        self.selected_cells = set()
        self.anchor = None
        self._notify()

    def replace(self, cells, anchor: CellPosition | None):
        self.selected_cells = {CellPosition(*c) for c in cells}
        self.anchor = anchor
        self._notify()

    def _notify(self):
        for listener in list(self.listeners):
            listener()
