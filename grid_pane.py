# ~/Apps/torquegrid/grid_pane.py
import curses

import pandas as pd

from cell_coercion import format_rpm, format_torque
from curve_table import FIRST_SERIES_COLUMN
from selection_model import CellPosition

LOCK_MARKER = " [L]"


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_SELECTED = 2
    PAIR_LOCKED = 3
    PAIR_AXIS = 4
    MAX_COL_WIDTH = 24
    MIN_COL_WIDTH = 8

    def __init__(self, table):
        self.table = table
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_SELECTED, curses.COLOR_BLACK, curses.COLOR_WHITE)
            curses.init_pair(self.PAIR_LOCKED, curses.COLOR_RED, -1)
            curses.init_pair(self.PAIR_AXIS, curses.COLOR_CYAN, -1)
        except curses.error:
            pass

        self.row_offset = 0
        self.col_offset = 0
        self.rendered_col_widths = {}

    # ---------- geometry ----------
    @property
    def cursor(self) -> CellPosition:
        sel = self.table.selection
        if sel.anchor is not None:
            return sel.anchor
        if sel.selected_cells:
            return sel.sorted_cells()[0]
        return CellPosition(0, 0)

    def header_text(self, col_idx: int) -> str:
        if col_idx == 0:
            return "%"
        if col_idx == 1:
            return "RPM"
        curve = self.table.get_series_for_column(col_idx)
        if curve is None:
            return ""
        return curve.name + (LOCK_MARKER if curve.locked else "")

    def get_col_width(self, col_idx: int) -> int:
        if col_idx < 0 or col_idx >= self.table.column_count:
            return self.MAX_COL_WIDTH
        width = max(self.MIN_COL_WIDTH, len(self.header_text(col_idx)) + 2)
        return min(self.MAX_COL_WIDTH, width)

    def _row_label_width(self) -> int:
        return max(3, len(str(self.table.row_count)) + 1)

    def _visible_col_count(self, avail_w: int) -> int:
        count = 0
        used = 0
        for c in range(self.col_offset, self.table.column_count):
            cw = self.get_col_width(c)
            if used + cw + 1 > avail_w:
                break
            used += cw + 1
            count += 1
        return max(1, count)

    def adjust_viewport(self, win=None):
        """Scroll so the cursor cell is on screen."""
        if win is not None:
            h, w = win.getmaxyx()
        else:
            h, w = 24, 120

        rows = self.table.row_count
        cols = self.table.column_count
        if rows == 0 or cols == 0:
            self.row_offset = 0
            self.col_offset = 0
            return

        cursor = self.cursor
        body_h = max(1, h - 3)
        if cursor.row < self.row_offset:
            self.row_offset = cursor.row
        elif cursor.row >= self.row_offset + body_h:
            self.row_offset = cursor.row - body_h + 1
        self.row_offset = max(0, min(self.row_offset, max(0, rows - body_h)))

        avail_w = max(20, w - (self._row_label_width() + 1))
        visible = self._visible_col_count(avail_w)
        if cursor.column < self.col_offset:
            self.col_offset = cursor.column
        elif cursor.column >= self.col_offset + visible:
            self.col_offset = cursor.column - visible + 1
        self.col_offset = max(0, min(self.col_offset, max(0, cols - 1)))

    # ---------- rendering ----------
    @staticmethod
    def format_value(col: int, value) -> str:
        if pd.isna(value):
            return ""
        if col == 0:
            return str(int(value))
        if col == 1:
            return format_rpm(value)
        return format_torque(value)

    def cell_texts(self, frame: pd.DataFrame, rows, cols) -> list[list[str]]:
        """Formatted text for each (row, col) of the visible block of the frame."""
        return [[self.format_value(c, frame.iat[r, c]) for c in cols] for r in rows]

    def _cell_attr(self, row: int, col: int, active: bool):
        attr = curses.color_pair(self.PAIR_CELL_TEXT)
        if col < FIRST_SERIES_COLUMN:
            attr = curses.color_pair(self.PAIR_AXIS)
        else:
            curve = self.table.get_series_for_column(col)
            if curve is not None and curve.locked:
                attr = curses.color_pair(self.PAIR_LOCKED)
        if self.table.selection.is_selected(row, col):
            attr = curses.color_pair(self.PAIR_SELECTED)
            if active and (row, col) == self.cursor:
                attr |= curses.A_BOLD
        return attr

    def draw(self, win, active=True):
        win.erase()
        try:
            win.bkgd(" ", curses.color_pair(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()

        if self.table.current_voltage is None:
            try:
                win.addnstr(1, 1, "No voltage selected", max(1, w - 2))
            except curses.error:
                pass
            win.refresh()
            return

        self.adjust_viewport(win)
        row_w = self._row_label_width()
        avail_w = w - (row_w + 1)
        max_cols = self._visible_col_count(avail_w)
        visible_cols = tuple(
            range(self.col_offset, min(self.table.column_count, self.col_offset + max_cols))
        )

        # header
        self.rendered_col_widths = {}
        x = row_w + 1
        for c in visible_cols:
            eff_cw = min(self.get_col_width(c), max(1, w - x - 1))
            self.rendered_col_widths[c] = eff_cw
            name = self.header_text(c)[:eff_cw].rjust(eff_cw)
            attr = curses.A_BOLD
            curve = self.table.get_series_for_column(c)
            if curve is not None and curve.locked:
                attr |= curses.color_pair(self.PAIR_LOCKED)
            try:
                win.addnstr(1, x, name, eff_cw, attr)
            except curses.error:
                pass
            x += eff_cw + 1

        # rows
        base_y = 2
        body_h = max(0, h - base_y - 1)
        frame = self.table.to_frame()
        visible_rows = range(self.row_offset, min(len(frame), self.row_offset + body_h))
        texts = self.cell_texts(frame, visible_rows, visible_cols)
        for i, r in enumerate(visible_rows):
            y = base_y + i
            try:
                win.addnstr(y, 0, str(r).rjust(row_w), row_w)
            except curses.error:
                pass
            x = row_w + 1
            for c, cell in zip(visible_cols, texts[i]):
                eff_cw = self.rendered_col_widths[c]
                text = cell[:eff_cw].rjust(eff_cw)
                try:
                    win.addnstr(y, x, text, eff_cw, self._cell_attr(r, c, active))
                except curses.error:
                    pass
                x += eff_cw + 1

        # footer line
        try:
            win.hline(h - 1, 0, " ", w)
        except curses.error:
            pass

        win.refresh()
