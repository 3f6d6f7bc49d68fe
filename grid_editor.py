# ~/Apps/torquegrid/grid_editor.py
import curses
import logging

from cell_coercion import parse_torque
from clipboard_transfer import (
    apply_to_selection,
    copy_selection,
    copy_to_system_clipboard,
    read_system_clipboard,
)
from commands import EditSeriesCommand
from curve_table import FIRST_SERIES_COLUMN
from selection_model import CellPosition

logger = logging.getLogger(__name__)

_MOVE_KEYS = {
    curses.KEY_UP: (-1, 0),
    curses.KEY_DOWN: (1, 0),
    curses.KEY_LEFT: (0, -1),
    curses.KEY_RIGHT: (0, 1),
    ord("k"): (-1, 0),
    ord("j"): (1, 0),
    ord("h"): (0, -1),
    ord("l"): (0, 1),
}

_EXTEND_KEYS = {
    curses.KEY_SR: (-1, 0),
    curses.KEY_SF: (1, 0),
    curses.KEY_SLEFT: (0, -1),
    curses.KEY_SRIGHT: (0, 1),
    ord("K"): (-1, 0),
    ord("J"): (1, 0),
    ord("H"): (0, -1),
    ord("L"): (0, 1),
}

_EXTEND_TO_END_KEYS = {
    ord("g"): (-1, 0),
    ord("G"): (1, 0),
    ord("0"): (0, -1),
    ord("$"): (0, 1),
}

KEY_CTRL_R = 18


class GridEditor:
    """Key handling for the curve grid; every data change goes through the table."""

    def __init__(self, table, doc_state, set_status_cb, prompt=None, config=None):
        self.table = table
        self.doc = doc_state
        self._set_status = set_status_cb
        self.prompt = prompt
        self.config = config or {}
        # used when no clipboard command is configured
        self.register: str | None = None

    @property
    def undo_stack(self):
        return self.doc.undo_stack

    def _cursor(self) -> CellPosition:
        sel = self.table.selection
        if sel.anchor is not None:
            return sel.anchor
        if sel.selected_cells:
            return sel.sorted_cells()[0]
        return CellPosition(0, 0)

    # ---------- key dispatch ----------
    def handle_key(self, ch):
        sel = self.table.selection

        if ch in _MOVE_KEYS:
            sel.move_selection(*_MOVE_KEYS[ch])
        elif ch in _EXTEND_KEYS:
            sel.extend_selection(*_EXTEND_KEYS[ch])
        elif ch in _EXTEND_TO_END_KEYS:
            sel.extend_selection_to_end(*_EXTEND_TO_END_KEYS[ch])
        elif ch == ord(" "):
            cursor = self._cursor()
            if self.table.row_count and self.table.column_count:
                sel.toggle_cell(cursor.row, cursor.column)
        elif ch == ord("a"):
            self.select_all_torque()
        elif ch == 27:  # Esc
            sel.clear_selection()
        elif ch == ord("u"):
            self.undo()
        elif ch == KEY_CTRL_R:
            self.redo()
        elif ch == ord("y"):
            self.copy()
        elif ch == ord("p"):
            self.paste()
        elif ch == ord("x"):
            if self.table.clear_selected_torque_cells():
                self._set_status("Cleared selection", 2)
        elif ch in (ord("="), 10, 13):
            self.start_override_prompt()
        elif ch == ord("m"):
            self.toggle_lock()
        elif ch == ord("r"):
            self.start_rename_prompt()
        elif ch == ord("["):
            self.switch_voltage(-1)
        elif ch == ord("]"):
            self.switch_voltage(1)

    # ---------- selection ----------
    def select_all_torque(self):
        rows = self.table.row_count
        cols = self.table.column_count
        if rows == 0 or cols <= FIRST_SERIES_COLUMN:
            return
        self.table.selection.select_rectangular_range(
            CellPosition(0, FIRST_SERIES_COLUMN), CellPosition(rows - 1, cols - 1)
        )

    # ---------- undo ----------
    def undo(self):
        if not self.undo_stack.can_undo:
            self._set_status("Nothing to undo", 2)
            return
        desc = self.undo_stack.undo_description
        try:
            self.undo_stack.undo()
        except Exception as e:
            self._set_status(f"Undo failed: {e}", 4)
            return
        self._set_status(f"Undid: {desc}", 2)

    def redo(self):
        if not self.undo_stack.can_redo:
            self._set_status("Nothing to redo", 2)
            return
        desc = self.undo_stack.redo_description
        try:
            self.undo_stack.redo()
        except Exception as e:
            self._set_status(f"Redo failed: {e}", 4)
            return
        self._set_status(f"Redid: {desc}", 2)

    # ---------- clipboard ----------
    def copy(self):
        text = copy_selection(self.table)
        if not text:
            self._set_status("Nothing selected", 2)
            return
        self.register = text
        command = self.config.get("CLIPBOARD_COPY_COMMAND")
        if command and not copy_to_system_clipboard(text, command):
            self._set_status("Copied to register (clipboard command failed)", 3)
            return
        self._set_status(f"Copied {len(self.table.selection)} cells", 2)

    def paste(self):
        text = None
        command = self.config.get("CLIPBOARD_PASTE_COMMAND")
        if command:
            text = read_system_clipboard(command)
        if text is None:
            text = self.register
        if not text:
            self._set_status("Clipboard empty", 2)
            return
        if apply_to_selection(self.table, text):
            self._set_status("Pasted", 2)
        else:
            self._set_status("Nothing pasted", 2)

    # ---------- value / series edits ----------
    def start_override_prompt(self):
        if self.prompt is None or not len(self.table.selection):
            return
        self.prompt.start("Set torque: ", self._submit_override)

    def _submit_override(self, text):
        value = parse_torque(text)
        if value is None:
            return f"Not a number: {text}"
        if self.table.apply_override_value(value):
            self._set_status(f"Set {len(self.table.selection)} cells to {value:g}", 2)
        else:
            self._set_status("No writable cells changed", 2)
        return None

    def toggle_lock(self):
        curve = self.table.get_series_for_column(self._cursor().column)
        if curve is None:
            self._set_status("Not a curve column", 2)
            return
        self.undo_stack.push_and_execute(EditSeriesCommand(curve, new_locked=not curve.locked))
        state = "Locked" if curve.locked else "Unlocked"
        self._set_status(f"{state} '{curve.name}'", 2)

    def start_rename_prompt(self):
        curve = self.table.get_series_for_column(self._cursor().column)
        if curve is None or self.prompt is None:
            return
        self.prompt.start(
            "Rename curve to: ",
            lambda text: self._submit_rename(curve, text),
            initial=curve.name,
        )

    def _submit_rename(self, curve, text):
        if text == curve.name:
            return None
        if self.table.get_column_index_for_series(text) >= 0:
            return f"Curve '{text}' already exists"
        old = curve.name
        self.undo_stack.push_and_execute(EditSeriesCommand(curve, new_name=text))
        self._set_status(f"Renamed '{old}' to '{text}'", 2)
        return None

    # ---------- voltage ----------
    def switch_voltage(self, delta: int):
        voltage = self.doc.switch_voltage(delta)
        if voltage is None:
            self._set_status("No voltages", 2)
            return
        logger.debug("Switched to %s", voltage.display_name)
        self._set_status(f"{self.doc.active_drive.name} @ {voltage.display_name}", 2)
