# ~/Apps/torquegrid/orchestrator.py
import curses
import logging
import time

from chart_selection import ChartSelection
from config_paths import WRITE_EPSILON_DEFAULT
from curve_table import CurveDataTable
from editing_coordinator import EditingCoordinator
from grid_editor import GridEditor
from grid_pane import GridPane
from line_prompt import LinePrompt
from screen_layout import ScreenLayout
from status_bar import render_status

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, doc_state, config=None):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.config = config or {}
        self.doc = doc_state
        self.layout = ScreenLayout(stdscr)

        # ---- editing engine ----
        self.coordinator = EditingCoordinator()
        self.table = CurveDataTable(
            undo_stack=self.doc.undo_stack,
            coordinator=self.coordinator,
            epsilon=self.config.get("WRITE_EPSILON", WRITE_EPSILON_DEFAULT),
        )
        self.chart = ChartSelection(self.coordinator, self.doc.undo_stack)
        self.doc.listeners.append(self._on_voltage_changed)
        self._on_voltage_changed()

        self.grid = GridPane(self.table)

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        # ---- prompt + key handling ----
        self.prompt = LinePrompt(self._set_status)
        self.editor = GridEditor(
            self.table, self.doc, self._set_status, prompt=self.prompt, config=self.config
        )

    # ---------------- helpers ----------------

    def _on_voltage_changed(self):
        self.table.current_voltage = self.doc.active_voltage
        self.chart.current_voltage = self.doc.active_voltage

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def status_context(self):
        drive = self.doc.active_drive
        voltage = self.doc.active_voltage
        selection = self.table.selection
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "file_path": self.doc.file_path,
            "dirty": self.doc.is_dirty,
            "drive_name": drive.name if drive is not None else None,
            "voltage_name": voltage.display_name if voltage is not None else None,
            "selected_count": len(selection),
            "cursor": tuple(selection.anchor) if selection.anchor is not None else None,
            "undo_depth": self.doc.undo_stack.undo_depth,
            "redo_depth": self.doc.undo_stack.redo_depth,
        }

    # ---------------- UI ----------------

    def redraw(self):
        try:
            curses.curs_set(1 if self.prompt.active else 0)
        except curses.error:
            pass

        self.grid.draw(self.layout.table_win, active=not self.prompt.active)

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self.status_context(), w), w, curses.A_REVERSE)
        except curses.error:
            pass
        sw.refresh()

        pw = self.layout.prompt_win
        pw.erase()
        if self.prompt.active:
            self.prompt.draw(pw)
        else:
            pw.refresh()

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self.stdscr.getch()

            if ch in (3, 24):  # Ctrl+C / Ctrl+X
                break

            if ch == -1:
                self.redraw()
                continue

            if self.prompt.active:
                self.prompt.handle_key(ch)
                self.redraw()
                continue

            if ch == curses.KEY_RESIZE:
                self.layout = ScreenLayout(self.stdscr)
                self.redraw()
                continue

            try:
                self.editor.handle_key(ch)
            except (ValueError, IndexError) as e:
                logger.exception("Edit failed")
                self._set_status(f"Edit failed: {e}", 4)

            self.redraw()
