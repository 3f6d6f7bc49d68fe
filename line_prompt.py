import curses
from typing import Callable, Optional

KEY_ENTER_CODES = (10, 13, curses.KEY_ENTER)
KEY_BACKSPACE_CODES = (curses.KEY_BACKSPACE, 127, 8)
KEY_ESC = 27


class LinePrompt:
    """One-line input on the prompt window.

    The submit callback returns an error message to keep the prompt open,
    or None to close it.
    """

    def __init__(self, set_status_cb: Callable[[str, int], None]):
        self._set_status = set_status_cb
        self._reset()

    # ---------- public API ----------
    def start(self, label: str, on_submit: Callable[[str], Optional[str]], initial: str = ""):
        self.active = True
        self.label = label
        self.on_submit = on_submit
        self.buffer = initial
        self.cursor = len(initial)
        self.hscroll = 0

    def handle_key(self, ch):
        if not self.active:
            return
        if ch in KEY_ENTER_CODES:
            self._submit()
        elif ch == KEY_ESC:
            self._set_status("Action canceled", 3)
            self._reset()
        elif ch in KEY_BACKSPACE_CODES:
            self._delete_before_cursor()
        elif ch == curses.KEY_DC:
            self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
        elif ch in (curses.KEY_LEFT, curses.KEY_RIGHT, curses.KEY_HOME, curses.KEY_END):
            self._move_cursor(ch)
        elif 32 <= ch <= 126:
            self._insert(chr(ch))

    def draw(self, win):
        if not self.active:
            return
        _, w = win.getmaxyx()
        text_w = max(1, w - len(self.label) - 1)
        self.hscroll = min(self.hscroll, self.cursor)
        self.hscroll = max(self.hscroll, self.cursor - text_w)
        visible = self.buffer[self.hscroll : self.hscroll + text_w]
        try:
            win.addnstr(0, 0, self.label + visible, len(self.label) + text_w)
            win.move(0, len(self.label) + self.cursor - self.hscroll)
        except curses.error:
            pass
        win.refresh()

    # ---------- editing ----------
    def _insert(self, text: str):
        self.buffer = self.buffer[: self.cursor] + text + self.buffer[self.cursor :]
        self.cursor += len(text)

    def _delete_before_cursor(self):
        if self.cursor == 0:
            return
        self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
        self.cursor -= 1

    def _move_cursor(self, ch):
        targets = {
            curses.KEY_LEFT: self.cursor - 1,
            curses.KEY_RIGHT: self.cursor + 1,
            curses.KEY_HOME: 0,
            curses.KEY_END: len(self.buffer),
        }
        self.cursor = max(0, min(len(self.buffer), targets[ch]))

    def _submit(self):
        text = self.buffer.strip()
        if not text:
            self._set_status("Value required", 3)
            return
        error = self.on_submit(text) if self.on_submit else None
        if error:
            self._set_status(error, 3)
            return
        self._reset()

    def _reset(self):
        self.active = False
        self.label = ""
        self.on_submit: Optional[Callable[[str], Optional[str]]] = None
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
