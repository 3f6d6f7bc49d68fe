import curses

STATUS_ROWS = 1
PROMPT_ROWS = 1


class ScreenLayout:
    """Grid on top, then one status row and one prompt row at the bottom."""

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        self.table_h = max(1, self.H - STATUS_ROWS - PROMPT_ROWS)
        status_y = self.table_h
        prompt_y = status_y + STATUS_ROWS

        self.table_win = self._window(self.table_h, 0, keep_cursor=False)
        self.status_win = self._window(STATUS_ROWS, status_y, keep_cursor=False)
        # the prompt is the only window that places the terminal cursor
        self.prompt_win = self._window(PROMPT_ROWS, prompt_y, keep_cursor=True)

    def _window(self, rows: int, y: int, keep_cursor: bool):
        win = curses.newwin(rows, self.W, y, 0)
        if not keep_cursor:
            win.leaveok(True)
        return win
