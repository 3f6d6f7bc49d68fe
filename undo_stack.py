import logging
from typing import Callable

logger = logging.getLogger(__name__)


class UndoStack:
    """Undo/redo stacks of executed commands.

    A failing execute/undo/redo leaves both stacks exactly as they were and
    re-raises; command errors are never swallowed here.
    """

    def __init__(self):
        self._undo: list = []
        self._redo: list = []
        self.listeners: list[Callable[[], None]] = []

    # ---------- queries ----------
    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def undo_description(self) -> str | None:
        return self._undo[-1].description if self._undo else None

    @property
    def redo_description(self) -> str | None:
        return self._redo[-1].description if self._redo else None

    # ---------- mutations ----------
    def push_and_execute(self, command):
        if command is None:
            raise TypeError("command is required")
        logger.debug("Executing and pushing command '%s'", command.description)
        try:
            command.execute()
        except Exception:
            logger.error(
                "Failed to execute undoable command '%s'", command.description, exc_info=True
            )
            raise
        self._undo.append(command)
        self._redo.clear()
        self._notify()

    def undo(self):
        if not self._undo:
            logger.debug("Undo requested with an empty undo stack")
            return
        command = self._undo.pop()
        logger.debug("Undoing command '%s'", command.description)
        try:
            command.undo()
        except Exception:
            logger.error("Failed to undo command '%s'", command.description, exc_info=True)
            self._undo.append(command)
            raise
        self._redo.append(command)
        self._notify()

    def redo(self):
        if not self._redo:
            logger.debug("Redo requested with an empty redo stack")
            return
        command = self._redo.pop()
        logger.debug("Redoing command '%s'", command.description)
        try:
            command.execute()
        except Exception:
            logger.error("Failed to redo command '%s'", command.description, exc_info=True)
            self._redo.append(command)
            raise
        self._undo.append(command)
        self._notify()

    def clear(self):
        logger.debug(
            "Clearing undo history (undo depth=%d, redo depth=%d)",
            len(self._undo),
            len(self._redo),
        )
        self._undo.clear()
        self._redo.clear()
        self._notify()

    def _notify(self):
        for listener in list(self.listeners):
            listener()
