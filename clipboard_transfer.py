import logging
import os
import re
import subprocess
from dataclasses import dataclass

from cell_coercion import parse_torque
from curve_table import FIRST_SERIES_COLUMN
from selection_model import CellPosition

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"[\r\n]")


@dataclass
class ClipboardBlock:
    rows: list[list[str]]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    @property
    def scalar(self) -> float | None:
        """The value if the block holds exactly one non-empty field."""
        if len(self.rows) != 1:
            return None
        fields = [f for f in self.rows[0] if f != ""]
        if len(fields) != 1:
            return None
        return parse_torque(fields[0])


def parse_clipboard_text(text) -> ClipboardBlock | None:
    if text is None or not text.strip():
        return None
    lines = [line for line in _LINE_SPLIT.split(text) if line]
    if not lines:
        return None
    return ClipboardBlock([line.split("\t") for line in lines])


def build_clipboard_text(table, cells) -> str:
    if cells is None:
        raise TypeError("cells is required")
    cells = {CellPosition(*c) for c in cells}
    if not cells:
        return ""
    min_row = min(c.row for c in cells)
    max_row = max(c.row for c in cells)
    min_col = min(c.column for c in cells)
    max_col = max(c.column for c in cells)

    lines = []
    for row in range(min_row, max_row + 1):
        fields = []
        for col in range(min_col, max_col + 1):
            if CellPosition(row, col) not in cells:
                fields.append("")
            else:
                fields.append(table.cell_text(row, col))
        lines.append("\t".join(fields))
    return os.linesep.join(lines)


def copy_selection(table) -> str:
    return build_clipboard_text(table, table.selection.selected_cells)


def apply_at_top_left(table, top_left, text) -> bool:
    block = parse_clipboard_text(text)
    if block is None:
        return False
    top_left = CellPosition(*top_left)

    if top_left.row < 0 or top_left.column < 0:
        return False
    if (
        top_left.row + block.row_count > table.row_count
        or top_left.column + block.column_count > table.column_count
    ):
        logger.debug(
            "Paste of %dx%d block at %s does not fit a %dx%d grid",
            block.row_count,
            block.column_count,
            tuple(top_left),
            table.row_count,
            table.column_count,
        )
        return False

    writes = []
    for r, fields in enumerate(block.rows):
        for c, raw in enumerate(fields):
            target = CellPosition(top_left.row + r, top_left.column + c)
            if target.column < FIRST_SERIES_COLUMN:
                continue
            curve = table.get_series_for_column(target.column)
            if curve is None or curve.locked:
                continue
            value = parse_torque(raw)
            if value is None:
                continue
            writes.append((target, value))
    return table.commit_torque_writes(writes)


def apply_to_selection(table, text) -> bool:
    cells = table.selection.sorted_cells()
    if not cells:
        return False
    if table.current_voltage is None or table.row_count == 0 or not table.series_columns:
        return False
    block = parse_clipboard_text(text)
    if block is None:
        return False

    scalar = block.scalar
    if scalar is not None:
        return table.commit_torque_writes([(cell, scalar) for cell in cells])

    top_left = CellPosition(min(c.row for c in cells), min(c.column for c in cells))
    return apply_at_top_left(table, top_left, text)


# ---------- system clipboard ----------
def copy_to_system_clipboard(text: str, command) -> bool:
    if not command:
        return False
    try:
        subprocess.run(command, input=text, text=True, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.warning("Clipboard copy command %s failed: %s", command, exc)
        return False
    return True


def read_system_clipboard(command) -> str | None:
    if not command:
        return None
    try:
        result = subprocess.run(command, capture_output=True, text=True, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.warning("Clipboard paste command %s failed: %s", command, exc)
        return None
    return result.stdout
