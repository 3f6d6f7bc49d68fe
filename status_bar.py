import os
import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, file_path, dirty, drive_name,
                  voltage_name, selected_count, cursor, undo_depth, redo_depth
    """
    text = ""
    now = time.time()
    if context.get('status_msg') and now < context.get('status_until', 0):
        text = f" {context['status_msg']}"
    else:
        fname = context.get('file_path') or '[new motor]'
        fname = os.path.basename(fname)
        if context.get('dirty'):
            fname += ' *'
        drive = context.get('drive_name') or '-'
        voltage = context.get('voltage_name') or '-'
        selected = context.get('selected_count', 0)
        cursor = context.get('cursor')
        cursor_text = f"{cursor[0]},{cursor[1]}" if cursor is not None else "-"
        undo = context.get('undo_depth', 0)
        redo = context.get('redo_depth', 0)
        text = (
            f" {fname} | {drive} @ {voltage} | sel {selected} @ {cursor_text}"
            f" | undo {undo}/redo {redo}"
        )

    return text.ljust(width)[:width]
