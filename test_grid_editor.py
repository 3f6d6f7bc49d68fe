import curses
from unittest.mock import patch

from curve_table import CurveDataTable
from default_motor_initializer import DefaultMotorInitializer
from document_state import DocumentState
from grid_editor import KEY_CTRL_R, GridEditor
from line_prompt import LinePrompt
from selection_model import CellPosition


def _editor(config=None):
    doc = DocumentState(DefaultMotorInitializer().create())
    table = CurveDataTable(undo_stack=doc.undo_stack)
    table.current_voltage = doc.active_voltage
    doc.listeners.append(lambda: setattr(table, "current_voltage", doc.active_voltage))
    messages = []
    prompt = LinePrompt(lambda m, _: messages.append(m))
    editor = GridEditor(
        table, doc, lambda m, _=None: messages.append(m), prompt=prompt, config=config
    )
    return editor, table, doc, prompt, messages


def _keys(editor, text):
    for ch in text:
        editor.handle_key(ord(ch))


def test_movement_and_extension_keys():
    editor, table, _, _, _ = _editor()

    editor.handle_key(curses.KEY_DOWN)  # empty selection selects origin
    assert table.selection.selected_cells == {CellPosition(0, 0)}

    _keys(editor, "jll")
    assert table.selection.selected_cells == {CellPosition(1, 2)}

    _keys(editor, "JL")
    assert table.selection.bounds() == (1, 2, 2, 3)

    editor.handle_key(ord("G"))
    assert table.selection.bounds() == (1, 100, 2, 3)

    editor.handle_key(27)
    assert len(table.selection) == 0


def test_space_toggles_cursor_cell():
    editor, table, _, _, _ = _editor()
    table.selection.select_cell(4, 2)
    editor.handle_key(ord(" "))
    assert len(table.selection) == 0


def test_select_all_torque():
    editor, table, _, _, _ = _editor()
    editor.handle_key(ord("a"))
    assert table.selection.bounds() == (0, 100, 2, 3)


def test_override_prompt_then_undo_redo():
    editor, table, doc, prompt, messages = _editor()
    peak = doc.active_voltage.curves[0]
    table.selection.select_rectangular_range((0, 2), (1, 2))

    editor.handle_key(ord("="))
    assert prompt.active
    for ch in "7.5":
        prompt.handle_key(ord(ch))
    prompt.handle_key(10)

    assert peak.torques[:2] == [7.5, 7.5]
    assert doc.is_dirty

    editor.handle_key(ord("u"))
    assert peak.torques[:2] == [12.0, 12.0]
    assert not doc.is_dirty

    editor.handle_key(KEY_CTRL_R)
    assert peak.torques[:2] == [7.5, 7.5]
    assert messages[-1].startswith("Redid:")


def test_bad_override_value_keeps_prompt_open():
    editor, table, _, prompt, messages = _editor()
    table.selection.select_cell(0, 2)
    editor.handle_key(ord("="))
    for ch in "abc":
        prompt.handle_key(ord(ch))
    prompt.handle_key(10)
    assert prompt.active
    assert messages[-1] == "Not a number: abc"


def test_undo_with_empty_history():
    editor, _, _, _, messages = _editor()
    editor.handle_key(ord("u"))
    editor.handle_key(KEY_CTRL_R)
    assert messages == ["Nothing to undo", "Nothing to redo"]


def test_x_zeroes_selection():
    editor, table, doc, _, _ = _editor()
    table.selection.select_cell(3, 3)
    editor.handle_key(ord("x"))
    assert doc.active_voltage.curves[1].points[3].torque == 0.0


def test_lock_toggle_blocks_writes_and_is_undoable():
    editor, table, doc, _, _ = _editor()
    cont = doc.active_voltage.curves[1]
    table.selection.select_cell(0, 3)

    editor.handle_key(ord("m"))
    assert cont.locked
    assert not table.can_write_cell((0, 3), 99.0)

    editor.handle_key(ord("u"))
    assert not cont.locked


def test_rename_rejects_duplicates():
    editor, table, doc, prompt, messages = _editor()
    peak = doc.active_voltage.curves[0]
    table.selection.select_cell(0, 2)

    editor.handle_key(ord("r"))
    assert prompt.buffer == "Peak"
    for _ in range(4):
        prompt.handle_key(127)
    for ch in "Continuous":
        prompt.handle_key(ord(ch))
    prompt.handle_key(10)
    assert prompt.active
    assert peak.name == "Peak"

    for _ in range(len("Continuous")):
        prompt.handle_key(127)
    for ch in "Boost":
        prompt.handle_key(ord(ch))
    prompt.handle_key(10)
    assert not prompt.active
    assert peak.name == "Boost"


def test_voltage_switch_keys():
    editor, table, doc, _, _ = _editor()
    editor.handle_key(ord("]"))
    assert doc.active_voltage.value == 24.0
    assert table.current_voltage is doc.active_voltage
    editor.handle_key(ord("["))
    assert doc.active_voltage.value == 48.0


def test_copy_and_paste_through_register():
    editor, table, doc, _, _ = _editor()
    peak = doc.active_voltage.curves[0]
    peak.points[0].torque = 3.5
    table.selection.select_cell(0, 2)
    editor.handle_key(ord("y"))
    assert editor.register == "3.50"

    table.selection.select_rectangular_range((10, 2), (12, 2))
    editor.handle_key(ord("p"))
    assert peak.torques[10:13] == [3.5, 3.5, 3.5]


def test_copy_and_paste_through_system_clipboard():
    config = {
        "CLIPBOARD_COPY_COMMAND": ["fake-copy"],
        "CLIPBOARD_PASTE_COMMAND": ["fake-paste"],
    }
    editor, table, doc, _, _ = _editor(config)
    cont = doc.active_voltage.curves[1]

    with patch("subprocess.run") as run:
        table.selection.select_cell(0, 3)
        editor.handle_key(ord("y"))
        assert run.call_args.args[0] == ["fake-copy"]
        assert run.call_args.kwargs.get("input") == "6.00"

        run.return_value.stdout = "1.25"
        table.selection.select_cell(5, 3)
        editor.handle_key(ord("p"))
        assert run.call_args.args[0] == ["fake-paste"]

    assert cont.points[5].torque == 1.25
