import time

from status_bar import render_status


def test_status_message_wins_while_fresh():
    ctx = {"status_msg": "Pasted", "status_until": time.time() + 10}
    assert render_status(ctx, 20) == " Pasted".ljust(20)


def test_summary_line():
    ctx = {
        "status_msg": "old",
        "status_until": 0,
        "file_path": "/tmp/motors/servo.json",
        "dirty": True,
        "drive_name": "Drive 1",
        "voltage_name": "48 V",
        "selected_count": 3,
        "cursor": (4, 2),
        "undo_depth": 2,
        "redo_depth": 1,
    }
    text = render_status(ctx, 200)
    assert text.startswith(" servo.json * | Drive 1 @ 48 V | sel 3 @ 4,2 | undo 2/redo 1")
    assert len(text) == 200


def test_summary_defaults_and_truncation():
    text = render_status({}, 12)
    assert len(text) == 12
    assert text.startswith(" [new motor]")
