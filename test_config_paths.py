import json
import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path

import config_paths


@contextmanager
def _config_home(payload=None, raw=None):
    """Point the module path constants at a temp dir, optionally with a config file."""
    names = ("CONFIG_DIR", "CONFIG_JSON", "LOG_PATH")
    saved = {name: getattr(config_paths, name) for name in names}
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "torquegrid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        cfg_path = cfg_dir / "config.json"
        if payload is not None:
            cfg_path.write_text(json.dumps(payload))
        elif raw is not None:
            cfg_path.write_text(raw)
        try:
            config_paths.CONFIG_DIR = str(cfg_dir)
            config_paths.CONFIG_JSON = str(cfg_path)
            config_paths.LOG_PATH = str(cfg_dir / "torquegrid.log")
            yield cfg_dir
        finally:
            for name, value in saved.items():
                setattr(config_paths, name, value)


def test_load_config_defaults_without_json():
    with _config_home():
        cfg = config_paths.load_config()
    assert cfg["CLIPBOARD_COPY_COMMAND"] is None
    assert cfg["CLIPBOARD_PASTE_COMMAND"] is None
    assert cfg["WRITE_EPSILON"] == config_paths.WRITE_EPSILON_DEFAULT
    assert cfg["LOG_LEVEL"] == "WARNING"


def test_load_config_reads_json_overrides():
    payload = {
        "clipboard": {
            "copy_command": ["wl-copy"],
            "paste_command": ["wl-paste", "-n"],
        },
        "editing": {"write_epsilon": 0.001},
        "logging": {"level": "debug"},
    }
    with _config_home(payload):
        cfg = config_paths.load_config()
    assert cfg["CLIPBOARD_COPY_COMMAND"] == ["wl-copy"]
    assert cfg["CLIPBOARD_PASTE_COMMAND"] == ["wl-paste", "-n"]
    assert cfg["WRITE_EPSILON"] == 0.001
    assert cfg["LOG_LEVEL"] == "DEBUG"


def test_load_config_ignores_invalid_values():
    payload = {
        "clipboard": {"copy_command": "wl-copy", "paste_command": []},
        "editing": {"write_epsilon": -1},
        "logging": {"level": "LOUD"},
    }
    with _config_home(payload):
        cfg = config_paths.load_config()
    assert cfg["CLIPBOARD_COPY_COMMAND"] is None
    assert cfg["CLIPBOARD_PASTE_COMMAND"] is None
    assert cfg["WRITE_EPSILON"] == config_paths.WRITE_EPSILON_DEFAULT
    assert cfg["LOG_LEVEL"] == "WARNING"


def test_load_config_survives_malformed_json():
    with _config_home(raw="{not json"):
        cfg = config_paths.load_config()
    assert cfg["LOG_LEVEL"] == "WARNING"


def test_configure_logging_writes_to_log_file():
    root = logging.getLogger()
    orig_level = root.level
    with _config_home():
        handler = config_paths.configure_logging("INFO")
        try:
            logging.getLogger("test").info("hello log")
            handler.flush()
            text = Path(config_paths.LOG_PATH).read_text()
        finally:
            root.removeHandler(handler)
            handler.close()
            root.setLevel(orig_level)
    assert "hello log" in text
