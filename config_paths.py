import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "torquegrid")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "torquegrid.log")

# default settings
CLIPBOARD_COPY_COMMAND_DEFAULT = None
CLIPBOARD_PASTE_COMMAND_DEFAULT = None
WRITE_EPSILON_DEFAULT = 1e-9
LOG_LEVEL_DEFAULT = "WARNING"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    try:
        os.makedirs(CONFIG_DIR, exist_ok=True)
    except OSError:
        pass


def _argv(value):
    if isinstance(value, list) and value and all(isinstance(x, str) for x in value):
        return list(value)
    return None


def load_config():
    cfg = {
        "CLIPBOARD_COPY_COMMAND": CLIPBOARD_COPY_COMMAND_DEFAULT,
        "CLIPBOARD_PASTE_COMMAND": CLIPBOARD_PASTE_COMMAND_DEFAULT,
        "WRITE_EPSILON": WRITE_EPSILON_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    clipboard = data.get("clipboard")
    if isinstance(clipboard, dict):
        copy_cmd = _argv(clipboard.get("copy_command"))
        if copy_cmd is not None:
            cfg["CLIPBOARD_COPY_COMMAND"] = copy_cmd
        paste_cmd = _argv(clipboard.get("paste_command"))
        if paste_cmd is not None:
            cfg["CLIPBOARD_PASTE_COMMAND"] = paste_cmd

    editing = data.get("editing")
    if isinstance(editing, dict):
        eps = editing.get("write_epsilon")
        if isinstance(eps, (int, float)) and not isinstance(eps, bool) and eps > 0:
            cfg["WRITE_EPSILON"] = float(eps)

    log_cfg = data.get("logging")
    if isinstance(log_cfg, dict):
        level = log_cfg.get("level")
        if isinstance(level, str) and level.upper() in _LOG_LEVELS:
            cfg["LOG_LEVEL"] = level.upper()

    return cfg


def configure_logging(level=LOG_LEVEL_DEFAULT):
    """Send log records to LOG_PATH; the terminal belongs to curses."""
    ensure_config_dirs()
    root = logging.getLogger()
    root.setLevel(level)
    try:
        handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    return handler
