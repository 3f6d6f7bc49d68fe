import sys
import os
import curses
import logging

from config_paths import configure_logging, load_config
from default_motor_initializer import DefaultMotorInitializer
from document_state import DocumentState

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

try:
    from _version import __version__
except Exception:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)

USAGE = (
    "torquegrid - terminal torque curve grid editor\n\n"
    "Usage:\n  torquegrid\n  torquegrid -v\n  torquegrid -h\n\n"
    "Keys:\n"
    "  hjkl/arrows move    HJKL/shift-arrows extend    g G 0 $ extend to edge\n"
    "  space toggle cell   a select all torque         Esc clear selection\n"
    "  = set value         x zero selection            y copy    p paste\n"
    "  u undo   Ctrl+R redo   m lock/unlock curve   r rename curve\n"
    "  [ ] previous/next voltage                       Ctrl+C / Ctrl+X quit\n"
)


def parse_args(args):
    """Return 'version', 'help', or 'run'; unknown arguments fall back to help."""
    if "-v" in args or "-V" in args:
        return "version"
    if "-h" in args or "--help" in args or args:
        return "help"
    return "run"


def main():
    action = parse_args(sys.argv[1:])

    if action == "version":
        print(__version__)
        return

    if action == "help":
        print(USAGE)
        return

    config = load_config()
    configure_logging(config["LOG_LEVEL"])
    logger.info("Starting torquegrid %s", __version__)

    motor = DefaultMotorInitializer().create()

    def curses_main(stdscr):
        state = DocumentState(motor)
        Orchestrator(stdscr, state, config).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
