"""
ANSI escape codes for manipulating the terminal: cursor movement, text
attributes, screen clearing, and an experimental cursor position query.
"""
import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

CSI = "\033["

RESET = CSI + "m"
CLEAR = CSI + "2J"
CLEAR_BUFFER = CSI + "3J"
RESET_CURSOR = CSI + "H"
CLEAR_LINE = CSI + "2K"
MOVE_UP = CSI + "A"
MOVE_DOWN = CSI + "B"
MOVE_RIGHT = CSI + "C"
MOVE_LEFT = CSI + "D"
MOVE_LINEUP = CSI + "E"
MOVE_LINEDOWN = CSI + "F"
BOLD = CSI + "1m"
FAINT = CSI + "2m"
ITALIC = CSI + "3m"
UNDERLINE = CSI + "4m"
BLINK_SLOW = CSI + "5m"
BLINK_FAST = CSI + "6m"
SWAP_COLORS = CSI + "7m"
DEFAULT_FONT = CSI + "10m"
FRAKTUR = CSI + "20m"
UNDERLINE_DOUBLE = CSI + "21m"
NORMAL = CSI + "22m"
ITALIC_OFF = CSI + "23m"
UNDERLINE_OFF = CSI + "24m"
BLINK_OFF = CSI + "25m"
INVERSE_OFF = CSI + "26m"
DEFAULT_FOREGROUND = CSI + "39m"
DEFAULT_BACKGROUND = CSI + "49m"
FRAMED = CSI + "51m"
ENCIRCLED = CSI + "52m"
OVERLINED = CSI + "53m"
FRAMED_OFF = CSI + "54m"
OVERLINED_OFF = CSI + "55m"
HIDE_CURSOR = CSI + "?25l"
SHOW_CURSOR = CSI + "?25h"
REQUEST_CURSOR_POSITION = CSI + "6n"


def alternative_font(n: int) -> str:
    """Select alternative font n, between 0 and 9 where 0 is the default font."""
    if n < 0 or n > 9:
        raise InvalidArgumentError("Font number should be between 0 and 9.")
    return f"{CSI}{n + 10}m"


def move_up(n: int) -> str:
    return f"{CSI}{n}A"


def move_down(n: int) -> str:
    return f"{CSI}{n}B"


def move_right(n: int) -> str:
    return f"{CSI}{n}C"


def move_left(n: int) -> str:
    return f"{CSI}{n}D"


def move_next_line(n: int) -> str:
    return f"{CSI}{n}E"


def move_previous_line(n: int) -> str:
    return f"{CSI}{n}F"


def cursor_to(row: int, col: int) -> str:
    return f"{CSI}{row};{col}H"


@dataclass(frozen=True)
class CursorPos:
    row: int
    col: int


def _read_field(stream: TextIO, terminator: str) -> Optional[str]:
    chars = []
    while True:
        ch = stream.read(1)
        if not ch:
            return None
        if ch == terminator:
            return "".join(chars)
        chars.append(ch)


def cursor_position(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> Optional[CursorPos]:
    """
    Query the terminal for the cursor position (experimental).

    Blocks until the terminal answers with ``ESC [ row ; col R``; there is no
    timeout. The terminal must already be in a mode where the answer is not
    line buffered. Returns None when the answer is missing or malformed,
    or when reading or writing the terminal fails.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    try:
        stdout.write(REQUEST_CURSOR_POSITION)
        stdout.flush()

        introducer = stdin.read(2)
        if introducer != CSI:
            logger.warning("Unexpected cursor position introducer: %r", introducer)
            return None
        row = _read_field(stdin, ";")
        col = _read_field(stdin, "R") if row is not None else None
    except (OSError, ValueError) as e:
        logger.warning("Cursor position query failed: %s", e)
        return None
    if row is None or col is None:
        logger.warning("Terminal closed input before reporting the cursor position")
        return None
    try:
        return CursorPos(int(row) if row else 1, int(col) if col else 1)
    except ValueError:
        logger.warning("Malformed cursor position report: row=%r col=%r", row, col)
        return None
