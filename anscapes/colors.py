"""
The 16 indexed ANSI colors and the 24-bit true-color variant.

RGB reference values are arbitrary; they were picked to make the nearest
color approximation look right on common terminal themes.
"""
from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidArgumentError
from .escapes import CSI

BACKGROUND_OFFSET = 10


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise InvalidArgumentError(f"Color channel out of range 0-255: {channel}")

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class PaletteEntry:
    name: str
    code: int
    color: Color
    index: int

    def fg(self) -> str:
        return f"{CSI}{self.code}m"

    def bg(self) -> str:
        return f"{CSI}{self.code + BACKGROUND_OFFSET}m"


@dataclass(frozen=True)
class TrueColor:
    color: Color

    def fg(self) -> str:
        c = self.color
        return f"{CSI}38;2;{c.r};{c.g};{c.b}m"

    def bg(self) -> str:
        c = self.color
        return f"{CSI}48;2;{c.r};{c.g};{c.b}m"


def rgb(r: int, g: int, b: int) -> TrueColor:
    """True color for terminals supporting 24-bit escapes."""
    return TrueColor(Color(r, g, b))


_DEFINITIONS = (
    ("BLACK", 30, (0, 0, 0)),
    ("RED", 31, (178, 0, 0)),
    ("GREEN", 32, (50, 184, 26)),
    ("YELLOW", 33, (185, 183, 26)),
    ("BLUE", 34, (0, 21, 182)),
    ("MAGENTA", 35, (177, 0, 182)),
    ("CYAN", 36, (47, 186, 184)),
    ("WHITE", 37, (184, 184, 184)),

    ("BLACK_BRIGHT", 90, (58, 58, 58)),
    ("RED_BRIGHT", 91, (247, 48, 58)),
    ("GREEN_BRIGHT", 92, (89, 255, 68)),
    ("YELLOW_BRIGHT", 93, (255, 255, 67)),
    ("BLUE_BRIGHT", 94, (85, 91, 253)),
    ("MAGENTA_BRIGHT", 95, (246, 55, 253)),
    ("CYAN_BRIGHT", 96, (86, 255, 255)),
    ("WHITE_BRIGHT", 97, (255, 255, 255)),
)

# Normal intensity first, then bright; matching depends on this order.
PALETTE: Tuple[PaletteEntry, ...] = tuple(
    PaletteEntry(name, code, Color(*value), i) for i, (name, code, value) in enumerate(_DEFINITIONS)
)

(BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE,
 BLACK_BRIGHT, RED_BRIGHT, GREEN_BRIGHT, YELLOW_BRIGHT,
 BLUE_BRIGHT, MAGENTA_BRIGHT, CYAN_BRIGHT, WHITE_BRIGHT) = PALETTE
