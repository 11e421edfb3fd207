from dataclasses import dataclass, field
from enum import Enum

import torch

from .errors import InvalidConfigurationError

DEVICE = torch.device('cpu')

SEP_VAL = 59  # ;
SGR_END_VAL = 109  # m
FG_RGB_PREF_VALS = (27, 91, 51, 56, 59, 50, 59)  # \e[38;2;
BG_RGB_PREF_VALS = (27, 91, 52, 56, 59, 50, 59)  # \e[48;2;
RESET_VALS = (27, 91, 109)  # \e[m
NEWLINE_VAL = 10

BLOCK_GLYPH = "█"
SPACE_GLYPH = " "
DEFAULT_BUFFER_SIZE = 65536
CELL_ASPECT = 0.5


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ColorMode(str, Enum):
    INDEXED = "16"
    TRUE_COLOR = "full"


@dataclass(frozen=True)
class Config:
    width: int
    height: int
    bias: int = 0
    color_mode: ColorMode = ColorMode.INDEXED
    threshold: float = 0.0
    background: bool = False
    device: torch.device = field(default=DEVICE, compare=False)

    def __post_init__(self):
        if not _is_int(self.width) or self.width <= 0:
            raise InvalidConfigurationError(f"Target width must be a positive integer, got {self.width!r}")
        if not _is_int(self.height) or self.height <= 0:
            raise InvalidConfigurationError(f"Target height must be a positive integer, got {self.height!r}")
        if not _is_int(self.bias) or self.bias < 0:
            raise InvalidConfigurationError(f"Bias must be a non-negative integer, got {self.bias!r}")
        try:
            object.__setattr__(self, 'color_mode', ColorMode(self.color_mode))
        except ValueError:
            raise InvalidConfigurationError(f"Unknown color mode: {self.color_mode!r}") from None

    @property
    def true_color(self) -> bool:
        return self.color_mode is ColorMode.TRUE_COLOR

    @property
    def glyph(self) -> str:
        return SPACE_GLYPH if self.background else BLOCK_GLYPH
