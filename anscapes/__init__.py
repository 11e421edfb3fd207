# ANSI image rendering package
# Turns images and video frames into terminal text made of colored cells

from .ansi_generator import StreamSink
from .ansi_renderer import AnsiRenderer
from .colors import PALETTE, Color, PaletteEntry, TrueColor, rgb
from .config import ColorMode, Config
from .errors import AnscapesError, InvalidArgumentError, InvalidConfigurationError, InvalidInputError
from .frame_processing import resample
from .matcher import find_nearest_color

__version__ = "0.1.0"

__all__ = [
    'AnsiRenderer',
    'AnscapesError',
    'Color',
    'ColorMode',
    'Config',
    'InvalidArgumentError',
    'InvalidConfigurationError',
    'InvalidInputError',
    'PALETTE',
    'PaletteEntry',
    'StreamSink',
    'TrueColor',
    'find_nearest_color',
    'resample',
    'rgb',
]
