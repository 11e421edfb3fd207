import math
from typing import Sequence, Union

import torch

from .colors import PALETTE, Color, PaletteEntry

PALETTE_RGB = torch.tensor([entry.color.as_tuple() for entry in PALETTE], dtype=torch.float64)


def find_nearest_color(target: Union[Color, Sequence[int]], threshold: float = 0) -> PaletteEntry:
    """
    Nearest palette entry to ``target`` by Euclidean distance in RGB space.

    Entries are visited normal intensity first, then bright. The first entry
    closer than ``threshold`` is returned right away; a threshold <= 0 always
    searches for the true minimum. Ties go to the entry visited first.
    """
    r, g, b = target.as_tuple() if isinstance(target, Color) else target
    closest = None
    closest_dist = math.inf
    for entry in PALETTE:
        ref = entry.color
        dist = math.sqrt((ref.r - r) ** 2 + (ref.g - g) ** 2 + (ref.b - b) ** 2)
        # Low distance, it's a spot-on
        if dist < threshold:
            return entry
        if dist < closest_dist:
            closest_dist = dist
            closest = entry
    return closest


def quantize_colors(rgb_colors: torch.Tensor, threshold: float = 0) -> torch.Tensor:
    """
    Palette indices for an (N, 3) tensor of RGB colors.

    Same rule as find_nearest_color, evaluated for all colors at once:
    the first entry under the threshold wins, otherwise the first minimum.
    """
    ansi_colors = PALETTE_RGB.to(rgb_colors.device)
    diff = rgb_colors.to(torch.float64).unsqueeze(1) - ansi_colors.unsqueeze(0)
    distances = (diff ** 2).sum(dim=2).sqrt_()  # (N, 16)
    nearest = distances.argmin(dim=1)
    if threshold > 0:
        close = distances < threshold
        first_close = close.to(torch.int32).argmax(dim=1)
        nearest = torch.where(close.any(dim=1), first_close, nearest)
    return nearest.contiguous()
