from typing import Any, Tuple

import torch

from .config import CELL_ASPECT, DEVICE
from .errors import InvalidInputError


def to_frame(image: Any, device: torch.device = DEVICE) -> torch.Tensor:
    """
    Normalise an image to an (H, W, 3) uint8 RGB tensor.

    Accepts tensors, numpy arrays or nested sequences shaped (H, W), (H, W, 3)
    or (H, W, 4). A fourth channel is treated as alpha and dropped. Channel
    values must be whole numbers in 0-255.
    """
    frame = torch.as_tensor(image, device=device)
    if frame.dim() == 2:
        frame = frame.unsqueeze(-1).expand(-1, -1, 3)
    if frame.dim() != 3 or frame.shape[2] not in (3, 4):
        raise InvalidInputError(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {tuple(frame.shape)}")
    if frame.shape[0] == 0 or frame.shape[1] == 0:
        raise InvalidInputError("Image has no pixels")
    rgb = frame[..., :3]
    if rgb.dtype != torch.uint8:
        if rgb.is_floating_point() and not torch.equal(rgb, rgb.round()):
            raise InvalidInputError("Float images must hold whole channel values in 0-255")
        if rgb.min().item() < 0 or rgb.max().item() > 255:
            raise InvalidInputError(
                f"Channel values must be within 0-255, got {rgb.min().item()}..{rgb.max().item()}")
    return rgb.to(torch.uint8).contiguous()


def unpack_pixels(pixel_data: Any, width: int, height: int, device: torch.device = DEVICE) -> torch.Tensor:
    """
    Turn a flat row-major run of packed 0xAARRGGBB integers into an RGB frame.
    Raises InvalidInputError when the length does not match width * height.
    """
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"Source dimensions must be positive, got {width}x{height}")
    try:
        packed = torch.as_tensor(pixel_data, dtype=torch.int64, device=device)
    except (TypeError, ValueError, RuntimeError):
        packed = torch.tensor(list(pixel_data), dtype=torch.int64, device=device)
    packed = packed.reshape(-1)
    if packed.numel() != width * height:
        raise InvalidInputError(
            f"Pixel data holds {packed.numel()} values, expected {width}x{height}={width * height}")
    frame = torch.stack(((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF), dim=-1)
    return frame.reshape(height, width, 3).to(torch.uint8)


def _summed_area_table(frame: torch.Tensor) -> torch.Tensor:
    h, w, c = frame.shape
    table = torch.zeros((h + 1, w + 1, c), dtype=torch.int64, device=frame.device)
    table[1:, 1:] = frame.to(torch.int64).cumsum(dim=0).cumsum(dim=1)
    return table


def resample(frame: torch.Tensor, width: int, height: int, bias: int = 0) -> torch.Tensor:
    """
    Map an (H, W, 3) frame onto a (height, width, 3) grid of cells.

    bias 0 picks the nearest source pixel per cell. A positive bias averages
    the (2 * bias + 1) square centred on that pixel, clipped to the frame,
    rounding each channel to the nearest integer.
    """
    src_h, src_w = frame.shape[:2]
    device = frame.device
    ys = torch.arange(height, device=device) * src_h // height
    xs = torch.arange(width, device=device) * src_w // width
    if bias == 0:
        return frame[ys[:, None], xs[None, :]].contiguous()

    table = _summed_area_table(frame)
    y0 = (ys - bias).clamp_(min=0)[:, None]
    y1 = (ys + bias).clamp_(max=src_h - 1)[:, None] + 1
    x0 = (xs - bias).clamp_(min=0)[None, :]
    x1 = (xs + bias).clamp_(max=src_w - 1)[None, :] + 1
    total = table[y1, x1] - table[y0, x1] - table[y1, x0] + table[y0, x0]
    count = ((y1 - y0) * (x1 - x0)).unsqueeze(-1)
    # Halves round up
    return ((2 * total + count) // (2 * count)).to(torch.uint8)


def fit_dimensions(src_width: int, src_height: int, max_width: int, max_height: int,
                   cell_aspect: float = CELL_ASPECT) -> Tuple[int, int]:
    """Largest cell grid within max_width x max_height keeping the source aspect ratio."""
    eff_w = max_width * cell_aspect
    scale = min(eff_w / src_width, max_height / src_height)
    new_w = max(1, min(max_width, int(round(src_width * scale / cell_aspect))))
    new_h = max(1, min(max_height, int(round(src_height * scale))))
    return new_w, new_h
