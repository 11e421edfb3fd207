# tests/test_frame_processing.py

import pytest
import torch

from anscapes.errors import InvalidInputError
from anscapes.frame_processing import fit_dimensions, resample, to_frame, unpack_pixels


def solid(height: int, width: int, color) -> torch.Tensor:
    return torch.tensor(color, dtype=torch.uint8).expand(height, width, 3).contiguous()


@pytest.mark.parametrize("width, height", [(1, 1), (3, 2), (40, 17)])
def test_single_pixel_fills_every_cell(width: int, height: int) -> None:
    frame = solid(1, 1, (12, 34, 56))
    cells = resample(frame, width, height, bias=0)
    assert cells.shape == (height, width, 3)
    assert (cells == torch.tensor([12, 34, 56], dtype=torch.uint8)).all()


@pytest.mark.parametrize("bias", [1, 2, 5, 32])
def test_uniform_image_survives_pooling(bias: int) -> None:
    frame = solid(23, 31, (200, 7, 128))
    cells = resample(frame, 9, 5, bias=bias)
    assert cells.shape == (5, 9, 3)
    assert (cells == torch.tensor([200, 7, 128], dtype=torch.uint8)).all()


def test_nearest_sampling_picks_floor_coordinates() -> None:
    frame = torch.tensor([[[0, 0, 0], [1, 1, 1], [2, 2, 2], [3, 3, 3]]], dtype=torch.uint8)
    cells = resample(frame, 2, 1, bias=0)
    assert cells[0, :, 0].tolist() == [0, 2]


def test_nearest_sampling_upscales() -> None:
    frame = torch.tensor([[[10, 0, 0], [20, 0, 0]]], dtype=torch.uint8)
    cells = resample(frame, 4, 2, bias=0)
    assert cells[..., 0].tolist() == [[10, 10, 20, 20], [10, 10, 20, 20]]


def test_box_average_clips_at_edges_and_rounds() -> None:
    frame = torch.tensor([[[0, 0, 0], [100, 0, 0], [255, 0, 0]]], dtype=torch.uint8)
    cells = resample(frame, 3, 1, bias=1)
    # (0+100)/2, (0+100+255)/3, (100+255)/2 rounded half up
    assert cells[0, :, 0].tolist() == [50, 118, 178]


def test_box_average_two_dimensional_window() -> None:
    frame = torch.zeros((3, 3, 3), dtype=torch.uint8)
    frame[1, 1] = torch.tensor([90, 180, 9], dtype=torch.uint8)
    cells = resample(frame, 3, 3, bias=1)
    assert cells[1, 1].tolist() == [10, 20, 1]
    # corner window is 2x2 and contains the bright pixel
    assert cells[0, 0].tolist() == [23, 45, 2]


def test_unpack_pixels_splits_channels() -> None:
    frame = unpack_pixels([0xFF102030, 0x00405060, -1, 0], 2, 2)
    assert frame.dtype == torch.uint8
    assert frame.tolist() == [
        [[0x10, 0x20, 0x30], [0x40, 0x50, 0x60]],
        [[255, 255, 255], [0, 0, 0]],
    ]


def test_unpack_pixels_accepts_tensors() -> None:
    packed = torch.tensor([0x00FF0000, 0x0000FF00, 0x000000FF], dtype=torch.int32)
    frame = unpack_pixels(packed, 3, 1)
    assert frame[0].tolist() == [[255, 0, 0], [0, 255, 0], [0, 0, 255]]


@pytest.mark.parametrize("length, width, height", [(3, 2, 2), (5, 2, 2), (0, 1, 1)])
def test_unpack_pixels_rejects_length_mismatch(length: int, width: int, height: int) -> None:
    with pytest.raises(InvalidInputError):
        unpack_pixels([0] * length, width, height)


def test_unpack_pixels_rejects_empty_dimensions() -> None:
    with pytest.raises(InvalidInputError):
        unpack_pixels([], 0, 0)


def test_to_frame_drops_alpha() -> None:
    image = [[[1, 2, 3, 4], [5, 6, 7, 8]]]
    frame = to_frame(image)
    assert frame.shape == (1, 2, 3)
    assert frame.tolist() == [[[1, 2, 3], [5, 6, 7]]]


def test_to_frame_expands_grayscale() -> None:
    frame = to_frame(torch.tensor([[7, 9]], dtype=torch.uint8))
    assert frame.tolist() == [[[7, 7, 7], [9, 9, 9]]]


@pytest.mark.parametrize("shape", [(4,), (2, 2, 2), (2, 2, 5), (0, 3, 3)])
def test_to_frame_rejects_bad_shapes(shape) -> None:
    with pytest.raises(InvalidInputError):
        to_frame(torch.zeros(shape, dtype=torch.uint8))


def test_fit_dimensions_keeps_aspect_with_tall_cells() -> None:
    assert fit_dimensions(100, 100, 80, 24) == (48, 24)
    assert fit_dimensions(400, 100, 80, 24) == (80, 10)


@pytest.mark.parametrize(
    "image",
    [
        [[[300, 0, 0]]],
        [[[0, -1, 0]]],
        torch.tensor([[[0.5, 0.25, 1.0]]]),
        torch.tensor([[[256.0, 0.0, 0.0]]]),
    ],
)
def test_to_frame_rejects_values_outside_eight_bits(image) -> None:
    with pytest.raises(InvalidInputError):
        to_frame(image)


def test_to_frame_accepts_whole_valued_wide_types() -> None:
    frame = to_frame(torch.tensor([[[255.0, 0.0, 128.0]]]))
    assert frame.dtype == torch.uint8
    assert frame.tolist() == [[[255, 0, 128]]]
    assert to_frame([[[255, 1, 2]]]).tolist() == [[[255, 1, 2]]]


@pytest.mark.parametrize(
    "packed, expected",
    [
        (0xFF112233, [0x11, 0x22, 0x33]),
        (0x00112233, [0x11, 0x22, 0x33]),
        (-16777216, [0, 0, 0]),
        (-0x00EDCCCD, [0x12, 0x33, 0x33]),
    ],
)
def test_unpack_pixels_ignores_alpha_and_sign(packed: int, expected) -> None:
    assert unpack_pixels([packed], 1, 1)[0, 0].tolist() == expected
