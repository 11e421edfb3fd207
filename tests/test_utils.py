# tests/test_utils.py

import os
import threading

import cv2
import pytest
import torch

from anscapes.utils import load_image, read_video_frames, setup_lookup, video_fps, write_all
from tests.conftest import CLIP_FPS


def test_setup_lookup() -> None:
    lookup = setup_lookup(256)
    assert len(lookup) == 256
    assert lookup[0] == b"0"
    assert lookup[7] == b"7"
    assert lookup[255] == b"255"


def test_write_all_writes_everything() -> None:
    read_fd, write_fd = os.pipe()
    try:
        data = bytes(range(256)) * 100
        write_all(write_fd, data)
        os.close(write_fd)
        received = b""
        while True:
            chunk = os.read(read_fd, 65536)
            if not chunk:
                break
            received += chunk
    finally:
        os.close(read_fd)
    assert received == data


def test_write_all_ignores_empty_data() -> None:
    write_all(-1, b"")


def test_load_image_returns_rgb(tmp_path) -> None:
    bgr = torch.zeros((2, 3, 3), dtype=torch.uint8)
    bgr[0, 0] = torch.tensor([0, 0, 255], dtype=torch.uint8)
    bgr[1, 2] = torch.tensor([255, 0, 0], dtype=torch.uint8)
    path = tmp_path / "tiny.png"
    assert cv2.imwrite(str(path), bgr.numpy())

    frame = load_image(str(path))
    assert frame.shape == (2, 3, 3)
    assert frame.dtype == torch.uint8
    assert frame[0, 0].tolist() == [255, 0, 0]
    assert frame[1, 2].tolist() == [0, 0, 255]


def test_load_image_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_image(str(tmp_path / "missing.png"))


def test_read_video_frames_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        next(read_video_frames(str(tmp_path / "missing.mp4")))


def test_read_video_frames_yields_rgb_frames(video_path) -> None:
    frames = list(read_video_frames(video_path))
    assert len(frames) == 3
    for frame, dominant in zip(frames, (0, 1, 2)):
        assert frame.shape == (16, 16, 3)
        assert frame.dtype == torch.uint8
        mean = frame.to(torch.float32).mean(dim=(0, 1))
        # lossy codec, so only the dominant channel is checked
        assert mean.argmax().item() == dominant
        assert mean[dominant] > 200


def test_read_video_frames_stops_on_exit_event(video_path) -> None:
    exit_event = threading.Event()
    frames = read_video_frames(video_path, exit_event)
    next(frames)
    exit_event.set()
    assert list(frames) == []


def test_video_fps(video_path, tmp_path) -> None:
    assert video_fps(video_path, 30.0) == pytest.approx(CLIP_FPS, abs=0.5)
    assert video_fps(str(tmp_path / "missing.avi"), 24.0) == 24.0
