# tests/conftest.py

import cv2
import pytest
import torch

# BGR, as OpenCV writes them
CLIP_COLORS_BGR = [(0, 0, 255), (0, 255, 0), (255, 0, 0)]
CLIP_FPS = 10.0


@pytest.fixture
def video_path(tmp_path) -> str:
    """A three-frame 16x16 MJPG clip: solid red, green, then blue."""
    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), CLIP_FPS, (16, 16))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG video")
    try:
        for color in CLIP_COLORS_BGR:
            frame = torch.tensor(color, dtype=torch.uint8).expand(16, 16, 3).contiguous()
            writer.write(frame.numpy())
    finally:
        writer.release()
    return str(path)
