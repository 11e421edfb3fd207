import os
import threading
from typing import Generator, Optional, Tuple

import cv2
import torch


def write_all(fd: int, data) -> None:
    """Write all data to fd, handling partial writes."""
    if not data:
        return
    BUFFER_SIZE = 65536
    view = memoryview(data)
    total = 0
    remaining = len(view)

    while remaining > 0:
        chunk_size = min(remaining, BUFFER_SIZE)
        written = os.write(fd, view[total:total + chunk_size])
        if not written:
            break
        total += written
        remaining -= written


def setup_lookup(max_val: int) -> Tuple[bytes, ...]:
    """ASCII decimal encodings of 0..max_val-1, indexed by value."""
    return tuple(str(i).encode() for i in range(max_val))


def load_image(path: str) -> torch.Tensor:
    """Read an image file into an (H, W, 3) uint8 RGB tensor."""
    frame = cv2.imread(path, cv2.IMREAD_COLOR)
    if frame is None:
        raise FileNotFoundError(f"Could not read image file: {path}")
    return torch.from_numpy(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))


def read_video_frames(path: str, exit_event: Optional[threading.Event] = None) -> Generator[torch.Tensor, None, None]:
    cap = cv2.VideoCapture(path)
    if not cap.isOpened():
        raise FileNotFoundError(f"Could not open video file: {path}")
    try:
        while exit_event is None or not exit_event.is_set():
            ret, frame = cap.read()
            if not ret:
                break
            yield torch.from_numpy(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
    finally:
        cap.release()


def video_fps(path: str, default: float) -> float:
    cap = cv2.VideoCapture(path)
    try:
        fps = cap.get(cv2.CAP_PROP_FPS)
    finally:
        cap.release()
    return fps if fps and fps > 0 else default
