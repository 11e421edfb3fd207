import logging
from typing import Any

import torch

from .ansi_generator import (BG_ESCAPES, FG_ESCAPES, MAX_RGB_ESCAPE_LEN, NEWLINE, RESET, BufferWriter,
                             ChunkCollector, StreamSink, ansi_generate_indexed, ansi_generate_rgb)
from .config import Config
from .frame_processing import resample, to_frame, unpack_pixels
from .matcher import quantize_colors

logger = logging.getLogger(__name__)


class AnsiRenderer:
    """
    Renders images as terminal text at a fixed cell grid.

    The configuration is frozen at construction and no per-frame state is
    kept, so one renderer can serve many frames, and many threads, as long
    as each call gets its own sink.
    """

    def __init__(self, config: Config):
        self.config = config
        self.glyph = config.glyph.encode()
        if config.true_color:
            escape_len = MAX_RGB_ESCAPE_LEN
        else:
            escape_len = max(len(e) for e in (BG_ESCAPES if config.background else FG_ESCAPES))
        self.min_buffer_size = max(escape_len, len(self.glyph), len(RESET), len(NEWLINE))
        logger.debug("Renderer ready: %dx%d cells, bias=%d, colors=%s",
                     config.width, config.height, config.bias, config.color_mode.value)

    def render_string(self, image: Any) -> str:
        """Render an (H, W, 3|4) image to a single string."""
        frame = to_frame(image, self.config.device)
        collector = ChunkCollector()
        self._generate(frame, collector)
        return collector.getvalue().decode("utf-8")

    def render(self, pixel_data: Any, width: int, height: int, sink: StreamSink) -> int:
        """
        Render packed 0xAARRGGBB pixels into the sink's buffer.

        The consumer is called with (buffer, length) every time the buffer
        fills up and once more at the end. Returns the number of bytes produced.
        """
        frame = unpack_pixels(pixel_data, width, height, self.config.device)
        return self._stream(frame, sink)

    def render_frame(self, image: Any, sink: StreamSink) -> int:
        """Streaming counterpart of render_string for (H, W, 3|4) frames."""
        return self._stream(to_frame(image, self.config.device), sink)

    def _stream(self, frame: torch.Tensor, sink: StreamSink) -> int:
        writer = BufferWriter(sink, self.min_buffer_size)
        self._generate(frame, writer)
        logger.debug("Streamed %dx%d frame as %d bytes", frame.shape[1], frame.shape[0], writer.total)
        return writer.total

    def _generate(self, frame: torch.Tensor, writer) -> None:
        cfg = self.config
        cells = resample(frame, cfg.width, cfg.height, cfg.bias)
        if cfg.true_color:
            ansi_generate_rgb(cells, self.glyph, writer, cfg.background)
        else:
            indices = quantize_colors(cells.reshape(-1, 3), cfg.threshold).reshape(cfg.height, cfg.width)
            ansi_generate_indexed(indices, self.glyph, writer, cfg.background)
