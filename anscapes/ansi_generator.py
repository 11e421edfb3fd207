"""
Escape sequence emission.

Cells are grouped into runs of identical color. Every run is written as
``<color escape><glyph * n><reset>``, rows end with a newline and the frame
ends with one more reset. Output goes through a writer exposing ``write``
and ``write_repeated``; the streaming writer never splits an escape
sequence, a glyph or a reset across two flushes.
"""
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple, Union

import torch

from .colors import PALETTE
from .config import BG_RGB_PREF_VALS, FG_RGB_PREF_VALS, NEWLINE_VAL, RESET_VALS, SEP_VAL, SGR_END_VAL
from .errors import InvalidInputError
from .utils import setup_lookup

WritableBuffer = Union[bytearray, memoryview]
Consumer = Callable[[WritableBuffer, int], None]

RESET = bytes(RESET_VALS)
NEWLINE = bytes((NEWLINE_VAL,))
SEP = bytes((SEP_VAL,))
SGR_END = bytes((SGR_END_VAL,))
FG_RGB_PREFIX = bytes(FG_RGB_PREF_VALS)
BG_RGB_PREFIX = bytes(BG_RGB_PREF_VALS)
DIGITS = setup_lookup(256)

FG_ESCAPES = tuple(entry.fg().encode() for entry in PALETTE)
BG_ESCAPES = tuple(entry.bg().encode() for entry in PALETTE)
MAX_RGB_ESCAPE_LEN = len(FG_RGB_PREFIX) + 3 * 3 + 2 + 1


@dataclass
class StreamSink:
    """A caller-owned buffer and the consumer that drains it."""
    buffer: WritableBuffer
    consumer: Consumer


class BufferWriter:
    """Fills a caller-supplied buffer, handing it to the consumer whenever the next unit does not fit."""
    __slots__ = ('buffer', 'consumer', 'capacity', 'pos', 'total')

    def __init__(self, sink: StreamSink, min_capacity: int):
        view = memoryview(sink.buffer)
        if view.readonly:
            raise InvalidInputError("Sink buffer must be writable")
        if view.itemsize != 1 or view.ndim != 1:
            raise InvalidInputError("Sink buffer must be a flat buffer of single bytes")
        if view.nbytes < min_capacity:
            raise InvalidInputError(f"Sink buffer holds {view.nbytes} bytes, needs at least {min_capacity}")
        self.buffer = sink.buffer
        self.consumer = sink.consumer
        self.capacity = view.nbytes
        self.pos = 0
        self.total = 0

    def write(self, *parts: bytes) -> None:
        size = 0
        for part in parts:
            size += len(part)
        if self.pos + size > self.capacity:
            self.flush()
        pos = self.pos
        for part in parts:
            end = pos + len(part)
            self.buffer[pos:end] = part
            pos = end
        self.pos = pos
        self.total += size

    def write_repeated(self, unit: bytes, count: int) -> None:
        unit_len = len(unit)
        while count > 0:
            room = (self.capacity - self.pos) // unit_len
            if room == 0:
                self.flush()
                continue
            n = min(room, count)
            end = self.pos + n * unit_len
            self.buffer[self.pos:end] = unit * n
            self.pos = end
            self.total += n * unit_len
            count -= n

    def flush(self) -> None:
        if self.pos:
            self.consumer(self.buffer, self.pos)
            self.pos = 0


class ChunkCollector:
    """Accumulates emitted bytes in memory, used to build a single string."""
    __slots__ = ('parts',)

    def __init__(self):
        self.parts: List[bytes] = []

    def write(self, *parts: bytes) -> None:
        self.parts.extend(parts)

    def write_repeated(self, unit: bytes, count: int) -> None:
        self.parts.append(unit * count)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        return b"".join(self.parts)


def find_runs(keys: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Split an (H, W, K) grid of color keys into row-major runs.
    Returns the flat start index and length of every run; runs never cross rows.
    """
    h, w = keys.shape[:2]
    is_new_run = torch.ones((h, w), dtype=torch.bool, device=keys.device)
    if w > 1:
        is_new_run[:, 1:] = (keys[:, 1:] != keys[:, :-1]).any(dim=-1)
    run_starts = torch.nonzero(is_new_run.reshape(-1), as_tuple=True)[0]
    run_lengths = torch.diff(run_starts, append=torch.tensor([h * w], device=keys.device))
    return run_starts, run_lengths


def rgb_escape(r: int, g: int, b: int, background: bool = False) -> Tuple[bytes, ...]:
    prefix = BG_RGB_PREFIX if background else FG_RGB_PREFIX
    return (prefix, DIGITS[r], SEP, DIGITS[g], SEP, DIGITS[b], SGR_END)


def ansi_generate(escapes: Sequence[Tuple[bytes, ...]], run_lengths: Sequence[int], width: int,
                  glyph: bytes, writer) -> None:
    x = 0
    for escape, length in zip(escapes, run_lengths):
        writer.write(*escape)
        writer.write_repeated(glyph, length)
        writer.write(RESET)
        x += length
        if x == width:
            writer.write(NEWLINE)
            x = 0
    writer.write(RESET)
    writer.flush()


def ansi_generate_indexed(indices: torch.Tensor, glyph: bytes, writer, background: bool = False) -> None:
    """Emit an (H, W) grid of palette indices."""
    width = indices.shape[1]
    run_starts, run_lengths = find_runs(indices.unsqueeze(-1))
    table = BG_ESCAPES if background else FG_ESCAPES
    escapes = [(table[i],) for i in indices.reshape(-1)[run_starts].tolist()]
    ansi_generate(escapes, run_lengths.tolist(), width, glyph, writer)


def ansi_generate_rgb(colors: torch.Tensor, glyph: bytes, writer, background: bool = False) -> None:
    """Emit an (H, W, 3) grid of true colors."""
    width = colors.shape[1]
    run_starts, run_lengths = find_runs(colors)
    run_colors = colors.reshape(-1, 3)[run_starts].tolist()
    escapes = [rgb_escape(r, g, b, background) for r, g, b in run_colors]
    ansi_generate(escapes, run_lengths.tolist(), width, glyph, writer)
