import argparse
import logging
import os
import signal
import sys
import threading
import time
from typing import List, Optional

from .ansi_generator import StreamSink
from .ansi_renderer import AnsiRenderer
from .config import DEFAULT_BUFFER_SIZE, ColorMode, Config
from .errors import AnscapesError
from .escapes import HIDE_CURSOR, RESET, RESET_CURSOR, SHOW_CURSOR
from .frame_processing import fit_dimensions
from .utils import load_image, read_video_frames, video_fps, write_all

logger = logging.getLogger(__name__)


def setup_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s", stream=sys.stderr)


def terminal_size() -> tuple:
    if sys.stdout.isatty():
        cols, rows = os.get_terminal_size()
        return cols - 1, rows - 1
    return 80, 24


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="anscapes", description="Render images and videos as ANSI terminal text")
    parser.add_argument('path', help='Path to an image, or a video with --video')
    parser.add_argument('-W', '--width', type=int, default=None, help='Target width in cells')
    parser.add_argument('-H', '--height', type=int, default=None, help='Target height in cells')
    parser.add_argument('-b', '--bias', type=int, default=0, help='Pooling radius, 0 picks the nearest pixel')
    parser.add_argument('--colors', choices=[m.value for m in ColorMode], default=ColorMode.INDEXED.value,
                        help='Color mode: 16 for the indexed palette, full for 24-bit RGB (default: 16)')
    parser.add_argument('--threshold', type=float, default=0.0,
                        help='Accept the first palette color closer than this distance (default: exact match)')
    parser.add_argument('--background', action='store_true', help='Paint cell backgrounds instead of block glyphs')
    parser.add_argument('-o', '--output', help='Write the rendered image to this file instead of stdout')
    parser.add_argument('-v', '--video', action='store_true', help='Treat path as a video and play it')
    parser.add_argument('-f', '--fps', type=float, default=None, help='Playback rate, defaults to the video rate')
    parser.add_argument('--buffer-size', type=int, default=DEFAULT_BUFFER_SIZE)
    parser.add_argument('--log-level', default='WARNING')
    return parser


def make_config(args: argparse.Namespace, src_width: int, src_height: int) -> Config:
    max_w, max_h = terminal_size()
    if args.width is None and args.height is None:
        width, height = fit_dimensions(src_width, src_height, max_w, max_h)
    else:
        width = args.width if args.width is not None else max_w
        height = args.height if args.height is not None else max_h
    return Config(width=width, height=height, bias=args.bias, color_mode=ColorMode(args.colors),
                  threshold=args.threshold, background=args.background)


def render_image(args: argparse.Namespace) -> None:
    image = load_image(args.path)
    cfg = make_config(args, image.shape[1], image.shape[0])
    text = AnsiRenderer(cfg).render_string(image)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.info("Wrote %dx%d render to %s", cfg.width, cfg.height, args.output)
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def play_video(args: argparse.Namespace, exit_event: threading.Event) -> None:
    fps = args.fps or video_fps(args.path, 30.0)
    interval = 1.0 / fps
    fd = sys.stdout.fileno()
    buffer = bytearray(args.buffer_size)
    sink = StreamSink(buffer, lambda buf, length: write_all(fd, memoryview(buf)[:length]))
    renderer = None
    frames = 0

    write_all(fd, HIDE_CURSOR.encode())
    try:
        last_time = time.monotonic()
        for rgb in read_video_frames(args.path, exit_event):
            if renderer is None:
                renderer = AnsiRenderer(make_config(args, rgb.shape[1], rgb.shape[0]))
            write_all(fd, RESET_CURSOR.encode())
            renderer.render_frame(rgb, sink)
            frames += 1

            sleep_time = interval - (time.monotonic() - last_time)
            if sleep_time > 0:
                time.sleep(sleep_time)
            last_time = time.monotonic()
    finally:
        write_all(fd, RESET.encode())
        write_all(fd, SHOW_CURSOR.encode())
        logger.info("Played %d frames", frames)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    exit_event = threading.Event()

    def signal_handler(signum, frame):
        exit_event.set()

    previous_handler = signal.signal(signal.SIGINT, signal_handler)
    try:
        if args.video:
            play_video(args, exit_event)
        else:
            render_image(args)
    except (AnscapesError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)
    return 0


if __name__ == '__main__':
    sys.exit(main())
