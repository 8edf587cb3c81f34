"""Desktop front end: window, input, timing, audio streaming and the main loop."""

from __future__ import annotations

import argparse
import threading
import time
from array import array
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pygame

from .audio import Mixer
from .controls import ButtonId, Controls, DisplaySize
from .game import ASSET_FILES, Game, GameAssets
from .mathutil import V2i, XorShiftRandom
from .render import Canvas, load_gif
from .wav import WavFormatError, load_wav

TARGET_DT = 0.01666
MAX_DT = 0.1
SAMPLES_PER_SECOND = 44100
CHANNEL_COUNT = 2
BYTES_PER_SAMPLE = CHANNEL_COUNT * 2
JOB_QUEUE_CAPACITY = 32
WINDOW_TITLE = "CasseBrique"

_U32 = 0xFFFFFFFF

_KEYMAP = {
    pygame.K_LEFT: ButtonId.LEFT,
    pygame.K_RIGHT: ButtonId.RIGHT,
    pygame.K_UP: ButtonId.UP,
    pygame.K_DOWN: ButtonId.DOWN,
    pygame.K_ESCAPE: ButtonId.ESC,
    pygame.K_F5: ButtonId.F5,
    pygame.K_p: ButtonId.P,
}

JobCallback = Callable[["JobQueue", Any], None]


class JobQueue:
    """Worker threads running queued callbacks in the order they were added.

    The queue is a ring of ``capacity`` slots, one of which always stays
    empty, so at most ``capacity - 1`` jobs can wait at once.
    """

    def __init__(self, thread_count: int = 1, capacity: int = JOB_QUEUE_CAPACITY) -> None:
        if thread_count < 1:
            raise ValueError("thread_count must be at least 1")
        if capacity < 2:
            raise ValueError("capacity must be at least 2")
        self._capacity = capacity
        self._entries: deque[tuple[JobCallback, Any]] = deque()
        self._lock = threading.Lock()
        self._semaphore = threading.Semaphore(0)
        self._closed = threading.Event()
        self._threads = [
            threading.Thread(target=self._work, name=f"job-worker-{n}", daemon=True)
            for n in range(thread_count)
        ]
        for thread in self._threads:
            thread.start()

    @property
    def closed(self) -> bool:
        """True once close() has been called; long jobs should then finish."""
        return self._closed.is_set()

    def _take(self) -> Optional[tuple[JobCallback, Any]]:
        with self._lock:
            return self._entries.popleft() if self._entries else None

    def _work(self) -> None:
        while True:
            job = self._take()
            if job is not None:
                callback, data = job
                callback(self, data)
                continue
            if self._closed.is_set():
                return
            self._semaphore.acquire()

    def add(self, callback: JobCallback, data: Any = None) -> None:
        """Queue callback(queue, data) for a worker thread."""
        if self._closed.is_set():
            raise RuntimeError("job queue is closed")
        with self._lock:
            if len(self._entries) >= self._capacity - 1:
                raise RuntimeError("job queue is full")
            self._entries.append((callback, data))
        self._semaphore.release()

    def close(self) -> None:
        """Stop accepting jobs, let the workers drain the queue and wait for them."""
        if self._closed.is_set():
            return
        self._closed.set()
        for _ in self._threads:
            self._semaphore.release()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def __enter__(self) -> "JobQueue":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def random_seed_from_time(when: datetime) -> int:
    """A 32-bit seed counting (roughly) the seconds since the start of 1971."""
    seed = (
        31557600 * (when.year - 1 - 1970)
        + 2629800 * (when.month - 1)
        + 86400 * (when.day - 1)
        + 3600 * when.hour
        + 60 * when.minute
        + when.second
    )
    return seed & _U32


def next_display_size(index: int, max_width: int, max_height: int) -> tuple[int, int, int]:
    """Cycle to the next window size, capped by the screen.

    Returns the new size index, width and height. A size that reaches the
    screen's limit counts as the largest, so the next step wraps around.
    """
    sizes = list(DisplaySize)
    index = (index + 1) % len(sizes)
    full_width, full_height = sizes[index].resolution
    width = min(max_width, full_width)
    height = min(max_height, full_height)
    if width == max_width or height == max_height:
        index = len(sizes) - 1
    return index, width, height


def audio_bytes_to_write(
    running_sample_index: int,
    play_cursor: int,
    write_cursor: int,
    buffer_size: int,
    bytes_per_sample: int,
    samples_per_second: int,
    target_dt: float,
) -> tuple[int, int]:
    """Where to lock a looping sound buffer and how many bytes to fill.

    Keeps about one frame of audio ahead of the write cursor, plus one frame
    of safety margin. Returns (byte_to_lock, bytes_to_write).
    """
    if buffer_size <= 0 or bytes_per_sample <= 0:
        raise ValueError("buffer_size and bytes_per_sample must be positive")
    bytes_per_tick = int(samples_per_second * bytes_per_sample * target_dt)
    bytes_per_tick -= bytes_per_tick % bytes_per_sample
    safety_bytes = bytes_per_tick

    byte_to_lock = ((running_sample_index * bytes_per_sample) & _U32) % buffer_size
    expected_boundary_byte = (play_cursor + bytes_per_tick) & _U32

    safe_write_cursor = write_cursor
    if safe_write_cursor < play_cursor:
        safe_write_cursor += buffer_size
    else:
        safe_write_cursor += safety_bytes

    if safe_write_cursor < expected_boundary_byte:
        target_cursor = expected_boundary_byte + bytes_per_tick
    else:
        target_cursor = write_cursor + bytes_per_tick + safety_bytes
    target_cursor = (target_cursor & _U32) % buffer_size

    if byte_to_lock > target_cursor:
        bytes_to_write = buffer_size - byte_to_lock + target_cursor
    else:
        bytes_to_write = target_cursor - byte_to_lock
    return byte_to_lock, bytes_to_write


def _pcm_bytes(samples: Any) -> bytes:
    if isinstance(samples, (bytes, bytearray, memoryview)):
        return bytes(samples)
    return array("h", samples).tobytes()


def _stream_audio(queue: JobQueue, data: tuple[Mixer, "pygame.mixer.Channel"]) -> None:
    """Keep one mixed chunk queued behind the one that is playing."""
    mixer, channel = data
    frames = int(SAMPLES_PER_SECOND * TARGET_DT)
    while not queue.closed:
        if channel.get_queue() is None:
            sound = pygame.mixer.Sound(buffer=_pcm_bytes(mixer.mix(frames)))
            if channel.get_busy():
                channel.queue(sound)
            else:
                channel.play(sound)
        time.sleep(TARGET_DT / 4)


def _load_assets(data_dir: Path) -> GameAssets:
    loaded = {}
    for name, relative in ASSET_FILES.items():
        path = data_dir / relative
        try:
            loaded[name] = load_wav(path) if path.suffix == ".wav" else load_gif(path)
        except (OSError, WavFormatError):
            loaded[name] = None
    return GameAssets(**loaded)


def _present(screen: "pygame.Surface", canvas: Canvas) -> None:
    if canvas.width == 0 or canvas.height == 0:
        return
    surface = pygame.Surface(
        (canvas.width, canvas.height), 0, 32, (0xFF0000, 0x00FF00, 0x0000FF, 0)
    )
    data = canvas.pixels.tobytes()
    row_bytes = canvas.width * 4
    pitch = surface.get_pitch()
    buffer = surface.get_buffer()
    if pitch == row_bytes:
        buffer.write(data, 0)
    else:
        for y in range(canvas.height):
            buffer.write(data[y * row_bytes:(y + 1) * row_bytes], y * pitch)
    del buffer
    # Canvas row 0 is the bottom of the picture.
    screen.blit(pygame.transform.flip(surface, False, True), (0, 0))
    pygame.display.flip()


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="cassebrique", description="Brick-breaker game.")
    parser.add_argument("--data-dir", type=Path, default=Path(".."),
                        help="directory holding the Sprites and Sounds folders")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--no-audio", action="store_true", help="run without sound")
    parser.add_argument("--development", action="store_true",
                        help="enable level skipping, slow motion and the debug overlay")
    return parser.parse_args(argv)


def _set_mouse_captured(captured: bool) -> None:
    pygame.event.set_grab(captured)
    pygame.mouse.set_visible(not captured)
    pygame.mouse.get_rel()


def _run(args: argparse.Namespace) -> None:
    seed = args.seed if args.seed is not None else random_seed_from_time(
        datetime.now(timezone.utc))

    info = pygame.display.Info()
    max_width, max_height = info.current_w, info.current_h
    display_index = int(DisplaySize.HD)
    width, height = DisplaySize.HD.resolution
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption(WINDOW_TITLE)
    canvas = Canvas(width, height)

    mixer: Optional[Mixer] = None
    channel = None
    if not args.no_audio:
        try:
            pygame.mixer.init(frequency=SAMPLES_PER_SECOND, size=-16, channels=CHANNEL_COUNT)
        except pygame.error:
            pass
        else:
            mixer = Mixer()
            channel = pygame.mixer.Channel(0)

    game = Game(canvas=canvas, rng=XorShiftRandom(seed), assets=_load_assets(args.data_dir),
                mixer=mixer, development=args.development)
    controls = Controls()

    with JobQueue(thread_count=1) as audio_queue:
        if mixer is not None and channel is not None:
            audio_queue.add(_stream_audio, (mixer, channel))

        _set_mouse_captured(True)
        paused = False
        running = True
        last_dt = TARGET_DT
        last_counter = time.perf_counter()

        while running:
            controls.begin_frame()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    button = _KEYMAP.get(event.key)
                    if button is not None:
                        controls.process(button, event.type == pygame.KEYDOWN)
                elif event.type == pygame.WINDOWFOCUSLOST:
                    paused = True
                    _set_mouse_captured(False)

            if controls.pressed(ButtonId.ESC):
                running = False
            if controls.pressed(ButtonId.P):
                paused = not paused
                _set_mouse_captured(not paused)

            dx, dy = pygame.mouse.get_rel()
            controls.mouse_dp = V2i(dx, dy)

            if not paused:
                game.update(max(last_dt, 1e-6), controls)

            _present(screen, canvas)

            if controls.pressed(ButtonId.F5):
                display_index, width, height = next_display_size(
                    display_index, max_width, max_height)
                screen = pygame.display.set_mode((width, height))
                canvas.resize(width, height)

            elapsed = min(MAX_DT, time.perf_counter() - last_counter)
            sleep_ms = int((TARGET_DT - elapsed) * 1000.0)
            if sleep_ms > 1:
                time.sleep((sleep_ms - 1) / 1000.0)

            now = time.perf_counter()
            last_dt = min(MAX_DT, now - last_counter)
            last_counter = now


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the game window and play until it is closed."""
    args = _parse_args(argv)
    pygame.init()
    try:
        _run(args)
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())