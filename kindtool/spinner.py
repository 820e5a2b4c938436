"""A small terminal loading spinner for users waiting on long operations."""

from __future__ import annotations

import itertools
import threading
from typing import TextIO

SPINNER_FRAMES: tuple[str, ...] = (
    "⠈⠁",
    "⠈⠑",
    "⠈⠱",
    "⠈⡱",
    "⢀⡱",
    "⢄⡱",
    "⢄⡱",
    "⢆⡱",
    "⢎⡱",
    "⢎⡰",
    "⢎⡠",
    "⢎⡀",
    "⢎⠁",
    "⠎⠁",
    "⠊⠁",
)


class Spinner:
    """Redraws a spinner frame on the current line at a fixed interval.

    It assumes the line length does not change between frames. It is best
    used indirectly through :class:`kindtool.status.Status`.
    """

    interval: float = 0.1

    def __init__(self, writer: TextIO) -> None:
        self.frames = SPINNER_FRAMES
        self.writer = writer
        self._lock = threading.Lock()
        self._prefix = ""
        self._suffix = ""
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """Whether the spinner is currently drawing."""
        return self._thread is not None and self._thread.is_alive()

    def set_prefix(self, prefix: str) -> None:
        """Set the text printed before the spinner."""
        with self._lock:
            self._prefix = prefix

    def set_suffix(self, suffix: str) -> None:
        """Set the text printed after the spinner."""
        with self._lock:
            self._suffix = suffix

    def start(self) -> None:
        """Start drawing; does nothing if already running."""
        if self.running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop drawing and wait until the last frame has been written."""
        thread = self._thread
        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def _run(self, stop_event: threading.Event) -> None:
        for frame in itertools.cycle(self.frames):
            if stop_event.wait(self.interval):
                return
            with self._lock:
                self.writer.write(f"\r{self._prefix}{frame}{self._suffix}")
                flush = getattr(self.writer, "flush", None)
                if flush is not None:
                    flush()