"""Progress status lines for the command line, with a spinner on terminals."""

from __future__ import annotations

import logging
from typing import Any, TextIO

from kindtool.spinner import Spinner

LOG_LEVELS: tuple[str, ...] = (
    "panic",
    "fatal",
    "error",
    "warning",
    "info",
    "debug",
    "trace",
)


def is_terminal(writer: Any) -> bool:
    """Return True if writer is attached to a terminal."""
    isatty = getattr(writer, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def levels_string() -> str:
    """Return all log level names as one string, for help text."""
    return "[" + ", ".join(LOG_LEVELS) + "]"


class Status:
    """Tracks the current phase of a long operation.

    On a terminal a spinner runs while a phase is in progress; otherwise a
    plain line is printed when a phase starts.
    """

    def __init__(self, writer: TextIO) -> None:
        self.writer = writer
        self.spinner = Spinner(writer)
        self.status = ""

    def start(self, status: str) -> None:
        """End any current phase successfully and begin a new one."""
        self.end(True)
        self.status = status
        if is_terminal(self.writer):
            self.spinner.set_suffix(f" {status} ")
            self.spinner.start()
        else:
            self.writer.write(f" • {status}  ...\n")

    def end(self, success: bool) -> None:
        """Finish the current phase, marking it as a success or failure."""
        if not self.status:
            return
        if is_terminal(self.writer):
            self.spinner.stop()
            self.writer.write("\r")
        mark = "✓" if success else "✗"
        self.writer.write(f" {mark} {self.status}\n")
        self.status = ""

    def wrap_writer(self, writer: TextIO) -> StatusFriendlyWriter:
        """Return writer wrapped so its output does not collide with the spinner."""
        return StatusFriendlyWriter(self, writer)

    def maybe_wrap_writer(self, writer: TextIO) -> Any:
        """Wrap writer only if both it and the status output are terminals."""
        if is_terminal(self.writer) and is_terminal(writer):
            return self.wrap_writer(writer)
        return writer

    def wrap_logger(self, logger: logging.Logger) -> None:
        """Wrap the streams of the logger's stream handlers."""
        for handler in _stream_handlers(logger):
            handler.setStream(self.wrap_writer(handler.stream))

    def maybe_wrap_logger(self, logger: logging.Logger) -> None:
        """Like wrap_logger, but only where maybe_wrap_writer would wrap."""
        for handler in _stream_handlers(logger):
            wrapped = self.maybe_wrap_writer(handler.stream)
            if wrapped is not handler.stream:
                handler.setStream(wrapped)


def _stream_handlers(logger: logging.Logger) -> list[logging.StreamHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]


class StatusFriendlyWriter:
    """A writer that pauses the status spinner around each write."""

    def __init__(self, status: Status, inner: TextIO) -> None:
        self.status = status
        self.inner = inner

    def write(self, data: str) -> int:
        spinner = self.status.spinner
        was_running = spinner.running
        spinner.stop()
        self.inner.write("\r")
        written = self.inner.write(data)
        if was_running:
            spinner.start()
        return written

    def flush(self) -> None:
        flush = getattr(self.inner, "flush", None)
        if flush is not None:
            flush()

    def isatty(self) -> bool:
        return is_terminal(self.inner)