import io
import logging
import threading
import time

from kindtool.spinner import SPINNER_FRAMES
from kindtool.status import (
    LOG_LEVELS,
    Status,
    StatusFriendlyWriter,
    is_terminal,
    levels_string,
)


class _FakeTTY(io.StringIO):
    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()

    def isatty(self):
        return True

    def write(self, s):
        with self._lock:
            return super().write(s)

    def getvalue(self):
        with self._lock:
            return super().getvalue()


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_is_terminal():
    assert is_terminal(io.StringIO()) is False
    assert is_terminal(_FakeTTY()) is True
    assert is_terminal(object()) is False


def test_levels_string_lists_all_levels():
    text = levels_string()
    assert text.startswith("[") and text.endswith("]")
    assert text[1:-1].split(", ") == list(LOG_LEVELS)


def test_start_on_plain_writer_prints_line():
    buf = io.StringIO()
    status = Status(buf)
    status.start("Preparing nodes")
    assert buf.getvalue() == " • Preparing nodes  ...\n"
    assert status.status == "Preparing nodes"


def test_end_success_and_failure_marks():
    buf = io.StringIO()
    status = Status(buf)
    status.start("a")
    status.end(True)
    status.start("b")
    status.end(False)
    assert buf.getvalue() == " • a  ...\n ✓ a\n • b  ...\n ✗ b\n"
    assert status.status == ""


def test_end_without_status_writes_nothing():
    buf = io.StringIO()
    status = Status(buf)
    status.end(False)
    assert buf.getvalue() == ""


def test_start_ends_previous_phase_successfully():
    buf = io.StringIO()
    status = Status(buf)
    status.start("first")
    status.start("second")
    assert buf.getvalue().splitlines() == [
        " • first  ...",
        " ✓ first",
        " • second  ...",
    ]


def test_terminal_status_spins_then_marks():
    tty = _FakeTTY()
    status = Status(tty)
    status.spinner.interval = 0.005
    status.start("work")
    assert status.spinner.running is True
    assert _wait_for(lambda: "\r" in tty.getvalue())
    status.end(True)
    assert status.spinner.running is False
    out = tty.getvalue()
    assert out.endswith("\r ✓ work\n")
    first = out.split("\r")[1]
    assert first == f"{SPINNER_FRAMES[0]} work "


def test_wrap_writer_prefixes_carriage_return():
    status = Status(io.StringIO())
    inner = io.StringIO()
    writer = status.wrap_writer(inner)
    assert isinstance(writer, StatusFriendlyWriter)
    assert writer.write("hello\n") == len("hello\n")
    assert inner.getvalue() == "\rhello\n"
    assert status.spinner.running is False


def test_wrapped_writer_keeps_spinner_running():
    tty = _FakeTTY()
    status = Status(tty)
    status.spinner.interval = 0.005
    status.start("busy")
    inner = io.StringIO()
    status.wrap_writer(inner).write("log line\n")
    assert status.spinner.running is True
    status.end(True)
    assert inner.getvalue() == "\rlog line\n"


def test_maybe_wrap_writer_only_on_terminals():
    plain = Status(io.StringIO())
    target = _FakeTTY()
    assert plain.maybe_wrap_writer(target) is target

    term = Status(_FakeTTY())
    other = io.StringIO()
    assert term.maybe_wrap_writer(other) is other
    wrapped = term.maybe_wrap_writer(target)
    assert isinstance(wrapped, StatusFriendlyWriter)
    assert wrapped.inner is target


def test_wrap_logger_routes_through_wrapper():
    status = Status(io.StringIO())
    sink = io.StringIO()
    logger = logging.getLogger("kindtool.test.wrap")
    logger.propagate = False
    handler = logging.StreamHandler(sink)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    try:
        status.wrap_logger(logger)
        logger.warning("careful")
        assert isinstance(handler.stream, StatusFriendlyWriter)
        assert sink.getvalue() == "\rcareful\n"
    finally:
        logger.removeHandler(handler)


def test_maybe_wrap_logger_leaves_plain_streams():
    status = Status(io.StringIO())
    sink = io.StringIO()
    logger = logging.getLogger("kindtool.test.maybe")
    logger.propagate = False
    handler = logging.StreamHandler(sink)
    logger.addHandler(handler)
    try:
        status.maybe_wrap_logger(logger)
        assert handler.stream is sink
    finally:
        logger.removeHandler(handler)