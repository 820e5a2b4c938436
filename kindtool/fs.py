"""Host filesystem helpers that play well with container bind mounts."""

from __future__ import annotations

import os
import shutil
import stat
import sys
import tempfile


def temp_dir(dir: str | None = None, prefix: str = "") -> str:
    """Create a temporary directory, returning a mountable path on macOS."""
    name = tempfile.mkdtemp(prefix=prefix, dir=dir or None)
    # on macOS $TMPDIR is typically under /var/..., which is not mountable
    if sys.platform == "darwin" and name.startswith("/var/"):
        name = os.path.join("/private", name.lstrip("/"))
    return name


def copy(src: str, dst: str) -> None:
    """Recursively copy src to dst, dereferencing symlinks and keeping modes."""
    info = os.lstat(src)
    parent = os.path.dirname(dst)
    if parent:
        os.makedirs(parent, exist_ok=True)
    _copy(src, dst, info)


def copy_file(src: str, dst: str) -> None:
    """Copy a single file from src to dst, keeping its mode."""
    _copy_file(src, dst, os.stat(src))


def _copy(src: str, dst: str, info: os.stat_result) -> None:
    if stat.S_ISLNK(info.st_mode):
        _copy_symlink(src, dst)
    elif stat.S_ISDIR(info.st_mode):
        _copy_dir(src, dst, info)
    else:
        _copy_file(src, dst, info)


def _copy_file(src: str, dst: str, info: os.stat_result) -> None:
    with open(src, "rb") as fin:
        fd = os.open(dst, os.O_RDWR | os.O_CREAT | os.O_TRUNC, stat.S_IMODE(info.st_mode))
        with os.fdopen(fd, "wb") as fout:
            shutil.copyfileobj(fin, fout)
            fout.flush()
            os.fsync(fout.fileno())


def _copy_symlink(src: str, dst: str) -> None:
    real_src = os.path.realpath(src, strict=True) if sys.version_info >= (3, 10) else os.path.realpath(src)
    _copy(real_src, dst, os.lstat(real_src))


def _copy_dir(src: str, dst: str, info: os.stat_result) -> None:
    os.makedirs(dst, mode=stat.S_IMODE(info.st_mode), exist_ok=True)
    for name in sorted(os.listdir(src)):
        entry_src = os.path.join(src, name)
        _copy(entry_src, os.path.join(dst, name), os.lstat(entry_src))