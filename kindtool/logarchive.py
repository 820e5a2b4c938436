"""Unpacking of log archives streamed out of cluster nodes."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from typing import BinaryIO

_log = logging.getLogger(__name__)

_CHUNK = 64 * 1024


class _Prefixed:
    """A readable stream with some already-read bytes put back in front."""

    def __init__(self, head: bytes, rest: BinaryIO) -> None:
        self._head = head
        self._rest = rest

    def read(self, size: int = -1) -> bytes:
        if not self._head:
            return self._rest.read(size)
        if size is None or size < 0:
            data, self._head = self._head + self._rest.read(), b""
            return data
        data, self._head = self._head[:size], self._head[size:]
        if len(data) < size:
            data += self._rest.read(size - len(data))
        return data


def untar(stream: BinaryIO, dir: str) -> None:
    """Read a tar archive from stream and write its contents into dir.

    Only regular files and directories are written; other entries are
    logged and skipped. An empty stream is an empty archive.
    """
    head = stream.read(1)
    if not head:
        return
    try:
        archive = tarfile.open(fileobj=_Prefixed(head, stream), mode="r|")
    except tarfile.TarError as err:
        raise ValueError(f"tar reading error: {err}") from err

    with archive:
        while True:
            try:
                member = archive.next()
            except tarfile.TarError as err:
                raise ValueError(f"tar reading error: {err}") from err
            if member is None:
                return
            target = os.path.join(dir, os.path.normpath(member.name))
            if member.isreg():
                _write_file(archive, member, target)
            elif member.isdir():
                if not os.path.exists(target):
                    os.makedirs(target, mode=0o755, exist_ok=True)
            else:
                _log.warning(
                    "tar file entry %s contained unsupported file type %r",
                    member.name,
                    member.type.decode("ascii", "replace"),
                )


def _write_file(archive: tarfile.TarFile, member: tarfile.TarInfo, target: str) -> None:
    source = archive.extractfile(member)
    if source is None:
        raise ValueError(f"tar reading error: cannot read {member.name}")
    fd = os.open(target, os.O_CREAT | os.O_RDWR, member.mode & 0o7777)
    written = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = source.read(_CHUNK)
                if not chunk:
                    break
                out.write(chunk)
                written += len(chunk)
    except (OSError, tarfile.TarError) as err:
        raise OSError(f"error writing to {target}: {err}") from err
    if written != member.size:
        raise ValueError(
            f"only wrote {written} bytes to {target}; expected {member.size}"
        )


__all__ = ["untar", "shutil"][:1]