"""Information about the host environment."""

from __future__ import annotations

import os
import platform
import sys

_ARCHES = {
    "amd64": "amd64",
    "x86_64": "amd64",
    "arm": "arm",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm64": "arm64",
    "aarch64": "arm64",
    "ppc64le": "ppc64le",
}


def home_dir() -> str:
    """Return the home directory for the current user.

    On Windows the first of HOME, HOMEDRIVE+HOMEPATH, USERPROFILE holding a
    .kube/config file wins; failing that the first of HOME, USERPROFILE,
    HOMEDRIVE+HOMEPATH that is a writeable directory, then the first that
    exists, then the first that is set.
    """
    if sys.platform != "win32":
        return os.environ.get("HOME", "")

    home = os.environ.get("HOME", "")
    drive, path = os.environ.get("HOMEDRIVE", ""), os.environ.get("HOMEPATH", "")
    drive_path = drive + path if drive and path else ""
    user_profile = os.environ.get("USERPROFILE", "")

    for candidate in (home, drive_path, user_profile):
        if candidate and os.path.exists(os.path.join(candidate, ".kube", "config")):
            return candidate

    first_set = ""
    first_existing = ""
    for candidate in (home, user_profile, drive_path):
        if not candidate:
            continue
        first_set = first_set or candidate
        try:
            info = os.stat(candidate)
        except OSError:
            continue
        first_existing = first_existing or candidate
        if os.path.isdir(candidate) and info.st_mode & 0o200:
            return candidate

    return first_existing or first_set


def get_arch() -> str:
    """Return the current architecture name, raising if it is unsupported."""
    machine = platform.machine()
    try:
        return _ARCHES[machine.lower()]
    except KeyError:
        raise RuntimeError(f"unsupported architecture {machine}") from None