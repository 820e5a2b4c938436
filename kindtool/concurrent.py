"""Run callables concurrently and gather their failures."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, as_completed, wait
from typing import Any

from kindtool.errors import flatten


def until_error(funcs: Iterable[Callable[[], Any]]) -> None:
    """Run every callable in its own thread; raise the first exception seen.

    Returns as soon as a callable fails, without waiting for the rest.
    """
    funcs = list(funcs)
    if not funcs:
        return
    executor = ThreadPoolExecutor(max_workers=len(funcs))
    try:
        futures = [executor.submit(f) for f in funcs]
        for future in as_completed(futures):
            exc = future.exception()
            if exc is not None:
                raise exc
    finally:
        executor.shutdown(wait=False)


def coalesce(*args: Callable[[], Any]) -> None:
    """Run all callables concurrently and wait for every one of them.

    A single failure is re-raised as is; several are raised as one Errors.
    """
    if not args:
        return
    with ThreadPoolExecutor(max_workers=len(args)) as executor:
        futures = [executor.submit(f) for f in args]
        wait(futures)
    errs = [exc for exc in (f.exception() for f in futures) if exc is not None]
    if len(errs) > 1:
        raise flatten(errs)
    if errs:
        raise errs[0]


__all__ = ["until_error", "coalesce", "FIRST_EXCEPTION"][:2]