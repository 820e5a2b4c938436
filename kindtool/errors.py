"""An exception that carries several errors at once."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class Errors(Exception):
    """A collection of errors raised together, e.g. by config validation."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: list[BaseException] = list(errors)
        super().__init__(self.errors)

    def __str__(self) -> str:
        return "".join(f"{err}\n" for err in self.errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


def flatten(errors: Iterable[BaseException]) -> Errors:
    """Recursively flatten nested Errors into a single top level Errors."""
    flat: list[BaseException] = []
    for err in errors:
        if isinstance(err, Errors):
            flat.extend(flatten(err.errors).errors)
        else:
            flat.append(err)
    return Errors(flat)