"""Exclusive advisory locks around generated files.

Several build processes may regenerate the same headers at once. Every file
the pipeline touches is opened through :func:`locked_file`, which holds an
exclusive ``flock`` for the whole read-modify-write cycle, so readers never
see half-written output and writers never interleave.
"""

from __future__ import annotations

import fcntl
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, IO, Iterator

from ..logging import get_logger

_LOGGER = get_logger("stores.locked_file")


@contextmanager
def locked_file(path: Path, mode: str = "r+") -> Iterator[IO[str]]:
    """Open ``path`` and hold an exclusive lock on it until the block exits.

    Supported modes are ``"r"``, ``"r+"`` and ``"w"``. Write mode creates the
    file if needed and truncates it only once the lock is held. Pending
    writes are flushed to disk before the lock is released.
    """
    if mode not in {"r", "r+", "w"}:
        raise ValueError(f"Unsupported lock mode: {mode}")
    # "w" would truncate before the lock is taken; open without truncation instead
    open_mode = "a+" if mode == "w" else mode
    if mode == "w":
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open(open_mode, encoding="utf-8", newline="") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        _LOGGER.debug("Locked %s", path)
        try:
            if mode == "w":
                handle.seek(0)
                handle.truncate()
            yield handle
            if mode != "r":
                handle.flush()
                os.fsync(handle.fileno())
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
            _LOGGER.debug("Unlocked %s", path)


def write_locked(path: Path, content: str) -> None:
    """Replace the contents of ``path`` while holding its lock."""
    with locked_file(path, "w") as handle:
        handle.write(content)


def read_locked(path: Path) -> str:
    with locked_file(path, "r") as handle:
        return handle.read()


def rewrite_locked(path: Path, transform: Callable[[str], str]) -> str:
    """Read, transform and write back ``path`` under a single lock."""
    with locked_file(path, "r+") as handle:
        original = handle.read()
        updated = transform(original)
        handle.seek(0)
        handle.write(updated)
        handle.truncate()
    return updated


__all__ = ["locked_file", "read_locked", "rewrite_locked", "write_locked"]
