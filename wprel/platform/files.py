"""Filesystem helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from wprel.core.result import Err, Ok, Result

__all__ = ["FileLock", "LockError", "acquire_lock", "atomic_symlink"]


def atomic_symlink(link: Path, target: Path | str) -> Path | None:
    """Point link at target using temp link + replace.

    Readers following `link` see either the old or the new target, never a
    missing entry. Returns the previous target, or None if link was not a
    symlink before.

    Raises:
        OSError: If the link cannot be created or replaced.
    """
    previous: Path | None = None
    if link.is_symlink():
        previous = Path(os.readlink(link))

    link.parent.mkdir(parents=True, exist_ok=True)
    tmp_link = link.with_name(f".{link.name}.tmp-{os.getpid()}")
    if tmp_link.is_symlink() or tmp_link.exists():
        tmp_link.unlink()

    try:
        tmp_link.symlink_to(target)
        os.replace(tmp_link, link)
    finally:
        if tmp_link.is_symlink():
            tmp_link.unlink(missing_ok=True)

    return previous


@dataclass(frozen=True, slots=True)
class LockError:
    path: Path
    message: str
    holder_pid: int | None = None


class FileLock:
    """An exclusive lock file held until release() or the end of a with block."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self.path.unlink(missing_ok=True)

    def __enter__(self) -> FileLock:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


def _read_pid(path: Path) -> int | None:
    try:
        return int(path.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return None


def acquire_lock(path: Path) -> Result[FileLock, LockError]:
    """Create path exclusively and record our pid in it.

    Fails without waiting if the lock file already exists. A lock left behind
    by a killed process has to be removed by hand.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    except FileExistsError:
        pid = _read_pid(path)
        held_by = f" by pid {pid}" if pid is not None else ""
        return Err(LockError(path=path, message=f"lock is held{held_by}", holder_pid=pid))
    except OSError as e:
        return Err(LockError(path=path, message=f"cannot create lock file: {e}"))

    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(f"{os.getpid()}\n")

    return Ok(FileLock(path))
