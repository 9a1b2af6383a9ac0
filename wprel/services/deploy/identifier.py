"""Release identifier derivation.

The short id is the archive's modification time (epoch seconds, decimal)
truncated to 8 characters. The timestamp comes from the first strategy that
answers: GNU `stat`, BSD `stat`, then `os.stat`. It is a disambiguator, not a
content hash: two archives with close mtimes can collide, and the deploy
refuses to overwrite an existing release in that case.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from wprel.core.result import Err, Ok, Result
from wprel.platform.detection import Platform, detect_platform
from wprel.platform.process import run as run_process
from wprel.services.deploy.model import FALLBACK_SHORT_ID, SHORT_ID_LENGTH, ShortId

__all__ = [
    "CommandMtime",
    "MtimeStrategy",
    "OsStatMtime",
    "default_strategies",
    "derive_short_id",
    "probe_mtime",
]


class MtimeStrategy(Protocol):
    @property
    def name(self) -> str: ...

    def probe(self, path: Path) -> Result[int, str]: ...


@dataclass(frozen=True, slots=True)
class CommandMtime:
    """Read the mtime from an external command printing epoch seconds."""

    name: str
    argv: tuple[str, ...]
    timeout: float = 10.0

    def probe(self, path: Path) -> Result[int, str]:
        # The command runs in the archive directory, so relative paths would resolve twice.
        absolute = path.absolute()
        cmd = [*self.argv, str(absolute)]
        result = run_process(cmd, cwd=absolute.parent, timeout=self.timeout)
        if isinstance(result, Err):
            detail = result.error.stderr.strip() or str(result.error)
            return Err(f"{self.name}: {detail}")

        out = result.value.strip()
        try:
            return Ok(int(out))
        except ValueError:
            return Err(f"{self.name}: unexpected output {out!r}")


@dataclass(frozen=True, slots=True)
class OsStatMtime:
    name: str = "os.stat"

    def probe(self, path: Path) -> Result[int, str]:
        try:
            return Ok(int(os.stat(path).st_mtime))
        except OSError as e:
            return Err(f"{self.name}: {e}")


GNU_STAT = CommandMtime(name="stat -c %Y", argv=("stat", "-c", "%Y"))
BSD_STAT = CommandMtime(name="stat -f %m", argv=("stat", "-f", "%m"))


def default_strategies(platform: Platform | None = None) -> tuple[MtimeStrategy, ...]:
    """Strategies in probing order for the given (or current) platform."""
    platform = platform or detect_platform()
    if platform == Platform.WINDOWS:
        return (OsStatMtime(),)
    if platform.has_bsd_stat:
        return (BSD_STAT, GNU_STAT, OsStatMtime())
    return (GNU_STAT, BSD_STAT, OsStatMtime())


def probe_mtime(
    path: Path,
    strategies: Sequence[MtimeStrategy],
) -> Result[int, tuple[str, ...]]:
    """Return the first timestamp any strategy produces.

    On failure the error lists every strategy's reason, in order.
    """
    reasons: list[str] = []
    for strategy in strategies:
        result = strategy.probe(path)
        if isinstance(result, Ok):
            return result
        reasons.append(result.error)
    return Err(tuple(reasons))


def derive_short_id(
    path: Path,
    strategies: Sequence[MtimeStrategy] | None = None,
) -> ShortId:
    """Derive the short release id for an archive.

    Falls back to the constant token when no timestamp can be read, including
    when the file does not exist.
    """
    if not path.exists():
        return ShortId(value=FALLBACK_SHORT_ID, fallback=True)

    result = probe_mtime(path, default_strategies() if strategies is None else strategies)
    if isinstance(result, Err):
        return ShortId(value=FALLBACK_SHORT_ID, fallback=True)

    return ShortId(value=str(result.value)[:SHORT_ID_LENGTH])
