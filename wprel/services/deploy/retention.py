"""Retention: keep only the newest releases and archives.

Release directories and archives are pruned independently, each ordered by
modification time. The release the current symlink points at is never
removed, even when it falls outside the kept window.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

from wprel.core.result import Err, Ok, Result
from wprel.output.console import ConsoleProtocol, Style
from wprel.services.deploy.errors import DeployError
from wprel.services.deploy.model import ARCHIVE_SUFFIX, RELEASE_PREFIX, PruneReport, ReleaseEntry

__all__ = [
    "list_archives",
    "list_releases",
    "plan_prune",
    "prune_releases",
]


def _newest_first(paths: Sequence[Path]) -> list[ReleaseEntry]:
    entries: list[ReleaseEntry] = []
    for p in paths:
        try:
            mtime = p.stat().st_mtime
        except FileNotFoundError:
            continue
        entries.append(ReleaseEntry(path=p, mtime=mtime))
    entries.sort(key=lambda e: (e.mtime, e.name), reverse=True)
    return entries


def list_releases(releases_dir: Path) -> list[ReleaseEntry]:
    """Release directories, newest first."""
    if not releases_dir.is_dir():
        return []
    return _newest_first(
        [p for p in releases_dir.glob(f"{RELEASE_PREFIX}*") if p.is_dir()]
    )


def list_archives(releases_dir: Path) -> list[ReleaseEntry]:
    """Release archives, newest first."""
    if not releases_dir.is_dir():
        return []
    return _newest_first(
        [p for p in releases_dir.glob(f"{RELEASE_PREFIX}*{ARCHIVE_SUFFIX}") if p.is_file()]
    )


def plan_prune(
    entries: Sequence[ReleaseEntry],
    keep: int,
    protect: Path | None = None,
) -> list[ReleaseEntry]:
    """Entries beyond the newest `keep`, excluding the protected path."""
    protected = protect.resolve() if protect is not None else None
    return [e for e in entries[keep:] if protected is None or e.path.resolve() != protected]


def prune_releases(
    releases_dir: Path,
    *,
    keep: int,
    protect: Path | None = None,
    console: ConsoleProtocol | None = None,
) -> Result[PruneReport, DeployError]:
    """Delete old release directories and archives beyond `keep` of each."""
    if keep < 1:
        return Err(DeployError(kind="prune_failed", message=f"keep must be >= 1, got {keep}"))

    removed_dirs: list[Path] = []
    removed_archives: list[Path] = []
    try:
        for entry in plan_prune(list_releases(releases_dir), keep, protect):
            if console is not None:
                console.print(f"Removing old release dir: {entry.path}", Style.DIM)
            shutil.rmtree(entry.path)
            removed_dirs.append(entry.path)

        for entry in plan_prune(list_archives(releases_dir), keep):
            if console is not None:
                console.print(f"Removing old tarball: {entry.path}", Style.DIM)
            entry.path.unlink(missing_ok=True)
            removed_archives.append(entry.path)
    except OSError as e:
        return Err(
            DeployError(
                kind="prune_failed",
                message=f"cleanup failed in {releases_dir}: {e}",
                hint=f"removed {len(removed_dirs)} dirs and {len(removed_archives)} archives",
            )
        )

    return Ok(
        PruneReport(removed_dirs=tuple(removed_dirs), removed_archives=tuple(removed_archives))
    )
