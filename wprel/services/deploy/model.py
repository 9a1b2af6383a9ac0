from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path

RELEASE_PREFIX = "release-"
ARCHIVE_SUFFIX = ".tar.gz"
SHORT_ID_LENGTH = 8
FALLBACK_SHORT_ID = "ts"

# release-YYYY-MM-DD-<id>, <id> being the mtime prefix or the fallback token
_RELEASE_NAME_RE = re.compile(r"^release-(\d{4}-\d{2}-\d{2})-(.+)$")


@dataclass(frozen=True, slots=True)
class ShortId:
    value: str
    fallback: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseName:
    day: date
    short_id: str

    def __str__(self) -> str:
        return f"{RELEASE_PREFIX}{self.day.isoformat()}-{self.short_id}"

    @property
    def archive_name(self) -> str:
        return f"{self}{ARCHIVE_SUFFIX}"

    @classmethod
    def parse(cls, name: str) -> ReleaseName | None:
        """Parse a directory name produced by __str__, or return None."""
        m = _RELEASE_NAME_RE.match(name)
        if m is None:
            return None
        try:
            day = date.fromisoformat(m.group(1))
        except ValueError:
            return None
        return cls(day=day, short_id=m.group(2))


def release_name(day: date, short_id: ShortId | str) -> ReleaseName:
    value = short_id.value if isinstance(short_id, ShortId) else short_id
    return ReleaseName(day=day, short_id=value)


@dataclass(frozen=True, slots=True)
class ReleaseEntry:
    """A release directory or archive found on disk."""

    path: Path
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True, slots=True)
class PermissionStats:
    directories: int
    files: int


@dataclass(frozen=True, slots=True)
class PruneReport:
    removed_dirs: tuple[Path, ...]
    removed_archives: tuple[Path, ...]

    @property
    def total(self) -> int:
        return len(self.removed_dirs) + len(self.removed_archives)


@dataclass(frozen=True, slots=True)
class DeployReport:
    release: ReleaseName
    release_dir: Path
    archive_path: Path
    current_link: Path
    previous_target: Path | None
    files_extracted: int
    permissions: PermissionStats
    pruned: PruneReport
    fallback_id: bool = False
