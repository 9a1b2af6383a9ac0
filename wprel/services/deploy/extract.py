"""Archive extraction into a fresh release directory.

Members are extracted one by one through tarfile's "data" filter. Regular
files, directories, hardlinks and symlinks are kept as long as they stay inside
the release directory. Members that would escape it (absolute link targets,
`..` traversal) and device entries are skipped.
"""

from __future__ import annotations

import tarfile
from pathlib import Path, PurePosixPath

from wprel.core.result import Err, Ok, Result
from wprel.services.deploy.errors import DeployError

__all__ = ["extract_archive"]


def _safe_relative_path(member_name: str) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = [p for p in PurePosixPath(normalized).parts if p != "."]
    if not parts:
        return None
    if any(part in {"", ".."} for part in parts):
        return None
    if parts[0].endswith(":"):
        return None

    return Path(*parts)


def extract_archive(archive: Path, target: Path) -> Result[int, DeployError]:
    """Extract a gzip tarball into target, which must not exist yet.

    Returns the number of regular files written, hardlinks included. On
    failure the partially extracted directory is left in place.
    """
    try:
        target.mkdir()
    except FileExistsError:
        return Err(
            DeployError(
                kind="release_exists",
                message=f"target directory already exists: {target}",
            )
        )
    except OSError as e:
        return Err(DeployError(kind="extract_failed", message=f"cannot create {target}: {e}"))

    files_count = 0
    try:
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                # "./" itself would reset the release directory's mtime
                if _safe_relative_path(member.name) is None:
                    continue

                try:
                    tar.extract(member, path=target, filter="data")
                except tarfile.FilterError:
                    continue

                if member.isreg() or member.islnk():
                    files_count += 1

    except (tarfile.TarError, EOFError) as e:
        return Err(
            DeployError(
                kind="extract_failed",
                message=f"tar extraction failed for {archive}: {e}",
                hint=f"partial release left at {target}",
            )
        )
    except OSError as e:
        return Err(
            DeployError(
                kind="extract_failed",
                message=f"IO error extracting {archive}: {e}",
                hint=f"partial release left at {target}",
            )
        )

    return Ok(files_count)
