"""Permission normalization for an extracted release."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from wprel.core.result import Err, Ok, Result
from wprel.services.deploy.errors import DeployError
from wprel.services.deploy.model import PermissionStats

__all__ = ["normalize_permissions"]


def _raise(error: OSError) -> None:
    raise error


def normalize_permissions(
    root: Path,
    *,
    dir_mode: int = 0o755,
    file_mode: int = 0o644,
) -> Result[PermissionStats, DeployError]:
    """Force dir_mode on root and every directory below it, file_mode on every file.

    Modes shipped in the archive are overwritten. Symlinks are neither
    followed nor chmod-ed.
    """
    directories = 0
    files = 0
    try:
        os.chmod(root, dir_mode)
        directories += 1
        # Directories are chmod-ed before descending so unreadable ones become walkable.
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            base = Path(dirpath)
            for name in dirnames:
                path = base / name
                if path.is_symlink():
                    continue
                os.chmod(path, dir_mode)
                directories += 1
            for name in filenames:
                path = base / name
                if not stat.S_ISREG(os.lstat(path).st_mode):
                    continue
                os.chmod(path, file_mode)
                files += 1
    except OSError as e:
        return Err(
            DeployError(
                kind="permissions_failed",
                message=f"cannot set permissions in {root}: {e}",
            )
        )

    return Ok(PermissionStats(directories=directories, files=files))
