"""Activation: re-point the current symlink at a release."""

from __future__ import annotations

from pathlib import Path

from wprel.core.result import Err, Ok, Result
from wprel.platform.files import atomic_symlink
from wprel.services.deploy.errors import DeployError

__all__ = ["activate_release", "current_target"]


def current_target(link: Path) -> Path | None:
    """Resolved directory the current symlink points at, if any."""
    if not link.is_symlink():
        return None
    return link.resolve()


def activate_release(link: Path, release_dir: Path) -> Result[Path | None, DeployError]:
    """Atomically point link at release_dir (absolute path).

    Returns the previous link target, or None on first activation.
    """
    if link.exists() and not link.is_symlink():
        return Err(
            DeployError(
                kind="activate_failed",
                message=f"{link} exists and is not a symlink",
                hint="move it out of the way before deploying",
            )
        )

    try:
        previous = atomic_symlink(link, release_dir.absolute())
    except OSError as e:
        return Err(
            DeployError(kind="activate_failed", message=f"cannot update {link}: {e}")
        )
    return Ok(previous)
