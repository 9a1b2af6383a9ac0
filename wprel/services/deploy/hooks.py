"""Post-extraction hooks.

Hooks adjust a freshly extracted release before permissions are normalized
and the release is activated. The defaults reproduce the WordPress layout
fixups: a `config` symlink to the shared configuration two levels up, and
moving ACF Pro from `plugins/` to `mu-plugins/`.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

from wprel.core.config import HookConfig, MoveHookConfig, SymlinkHookConfig
from wprel.core.result import Err, Ok, Result
from wprel.output.console import ConsoleProtocol
from wprel.services.deploy.errors import DeployError

__all__ = [
    "MoveHook",
    "PostExtractHook",
    "SymlinkHook",
    "build_hooks",
    "run_hooks",
]


class PostExtractHook(Protocol):
    @property
    def name(self) -> str: ...

    def apply(self, release_dir: Path) -> Result[None, DeployError]: ...


def _release_path(release_dir: Path, rel: str) -> Path | None:
    """Join a configured relative path onto the release, rejecting escapes."""
    pure = PurePosixPath(rel)
    if pure.is_absolute() or ".." in pure.parts:
        return None
    return release_dir.joinpath(*pure.parts)


@dataclass(frozen=True, slots=True)
class SymlinkHook:
    """Create (or replace) link inside the release pointing at target.

    target is stored verbatim, so relative targets resolve from the link's
    directory, like `ln -sfn`. Unlike `ln -sfn`, an existing real directory at
    link is a hook_failed error and nothing is created inside it.
    """

    link: str
    target: str

    @property
    def name(self) -> str:
        return f"symlink {self.link} -> {self.target}"

    def apply(self, release_dir: Path) -> Result[None, DeployError]:
        link_path = _release_path(release_dir, self.link)
        if link_path is None:
            return Err(
                DeployError(kind="hook_failed", message=f"invalid link path: {self.link}")
            )

        try:
            if link_path.is_symlink() or link_path.is_file():
                link_path.unlink()
            elif link_path.is_dir():
                return Err(
                    DeployError(
                        kind="hook_failed",
                        message=f"cannot create symlink, directory exists: {link_path}",
                    )
                )
            link_path.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(self.target, link_path)
        except OSError as e:
            return Err(
                DeployError(kind="hook_failed", message=f"{self.name} failed: {e}")
            )
        return Ok(None)


@dataclass(frozen=True, slots=True)
class MoveHook:
    """Move source to destination within the release.

    The source must exist, the destination must not, and the destination's
    parent directory must already be part of the archive.
    """

    source: str
    destination: str

    @property
    def name(self) -> str:
        return f"move {self.source} -> {self.destination}"

    def apply(self, release_dir: Path) -> Result[None, DeployError]:
        src = _release_path(release_dir, self.source)
        dst = _release_path(release_dir, self.destination)
        if src is None or dst is None:
            return Err(DeployError(kind="hook_failed", message=f"invalid path in {self.name}"))

        if not (src.exists() or src.is_symlink()):
            return Err(
                DeployError(
                    kind="hook_failed",
                    message=f"cannot move, source not found: {src}",
                    hint="check the archive layout",
                )
            )
        if dst.exists() or dst.is_symlink():
            return Err(
                DeployError(kind="hook_failed", message=f"cannot move, destination exists: {dst}")
            )
        if not dst.parent.is_dir():
            return Err(
                DeployError(
                    kind="hook_failed",
                    message=f"cannot move, destination directory missing: {dst.parent}",
                    hint="check the archive layout",
                )
            )

        try:
            shutil.move(str(src), str(dst))
        except OSError as e:
            return Err(DeployError(kind="hook_failed", message=f"{self.name} failed: {e}"))
        return Ok(None)


def build_hooks(configs: Sequence[HookConfig]) -> list[PostExtractHook]:
    hooks: list[PostExtractHook] = []
    for cfg in configs:
        match cfg:
            case SymlinkHookConfig(link=link, target=target):
                hooks.append(SymlinkHook(link=link, target=target))
            case MoveHookConfig(source=source, destination=destination):
                hooks.append(MoveHook(source=source, destination=destination))
    return hooks


def run_hooks(
    release_dir: Path,
    hooks: Sequence[PostExtractHook],
    *,
    console: ConsoleProtocol | None = None,
) -> Result[tuple[str, ...], DeployError]:
    """Apply hooks in order and stop at the first failure.

    Returns the names of the hooks that ran.
    """
    applied: list[str] = []
    for hook in hooks:
        if console is not None:
            console.print(f"Running hook: {hook.name}")
        result = hook.apply(release_dir)
        if isinstance(result, Err):
            return result
        applied.append(hook.name)
    return Ok(tuple(applied))
