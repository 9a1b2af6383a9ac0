"""Deploy pipeline.

validate -> allocate id -> lock -> extract -> hooks -> permissions ->
activate -> move archive -> prune

Each step returns a Result and the pipeline stops at the first Err. Nothing
is rolled back: a failure after extraction leaves the partial release in
place and the error hint names it.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path

from wprel.core.config import DEFAULT_HOOKS, Config
from wprel.core.layout import DeploymentRoot
from wprel.core.result import Err, Ok, Result
from wprel.output.console import ConsoleProtocol, Style
from wprel.platform.files import FileLock, acquire_lock
from wprel.services.deploy.activate import activate_release
from wprel.services.deploy.errors import DeployError
from wprel.services.deploy.extract import extract_archive
from wprel.services.deploy.hooks import PostExtractHook, build_hooks, run_hooks
from wprel.services.deploy.identifier import MtimeStrategy, derive_short_id
from wprel.services.deploy.model import DeployReport, ReleaseName, release_name
from wprel.services.deploy.permissions import normalize_permissions
from wprel.services.deploy.retention import prune_releases

__all__ = [
    "DeployRequest",
    "LOCK_FILENAME",
    "deploy",
    "deploy_lock",
    "request_from_config",
]

LOCK_FILENAME = ".wprel.lock"


def _default_hooks() -> tuple[PostExtractHook, ...]:
    return tuple(build_hooks(DEFAULT_HOOKS))


@dataclass(frozen=True, slots=True)
class DeployRequest:
    archive: Path
    releases_dir: Path
    current_link: Path
    keep: int = 5
    dir_mode: int = 0o755
    file_mode: int = 0o644
    hooks: tuple[PostExtractHook, ...] = field(default_factory=_default_hooks)


def request_from_config(
    root: DeploymentRoot,
    config: Config,
    *,
    archive: Path,
    releases_dir: str | None = None,
    keep: int | None = None,
) -> DeployRequest:
    """Build a request from config, letting CLI arguments override it."""
    d = config.deploy
    return DeployRequest(
        archive=archive,
        releases_dir=root.releases_dir(releases_dir or d.releases_dir),
        current_link=root.current_link(d.current_link),
        keep=keep if keep is not None else d.keep,
        dir_mode=d.dir_mode,
        file_mode=d.file_mode,
        hooks=tuple(build_hooks(config.hooks)),
    )


def deploy(
    request: DeployRequest,
    *,
    console: ConsoleProtocol,
    today: date | None = None,
    strategies: Sequence[MtimeStrategy] | None = None,
) -> Result[DeployReport, DeployError]:
    """Deploy request.archive as a new release and activate it."""
    archive = request.archive
    if not archive.is_file():
        return Err(DeployError(kind="archive_missing", message=f"tar file not found: {archive}"))

    short_id = derive_short_id(archive, strategies)
    if short_id.fallback:
        console.warning("unable to compute hash, using timestamp only")

    name = release_name(today or date.today(), short_id)
    releases_dir = request.releases_dir

    try:
        releases_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(
            DeployError(kind="extract_failed", message=f"cannot create {releases_dir}: {e}")
        )

    lock = deploy_lock(releases_dir)
    if isinstance(lock, Err):
        return lock

    with lock.value:
        result = _deploy_locked(request, name, console=console)

    if isinstance(result, Ok) and short_id.fallback:
        return Ok(replace(result.value, fallback_id=True))
    return result


def _deploy_locked(
    request: DeployRequest,
    name: ReleaseName,
    *,
    console: ConsoleProtocol,
) -> Result[DeployReport, DeployError]:
    target = request.releases_dir / str(name)
    if target.exists() or target.is_symlink():
        return Err(
            DeployError(
                kind="release_exists",
                message=f"target directory already exists: {target}",
                hint="the archive was already deployed, or its id collides with an earlier one",
            )
        )

    console.print(f"Extracting {request.archive} -> {target}")
    extracted = extract_archive(request.archive, target)
    if isinstance(extracted, Err):
        return extracted

    hooks = run_hooks(target, request.hooks, console=console)
    if isinstance(hooks, Err):
        return Err(_leftover(hooks.error, target))

    console.print(
        f"Setting permissions: directories={request.dir_mode:o}, "
        f"files={request.file_mode:o} in {target}"
    )
    perms = normalize_permissions(
        target, dir_mode=request.dir_mode, file_mode=request.file_mode
    )
    if isinstance(perms, Err):
        return Err(_leftover(perms.error, target))

    console.print(f"Updating symlink: {request.current_link} -> {target}")
    activated = activate_release(request.current_link, target)
    if isinstance(activated, Err):
        return Err(_leftover(activated.error, target))

    archive_path = request.releases_dir / name.archive_name
    console.print(f"Renaming tarball: {request.archive} -> {archive_path}")
    moved = _move_archive(request.archive, archive_path)
    if isinstance(moved, Err):
        return moved

    console.print(f"Cleaning up old releases, keeping latest {request.keep}...")
    pruned = prune_releases(
        request.releases_dir, keep=request.keep, protect=target, console=console
    )
    if isinstance(pruned, Err):
        return pruned

    return Ok(
        DeployReport(
            release=name,
            release_dir=target,
            archive_path=archive_path,
            current_link=request.current_link,
            previous_target=activated.value,
            files_extracted=extracted.value,
            permissions=perms.value,
            pruned=pruned.value,
        )
    )


def _leftover(error: DeployError, target: Path) -> DeployError:
    return DeployError(
        kind=error.kind,
        message=error.message,
        hint=error.hint or f"partial release left at {target}",
    )


def _move_archive(src: Path, dst: Path) -> Result[Path, DeployError]:
    if dst.exists():
        return Err(
            DeployError(kind="archive_failed", message=f"archive already exists: {dst}")
        )
    try:
        shutil.move(str(src), str(dst))
    except OSError as e:
        return Err(
            DeployError(kind="archive_failed", message=f"cannot move {src} to {dst}: {e}")
        )
    return Ok(dst)


def deploy_lock(releases_dir: Path) -> Result[FileLock, DeployError]:
    """Take the exclusive deploy lock for a releases directory."""
    lock = acquire_lock(releases_dir / LOCK_FILENAME)
    if isinstance(lock, Err):
        return Err(
            DeployError(
                kind="locked",
                message=f"another deploy is running in {releases_dir} ({lock.error.message})",
                hint=f"remove {lock.error.path} if no deploy is running",
            )
        )
    return lock
