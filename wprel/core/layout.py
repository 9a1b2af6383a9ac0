"""Deployment root detection and paths.

The deployment root holds the releases directory, the current symlink and the
shared `config/` directory that every release links to:

    <root>/
      wprel.toml            (optional)
      config/               (shared, not managed here)
      current-release -> <root>/releases/release-2026-10-18-17608000
      releases/
        release-2026-10-18-17608000/
        release-2026-10-18-17608000.tar.gz
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .config import CONFIG_FILENAME, DEFAULT_CURRENT_LINK, DEFAULT_RELEASES_DIR
from .result import Err, Ok, Result

__all__ = [
    "DeploymentRoot",
    "RootError",
    "RootSource",
    "detect_root",
    "find_root_upward",
]

ROOT_ENV_VAR = "WPREL_ROOT"

RootSource = Literal["option", "env", "marker", "cwd"]


@dataclass(frozen=True)
class RootError:
    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class DeploymentRoot:
    root: Path
    source: RootSource = "cwd"

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    def releases_dir(self, name: str = DEFAULT_RELEASES_DIR) -> Path:
        """Releases directory. Relative names resolve against the root."""
        return self.root / name

    def current_link(self, name: str = DEFAULT_CURRENT_LINK) -> Path:
        return self.root / name

    def __str__(self) -> str:
        return str(self.root)


def find_root_upward(start: Path) -> Path | None:
    """Return the nearest ancestor of start containing wprel.toml."""
    for parent in (start, *start.parents):
        if (parent / CONFIG_FILENAME).is_file():
            return parent
    return None


def detect_root(
    *,
    explicit: Path | None = None,
    start_dir: Path | None = None,
    env_var: str = ROOT_ENV_VAR,
) -> Result[DeploymentRoot, RootError]:
    """Resolve the deployment root.

    Detection order:
    1. explicit path (--root)
    2. $WPREL_ROOT
    3. nearest ancestor of start_dir (or cwd) containing wprel.toml
    4. start_dir (or cwd) itself
    """
    if explicit is not None:
        try:
            path = explicit.expanduser().resolve()
        except OSError as e:
            return Err(RootError(f"invalid --root: {e}", path=explicit))
        if not path.is_dir():
            return Err(RootError(f"--root '{path}' is not a directory", path=path))
        return Ok(DeploymentRoot(root=path, source="option"))

    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir():
            return Ok(DeploymentRoot(root=env_path, source="env"))
        return Err(
            RootError(
                message=f"${env_var} is set to '{env_value}' but it is not a directory",
                path=env_path,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_root_upward(search_start)
    if found is not None:
        return Ok(DeploymentRoot(root=found, source="marker"))

    return Ok(DeploymentRoot(root=search_start, source="cwd"))
