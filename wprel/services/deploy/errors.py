"""Error type shared by every deploy step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DeployErrorKind = Literal[
    "archive_missing",
    "release_exists",
    "locked",
    "extract_failed",
    "hook_failed",
    "permissions_failed",
    "activate_failed",
    "archive_failed",
    "prune_failed",
]


@dataclass(frozen=True, slots=True)
class DeployError:
    kind: DeployErrorKind
    message: str
    hint: str | None = None
