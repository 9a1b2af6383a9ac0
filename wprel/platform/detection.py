"""Operating system detection.

Only the platform family matters here: it decides which `stat` flavour is
probed first when reading archive timestamps.
"""

from __future__ import annotations

import sys as _sys
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "detect_platform",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    BSD = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def has_bsd_stat(self) -> bool:
        """True if `stat` is the BSD flavour (`-f %m` rather than `-c %Y`)."""
        return self in (Platform.MACOS, Platform.BSD)


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("freebsd", "openbsd", "netbsd")):
        return Platform.BSD
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN

