"""Platform abstraction layer."""

from .detection import (
    Platform,
    detect_platform,
)
from .files import (
    FileLock,
    LockError,
    acquire_lock,
    atomic_symlink,
)
from .process import (
    ProcessError,
    run,
)

__all__ = [
    # detection
    "Platform",
    "detect_platform",
    # files
    "FileLock",
    "LockError",
    "acquire_lock",
    "atomic_symlink",
    # process
    "ProcessError",
    "run",
]
