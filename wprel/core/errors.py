"""Error codes for CLI exit status.

Every deploy failure exits with USER_ERROR (1) so wrapper scripts can rely on
a single non-zero code. ENV_ERROR is reserved for an unusable deployment root
or configuration file.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are stable."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
