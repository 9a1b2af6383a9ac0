"""Core domain types: results, exit codes, configuration, deployment root."""

from .config import Config, ConfigError, load_config, load_config_or_default
from .errors import ErrorCode
from .layout import DeploymentRoot, RootError, detect_root
from .result import Err, Ok, Result

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # layout
    "DeploymentRoot",
    "RootError",
    "detect_root",
    # result
    "Err",
    "Ok",
    "Result",
]
