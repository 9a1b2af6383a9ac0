"""Typed configuration loading.

The deployment root may contain a `wprel.toml`:

    [deploy]
    releases_dir = "releases"
    current_link = "current-release"
    keep = 5
    dir_mode = "755"
    file_mode = "644"

    [[hooks]]
    kind = "symlink"
    link = "config"
    target = "../../config"

    [[hooks]]
    kind = "move"
    source = "wp-content/plugins/advanced-custom-fields-pro"
    destination = "wp-content/mu-plugins/advanced-custom-fields-pro"

Every key is optional. Declaring any `[[hooks]]` entry replaces the default
hook list as a whole.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_table, get_table_list

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "DEFAULT_HOOKS",
    "DeployConfig",
    "HookConfig",
    "MoveHookConfig",
    "SymlinkHookConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "wprel.toml"

DEFAULT_RELEASES_DIR = "releases"
DEFAULT_CURRENT_LINK = "current-release"
DEFAULT_KEEP = 5
DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class SymlinkHookConfig:
    """Create `link` inside the release, pointing at `target` (kept relative)."""

    link: str
    target: str


@dataclass(frozen=True, slots=True)
class MoveHookConfig:
    """Move `source` to `destination`, both relative to the release root."""

    source: str
    destination: str


type HookConfig = SymlinkHookConfig | MoveHookConfig

DEFAULT_HOOKS: tuple[HookConfig, ...] = (
    SymlinkHookConfig(link="config", target="../../config"),
    MoveHookConfig(
        source="wp-content/plugins/advanced-custom-fields-pro",
        destination="wp-content/mu-plugins/advanced-custom-fields-pro",
    ),
)


@dataclass(frozen=True, slots=True)
class DeployConfig:
    releases_dir: str = DEFAULT_RELEASES_DIR
    current_link: str = DEFAULT_CURRENT_LINK
    keep: int = DEFAULT_KEEP
    dir_mode: int = DEFAULT_DIR_MODE
    file_mode: int = DEFAULT_FILE_MODE


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    deploy: DeployConfig = field(default_factory=DeployConfig)
    hooks: tuple[HookConfig, ...] = DEFAULT_HOOKS

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML.

        Raises:
            ValueError: If a value is present but invalid.
        """
        deploy: StrDict = get_table(data, "deploy") or {}

        keep = get_int(deploy, "keep")
        if keep is None and "keep" in deploy:
            raise ValueError(f"deploy.keep must be an integer, got {deploy['keep']!r}")
        if keep is not None and keep < 1:
            raise ValueError(f"deploy.keep must be >= 1, got {keep}")

        hooks: tuple[HookConfig, ...] = DEFAULT_HOOKS
        if "hooks" in data:
            raw_hooks = get_table_list(data, "hooks")
            if raw_hooks is None:
                raise ValueError("hooks must be an array of tables ([[hooks]])")
            hooks = tuple(_parse_hook(h) for h in raw_hooks)

        return cls(
            deploy=DeployConfig(
                releases_dir=_parse_name(deploy, "releases_dir", DEFAULT_RELEASES_DIR),
                current_link=_parse_name(deploy, "current_link", DEFAULT_CURRENT_LINK),
                keep=keep if keep is not None else DEFAULT_KEEP,
                dir_mode=_parse_mode(deploy, "dir_mode", DEFAULT_DIR_MODE),
                file_mode=_parse_mode(deploy, "file_mode", DEFAULT_FILE_MODE),
            ),
            hooks=hooks,
        )


def _parse_name(table: Mapping[str, object], key: str, default: str) -> str:
    if key not in table:
        return default
    value = get_str(table, key)
    if value is None:
        raise ValueError(f"deploy.{key} must be a non-empty string, got {table[key]!r}")
    return value


def _parse_mode(table: Mapping[str, object], key: str, default: int) -> int:
    # Modes are written as octal strings ("755") so TOML does not read them as decimal.
    if key not in table:
        return default
    raw = get_str(table, key)
    try:
        mode = int(raw or "", 8)
    except ValueError:
        raise ValueError(
            f"deploy.{key} must be an octal string like \"755\", got {table[key]!r}"
        ) from None
    if not 0 <= mode <= 0o7777:
        raise ValueError(f"deploy.{key} out of range: {raw!r}")
    return mode


def _parse_hook(table: StrDict) -> HookConfig:
    kind = get_str(table, "kind")
    match kind:
        case "symlink":
            link = get_str(table, "link")
            target = get_str(table, "target")
            if link is None or target is None:
                raise ValueError("symlink hook requires 'link' and 'target'")
            return SymlinkHookConfig(link=link, target=target)
        case "move":
            source = get_str(table, "source")
            destination = get_str(table, "destination")
            if source is None or destination is None:
                raise ValueError("move hook requires 'source' and 'destination'")
            return MoveHookConfig(source=source, destination=destination)
        case _:
            raise ValueError(f"unknown hook kind: {kind!r}")


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return defaults.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
