from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from wprel.core.config import Config, load_config_or_default
from wprel.core.errors import ErrorCode
from wprel.core.layout import DeploymentRoot, detect_root
from wprel.core.result import Err
from wprel.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: DeploymentRoot
    config: Config
    console: ConsoleProtocol


def build_context(root: Path | None = None) -> CLIContext:
    root_result = detect_root(explicit=root)
    if isinstance(root_result, Err):
        typer.echo(f"error: {root_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    deployment_root = root_result.value
    config_result = load_config_or_default(deployment_root.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        root=deployment_root,
        config=config_result.value,
        console=RichConsole(),
    )
