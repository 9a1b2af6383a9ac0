"""Deploy command - extract an archive as a new release and activate it."""

from __future__ import annotations

import os
from pathlib import Path

import typer

from wprel.cli.commands._helpers import exit_on_error
from wprel.cli.context import build_context
from wprel.core.result import Err
from wprel.output.console import Style
from wprel.services.deploy import deploy as run_deploy
from wprel.services.deploy import request_from_config


def deploy(
    archive: Path = typer.Argument(
        Path("release.tar.gz"), help="Release archive (.tar.gz) to deploy."
    ),
    releases_dir: str | None = typer.Argument(
        None,
        help="Releases directory under the deployment root [default: releases]",
        show_default=False,
    ),
    keep: int | None = typer.Option(
        None, "--keep", min=1, help="Releases and archives to keep [default: 5]"
    ),
    root: Path | None = typer.Option(
        None, "--root", help="Deployment root (overrides auto detection)"
    ),
) -> None:
    """Deploy ARCHIVE into RELEASES_DIR and point current-release at it."""
    ctx = build_context(root)

    request = request_from_config(
        ctx.root,
        ctx.config,
        archive=archive,
        releases_dir=releases_dir,
        keep=keep,
    )
    result = run_deploy(request, console=ctx.console)
    exit_on_error(result, ctx)
    if isinstance(result, Err):
        return

    report = result.value
    ctx.console.success(f"Created release: {report.release_dir}")
    ctx.console.print(
        f"{report.current_link.name} -> {os.readlink(report.current_link)}", Style.DIM
    )
