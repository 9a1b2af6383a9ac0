"""List command - show releases and archives, newest first."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer

from wprel.cli.context import build_context
from wprel.output.console import Style
from wprel.services.deploy.activate import current_target
from wprel.services.deploy.model import ReleaseName
from wprel.services.deploy.retention import list_archives, list_releases


def list_releases_cmd(
    releases_dir: str | None = typer.Argument(
        None, help="Releases directory [default: releases]", show_default=False
    ),
    root: Path | None = typer.Option(None, "--root", help="Deployment root"),
) -> None:
    """List releases and archives, marking the active release."""
    ctx = build_context(root)
    console = ctx.console

    directory = ctx.root.releases_dir(releases_dir or ctx.config.deploy.releases_dir)
    active = current_target(ctx.root.current_link(ctx.config.deploy.current_link))

    releases = list_releases(directory)
    if not releases:
        console.print(f"No releases in {directory}", Style.DIM)
        return

    for entry in releases:
        stamp = datetime.fromtimestamp(entry.mtime).strftime("%Y-%m-%d %H:%M")
        if ReleaseName.parse(entry.name) is None:
            stamp += "  (unrecognized name)"
        if active is not None and entry.path.resolve() == active:
            console.print(f"* {entry.name}  {stamp}", Style.SUCCESS)
        else:
            console.print(f"  {entry.name}  {stamp}")

    archives = list_archives(directory)
    if archives:
        console.newline()
        for entry in archives:
            console.print(f"  {entry.name}", Style.DIM)
