"""Prune command - apply retention without deploying."""

from __future__ import annotations

from pathlib import Path

import typer

from wprel.cli.commands._helpers import exit_on_error
from wprel.cli.context import build_context
from wprel.core.result import Err
from wprel.output.console import ConsoleProtocol, Style
from wprel.services.deploy.activate import current_target
from wprel.services.deploy.model import ReleaseEntry
from wprel.services.deploy.retention import (
    list_archives,
    list_releases,
    plan_prune,
    prune_releases,
)
from wprel.services.deploy.service import deploy_lock


def _plan(directory: Path, keep: int, active: Path | None) -> list[ReleaseEntry]:
    return [
        *plan_prune(list_releases(directory), keep, active),
        *plan_prune(list_archives(directory), keep),
    ]


def _show(console: ConsoleProtocol, doomed: list[ReleaseEntry], *, execute: bool) -> None:
    if execute:
        console.print("\nEXECUTE\n", Style.ERROR)
    else:
        console.print("\nDRY-RUN\n", Style.WARNING)

    for entry in doomed:
        console.print(f"  {entry.path}", Style.DIM)


def prune(
    releases_dir: str | None = typer.Argument(
        None, help="Releases directory [default: releases]", show_default=False
    ),
    keep: int | None = typer.Option(None, "--keep", min=1, help="Entries of each kind to keep"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Execute (default is dry-run)"),
    root: Path | None = typer.Option(None, "--root", help="Deployment root"),
) -> None:
    """Remove old releases and archives. Dry-run by default, use -y to execute."""
    ctx = build_context(root)
    console = ctx.console

    directory = ctx.root.releases_dir(releases_dir or ctx.config.deploy.releases_dir)
    keep_n = keep if keep is not None else ctx.config.deploy.keep
    active = current_target(ctx.root.current_link(ctx.config.deploy.current_link))

    if not directory.is_dir():
        console.print("Nothing to prune", Style.DIM)
        return

    if not yes:
        doomed = _plan(directory, keep_n, active)
        if not doomed:
            console.print("Nothing to prune", Style.DIM)
            return
        _show(console, doomed, execute=False)
        console.print("\nUse -y to execute", Style.DIM)
        return

    lock = deploy_lock(directory)
    exit_on_error(lock, ctx)
    if isinstance(lock, Err):
        return

    with lock.value:
        doomed = _plan(directory, keep_n, active)
        if not doomed:
            console.print("Nothing to prune", Style.DIM)
            return
        _show(console, doomed, execute=True)

        result = prune_releases(directory, keep=keep_n, protect=active)
        exit_on_error(result, ctx)
        if isinstance(result, Err):
            return
    console.success(f"Removed {result.value.total} entries")
