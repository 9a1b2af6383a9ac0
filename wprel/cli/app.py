from __future__ import annotations

import typer

from wprel import __version__
from wprel.cli.commands.deploy_cmd import deploy
from wprel.cli.commands.list_cmd import list_releases_cmd
from wprel.cli.commands.prune_cmd import prune


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command()(deploy)
app.command("list")(list_releases_cmd)
app.command()(prune)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    pass


# Single-command entry point: `create-release [ARCHIVE] [RELEASES_DIR]`.
create_release_app = typer.Typer(add_completion=False, rich_markup_mode="rich")
create_release_app.command()(deploy)


def main() -> None:
    app()


def create_release_main() -> None:
    create_release_app()
