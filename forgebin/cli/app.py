from __future__ import annotations

import os
from pathlib import Path

import typer

from forgebin import __version__
from forgebin.cli.commands.install_cmd import install
from forgebin.cli.commands.plan_cmd import plan
from forgebin.cli.commands.versions_cmd import versions
from forgebin.cli.context import CONFIG_ENV

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    invoke_without_command=True,
    rich_markup_mode="rich",
    help="Install prebuilt binaries from forge releases.",
)

app.command()(install)
app.command()(plan)
app.command()(versions)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(None, "--config", help="Config file to use."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        os.environ[CONFIG_ENV] = str(config.expanduser())

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def main() -> None:
    app()
