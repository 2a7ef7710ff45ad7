from __future__ import annotations

import typer

from forgebin.cli.commands._helpers import cli_options, exit_on_install_error, tool_request
from forgebin.cli.context import build_context
from forgebin.core.result import Err


def versions(
    ref: str = typer.Argument(..., help="Tool as host/owner/repo."),
    api_url: str | None = typer.Option(None, "--api-url", help="Forge API base URL."),
    prefix: str | None = typer.Option(None, "--prefix", help="Tag prefix."),
) -> None:
    """List installable versions, oldest first."""
    ctx = build_context()
    request = tool_request(ctx, ref, cli_options(ctx, api_url=api_url, prefix=prefix))

    result = ctx.service().list_versions(request.tool, request.options)
    if isinstance(result, Err):
        exit_on_install_error(result.error, ctx)

    for version in result.value:
        ctx.console.print(version)
