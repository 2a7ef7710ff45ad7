from __future__ import annotations

import typer

from forgebin.cli.commands._helpers import cli_options, exit_on_install_error, tool_request
from forgebin.cli.context import build_context
from forgebin.core.result import Err


def install(
    ref: str = typer.Argument(..., help="Tool as host/owner/repo[@version]."),
    api_url: str | None = typer.Option(None, "--api-url", help="Forge API base URL."),
    pattern: str | None = typer.Option(
        None,
        "--pattern",
        help="Glob selecting the asset; {os}, {arch}, {version} are expanded.",
    ),
    prefix: str | None = typer.Option(
        None,
        "--prefix",
        help="Tag prefix (e.g. 'release-'); pass '' to use tags verbatim.",
    ),
    checksum: str | None = typer.Option(None, "--checksum", help="Expected 'algo:hex' digest."),
    size: int | None = typer.Option(None, "--size", min=0, help="Expected size in bytes."),
    strip: int | None = typer.Option(
        None, "--strip", min=0, help="Leading path components to strip (default: auto)."
    ),
    bin_name: str | None = typer.Option(None, "--bin", help="Rename a single-file binary."),
    bin_path: str | None = typer.Option(
        None, "--bin-path", help="Executable directory inside the archive (templated)."
    ),
    force: bool = typer.Option(False, "--force", help="Reinstall and re-download."),
) -> None:
    """Install a tool from its forge releases."""
    ctx = build_context()
    flags = cli_options(
        ctx,
        api_url=api_url,
        pattern=pattern,
        prefix=prefix,
        checksum=checksum,
        size=size,
        strip=strip,
        bin_name=bin_name,
        bin_path=bin_path,
    )
    request = tool_request(ctx, ref, flags)

    result = ctx.service().install(
        request.tool, request.constraint, request.options, force=force
    )
    if isinstance(result, Err):
        exit_on_install_error(result.error, ctx)
