from __future__ import annotations

import typer

from forgebin.cli.commands._helpers import cli_options, exit_on_install_error, tool_request
from forgebin.cli.context import build_context
from forgebin.core.result import Err


def plan(
    ref: str = typer.Argument(..., help="Tool as host/owner/repo[@version]."),
    api_url: str | None = typer.Option(None, "--api-url", help="Forge API base URL."),
    pattern: str | None = typer.Option(None, "--pattern", help="Glob selecting the asset."),
    prefix: str | None = typer.Option(None, "--prefix", help="Tag prefix."),
    checksum: str | None = typer.Option(None, "--checksum", help="Expected 'algo:hex' digest."),
    size: int | None = typer.Option(None, "--size", min=0, help="Expected size in bytes."),
    strip: int | None = typer.Option(None, "--strip", min=0, help="Path components to strip."),
    bin_name: str | None = typer.Option(None, "--bin", help="Rename a single-file binary."),
    bin_path: str | None = typer.Option(None, "--bin-path", help="Executable directory."),
) -> None:
    """Show what install would do, without placing any files."""
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

    result = ctx.service().plan(request.tool, request.constraint, request.options)
    if isinstance(result, Err):
        exit_on_install_error(result.error, ctx)

    p = result.value
    ctx.console.header(f"{request.tool} {p.version}")
    ctx.console.detail("tag", p.version.tag)
    ctx.console.detail("asset", p.asset.name)
    ctx.console.detail("url", p.asset.url)
    ctx.console.detail("size", str(p.artifact.size))
    ctx.console.detail("sha256", p.artifact.sha256)
    ctx.console.detail("format", str(p.archive_format) if p.archive_format else "binary")
    ctx.console.detail("strip", str(p.strip_components))
    ctx.console.detail("bin", p.bin_dir.as_posix())
    if p.bin_name:
        ctx.console.detail("name", p.bin_name)
