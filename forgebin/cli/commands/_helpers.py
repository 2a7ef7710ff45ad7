"""Shared helpers for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn

import typer

from forgebin.cli.ref import parse_ref
from forgebin.core.errors import ErrorCode
from forgebin.core.result import Err
from forgebin.install.options import Checksum, ToolOptions
from forgebin.install.version import parse_constraint
from forgebin.output.errors import install_error_exit_code, print_install_error

if TYPE_CHECKING:
    from forgebin.cli.context import CLIContext
    from forgebin.forge.models import ToolRef
    from forgebin.install.version import VersionConstraint
    from forgebin.services.install_errors import InstallError


@dataclass(frozen=True, slots=True)
class ToolRequest:
    """A parsed REF argument merged with config and flags."""

    tool: ToolRef
    constraint: VersionConstraint
    options: ToolOptions


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def exit_on_install_error(error: InstallError, ctx: CLIContext) -> NoReturn:
    print_install_error(error, ctx.console)
    exit_with_code(install_error_exit_code(error))


def cli_options(
    ctx: CLIContext,
    *,
    api_url: str | None = None,
    pattern: str | None = None,
    prefix: str | None = None,
    checksum: str | None = None,
    size: int | None = None,
    strip: int | None = None,
    bin_name: str | None = None,
    bin_path: str | None = None,
) -> ToolOptions:
    """ToolOptions from command-line flags; bad values exit with USER_ERROR."""
    try:
        return ToolOptions(
            asset_pattern=pattern,
            version_prefix=prefix,
            checksum=Checksum.parse(checksum) if checksum else None,
            size=size,
            strip_components=strip,
            bin=bin_name,
            bin_path=bin_path,
            api_url=api_url,
        )
    except ValueError as e:
        ctx.console.error(str(e))
        exit_with_code(int(ErrorCode.USER_ERROR))


def tool_request(ctx: CLIContext, ref: str, flags: ToolOptions) -> ToolRequest:
    """Parse ``ref`` and layer config, then flags, over the defaults.

    A version in ``ref`` wins over the configured one. The API URL falls
    back to the ``[forges]`` entry for the host.
    """
    parsed = parse_ref(ref)
    if isinstance(parsed, Err):
        ctx.console.error(str(parsed.error))
        exit_with_code(int(ErrorCode.USER_ERROR))

    tool = parsed.value.tool
    configured = ctx.config.tool(tool.key)
    options = configured.options.merged(flags)
    if not options.api_url:
        options = options.merged(ToolOptions(api_url=ctx.config.api_url_for(tool.host)))

    constraint = parsed.value.constraint
    if parsed.value.version is None and configured.version:
        constraint = parse_constraint(configured.version)

    return ToolRequest(tool=tool, constraint=constraint, options=options)
