"""Error presentation.

Every ``PlanError`` kind gets a one-line diagnostic plus, where it helps,
the context needed to fix the request (available versions, asset names).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from forgebin.core.errors import ErrorCode
from forgebin.install.errors import (
    ChecksumMismatch,
    DownloadFailed,
    ExtractFailed,
    InvalidOptions,
    NoMatchingAsset,
    PlanError,
    ReleaseNotFound,
    SizeMismatch,
    VersionNotFound,
)
from forgebin.output.console import Style
from forgebin.services.install_errors import (
    InstallError,
    ListingFailed,
    MissingApiUrl,
    PlacementFailed,
)

if TYPE_CHECKING:
    from forgebin.output.console import ConsoleProtocol

__all__ = [
    "install_error_exit_code",
    "plan_error_exit_code",
    "print_install_error",
    "print_plan_error",
]

# Listing hundreds of tags or assets helps nobody.
MAX_LISTED = 10


def _listing(items: tuple[str, ...]) -> str:
    shown = ", ".join(items[:MAX_LISTED])
    if len(items) > MAX_LISTED:
        shown += f", ... ({len(items) - MAX_LISTED} more)"
    return shown


def print_plan_error(error: PlanError, console: ConsoleProtocol) -> None:
    """Print a plan error with appropriate formatting."""
    match error:
        case VersionNotFound(requested=requested, prefix=prefix, available=available):
            console.error(f"version not found: {requested}")
            if prefix is not None:
                console.print(f"version_prefix: {prefix!r}", Style.DIM)
            if available:
                console.print(f"Available tags: {_listing(available)}", Style.DIM)
            else:
                console.print("The repository has no stable releases", Style.DIM)
        case ReleaseNotFound(tag=tag):
            console.error(f"release not found: {tag}")
        case NoMatchingAsset(platform=platform, pattern=pattern, available=available):
            if pattern is not None:
                console.error(f"no asset matches {pattern!r}")
            else:
                console.error(f"no asset for {platform}")
            if available:
                console.print(f"Assets: {_listing(available)}", Style.DIM)
            console.print("hint: set asset_pattern or --pattern", Style.DIM)
        case DownloadFailed(asset=asset, reason=reason):
            console.error(f"download failed: {asset}")
            console.print(reason, Style.DIM)
        case SizeMismatch(expected=expected, actual=actual):
            console.error(f"size mismatch: expected {expected} bytes, got {actual}")
            console.print("The download was discarded", Style.DIM)
        case ChecksumMismatch(algorithm=algorithm, expected=expected, actual=actual):
            console.error(f"{algorithm} checksum mismatch")
            console.print(f"expected: {expected}", Style.DIM)
            console.print(f"actual:   {actual}", Style.DIM)
            console.print("The download was discarded", Style.DIM)
        case ExtractFailed(archive=archive, reason=reason):
            console.error(f"cannot unpack {archive}")
            console.print(reason, Style.DIM)
        case InvalidOptions(reason=reason):
            console.error(f"invalid options: {reason}")


def plan_error_exit_code(error: PlanError) -> int:
    """Get exit code for a plan error."""
    match error:
        case VersionNotFound() | ReleaseNotFound() | NoMatchingAsset() | InvalidOptions():
            return int(ErrorCode.USER_ERROR)
        case SizeMismatch() | ChecksumMismatch():
            return int(ErrorCode.INTEGRITY_ERROR)
        case DownloadFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case ExtractFailed():
            return int(ErrorCode.IO_ERROR)


def print_install_error(error: InstallError, console: ConsoleProtocol) -> None:
    """Print any error the install service can return."""
    match error:
        case MissingApiUrl(host=host, hint=hint):
            console.error(f"no API URL known for {host}")
            console.print(f"hint: {hint}", Style.DIM)
        case ListingFailed(repo=repo, reason=reason):
            console.error(f"cannot list releases of {repo}")
            console.print(reason, Style.DIM)
        case PlacementFailed(path=path, reason=reason):
            console.error(f"cannot write {path}")
            console.print(reason, Style.DIM)
        case _:
            print_plan_error(error, console)


def install_error_exit_code(error: InstallError) -> int:
    match error:
        case MissingApiUrl():
            return int(ErrorCode.ENV_ERROR)
        case ListingFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case PlacementFailed():
            return int(ErrorCode.IO_ERROR)
        case _:
            return plan_error_exit_code(error)
