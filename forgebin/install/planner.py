"""Turn a tool request and a release listing into an installation plan.

The planner is the only place the engine steps meet::

    options for platform -> version -> release -> asset -> fetch
        -> verify -> listing -> layout -> plan

Every step returns a Result and the first Err is handed back unchanged.
Nothing is retried and nothing is written to disk; downloading is delegated
to the ``fetch`` callable so the planner stays testable without a network.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath

from forgebin.core.result import Err, Ok, Result
from forgebin.forge.models import Asset, Release
from forgebin.install.archive import ArchiveFormat, detect_format, list_members
from forgebin.install.errors import (
    DownloadFailed,
    InvalidOptions,
    PlanError,
    ReleaseNotFound,
)
from forgebin.install.layout import LayoutDecision, resolve_layout, resolve_single_file
from forgebin.install.options import Checksum, ToolOptions
from forgebin.install.scorer import select_asset
from forgebin.install.template import TemplateContext, expand
from forgebin.install.tree import ExtractedTree
from forgebin.install.verify import VerifiedArtifact, verify
from forgebin.install.version import ResolvedVersion, VersionConstraint, resolve_version
from forgebin.platform.detection import PlatformProfile

__all__ = ["Fetcher", "InstallRequest", "InstallationPlan", "InstallationPlanner"]

type Fetcher = Callable[[Asset], Result[bytes, DownloadFailed]]


@dataclass(frozen=True, slots=True)
class InstallRequest:
    """What to install.

    Attributes:
        name: Tool name, usually the repository name
        constraint: Latest or an exact version
        options: Tool options before the platform override is applied
        platform: Running platform
        locked_asset: Asset name recorded by an earlier install of this tool
        locked_sha256: Digest recorded with ``locked_asset``; the reused asset
            must still match it unless a checksum is configured
    """

    name: str
    constraint: VersionConstraint
    options: ToolOptions
    platform: PlatformProfile
    locked_asset: str | None = None
    locked_sha256: str | None = None

    def checksum_for(self, asset: Asset, options: ToolOptions) -> Checksum | None:
        """Configured checksum, else the locked digest when ``asset`` is the locked one."""
        if options.checksum is not None:
            return options.checksum
        if (
            self.locked_sha256
            and self.locked_asset
            and asset.name.lower() == self.locked_asset.lower()
        ):
            return Checksum("sha256", self.locked_sha256)
        return None


@dataclass(frozen=True, slots=True)
class InstallationPlan:
    """Everything needed to place a verified asset on disk."""

    version: ResolvedVersion
    asset: Asset
    artifact: VerifiedArtifact
    archive_format: ArchiveFormat | None
    tree: ExtractedTree
    layout: LayoutDecision

    def __post_init__(self) -> None:
        if not isinstance(self.artifact, VerifiedArtifact):
            raise TypeError("InstallationPlan requires verified content")

    @property
    def is_archive(self) -> bool:
        return self.archive_format is not None

    @property
    def strip_components(self) -> int:
        return self.layout.strip_components

    @property
    def bin_dir(self) -> PurePosixPath:
        return self.layout.bin_dir

    @property
    def bin_name(self) -> str | None:
        return self.layout.bin_name


def _find_release(releases: Sequence[Release], tag: str) -> Release | None:
    for release in releases:
        if release.tag == tag:
            return release
    return None


class InstallationPlanner:
    """Sequences version resolution, asset choice, verification and layout.

    Usage:
        planner = InstallationPlanner()
        result = planner.plan(request, releases, downloader_fetch)
        if is_ok(result):
            plan = result.value
    """

    def choose_asset(
        self,
        release: Release,
        options: ToolOptions,
        context: TemplateContext,
        locked_asset: str | None = None,
    ) -> Result[Asset, PlanError]:
        """Locked asset, then direct ``url``, then pattern or scorer.

        ``options`` must already have the platform override applied.
        """
        if locked_asset:
            asset = release.find_asset(locked_asset)
            if asset is not None:
                return Ok(asset)

        if options.url:
            return Ok(Asset.from_url(expand(options.url, context)))

        pattern = expand(options.asset_pattern, context) if options.asset_pattern else None
        return select_asset(release.assets, context.platform, pattern)

    def plan(
        self,
        request: InstallRequest,
        releases: Sequence[Release],
        fetch: Fetcher,
    ) -> Result[InstallationPlan, PlanError]:
        """Build a plan for ``request``.

        Args:
            request: Tool, constraint, options and platform
            releases: Stable releases, newest first
            fetch: Downloads an asset's content

        Returns:
            Ok with InstallationPlan, or Err with the first PlanError hit
        """
        options = request.options.for_platform(request.platform)

        resolved = resolve_version(
            request.constraint, options.version_prefix, [r.tag for r in releases]
        )
        if isinstance(resolved, Err):
            return resolved
        version = resolved.value

        release = _find_release(releases, version.tag)
        if release is None:
            return Err(ReleaseNotFound(tag=version.tag))

        context = TemplateContext(
            name=request.name, version=version.version, platform=request.platform
        )
        chosen = self.choose_asset(release, options, context, request.locked_asset)
        if isinstance(chosen, Err):
            return chosen
        asset = chosen.value

        fetched = fetch(asset)
        if isinstance(fetched, Err):
            return fetched

        verified = verify(fetched.value, request.checksum_for(asset, options), options.size)
        if isinstance(verified, Err):
            return verified
        artifact = verified.value

        fmt = detect_format(asset.name)
        if fmt is None:
            return Ok(
                InstallationPlan(
                    version=version,
                    asset=asset,
                    artifact=artifact,
                    archive_format=None,
                    tree=ExtractedTree.from_paths(asset.name),
                    layout=resolve_single_file(asset.name, options, request.platform),
                )
            )

        listed = list_members(artifact.data, fmt, asset.name)
        if isinstance(listed, Err):
            return listed
        tree = listed.value

        laid_out = resolve_layout(tree, options, context)
        if isinstance(laid_out, Err):
            return laid_out
        layout = laid_out.value
        if tree.files() and not tree.strip(layout.strip_components).files():
            return Err(
                InvalidOptions(
                    reason=(
                        f"strip_components={layout.strip_components} leaves no files "
                        f"in {asset.name}"
                    )
                )
            )

        return Ok(
            InstallationPlan(
                version=version,
                asset=asset,
                artifact=artifact,
                archive_format=fmt,
                tree=tree,
                layout=layout,
            )
        )
