from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from forgebin.core.result import Err, Ok, Result
from forgebin.forge.api import get_release, list_releases
from forgebin.forge.download import Downloader
from forgebin.install.archive import extract, remove_install
from forgebin.install.errors import (
    ChecksumMismatch,
    DownloadFailed,
    SizeMismatch,
)
from forgebin.install.lock import LockEntry, locked_entry, record
from forgebin.install.planner import InstallationPlan, InstallationPlanner, InstallRequest
from forgebin.install.version import Exact, candidate_tags, filter_versions, resolve_version
from forgebin.output.console import Style
from forgebin.platform.files import atomic_write_bytes
from forgebin.platform.paths import user_cache_dir, user_data_dir
from forgebin.services.install_errors import (
    InstallError,
    ListingFailed,
    MissingApiUrl,
    PlacementFailed,
)

if TYPE_CHECKING:
    from forgebin.core.config import Settings
    from forgebin.forge.http import HttpClient
    from forgebin.forge.models import Asset, Release, ToolRef
    from forgebin.install.options import ToolOptions
    from forgebin.install.version import VersionConstraint
    from forgebin.output.console import ConsoleProtocol
    from forgebin.platform.detection import PlatformProfile


@dataclass(frozen=True, slots=True)
class InstallPaths:
    install_dir: Path
    cache_dir: Path

    @classmethod
    def from_settings(cls, settings: Settings | None) -> InstallPaths:
        install_dir = settings.install_dir if settings else None
        cache_dir = settings.cache_dir if settings else None
        return cls(
            install_dir=install_dir or user_data_dir() / "tools",
            cache_dir=cache_dir or user_cache_dir() / "downloads",
        )

    def tool_dir(self, ref: ToolRef, version: str) -> Path:
        return self.install_dir / ref.host / ref.owner / ref.repo / version


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Where a tool ended up.

    ``plan`` is None when the locked version was already in place.
    """

    version: str
    root: Path
    bin_dir: Path
    plan: InstallationPlan | None = None

    @property
    def skipped(self) -> bool:
        return self.plan is None


class InstallService:
    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        http: HttpClient,
        paths: InstallPaths,
        platform: PlatformProfile,
        all_pages: bool = False,
    ) -> None:
        self._console = console
        self._http = http
        self._paths = paths
        self._platform = platform
        self._all_pages = all_pages
        self._downloader = Downloader(http, paths.cache_dir)
        self._planner = InstallationPlanner()

    def _releases(
        self,
        ref: ToolRef,
        api_url: str | None,
        *,
        all_pages: bool,
    ) -> Result[list[Release], InstallError]:
        if not api_url:
            return Err(MissingApiUrl(host=ref.host))
        result = list_releases(self._http, api_url, ref.repo_path, all_pages=all_pages)
        if isinstance(result, Err):
            return Err(ListingFailed(repo=str(ref), reason=str(result.error)))
        return Ok(result.value)

    def _releases_for(
        self,
        ref: ToolRef,
        constraint: VersionConstraint,
        options: ToolOptions,
    ) -> Result[list[Release], InstallError]:
        """Releases to resolve ``constraint`` against.

        An exact version is looked up by tag first, one request per tag
        spelling; the full listing is walked only when none of them names a
        stable release.
        """
        if isinstance(constraint, Exact) and options.api_url:
            prefix = options.for_platform(self._platform).version_prefix
            for tag in candidate_tags(constraint.version, prefix):
                found = get_release(self._http, options.api_url, ref.repo_path, tag)
                if isinstance(found, Ok) and found.value.is_stable:
                    return Ok([found.value])

        return self._releases(
            ref,
            options.api_url,
            all_pages=self._all_pages or isinstance(constraint, Exact),
        )

    def list_versions(
        self,
        ref: ToolRef,
        options: ToolOptions,
    ) -> Result[list[str], InstallError]:
        """Installable versions, oldest first."""
        releases = self._releases(ref, options.api_url, all_pages=True)
        if isinstance(releases, Err):
            return releases
        tags = [release.tag for release in releases.value]
        return Ok(list(reversed(filter_versions(options.version_prefix, tags))))

    def _fetch(self, asset: Asset, *, force: bool) -> Result[bytes, DownloadFailed]:
        self._console.print(f"download {asset.name}", Style.DIM)
        result = self._downloader.fetch(asset, force=force)
        if isinstance(result, Err):
            return Err(DownloadFailed(asset=asset.name, reason=str(result.error)))
        return Ok(result.value)

    def _discard(self, asset: Asset) -> None:
        self._downloader.clear_cache(asset.url)
        if asset.api_url:
            self._downloader.clear_cache(asset.api_url)

    def plan(
        self,
        ref: ToolRef,
        constraint: VersionConstraint,
        options: ToolOptions,
        *,
        force: bool = False,
        releases: list[Release] | None = None,
    ) -> Result[InstallationPlan, InstallError]:
        """Resolve, download and verify without placing anything."""
        if releases is None:
            listed = self._releases_for(ref, constraint, options)
            if isinstance(listed, Err):
                return listed
            releases = listed.value

        locked = self._locked(ref, constraint, options, releases)
        request = InstallRequest(
            name=ref.name,
            constraint=constraint,
            options=options,
            platform=self._platform,
            locked_asset=locked.asset if locked else None,
            locked_sha256=(locked.sha256 or None) if locked else None,
        )

        chosen: list[Asset] = []

        def fetch(asset: Asset) -> Result[bytes, DownloadFailed]:
            chosen.append(asset)
            return self._fetch(asset, force=force)

        result = self._planner.plan(request, releases, fetch)
        if isinstance(result, Err) and chosen:
            if isinstance(result.error, SizeMismatch | ChecksumMismatch):
                # A corrupted download must not be served from cache next time.
                self._discard(chosen[-1])
        return result

    def _locked(
        self,
        ref: ToolRef,
        constraint: VersionConstraint,
        options: ToolOptions,
        releases: list[Release],
    ) -> LockEntry | None:
        """Lock entry for this platform, if it still describes this request.

        The entry must record the version resolved now, installed with the
        same effective options.
        """
        locked = locked_entry(self._paths.install_dir, ref.key, self._platform.key)
        if locked is None:
            return None

        effective = options.for_platform(self._platform)
        if locked.options != effective.fingerprint():
            return None

        resolved = resolve_version(
            constraint, effective.version_prefix, [r.tag for r in releases]
        )
        if isinstance(resolved, Err) or resolved.value.tag != locked.tag:
            return None
        return locked

    def install(
        self,
        ref: ToolRef,
        constraint: VersionConstraint,
        options: ToolOptions,
        *,
        force: bool = False,
    ) -> Result[InstallOutcome, InstallError]:
        listed = self._releases_for(ref, constraint, options)
        if isinstance(listed, Err):
            return listed
        releases = listed.value

        if not force:
            existing = self._existing(ref, constraint, options, releases)
            if existing is not None:
                self._console.success(f"{ref} {existing.version} already installed")
                return Ok(existing)

        planned = self.plan(ref, constraint, options, force=force, releases=releases)
        if isinstance(planned, Err):
            return planned
        plan = planned.value

        root = self._paths.tool_dir(ref, plan.version.version)
        placed = self._place(plan, root)
        if isinstance(placed, Err):
            return placed

        record(
            self._paths.install_dir,
            ref.key,
            self._platform.key,
            LockEntry.now(
                tag=plan.version.tag,
                version=plan.version.version,
                asset=plan.asset.name,
                url=plan.asset.url,
                sha256=plan.artifact.sha256,
                bin_dir=plan.bin_dir.as_posix(),
                api_url=plan.asset.api_url,
                options=options.for_platform(self._platform).fingerprint(),
            ),
        )

        outcome = InstallOutcome(
            version=plan.version.version,
            root=root,
            bin_dir=placed.value,
            plan=plan,
        )
        self._console.success(f"{ref} {plan.version} installed")
        self._console.detail("bin", str(outcome.bin_dir))
        if not outcome.bin_dir.is_dir():
            self._console.warning(f"bin directory does not exist: {outcome.bin_dir}")
        return Ok(outcome)

    def _existing(
        self,
        ref: ToolRef,
        constraint: VersionConstraint,
        options: ToolOptions,
        releases: list[Release],
    ) -> InstallOutcome | None:
        """Outcome for an install already matching the lock, if any."""
        locked = self._locked(ref, constraint, options, releases)
        if locked is None:
            return None

        root = self._paths.tool_dir(ref, locked.version)
        if not root.is_dir():
            return None
        return InstallOutcome(version=locked.version, root=root, bin_dir=root / locked.bin_dir)

    def _place(self, plan: InstallationPlan, root: Path) -> Result[Path, InstallError]:
        """Write the verified content under ``root``; returns the bin directory."""
        if plan.archive_format is not None:
            result = extract(
                plan.artifact.data,
                plan.archive_format,
                root,
                strip_components=plan.strip_components,
                name=plan.asset.name,
            )
            if isinstance(result, Err):
                return result
            return Ok(root / plan.bin_dir)

        bin_name = plan.bin_name or plan.asset.name
        target = root / plan.bin_dir / bin_name
        try:
            remove_install(root)
            atomic_write_bytes(target, plan.artifact.data)
            if self._platform.os.is_unix:
                os.chmod(target, 0o755)
        except OSError as e:
            return Err(PlacementFailed(path=target, reason=str(e)))
        return Ok(target.parent)
