"""Install engine: version, asset, integrity and layout decisions."""

from forgebin.install.archive import ArchiveFormat, detect_format, extract, list_members
from forgebin.install.errors import (
    ChecksumMismatch,
    DownloadFailed,
    ExtractFailed,
    IntegrityError,
    InvalidOptions,
    NoMatchingAsset,
    PlanError,
    ReleaseNotFound,
    SizeMismatch,
    VersionNotFound,
)
from forgebin.install.layout import LayoutDecision, resolve_layout, resolve_single_file
from forgebin.install.lock import LockEntry, load_lock, save_lock
from forgebin.install.options import Checksum, PlatformOverride, ToolOptions
from forgebin.install.planner import InstallationPlan, InstallationPlanner, InstallRequest
from forgebin.install.scorer import AssetScore, score_asset, select_asset
from forgebin.install.template import TemplateContext, expand
from forgebin.install.tree import ExtractedTree
from forgebin.install.verify import VerifiedArtifact, verify
from forgebin.install.version import (
    LATEST,
    Exact,
    Latest,
    ResolvedVersion,
    VersionConstraint,
    filter_versions,
    parse_constraint,
    resolve_version,
)

__all__ = [
    # Errors
    "ChecksumMismatch",
    "DownloadFailed",
    "ExtractFailed",
    "IntegrityError",
    "InvalidOptions",
    "NoMatchingAsset",
    "PlanError",
    "ReleaseNotFound",
    "SizeMismatch",
    "VersionNotFound",
    # Options
    "Checksum",
    "PlatformOverride",
    "ToolOptions",
    # Version
    "LATEST",
    "Exact",
    "Latest",
    "ResolvedVersion",
    "VersionConstraint",
    "filter_versions",
    "parse_constraint",
    "resolve_version",
    # Assets
    "AssetScore",
    "score_asset",
    "select_asset",
    # Integrity
    "VerifiedArtifact",
    "verify",
    # Layout
    "ArchiveFormat",
    "ExtractedTree",
    "LayoutDecision",
    "TemplateContext",
    "detect_format",
    "expand",
    "extract",
    "list_members",
    "resolve_layout",
    "resolve_single_file",
    # Planning
    "InstallRequest",
    "InstallationPlan",
    "InstallationPlanner",
    "LockEntry",
    "load_lock",
    "save_lock",
]
