"""Services wiring the install engine to the network and the filesystem."""

from forgebin.services.install_errors import (
    InstallError,
    ListingFailed,
    MissingApiUrl,
    PlacementFailed,
)
from forgebin.services.installer import InstallOutcome, InstallPaths, InstallService

__all__ = [
    "InstallError",
    "InstallOutcome",
    "InstallPaths",
    "InstallService",
    "ListingFailed",
    "MissingApiUrl",
    "PlacementFailed",
]
