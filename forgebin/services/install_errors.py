from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from forgebin.install.errors import PlanError


@dataclass(frozen=True, slots=True)
class MissingApiUrl:
    host: str
    hint: str = "Pass --api-url or add [forges.\"<host>\"] api_url to the config"


@dataclass(frozen=True, slots=True)
class ListingFailed:
    repo: str
    reason: str


@dataclass(frozen=True, slots=True)
class PlacementFailed:
    path: Path
    reason: str


InstallError = PlanError | MissingApiUrl | ListingFailed | PlacementFailed
