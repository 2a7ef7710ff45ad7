"""Release and asset records as listed by a forge.

Forges speak the GitHub releases dialect: a release has a ``tag_name``,
``draft`` and ``prerelease`` flags and an ``assets`` array whose entries carry
``name``, ``size``, ``browser_download_url`` and an API ``url``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from forgebin.core.structured import as_obj_list, as_str_dict, get_int, get_str

__all__ = ["Asset", "Release", "ToolRef", "filename_from_url"]


def filename_from_url(url: str) -> str:
    """Return the last path segment of ``url`` (``download`` if empty)."""
    path = unquote(urlparse(url).path)
    return PurePosixPath(path).name or "download"


@dataclass(frozen=True, slots=True)
class Asset:
    """A downloadable file attached to a release.

    Attributes:
        name: File name as listed by the forge
        url: Browser download URL
        size: Size in bytes as reported by the forge, if any
        api_url: API endpoint that streams the content, if any
    """

    name: str
    url: str
    size: int | None = None
    api_url: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Asset name cannot be empty")

    @classmethod
    def from_url(cls, url: str) -> Asset:
        """Asset for a direct download URL with no forge listing behind it."""
        return cls(name=filename_from_url(url), url=url)

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> Asset | None:
        name = get_str(data, "name")
        url = get_str(data, "browser_download_url")
        if name is None or url is None:
            return None
        size = get_int(data, "size")
        return cls(
            name=name,
            url=url,
            size=size if size is not None and size >= 0 else None,
            api_url=get_str(data, "url"),
        )


@dataclass(frozen=True, slots=True)
class Release:
    """A tagged publication of a repository."""

    tag: str
    assets: tuple[Asset, ...] = ()
    draft: bool = False
    prerelease: bool = False

    @property
    def is_stable(self) -> bool:
        return not self.draft and not self.prerelease

    def find_asset(self, name: str) -> Asset | None:
        """Find an asset by name, exact first, then case-insensitively."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        lowered = name.lower()
        for asset in self.assets:
            if asset.name.lower() == lowered:
                return asset
        return None

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> Release | None:
        tag = get_str(data, "tag_name")
        if tag is None:
            return None

        assets: list[Asset] = []
        for item in as_obj_list(data.get("assets")) or []:
            table = as_str_dict(item)
            if table is None:
                continue
            asset = Asset.from_json(table)
            if asset is not None:
                assets.append(asset)

        return cls(
            tag=tag,
            assets=tuple(assets),
            draft=data.get("draft") is True,
            prerelease=data.get("prerelease") is True,
        )


@dataclass(frozen=True, slots=True)
class ToolRef:
    """A repository on a forge: ``host/owner/repo``."""

    host: str
    owner: str
    repo: str

    def __post_init__(self) -> None:
        for part in (self.host, self.owner, self.repo):
            if not part or "/" in part or part in (".", ".."):
                raise ValueError(f"Invalid tool reference part: {part!r}")

    @property
    def name(self) -> str:
        """Tool name used in templates."""
        return self.repo

    @property
    def repo_path(self) -> str:
        """``owner/repo`` as used in API paths."""
        return f"{self.owner}/{self.repo}"

    @property
    def key(self) -> str:
        """Config and lock key."""
        return f"{self.host}/{self.owner}/{self.repo}".lower()

    def __str__(self) -> str:
        return f"{self.host}/{self.owner}/{self.repo}"
