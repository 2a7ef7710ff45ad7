"""Asset downloader with caching support.

This module provides a Downloader class that:
- Downloads release assets into a URL-keyed cache directory
- Falls back to the forge API endpoint when the browser URL fails
- Hands the content back as bytes for integrity verification
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from forgebin.core.result import Err, Ok, Result
from forgebin.forge.models import filename_from_url

if TYPE_CHECKING:
    from collections.abc import Callable

    from forgebin.forge.http import HttpClient, HttpError
    from forgebin.forge.models import Asset

__all__ = ["Downloader", "DownloadResult"]

OCTET_STREAM = {"Accept": "application/octet-stream"}


@dataclass(frozen=True, slots=True)
class DownloadResult:
    """Result of a download operation.

    Attributes:
        path: Path to the downloaded file
        from_cache: True if file was served from cache
        size: File size in bytes
    """

    path: Path
    from_cache: bool
    size: int


class Downloader:
    """Asset downloader with a URL-keyed cache.

    Usage:
        downloader = Downloader(http_client, cache_dir)
        result = downloader.fetch(asset)
        if is_ok(result):
            data = result.value
    """

    def __init__(
        self,
        http: HttpClient,
        cache_dir: Path,
        *,
        progress: Callable[[int, int], None] | None = None,
    ) -> None:
        self._http = http
        self._cache_dir = cache_dir
        self._progress = progress

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def cache_key(self, url: str) -> str:
        """Cache file name for URL.

        Example: ".../rg-linux.tar.gz" -> "a1b2c3d4_rg-linux.tar.gz"
        """
        url_hash = hashlib.sha256(url.encode()).hexdigest()[:8]
        return f"{url_hash}_{filename_from_url(url)}"

    def cache_path(self, url: str) -> Path:
        return self._cache_dir / self.cache_key(url)

    def clear_cache(self, url: str | None = None) -> int:
        """Remove one cached URL, or everything when ``url`` is None.

        Returns:
            Number of files removed
        """
        if url is not None:
            path = self.cache_path(url)
            if path.exists():
                path.unlink()
                return 1
            return 0

        count = 0
        if self._cache_dir.exists():
            for file in self._cache_dir.iterdir():
                if file.is_file():
                    file.unlink()
                    count += 1
        return count

    def download(
        self,
        url: str,
        *,
        force: bool = False,
        headers: dict[str, str] | None = None,
    ) -> Result[DownloadResult, HttpError]:
        """Download URL into the cache.

        Args:
            url: URL to download
            force: Re-download even if cached
            headers: Extra request headers

        Returns:
            Ok with DownloadResult, or Err with HttpError
        """
        cache_path = self.cache_path(url)

        if not force and cache_path.exists():
            return Ok(DownloadResult(path=cache_path, from_cache=True, size=cache_path.stat().st_size))

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        result = self._http.download(url, cache_path, headers=headers, progress=self._progress)

        if isinstance(result, Err):
            # Partial files must not be served from cache later.
            if cache_path.exists():
                cache_path.unlink()
            return result

        return Ok(DownloadResult(path=cache_path, from_cache=False, size=cache_path.stat().st_size))

    def fetch(self, asset: Asset, *, force: bool = False) -> Result[bytes, HttpError]:
        """Download ``asset`` and return its content.

        The browser URL is tried first; if it fails and the forge listed an
        API URL, that endpoint is asked for the raw octet stream instead.
        """
        result = self.download(asset.url, force=force)
        if isinstance(result, Err) and asset.api_url and asset.api_url != asset.url:
            result = self.download(asset.api_url, force=force, headers=OCTET_STREAM)
        if isinstance(result, Err):
            return result
        return Ok(result.value.path.read_bytes())
