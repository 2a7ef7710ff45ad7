"""Forge access: release models, HTTP, API listing and downloads."""

from forgebin.forge.api import get_release, list_releases
from forgebin.forge.download import Downloader, DownloadResult
from forgebin.forge.http import (
    HttpClient,
    HttpError,
    JsonPage,
    MockHttpClient,
    RealHttpClient,
)
from forgebin.forge.models import Asset, Release, ToolRef, filename_from_url

__all__ = [
    # Models
    "Asset",
    "Release",
    "ToolRef",
    "filename_from_url",
    # HTTP
    "HttpClient",
    "HttpError",
    "JsonPage",
    "MockHttpClient",
    "RealHttpClient",
    # API
    "get_release",
    "list_releases",
    # Download
    "Downloader",
    "DownloadResult",
]
