"""Forge API queries.

Pure functions over an ``HttpClient`` that list what a repository has
published. The API base URL (``https://codeberg.org/api/v1`` and the like) is
supplied by the caller; nothing here derives it from a host name.

All functions take an HttpClient parameter for testability.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from forgebin.core.result import Err, Ok, Result
from forgebin.core.structured import as_obj_list, as_str_dict
from forgebin.forge.http import HttpError
from forgebin.forge.models import Release

if TYPE_CHECKING:
    from forgebin.forge.http import HttpClient

__all__ = ["get_release", "list_releases"]


def _collect_pages(
    http: HttpClient, url: str, *, all_pages: bool
) -> Result[list[object], HttpError]:
    """GET ``url`` and, when ``all_pages`` is set, follow ``rel="next"`` links."""
    items: list[object] = []
    next_url: str | None = url
    while next_url is not None:
        result = http.get_json(next_url)
        if isinstance(result, Err):
            return result

        page = as_obj_list(result.value.data)
        if page is None:
            return Err(HttpError(url=next_url, status=0, message="Expected JSON array"))
        items.extend(page)

        next_url = result.value.next_url if all_pages else None
    return Ok(items)


def list_releases(
    http: HttpClient,
    api_url: str,
    repo: str,
    *,
    all_pages: bool = False,
) -> Result[list[Release], HttpError]:
    """List stable releases of ``repo``, newest first.

    Drafts and prereleases are dropped; the forge's order is kept.

    Args:
        http: HTTP client to use
        api_url: API base, e.g. "https://codeberg.org/api/v1"
        repo: Repository in "owner/repo" format
        all_pages: Follow pagination links instead of stopping at page one

    Returns:
        Ok with releases, or Err with HttpError
    """
    url = f"{api_url.rstrip('/')}/repos/{repo}/releases"
    result = _collect_pages(http, url, all_pages=all_pages)
    if isinstance(result, Err):
        return result

    releases: list[Release] = []
    for item in result.value:
        table = as_str_dict(item)
        if table is None:
            continue
        release = Release.from_json(table)
        if release is not None and release.is_stable:
            releases.append(release)
    return Ok(releases)


def get_release(
    http: HttpClient, api_url: str, repo: str, tag: str
) -> Result[Release, HttpError]:
    """Fetch the single release published under ``tag``."""
    url = f"{api_url.rstrip('/')}/repos/{repo}/releases/tags/{tag}"
    result = http.get_json(url)
    if isinstance(result, Err):
        return result

    table = as_str_dict(result.value.data)
    release = Release.from_json(table) if table is not None else None
    if release is None:
        return Err(HttpError(url=url, status=0, message="Missing tag_name in response"))
    return Ok(release)
