"""Tests for forgebin.forge.download - Downloader with cache."""

from pathlib import Path

from forgebin.core.result import Err, Ok
from forgebin.forge.download import OCTET_STREAM, Downloader
from forgebin.forge.http import HttpError, MockHttpClient
from forgebin.forge.models import Asset

BROWSER_URL = "https://codeberg.org/o/tool/releases/download/v1/tool.tar.gz"
API_URL = "https://codeberg.org/api/v1/repos/o/tool/releases/assets/9"


class TestCacheKey:
    """Tests for cache key generation."""

    def test_includes_filename(self, tmp_path: Path) -> None:
        key = Downloader(MockHttpClient(), tmp_path).cache_key(BROWSER_URL)
        assert key.endswith("_tool.tar.gz")

    def test_unique_per_url(self, tmp_path: Path) -> None:
        downloader = Downloader(MockHttpClient(), tmp_path)
        assert downloader.cache_key("https://x/v1/f.zip") != downloader.cache_key("https://x/v2/f.zip")


class TestDownload:
    """Tests for Downloader.download."""

    def test_cache_hit(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(BROWSER_URL, b"content")
        downloader = Downloader(http, tmp_path)

        first = downloader.download(BROWSER_URL)
        second = downloader.download(BROWSER_URL)

        assert isinstance(first, Ok) and first.value.from_cache is False
        assert isinstance(second, Ok) and second.value.from_cache is True
        assert http.calls == [("download", BROWSER_URL)]

    def test_force(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(BROWSER_URL, b"content")
        downloader = Downloader(http, tmp_path)
        downloader.download(BROWSER_URL)
        result = downloader.download(BROWSER_URL, force=True)
        assert isinstance(result, Ok)
        assert result.value.from_cache is False

    def test_failure_leaves_no_cache_file(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(BROWSER_URL, HttpError(BROWSER_URL, 503, "Unavailable"))
        downloader = Downloader(http, tmp_path)
        assert isinstance(downloader.download(BROWSER_URL), Err)
        assert not downloader.cache_path(BROWSER_URL).exists()

    def test_clear_cache(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(BROWSER_URL, b"content")
        http.set_download(API_URL, b"content")
        downloader = Downloader(http, tmp_path)
        downloader.download(BROWSER_URL)
        downloader.download(API_URL)

        assert downloader.clear_cache(BROWSER_URL) == 1
        assert downloader.clear_cache(BROWSER_URL) == 0
        assert downloader.clear_cache() == 1


class TestFetch:
    """Tests for Downloader.fetch."""

    def test_browser_url(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(BROWSER_URL, b"bytes")
        result = Downloader(http, tmp_path).fetch(Asset(name="tool.tar.gz", url=BROWSER_URL))
        assert result == Ok(b"bytes")

    def test_falls_back_to_api_url(self, tmp_path: Path) -> None:
        """Private repos serve assets through the API with an octet-stream Accept."""
        http = MockHttpClient()
        http.set_download(BROWSER_URL, HttpError(BROWSER_URL, 404, "Not Found"))
        http.set_download(API_URL, b"bytes")
        asset = Asset(name="tool.tar.gz", url=BROWSER_URL, api_url=API_URL)

        result = Downloader(http, tmp_path).fetch(asset)

        assert result == Ok(b"bytes")
        assert http.headers[API_URL] == OCTET_STREAM

    def test_both_fail(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        asset = Asset(name="tool.tar.gz", url=BROWSER_URL, api_url=API_URL)
        result = Downloader(http, tmp_path).fetch(asset)
        assert isinstance(result, Err)
        assert result.error.url == API_URL
