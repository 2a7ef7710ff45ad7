"""Tests for forgebin.forge.http module."""

from pathlib import Path

from forgebin.core.result import Err, Ok
from forgebin.forge.http import HttpClient, HttpError, JsonPage, MockHttpClient, next_page_url


class TestNextPageUrl:
    """Link header parsing."""

    def test_next(self) -> None:
        link = '<https://x/releases?page=2>; rel="next", <https://x/releases?page=5>; rel="last"'
        assert next_page_url(link) == "https://x/releases?page=2"

    def test_next_after_prev(self) -> None:
        link = '<https://x/r?page=1>; rel="prev", <https://x/r?page=3>; rel="next"'
        assert next_page_url(link) == "https://x/r?page=3"

    def test_none(self) -> None:
        assert next_page_url(None) is None
        assert next_page_url('<https://x/r?page=1>; rel="prev"') is None

    def test_json_page(self) -> None:
        page = JsonPage(data=[], link='<https://x/2>; rel="next"')
        assert page.next_url == "https://x/2"


class TestHttpError:
    def test_str_with_status(self) -> None:
        assert str(HttpError("https://x", 404, "Not Found")) == "HTTP 404: Not Found (https://x)"

    def test_str_network(self) -> None:
        assert str(HttpError("https://x", 0, "timed out")) == "timed out (https://x)"


class TestMockHttpClient:
    """MockHttpClient behaves like a client in tests."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_json(self) -> None:
        client = MockHttpClient()
        client.set_json("https://x/a", {"k": 1}, link='<https://x/b>; rel="next"')
        result = client.get_json("https://x/a")
        assert isinstance(result, Ok)
        assert result.value.data == {"k": 1}
        assert result.value.next_url == "https://x/b"
        assert client.calls == [("get_json", "https://x/a")]

    def test_unknown_url_is_404(self) -> None:
        result = MockHttpClient().get_json("https://x/missing")
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_download_records_headers(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        client.set_download("https://x/f", b"data")
        dest = tmp_path / "f"
        result = client.download("https://x/f", dest, headers={"Accept": "application/octet-stream"})
        assert result == Ok(dest)
        assert dest.read_bytes() == b"data"
        assert client.headers["https://x/f"] == {"Accept": "application/octet-stream"}
