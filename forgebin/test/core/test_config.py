"""Tests for forgebin.core.config module."""

from pathlib import Path

import pytest

from forgebin.core.config import Config, ConfigError, load_config, load_config_or_default
from forgebin.core.result import Err, Ok
from forgebin.install.options import Checksum

SAMPLE = """
[settings]
install_dir = "/opt/forgebin"
all_pages = true

[forges."Codeberg.org"]
api_url = "https://codeberg.org/api/v1/"

[tools."codeberg.org/owner/tool"]
version = "1.2.0"
asset_pattern = "tool-*-{os}-{arch}.tar.gz"
version_prefix = ""
strip_components = 1

[tools."codeberg.org/owner/tool".platforms."windows-x64"]
asset_pattern = "tool-*-windows.zip"
checksum = "sha256:ABCDEF0123456789abcdef0123456789abcdef0123456789abcdef0123456789"
"""


class TestConfigFromDict:
    """Tests for Config.from_dict."""

    def test_empty(self) -> None:
        """An empty table yields defaults."""
        config = Config.from_dict({})
        assert config.settings.install_dir is None
        assert config.settings.all_pages is False
        assert config.forges == {}
        assert config.tools == {}

    def test_forge_api_url(self) -> None:
        """Hosts are case-insensitive; trailing slashes are dropped."""
        config = Config.from_dict({"forges": {"Codeberg.org": {"api_url": "https://x/api/v1/"}}})
        assert config.api_url_for("codeberg.org") == "https://x/api/v1"
        assert config.api_url_for("CODEBERG.ORG") == "https://x/api/v1"
        assert config.api_url_for("example.com") is None

    def test_forge_without_api_url_rejected(self) -> None:
        with pytest.raises(ValueError, match="api_url"):
            Config.from_dict({"forges": {"codeberg.org": {}}})

    def test_unknown_tool_is_empty(self) -> None:
        config = Config.from_dict({})
        tool = config.tool("codeberg.org/a/b")
        assert tool.version is None
        assert tool.options.asset_pattern is None


class TestLoadConfig:
    """Tests for load_config."""

    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(SAMPLE, encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Ok)
        config = result.value

        assert config.settings.install_dir == Path("/opt/forgebin")
        assert config.settings.all_pages is True
        assert config.api_url_for("codeberg.org") == "https://codeberg.org/api/v1"

        tool = config.tool("codeberg.org/owner/tool")
        assert tool.version == "1.2.0"
        assert tool.options.asset_pattern == "tool-*-{os}-{arch}.tar.gz"
        assert tool.options.version_prefix == ""
        assert tool.options.strip_components == 1

        override = tool.options.platforms["windows-x64"]
        assert override.asset_pattern == "tool-*-windows.zip"
        assert override.checksum == Checksum.parse(
            "sha256:abcdef0123456789abcdef0123456789abcdef0123456789abcdef0123456789"
        )

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[settings\n", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_invalid_tool_options(self, tmp_path: Path) -> None:
        """Bad checksums are reported with the tool key."""
        path = tmp_path / "config.toml"
        path.write_text('[tools."h/o/r"]\nchecksum = "crc32:00"\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "h/o/r" in result.error.message

    def test_or_default_missing(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / "nope.toml")
        assert result == Ok(Config())

    def test_or_default_still_reports_broken_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("not toml = = =", encoding="utf-8")
        assert isinstance(load_config_or_default(path), Err)
