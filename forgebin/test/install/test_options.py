"""Tests for forgebin.install.options."""

import pytest

from forgebin.install.options import Checksum, PlatformOverride, ToolOptions, platform_keys
from forgebin.platform.detection import Arch, Libc, Os, PlatformProfile

LINUX = PlatformProfile(Os.LINUX, Arch.X64, Libc.GNU)
MACOS_ARM = PlatformProfile(Os.MACOS, Arch.ARM64)
DIGEST = "ab" * 32


class TestChecksum:
    def test_parse(self) -> None:
        assert Checksum.parse(f"sha256:{DIGEST}") == Checksum("sha256", DIGEST)

    def test_parse_normalizes_case_and_space(self) -> None:
        assert Checksum.parse(f" SHA256 : {DIGEST.upper()} ") == Checksum("sha256", DIGEST)

    def test_str(self) -> None:
        assert str(Checksum("sha256", DIGEST)) == f"sha256:{DIGEST}"

    @pytest.mark.parametrize(
        "value",
        [DIGEST, "sha256:", ":abc", "crc32:0000", "sha256:abc", f"sha256:{'zz' * 32}"],
    )
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            Checksum.parse(value)

    def test_digest_length_follows_algorithm(self) -> None:
        Checksum.parse("md5:" + "0" * 32)
        with pytest.raises(ValueError, match="128 hex"):
            Checksum.parse("sha512:" + "0" * 64)


class TestPlatformKeys:
    def test_canonical_first(self) -> None:
        keys = platform_keys(LINUX)
        assert keys[0] == "linux-x64"
        assert "linux-amd64" in keys
        assert "linux-x86_64" in keys

    def test_aliases(self) -> None:
        assert "darwin-aarch64" in platform_keys(MACOS_ARM)


class TestForPlatform:
    def test_no_override(self) -> None:
        options = ToolOptions(asset_pattern="*.tar.gz")
        assert options.for_platform(LINUX) is options

    def test_override_replaces_set_fields(self) -> None:
        options = ToolOptions(
            asset_pattern="*.tar.gz",
            size=10,
            platforms={"macos-arm64": PlatformOverride(asset_pattern="*-universal.zip", size=0)},
        )
        effective = options.for_platform(MACOS_ARM)
        assert effective.asset_pattern == "*-universal.zip"
        assert effective.size == 0
        assert options.for_platform(LINUX).asset_pattern == "*.tar.gz"

    def test_override_keeps_unset_fields(self) -> None:
        checksum = Checksum("sha256", DIGEST)
        options = ToolOptions(
            checksum=checksum,
            platforms={"darwin-aarch64": PlatformOverride(url="https://example.com/t")},
        )
        effective = options.for_platform(MACOS_ARM)
        assert effective.checksum == checksum
        assert effective.url == "https://example.com/t"


class TestMerged:
    def test_other_wins_when_set(self) -> None:
        base = ToolOptions(asset_pattern="a*", version_prefix="release-", strip_components=1)
        flags = ToolOptions(asset_pattern="b*", strip_components=0)
        merged = base.merged(flags)
        assert merged.asset_pattern == "b*"
        assert merged.strip_components == 0
        assert merged.version_prefix == "release-"

    def test_empty_prefix_is_set(self) -> None:
        merged = ToolOptions(version_prefix="v").merged(ToolOptions(version_prefix=""))
        assert merged.version_prefix == ""


class TestFingerprint:
    """Options that change what gets installed change the fingerprint."""

    def test_stable(self) -> None:
        assert ToolOptions(asset_pattern="*.zip").fingerprint() == (
            ToolOptions(asset_pattern="*.zip").fingerprint()
        )

    @pytest.mark.parametrize(
        "changed",
        [
            ToolOptions(asset_pattern="*.zip"),
            ToolOptions(checksum=Checksum("sha256", DIGEST)),
            ToolOptions(url="https://example.com/tool"),
            ToolOptions(strip_components=0),
            ToolOptions(bin_path="libexec"),
        ],
    )
    def test_differs_from_defaults(self, changed: ToolOptions) -> None:
        assert changed.fingerprint() != ToolOptions().fingerprint()

    def test_override_applied_before(self) -> None:
        options = ToolOptions(platforms={"linux-x64": PlatformOverride(asset_pattern="*.zip")})
        assert options.for_platform(LINUX).fingerprint() != options.fingerprint()
        assert options.for_platform(MACOS_ARM).fingerprint() == options.fingerprint()

class TestFromDict:
    def test_full_table(self) -> None:
        options = ToolOptions.from_dict(
            {
                "asset_pattern": "tool-*-{os}-{arch}.tar.gz",
                "version_prefix": "",
                "checksum": f"sha256:{DIGEST}",
                "size": 42,
                "strip_components": 0,
                "bin": "tl",
                "bin_path": "{name}/bin",
                "api_url": "https://codeberg.org/api/v1",
                "platforms": {"Windows-X64": {"asset_pattern": "*.zip"}},
            }
        )
        assert options.version_prefix == ""
        assert options.checksum == Checksum("sha256", DIGEST)
        assert options.size == 42
        assert options.strip_components == 0
        assert options.platforms == {"windows-x64": PlatformOverride(asset_pattern="*.zip")}

    def test_empty(self) -> None:
        assert ToolOptions.from_dict({}) == ToolOptions()

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="strip_components"):
            ToolOptions.from_dict({"strip_components": -1})
        with pytest.raises(ValueError, match="size"):
            ToolOptions(size=-1)

    def test_bad_platform_table(self) -> None:
        with pytest.raises(ValueError, match="platforms"):
            ToolOptions.from_dict({"platforms": {"linux-x64": "nope"}})
