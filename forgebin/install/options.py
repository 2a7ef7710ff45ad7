"""User-specified options for a tool install.

``ToolOptions`` is what a ``[tools."host/owner/repo"]`` config table or the
CLI flags describe. Per-platform overrides live under ``platforms`` keyed by
``"{os}-{arch}"`` (``linux-x64``, ``macos-arm64``, ...); when the running
platform matches a key, its non-empty fields replace the top-level ones.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from forgebin.core.structured import as_str_dict, get_int, get_raw_str, get_str, get_table
from forgebin.platform.detection import Arch, Os

if TYPE_CHECKING:
    from forgebin.platform.detection import PlatformProfile

__all__ = [
    "SUPPORTED_ALGORITHMS",
    "Checksum",
    "PlatformOverride",
    "ToolOptions",
    "platform_keys",
]

SUPPORTED_ALGORITHMS = (
    "sha256",
    "sha512",
    "sha384",
    "sha224",
    "sha1",
    "md5",
    "blake2b",
    "blake2s",
)

_OS_KEY_ALIASES: dict[Os, tuple[str, ...]] = {
    Os.LINUX: ("linux",),
    Os.MACOS: ("macos", "darwin"),
    Os.WINDOWS: ("windows", "win"),
    Os.OTHER: ("other",),
}

_ARCH_KEY_ALIASES: dict[Arch, tuple[str, ...]] = {
    Arch.X64: ("x64", "amd64", "x86_64"),
    Arch.ARM64: ("arm64", "aarch64"),
    Arch.X86: ("x86", "i686", "386"),
    Arch.ARM: ("arm", "armv7"),
    Arch.OTHER: ("other",),
}


def platform_keys(platform: PlatformProfile) -> tuple[str, ...]:
    """Override keys that select ``platform``, canonical key first."""
    return tuple(
        f"{os_name}-{arch_name}"
        for os_name in _OS_KEY_ALIASES[platform.os]
        for arch_name in _ARCH_KEY_ALIASES[platform.arch]
    )


@dataclass(frozen=True, slots=True)
class Checksum:
    """Expected digest of an asset, written ``"<algorithm>:<hex>"``."""

    algorithm: str
    digest: str

    def __post_init__(self) -> None:
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported checksum algorithm {self.algorithm!r} "
                f"(expected one of: {', '.join(SUPPORTED_ALGORITHMS)})"
            )
        expected_len = hashlib.new(self.algorithm).digest_size * 2
        if len(self.digest) != expected_len or any(
            ch not in "0123456789abcdef" for ch in self.digest
        ):
            raise ValueError(
                f"Invalid {self.algorithm} digest: expected {expected_len} hex characters"
            )

    @classmethod
    def parse(cls, value: str) -> Checksum:
        """Parse ``"sha256:ABCD..."``; the digest is compared case-insensitively."""
        algorithm, sep, digest = value.strip().partition(":")
        if not sep or not algorithm or not digest:
            raise ValueError(f"Invalid checksum {value!r}: expected '<algorithm>:<hex-digest>'")
        return cls(algorithm=algorithm.strip().lower(), digest=digest.strip().lower())

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.digest}"


@dataclass(frozen=True, slots=True)
class PlatformOverride:
    """Fields a ``platforms."<os>-<arch>"`` table may override."""

    asset_pattern: str | None = None
    checksum: Checksum | None = None
    size: int | None = None
    url: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PlatformOverride:
        checksum = get_str(data, "checksum")
        return cls(
            asset_pattern=get_str(data, "asset_pattern"),
            checksum=Checksum.parse(checksum) if checksum else None,
            size=_non_negative(data, "size"),
            url=get_str(data, "url"),
        )


def _non_negative(data: Mapping[str, object], key: str) -> int | None:
    value = get_int(data, key)
    if value is not None and value < 0:
        raise ValueError(f"{key} must be non-negative, got: {value}")
    return value


@dataclass(frozen=True, slots=True)
class ToolOptions:
    """Options controlling how one tool is resolved and laid out.

    Attributes:
        asset_pattern: Glob narrowing candidate assets (``*`` and ``?``)
        version_prefix: None for default ``v`` handling, "" for verbatim
            tags, anything else for a custom tag prefix
        checksum: Expected digest of the downloaded asset
        size: Expected size in bytes of the downloaded asset
        strip_components: Leading path components to drop; None auto-detects
        bin: New name for a single downloaded binary
        bin_path: Template for the binary directory inside the install
        api_url: Forge API base URL
        url: Direct download URL bypassing asset selection
        platforms: Per-platform overrides keyed by ``"{os}-{arch}"``
    """

    asset_pattern: str | None = None
    version_prefix: str | None = None
    checksum: Checksum | None = None
    size: int | None = None
    strip_components: int | None = None
    bin: str | None = None
    bin_path: str | None = None
    api_url: str | None = None
    url: str | None = None
    platforms: dict[str, PlatformOverride] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.strip_components is not None and self.strip_components < 0:
            raise ValueError(
                f"strip_components must be non-negative, got: {self.strip_components}"
            )
        if self.size is not None and self.size < 0:
            raise ValueError(f"size must be non-negative, got: {self.size}")

    def override_for(self, platform: PlatformProfile) -> PlatformOverride | None:
        for key in platform_keys(platform):
            override = self.platforms.get(key)
            if override is not None:
                return override
        return None

    def for_platform(self, platform: PlatformProfile) -> ToolOptions:
        """Options with the matching per-platform override applied."""
        override = self.override_for(platform)
        if override is None:
            return self
        return replace(
            self,
            asset_pattern=override.asset_pattern or self.asset_pattern,
            checksum=override.checksum or self.checksum,
            size=override.size if override.size is not None else self.size,
            url=override.url or self.url,
        )

    def fingerprint(self) -> str:
        """Digest of the fields that decide what gets downloaded and where it lands.

        Meant for options already passed through ``for_platform``; the
        ``platforms`` table itself is not part of it.
        """
        fields = {
            "asset_pattern": self.asset_pattern,
            "version_prefix": self.version_prefix,
            "checksum": str(self.checksum) if self.checksum else None,
            "size": self.size,
            "strip_components": self.strip_components,
            "bin": self.bin,
            "bin_path": self.bin_path,
            "api_url": self.api_url,
            "url": self.url,
        }
        encoded = json.dumps(fields, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()[:16]

    def merged(self, other: ToolOptions) -> ToolOptions:
        """Options where every field set in ``other`` wins over ``self``."""
        platforms = {**self.platforms, **other.platforms}
        return ToolOptions(
            asset_pattern=other.asset_pattern or self.asset_pattern,
            version_prefix=(
                other.version_prefix if other.version_prefix is not None else self.version_prefix
            ),
            checksum=other.checksum or self.checksum,
            size=other.size if other.size is not None else self.size,
            strip_components=(
                other.strip_components
                if other.strip_components is not None
                else self.strip_components
            ),
            bin=other.bin or self.bin,
            bin_path=other.bin_path or self.bin_path,
            api_url=other.api_url or self.api_url,
            url=other.url or self.url,
            platforms=platforms,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ToolOptions:
        """Build options from a parsed TOML table.

        Raises:
            ValueError: On malformed checksums or negative counts.
        """
        platforms: dict[str, PlatformOverride] = {}
        for key, value in (get_table(data, "platforms") or {}).items():
            table = as_str_dict(value)
            if table is None:
                raise ValueError(f"platforms.{key} must be a table")
            platforms[key.strip().lower()] = PlatformOverride.from_dict(table)

        checksum = get_str(data, "checksum")
        return cls(
            asset_pattern=get_str(data, "asset_pattern"),
            version_prefix=get_raw_str(data, "version_prefix"),
            checksum=Checksum.parse(checksum) if checksum else None,
            size=_non_negative(data, "size"),
            strip_components=_non_negative(data, "strip_components"),
            bin=get_str(data, "bin"),
            bin_path=get_str(data, "bin_path"),
            api_url=get_str(data, "api_url"),
            url=get_str(data, "url"),
            platforms=platforms,
        )
