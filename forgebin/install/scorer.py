"""Pick the release asset that fits the running platform.

Each asset name is scored on five criteria, in priority order:

1. OS: an asset naming another OS is excluded; naming ours beats naming none.
2. Arch: an asset naming another architecture is excluded; naming ours
   (or ``universal`` on macOS) beats naming none.
3. Libc (Linux only): same family +1, the other family -1, unnamed 0.
4. Format: tar.gz/tgz > zip > tar.xz > tar.bz2 > tar.zst > raw binary > anything else.
5. Build type: checksums, signatures and metadata are excluded outright;
   debug/test/symbol builds are penalized.

``AssetScore`` orders lexicographically in that sequence, so an earlier
criterion always dominates every later one. Equal scores keep listing order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from forgebin.core.result import Err, Ok, Result
from forgebin.install.errors import NoMatchingAsset
from forgebin.install.pattern import glob_match
from forgebin.install.tokens import (
    detect_arches,
    detect_libcs,
    detect_oses,
    has_token,
    is_platform_token,
    is_universal,
)
from forgebin.platform.detection import Libc, Os

if TYPE_CHECKING:
    from forgebin.forge.models import Asset
    from forgebin.platform.detection import PlatformProfile

__all__ = ["AssetScore", "format_rank", "is_metadata_file", "score_asset", "select_asset"]

FORMAT_RANKS: tuple[tuple[str, int], ...] = (
    (".tar.gz", 7),
    (".tgz", 7),
    (".zip", 6),
    (".tar.xz", 5),
    (".txz", 5),
    (".tar.bz2", 4),
    (".tbz2", 4),
    (".tbz", 4),
    (".tar.zst", 3),
    (".tzst", 3),
)
RAW_BINARY_RANK = 2
RAW_BINARY_SUFFIXES = (".exe", ".appimage", ".bin")
OTHER_FORMAT_RANK = 0

METADATA_SUFFIXES = (
    ".sha256",
    ".sha256sum",
    ".sha512",
    ".sha512sum",
    ".sha1",
    ".md5",
    ".sig",
    ".asc",
    ".minisig",
    ".pem",
    ".crt",
    ".cert",
    ".pub",
    ".sbom",
    ".spdx",
    ".json",
    ".jsonl",
    ".txt",
    ".yml",
    ".yaml",
    ".pdb",
    ".dsym",
)
METADATA_WORDS = ("checksum", "checksums", "sha256sums", "sha512sums", "sums", "manifest")
PENALTY_WORDS = ("debug", "dbg", "debuginfo", "symbols", "unstripped", "test", "tests")


@dataclass(frozen=True, slots=True, order=True)
class AssetScore:
    """Comparable score; field order is criterion priority."""

    os: int
    arch: int
    libc: int
    format: int
    build: int


def format_rank(name: str) -> int:
    lowered = name.lower()
    for suffix, rank in FORMAT_RANKS:
        if lowered.endswith(suffix):
            return rank
    if lowered.endswith(RAW_BINARY_SUFFIXES):
        return RAW_BINARY_RANK

    stem, dot, ext = lowered.rpartition(".")
    if not dot or not stem:
        return RAW_BINARY_RANK
    # "tool-1.2.3" and "tool.linux-amd64" end in version or platform text, not an extension.
    if not any(ch.isalpha() for ch in ext) or not ext.isalnum() or is_platform_token(ext):
        return RAW_BINARY_RANK
    return OTHER_FORMAT_RANK


def is_metadata_file(name: str) -> bool:
    """Checksums, signatures, SBOMs and similar non-installable files."""
    lowered = name.lower()
    if lowered.endswith(METADATA_SUFFIXES):
        return True
    return any(has_token(lowered, word) for word in METADATA_WORDS)


def _build_penalty(name: str) -> int:
    return -sum(1 for word in PENALTY_WORDS if has_token(name, word))


def _libc_score(name: str, platform: PlatformProfile) -> int:
    if platform.os != Os.LINUX or platform.libc not in (Libc.GNU, Libc.MUSL):
        return 0
    named = detect_libcs(name)
    if platform.libc in named:
        return 1
    opposite = Libc.MUSL if platform.libc == Libc.GNU else Libc.GNU
    if opposite in named:
        return -1
    return 0


def _arch_matches(name: str, platform: PlatformProfile) -> bool:
    if platform.os == Os.MACOS and is_universal(name):
        return True
    return platform.arch in detect_arches(name)


def score_asset(name: str, platform: PlatformProfile) -> AssetScore | None:
    """Score ``name`` for ``platform``; None means the asset is excluded."""
    if is_metadata_file(name):
        return None

    oses = detect_oses(name)
    if oses and platform.os not in oses:
        return None

    arch_match = _arch_matches(name, platform)
    if detect_arches(name) and not arch_match:
        return None

    return AssetScore(
        os=1 if oses else 0,
        arch=1 if arch_match else 0,
        libc=_libc_score(name, platform),
        format=format_rank(name),
        build=_build_penalty(name),
    )


def _pattern_rank(name: str, platform: PlatformProfile) -> tuple[int, AssetScore]:
    """Rank for pattern-narrowed candidates: nothing is dropped, excluded sort last."""
    score = score_asset(name, platform)
    if score is None:
        return (0, AssetScore(os=0, arch=0, libc=0, format=format_rank(name), build=0))
    return (1, score)


def select_asset(
    assets: Sequence[Asset],
    platform: PlatformProfile,
    pattern: str | None = None,
) -> Result[Asset, NoMatchingAsset]:
    """Choose the best asset for ``platform``.

    An asset naming another architecture is never chosen, even when it is
    the only one left; an unlabeled asset is.

    Args:
        assets: Release assets in listing order
        platform: Running platform
        pattern: Optional glob; when set, only matching assets are considered
            and scoring merely orders them

    Returns:
        Ok with the winning Asset, or Err with NoMatchingAsset
    """
    no_match = NoMatchingAsset(
        platform=str(platform),
        pattern=pattern,
        available=tuple(asset.name for asset in assets),
    )

    if pattern is not None:
        matched = [asset for asset in assets if glob_match(pattern, asset.name)]
        if not matched:
            return Err(no_match)
        if len(matched) == 1:
            return Ok(matched[0])
        # max() keeps the first of equal elements, i.e. listing order.
        return Ok(max(matched, key=lambda asset: _pattern_rank(asset.name, platform)))

    candidates = [
        asset
        for asset in assets
        if not is_metadata_file(asset.name)
        and platform.os in (detect_oses(asset.name) or {platform.os})
    ]
    best: Asset | None = None
    best_score: AssetScore | None = None
    for asset in candidates:
        score = score_asset(asset.name, platform)
        if score is None:
            continue
        if best_score is None or score > best_score:
            best, best_score = asset, score

    if best is None:
        return Err(no_match)
    return Ok(best)
