from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VersionNotFound:
    requested: str
    prefix: str | None
    available: tuple[str, ...]

    def __str__(self) -> str:
        return f"no release tag matches version {self.requested!r}"


@dataclass(frozen=True, slots=True)
class ReleaseNotFound:
    tag: str

    def __str__(self) -> str:
        return f"release {self.tag!r} is not listed"


@dataclass(frozen=True, slots=True)
class NoMatchingAsset:
    platform: str
    pattern: str | None
    available: tuple[str, ...]

    def __str__(self) -> str:
        if self.pattern is not None:
            return f"no asset matches pattern {self.pattern!r}"
        return f"no suitable asset for platform {self.platform}"


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    asset: str
    reason: str

    def __str__(self) -> str:
        return f"download of {self.asset} failed: {self.reason}"


@dataclass(frozen=True, slots=True)
class SizeMismatch:
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"size mismatch: expected {self.expected} bytes, got {self.actual}"


@dataclass(frozen=True, slots=True)
class ChecksumMismatch:
    algorithm: str
    expected: str
    actual: str

    def __str__(self) -> str:
        return f"{self.algorithm} mismatch: expected {self.expected}, got {self.actual}"


@dataclass(frozen=True, slots=True)
class ExtractFailed:
    archive: str
    reason: str

    def __str__(self) -> str:
        return f"cannot unpack {self.archive}: {self.reason}"


@dataclass(frozen=True, slots=True)
class InvalidOptions:
    reason: str

    def __str__(self) -> str:
        return self.reason


IntegrityError = SizeMismatch | ChecksumMismatch

PlanError = (
    VersionNotFound
    | ReleaseNotFound
    | NoMatchingAsset
    | DownloadFailed
    | SizeMismatch
    | ChecksumMismatch
    | ExtractFailed
    | InvalidOptions
)
