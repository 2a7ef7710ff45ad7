"""Archive listing and extraction for verified asset content.

Archives are read from memory: the listing feeds the layout decision and the
same bytes are then unpacked. Only regular files and directories are
written; links, devices and members escaping the destination are skipped.
"""

from __future__ import annotations

import io
import os
import shutil
import stat
import tarfile
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import IO

import zstandard

from forgebin.core.result import Err, Ok, Result
from forgebin.install.errors import ExtractFailed
from forgebin.install.tree import ExtractedTree

__all__ = [
    "ArchiveFormat",
    "ExtractResult",
    "detect_format",
    "extract",
    "list_members",
    "remove_install",
]


class ArchiveFormat(Enum):
    TAR_GZ = "tar.gz"
    TAR_XZ = "tar.xz"
    TAR_BZ2 = "tar.bz2"
    TAR_ZST = "tar.zst"
    ZIP = "zip"

    def __str__(self) -> str:
        return self.value

    @property
    def tar_mode(self) -> str:
        return {
            ArchiveFormat.TAR_GZ: "r:gz",
            ArchiveFormat.TAR_XZ: "r:xz",
            ArchiveFormat.TAR_BZ2: "r:bz2",
            ArchiveFormat.TAR_ZST: "r:",
        }[self]


# Checked with endswith; Path.suffixes splits "tool-1.2.3-x64.zip" at every dot.
_SUFFIXES: tuple[tuple[tuple[str, ...], ArchiveFormat], ...] = (
    ((".tar.gz", ".tgz"), ArchiveFormat.TAR_GZ),
    ((".tar.xz", ".txz"), ArchiveFormat.TAR_XZ),
    ((".tar.bz2", ".tbz2", ".tbz"), ArchiveFormat.TAR_BZ2),
    ((".tar.zst", ".tzst"), ArchiveFormat.TAR_ZST),
    ((".zip",), ArchiveFormat.ZIP),
)


def detect_format(name: str) -> ArchiveFormat | None:
    """Archive format from a file name; None for anything else (bare binary)."""
    lowered = name.lower()
    for suffixes, fmt in _SUFFIXES:
        if lowered.endswith(suffixes):
            return fmt
    return None


@dataclass(frozen=True, slots=True)
class ExtractResult:
    """Outcome of ``extract``.

    Attributes:
        root: Destination directory
        files_count: Regular files written
    """

    root: Path
    files_count: int


def _tar_fileobj(data: bytes, fmt: ArchiveFormat) -> IO[bytes]:
    """Uncompressed tar stream; tarfile has no zstd codec of its own."""
    if fmt is not ArchiveFormat.TAR_ZST:
        return io.BytesIO(data)
    out = io.BytesIO()
    zstandard.ZstdDecompressor().copy_stream(io.BytesIO(data), out)
    out.seek(0)
    return out


def _is_zip_symlink(info: zipfile.ZipInfo) -> bool:
    return stat.S_ISLNK(info.external_attr >> 16)


def list_members(
    data: bytes, fmt: ArchiveFormat, name: str
) -> Result[ExtractedTree, ExtractFailed]:
    """List regular files and directories without extracting anything."""
    try:
        if fmt is ArchiveFormat.ZIP:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                members = [
                    (info.filename, info.is_dir())
                    for info in zf.infolist()
                    if not _is_zip_symlink(info)
                ]
        else:
            with tarfile.open(fileobj=_tar_fileobj(data, fmt), mode=fmt.tar_mode) as tar:
                members = [
                    (member.name, member.isdir())
                    for member in tar.getmembers()
                    if member.isdir() or member.isreg()
                ]
    except (
        tarfile.TarError,
        zipfile.BadZipFile,
        zstandard.ZstdError,
        EOFError,
        OSError,
    ) as e:
        return Err(ExtractFailed(archive=name, reason=str(e) or type(e).__name__))

    return Ok(ExtractedTree.from_members(members))


def _target(root: Path, member_name: str, strip: int) -> Path | None:
    """Destination for a member after stripping, or None if it must be skipped."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None
    parts = [part for part in PurePosixPath(normalized).parts if part != "."]
    if any(part == ".." for part in parts) or (parts and parts[0].endswith(":")):
        return None

    kept = parts[strip:]
    if not kept:
        return None

    target = root.joinpath(*kept)
    try:
        if not target.resolve().is_relative_to(root.resolve()):
            return None
    except OSError:
        return None
    return target


def _write(target: Path, src: IO[bytes], mode: int) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with src, open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    if mode:
        os.chmod(target, mode)


def extract(
    data: bytes,
    fmt: ArchiveFormat,
    dest: Path,
    *,
    strip_components: int = 0,
    name: str = "archive",
) -> Result[ExtractResult, ExtractFailed]:
    """Unpack ``data`` into ``dest``, replacing whatever was there.

    Args:
        data: Verified archive content
        fmt: Archive format
        dest: Destination directory
        strip_components: Leading path components to drop
        name: Archive name for error messages

    Returns:
        Ok with ExtractResult, or Err with ExtractFailed
    """
    try:
        remove_install(dest)
        dest.mkdir(parents=True, exist_ok=True)
        count = 0

        if fmt is ArchiveFormat.ZIP:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                for info in zf.infolist():
                    if info.is_dir() or _is_zip_symlink(info):
                        continue
                    target = _target(dest, info.filename, strip_components)
                    if target is None:
                        continue
                    _write(target, zf.open(info), (info.external_attr >> 16) & 0o777)
                    count += 1
        else:
            with tarfile.open(fileobj=_tar_fileobj(data, fmt), mode=fmt.tar_mode) as tar:
                for member in tar.getmembers():
                    if not member.isreg():
                        continue
                    target = _target(dest, member.name, strip_components)
                    if target is None:
                        continue
                    src = tar.extractfile(member)
                    if src is None:
                        continue
                    _write(target, src, member.mode & 0o777)
                    count += 1

    except (tarfile.TarError, zipfile.BadZipFile, zstandard.ZstdError, EOFError) as e:
        return Err(ExtractFailed(archive=name, reason=str(e) or type(e).__name__))
    except OSError as e:
        return Err(ExtractFailed(archive=name, reason=f"IO error: {e}"))

    return Ok(ExtractResult(root=dest, files_count=count))


def remove_install(path: Path) -> bool:
    """Remove an install directory; False if it did not exist."""
    if path.exists():
        shutil.rmtree(path)
        return True
    return False
