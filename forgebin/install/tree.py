"""Listing of unpacked content, independent of where it lives.

An ``ExtractedTree`` is the ordered set of relative paths an archive (or a
directory on disk) contains. Parent directories are implied by their
children, so a tar that only lists ``tool-1.0/bin/tool`` still has the
directories ``tool-1.0`` and ``tool-1.0/bin``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

__all__ = ["ExtractedTree", "TreeEntry"]


@dataclass(frozen=True, slots=True)
class TreeEntry:
    path: PurePosixPath
    is_dir: bool


def _normalize(raw: str) -> PurePosixPath | None:
    raw = raw.replace("\\", "/")
    if raw.startswith("/"):
        return None
    parts = [part for part in raw.split("/") if part not in ("", ".")]
    if not parts or ".." in parts or parts[0].endswith(":"):
        return None
    return PurePosixPath(*parts)


@dataclass(frozen=True, slots=True)
class ExtractedTree:
    """Ordered, duplicate-free entries; order is listing order."""

    entries: tuple[TreeEntry, ...]

    @classmethod
    def from_members(cls, members: Iterable[tuple[str, bool]]) -> ExtractedTree:
        """Build from ``(name, is_dir)`` pairs as archives list them.

        Unsafe or empty names (absolute, ``..``) are skipped.
        """
        seen: dict[PurePosixPath, bool] = {}
        for raw, is_dir in members:
            path = _normalize(raw)
            if path is None:
                continue
            for parent in reversed(path.parents[:-1]):
                seen.setdefault(parent, True)
            if path in seen:
                seen[path] = seen[path] or is_dir
            else:
                seen[path] = is_dir
        return cls(tuple(TreeEntry(path, is_dir) for path, is_dir in seen.items()))

    @classmethod
    def from_paths(cls, *paths: str) -> ExtractedTree:
        """Paths ending in ``/`` are directories, everything else is a file."""
        return cls.from_members((p, p.endswith("/")) for p in paths)

    @classmethod
    def from_directory(cls, root: Path) -> ExtractedTree:
        """Walk ``root`` in sorted order."""
        members: list[tuple[str, bool]] = []
        for path in sorted(root.rglob("*")):
            members.append((path.relative_to(root).as_posix(), path.is_dir()))
        return cls.from_members(members)

    def root_entries(self) -> tuple[TreeEntry, ...]:
        return tuple(entry for entry in self.entries if len(entry.path.parts) == 1)

    def children(self, directory: PurePosixPath) -> tuple[TreeEntry, ...]:
        return tuple(entry for entry in self.entries if entry.path.parent == directory)

    def is_dir(self, path: PurePosixPath) -> bool:
        return any(entry.path == path and entry.is_dir for entry in self.entries)

    def files(self) -> tuple[PurePosixPath, ...]:
        return tuple(entry.path for entry in self.entries if not entry.is_dir)

    def strip(self, count: int) -> ExtractedTree:
        """Drop ``count`` leading components; entries that vanish are removed."""
        if count <= 0:
            return self
        return ExtractedTree.from_members(
            ("/".join(entry.path.parts[count:]), entry.is_dir)
            for entry in self.entries
            if len(entry.path.parts) > count
        )

    def __len__(self) -> int:
        return len(self.entries)
