"""Decide how unpacked content maps onto an install directory.

Two questions are answered here, before anything touches the disk: how many
leading path components to strip from the archive, and which directory
inside the result holds the executables.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from forgebin.core.result import Err, Ok, Result
from forgebin.install.errors import InvalidOptions
from forgebin.install.template import expand
from forgebin.install.tokens import platform_tokens

if TYPE_CHECKING:
    from forgebin.install.options import ToolOptions
    from forgebin.install.template import TemplateContext
    from forgebin.install.tree import ExtractedTree
    from forgebin.platform.detection import PlatformProfile

__all__ = [
    "BIN_DIR_NAME",
    "LayoutDecision",
    "auto_strip_components",
    "find_bin_dir",
    "resolve_layout",
    "resolve_single_file",
    "strip_platform_suffix",
]

BIN_DIR_NAME = "bin"
ROOT = PurePosixPath(".")

_SEPARATORS = "-_."


@dataclass(frozen=True, slots=True)
class LayoutDecision:
    """Where things end up.

    Attributes:
        strip_components: Leading components dropped on extraction
        bin_dir: Executable directory relative to the install root
        bin_name: Final file name for a single-binary install, else None
    """

    strip_components: int
    bin_dir: PurePosixPath
    bin_name: str | None = None


def auto_strip_components(tree: ExtractedTree) -> int:
    """1 if the root holds exactly one entry and it is a directory, else 0."""
    roots = tree.root_entries()
    if len(roots) == 1 and roots[0].is_dir:
        return 1
    return 0


def find_bin_dir(tree: ExtractedTree) -> PurePosixPath:
    """``bin`` at the root, then the first ``*/bin``, then the root itself."""
    top = PurePosixPath(BIN_DIR_NAME)
    if tree.is_dir(top):
        return top
    for entry in tree.root_entries():
        if entry.is_dir and tree.is_dir(entry.path / BIN_DIR_NAME):
            return entry.path / BIN_DIR_NAME
    return ROOT


def _template_path(
    template: str, context: TemplateContext
) -> Result[PurePosixPath, InvalidOptions]:
    """Expanded ``bin_path``; it must stay inside the install directory."""
    expanded = expand(template, context).replace("\\", "/").strip("/")
    parts = [part for part in expanded.split("/") if part not in ("", ".")]
    if ".." in parts or (parts and parts[0].endswith(":")):
        return Err(InvalidOptions(reason=f"bin_path {expanded!r} escapes the install directory"))
    return Ok(PurePosixPath(*parts) if parts else ROOT)


def resolve_layout(
    tree: ExtractedTree,
    options: ToolOptions,
    context: TemplateContext,
) -> Result[LayoutDecision, InvalidOptions]:
    """Decide strip count and bin directory for an archive listing.

    An explicit ``strip_components`` is used as is, even 0. The bin directory
    is looked up in the tree as it will be after stripping. A ``bin_path``
    pointing outside the install directory is an Err.
    """
    strip = options.strip_components
    if strip is None:
        strip = auto_strip_components(tree)

    if options.bin_path:
        templated = _template_path(options.bin_path, context)
        if isinstance(templated, Err):
            return templated
        bin_dir = templated.value
    else:
        bin_dir = find_bin_dir(tree.strip(strip))

    return Ok(LayoutDecision(strip_components=strip, bin_dir=bin_dir))


def strip_platform_suffix(name: str) -> str:
    """Drop trailing OS, arch, libc and vendor words from a file name.

    Example: "rg-x86_64-unknown-linux-musl.exe" -> "rg.exe"
    """
    stem, ext = name, ""
    if name.lower().endswith(".exe"):
        stem, ext = name[:-4], name[-4:]

    tokens = sorted(platform_tokens(), key=len, reverse=True)
    changed = True
    while changed:
        changed = False
        lowered = stem.lower()
        for token in tokens:
            cut = len(stem) - len(token) - 1
            if cut > 0 and lowered.endswith(token) and lowered[cut] in _SEPARATORS:
                stem = stem[:cut]
                changed = True
                break

    return f"{stem}{ext}"


def resolve_single_file(
    filename: str,
    options: ToolOptions,
    platform: PlatformProfile,
) -> LayoutDecision:
    """Layout for a bare binary: nothing to strip, the file sits at the root."""
    name = options.bin if options.bin else strip_platform_suffix(filename)
    return LayoutDecision(
        strip_components=0,
        bin_dir=ROOT,
        bin_name=platform.os.exe_name(name) if platform.is_windows else name,
    )
