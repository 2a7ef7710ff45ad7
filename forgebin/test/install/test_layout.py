"""Tests for forgebin.install.layout."""

from pathlib import PurePosixPath

import pytest

from forgebin.core.result import Err, Ok
from forgebin.install.errors import InvalidOptions
from forgebin.install.layout import (
    ROOT,
    LayoutDecision,
    auto_strip_components,
    find_bin_dir,
    resolve_layout,
    resolve_single_file,
    strip_platform_suffix,
)
from forgebin.install.options import ToolOptions
from forgebin.install.template import TemplateContext
from forgebin.install.tree import ExtractedTree
from forgebin.platform.detection import Arch, Libc, Os, PlatformProfile

LINUX = PlatformProfile(Os.LINUX, Arch.X64, Libc.GNU)
WINDOWS = PlatformProfile(Os.WINDOWS, Arch.X64, Libc.MSVC)
CONTEXT = TemplateContext(name="tool", version="1.0.0", platform=LINUX)


def layout_of(tree: ExtractedTree, options: ToolOptions) -> LayoutDecision:
    result = resolve_layout(tree, options, CONTEXT)
    assert isinstance(result, Ok), result
    return result.value


class TestAutoStrip:
    def test_single_root_directory(self) -> None:
        tree = ExtractedTree.from_paths("tool-1.0.0/bin/tool")
        assert auto_strip_components(tree) == 1

    def test_several_roots(self) -> None:
        assert auto_strip_components(ExtractedTree.from_paths("tool", "LICENSE")) == 0

    def test_single_root_file(self) -> None:
        assert auto_strip_components(ExtractedTree.from_paths("tool")) == 0

    def test_empty(self) -> None:
        assert auto_strip_components(ExtractedTree(())) == 0


class TestFindBinDir:
    def test_top_level_bin(self) -> None:
        tree = ExtractedTree.from_paths("bin/tool", "pkg/bin/other")
        assert find_bin_dir(tree) == PurePosixPath("bin")

    def test_nested_bin(self) -> None:
        tree = ExtractedTree.from_paths("README", "pkg/share/x", "pkg/bin/tool")
        assert find_bin_dir(tree) == PurePosixPath("pkg/bin")

    def test_bin_file_is_not_a_directory(self) -> None:
        assert find_bin_dir(ExtractedTree.from_paths("bin")) == ROOT

    def test_fallback_root(self) -> None:
        assert find_bin_dir(ExtractedTree.from_paths("tool", "LICENSE")) == ROOT


class TestResolveLayout:
    def test_single_root_dir_with_bin(self) -> None:
        tree = ExtractedTree.from_paths("tool-1.0.0/bin/tool", "tool-1.0.0/README.md")
        assert layout_of(tree, ToolOptions()) == LayoutDecision(
            strip_components=1, bin_dir=PurePosixPath("bin")
        )

    def test_flat_archive(self) -> None:
        tree = ExtractedTree.from_paths("tool", "LICENSE")
        assert layout_of(tree, ToolOptions()) == LayoutDecision(
            strip_components=0, bin_dir=ROOT
        )

    def test_explicit_zero_strip(self) -> None:
        tree = ExtractedTree.from_paths("tool-1.0.0/bin/tool")
        layout = layout_of(tree, ToolOptions(strip_components=0))
        assert layout.strip_components == 0
        assert layout.bin_dir == PurePosixPath("tool-1.0.0/bin")

    def test_explicit_strip(self) -> None:
        tree = ExtractedTree.from_paths("a/b/tool")
        layout = layout_of(tree, ToolOptions(strip_components=2))
        assert layout == LayoutDecision(strip_components=2, bin_dir=ROOT)

    def test_bin_path_template(self) -> None:
        tree = ExtractedTree.from_paths("tool", "LICENSE")
        options = ToolOptions(bin_path="{name}-{version}/libexec/")
        layout = layout_of(tree, options)
        assert layout.bin_dir == PurePosixPath("tool-1.0.0/libexec")

    def test_bin_path_dot_is_root(self) -> None:
        tree = ExtractedTree.from_paths("bin/tool")
        layout = layout_of(tree, ToolOptions(bin_path="."))
        assert layout.bin_dir == ROOT

    @pytest.mark.parametrize(
        "bin_path",
        ["../outside", "bin/../../outside", "{name}/../..", "C:/tools", "..\\outside"],
    )
    def test_bin_path_escaping_install_dir(self, bin_path: str) -> None:
        """An expanded bin_path may not leave the install directory."""
        tree = ExtractedTree.from_paths("bin/tool")
        result = resolve_layout(tree, ToolOptions(bin_path=bin_path), CONTEXT)
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidOptions)
        assert "bin_path" in result.error.reason

    def test_bin_path_leading_slash_stays_inside(self) -> None:
        layout = layout_of(ExtractedTree.from_paths("bin/tool"), ToolOptions(bin_path="/bin/"))
        assert layout.bin_dir == PurePosixPath("bin")


class TestStripPlatformSuffix:
    def test_target_triple(self) -> None:
        assert strip_platform_suffix("rg-x86_64-unknown-linux-musl") == "rg"

    def test_keeps_exe(self) -> None:
        assert strip_platform_suffix("rg-x86_64-pc-windows-msvc.exe") == "rg.exe"

    def test_underscores(self) -> None:
        assert strip_platform_suffix("tool_linux_amd64") == "tool"

    def test_keeps_version_and_plain_names(self) -> None:
        assert strip_platform_suffix("tool-1.2.3-linux") == "tool-1.2.3"
        assert strip_platform_suffix("tool") == "tool"

    def test_never_empties(self) -> None:
        assert strip_platform_suffix("linux") == "linux"


class TestResolveSingleFile:
    def test_suffix_stripped(self) -> None:
        layout = resolve_single_file("tool-linux-amd64", ToolOptions(), LINUX)
        assert layout == LayoutDecision(strip_components=0, bin_dir=ROOT, bin_name="tool")

    def test_bin_option_wins(self) -> None:
        layout = resolve_single_file("tool-linux-amd64", ToolOptions(bin="tl"), LINUX)
        assert layout.bin_name == "tl"

    def test_windows_exe(self) -> None:
        assert resolve_single_file("tool-windows-x64.exe", ToolOptions(), WINDOWS).bin_name == (
            "tool.exe"
        )
        assert resolve_single_file("tool.exe", ToolOptions(bin="tl"), WINDOWS).bin_name == (
            "tl.exe"
        )

    def test_no_exe_elsewhere(self) -> None:
        assert resolve_single_file("tool", ToolOptions(bin="tl"), LINUX).bin_name == "tl"
