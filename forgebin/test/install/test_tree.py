"""Tests for forgebin.install.tree."""

from pathlib import Path, PurePosixPath

from forgebin.install.tree import ExtractedTree, TreeEntry


def paths(tree: ExtractedTree) -> list[str]:
    return [entry.path.as_posix() for entry in tree.entries]


class TestFromMembers:
    def test_implied_parents(self) -> None:
        tree = ExtractedTree.from_paths("tool-1.0/bin/tool")
        assert tree.entries == (
            TreeEntry(PurePosixPath("tool-1.0"), True),
            TreeEntry(PurePosixPath("tool-1.0/bin"), True),
            TreeEntry(PurePosixPath("tool-1.0/bin/tool"), False),
        )

    def test_duplicates_collapse(self) -> None:
        tree = ExtractedTree.from_paths("a/", "a/x", "a/")
        assert paths(tree) == ["a", "a/x"]

    def test_unsafe_names_skipped(self) -> None:
        tree = ExtractedTree.from_paths("../evil", "a/../../b", "", "./", "ok")
        assert paths(tree) == ["ok"]

    def test_leading_dot_and_backslash(self) -> None:
        tree = ExtractedTree.from_paths("./tool", "dir\\file")
        assert paths(tree) == ["tool", "dir", "dir/file"]

    def test_absolute_names_skipped(self) -> None:
        tree = ExtractedTree.from_paths("/usr/bin/tool", "C:/tool.exe", "tool")
        assert paths(tree) == ["tool"]


class TestQueries:
    def test_root_entries_and_children(self) -> None:
        tree = ExtractedTree.from_paths("tool", "LICENSE", "doc/guide.md")
        assert [e.path.name for e in tree.root_entries()] == ["tool", "LICENSE", "doc"]
        assert [e.path.name for e in tree.children(PurePosixPath("doc"))] == ["guide.md"]

    def test_is_dir(self) -> None:
        tree = ExtractedTree.from_paths("bin/tool")
        assert tree.is_dir(PurePosixPath("bin"))
        assert not tree.is_dir(PurePosixPath("bin/tool"))
        assert not tree.is_dir(PurePosixPath("missing"))

    def test_files(self) -> None:
        tree = ExtractedTree.from_paths("a/", "a/x", "y")
        assert tree.files() == (PurePosixPath("a/x"), PurePosixPath("y"))
        assert len(tree) == 3


class TestStrip:
    def test_strip_one(self) -> None:
        tree = ExtractedTree.from_paths("tool-1.0/bin/tool", "tool-1.0/README")
        assert paths(tree.strip(1)) == ["bin", "bin/tool", "README"]

    def test_strip_zero_is_identity(self) -> None:
        tree = ExtractedTree.from_paths("a/b")
        assert tree.strip(0) is tree

    def test_strip_everything(self) -> None:
        tree = ExtractedTree.from_paths("a/b")
        assert len(tree.strip(2)) == 0
        assert tree.strip(2).files() == ()


class TestFromDirectory:
    def test_walks_sorted(self, tmp_path: Path) -> None:
        (tmp_path / "bin").mkdir()
        (tmp_path / "bin" / "tool").write_text("#!/bin/sh\n")
        (tmp_path / "README").write_text("readme")

        tree = ExtractedTree.from_directory(tmp_path)

        assert paths(tree) == ["README", "bin", "bin/tool"]
        assert tree.is_dir(PurePosixPath("bin"))
