"""Tests for forgebin.platform.files module."""

from pathlib import Path

from forgebin.platform.files import atomic_write_bytes, atomic_write_text


class TestAtomicWrite:
    """Tests for atomic writes."""

    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "lock.json"
        atomic_write_text(target, "{}")
        assert target.read_text(encoding="utf-8") == "{}"

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "tool"
        target.write_bytes(b"old")
        atomic_write_bytes(target, b"new")
        assert target.read_bytes() == b"new"

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        atomic_write_bytes(tmp_path / "tool", b"x")
        assert [p.name for p in tmp_path.iterdir()] == ["tool"]
