"""Tests for forgebin.install.pattern - glob matching."""

import pytest

from forgebin.install.pattern import glob_match


class TestGlobMatch:
    @pytest.mark.parametrize(
        ("pattern", "name"),
        [
            ("tool.tar.gz", "tool.tar.gz"),
            ("*", ""),
            ("*", "anything"),
            ("tool-*-linux-*.tar.gz", "tool-1.2.0-linux-x64.tar.gz"),
            ("tool-?.zip", "tool-1.zip"),
            ("*linux*", "x-linux-y"),
            ("a*b*c", "abbbc"),
            ("[x].zip", "[x].zip"),
        ],
    )
    def test_matches(self, pattern: str, name: str) -> None:
        assert glob_match(pattern, name)

    @pytest.mark.parametrize(
        ("pattern", "name"),
        [
            ("tool.tar.gz", "tool.tar.gz.sha256"),
            ("tool-?.zip", "tool-12.zip"),
            ("*.zip", "tool.ZIP"),
            ("a*b*c", "abcb"),
            ("", "x"),
            ("t.ol", "tool"),
        ],
    )
    def test_rejects(self, pattern: str, name: str) -> None:
        assert not glob_match(pattern, name)
