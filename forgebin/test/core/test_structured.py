"""Tests for forgebin.core.structured helpers."""

from forgebin.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_raw_str,
    get_str,
    get_table,
)


class TestAccessors:
    """Typed access to parsed TOML / JSON."""

    def test_as_str_dict(self) -> None:
        assert as_str_dict({"a": 1}) == {"a": 1}
        assert as_str_dict({1: "a"}) is None
        assert as_str_dict([1]) is None

    def test_as_obj_list(self) -> None:
        assert as_obj_list([1, "a"]) == [1, "a"]
        assert as_obj_list({"a": 1}) is None

    def test_get_str_strips_and_drops_empty(self) -> None:
        table = {"a": "  x  ", "b": "   ", "c": 3}
        assert get_str(table, "a") == "x"
        assert get_str(table, "b") is None
        assert get_str(table, "c") is None
        assert get_str(table, "missing") is None

    def test_get_raw_str_keeps_empty(self) -> None:
        """An empty version_prefix is meaningful and must survive."""
        assert get_raw_str({"p": ""}, "p") == ""
        assert get_raw_str({}, "p") is None

    def test_get_int_rejects_bool(self) -> None:
        assert get_int({"n": 3}, "n") == 3
        assert get_int({"n": True}, "n") is None

    def test_get_bool(self) -> None:
        assert get_bool({"b": False}, "b") is False
        assert get_bool({"b": "yes"}, "b") is None

    def test_get_table(self) -> None:
        assert get_table({"t": {"k": 1}}, "t") == {"k": 1}
        assert get_table({"t": 1}, "t") is None
