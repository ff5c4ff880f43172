"""Tests for dotted-path helpers."""

import pytest

from switchyard.wiring.exceptions import PathConflictError
from switchyard.wiring.paths import (
    MISSING,
    config_hash,
    conflicting_ancestor,
    content_hash,
    get_path,
    hash_value,
    is_empty,
    set_path,
    value_preview,
)


class TestGetPath:
    """Tests for get_path."""

    def test_nested_dicts(self) -> None:
        """Walks nested dictionaries."""
        assert get_path({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_list_index(self) -> None:
        """Numeric segments index into lists."""
        record = {"slots": [{"id": "name"}, {"id": "phone"}]}
        assert get_path(record, "slots.1.id") == "phone"
        assert get_path(record, "slots.5.id") is MISSING

    def test_missing_segment(self) -> None:
        """An absent segment yields MISSING."""
        assert get_path({"a": {}}, "a.b") is MISSING
        assert get_path({"a": "text"}, "a.b") is MISSING

    def test_explicit_none_is_returned(self) -> None:
        """A stored None is distinct from MISSING."""
        assert get_path({"a": None}, "a") is None

    def test_empty_path(self) -> None:
        """The empty path resolves to nothing."""
        assert get_path({"a": 1}, "") is MISSING


class TestSetPath:
    """Tests for set_path."""

    def test_creates_intermediate_dicts(self) -> None:
        """Missing parents are created."""
        record: dict = {}
        set_path(record, "aiAgentSettings.frontDeskBehavior.bookingEnabled", True)
        assert record == {"aiAgentSettings": {"frontDeskBehavior": {"bookingEnabled": True}}}

    def test_keeps_siblings(self) -> None:
        """Existing siblings survive."""
        record = {"a": {"x": 1}}
        set_path(record, "a.y", 2)
        assert record == {"a": {"x": 1, "y": 2}}

    def test_refuses_to_replace_non_dict_parent(self) -> None:
        """A present scalar or list parent is never overwritten."""
        record = {"a": {"b": "legacy-v1"}}
        with pytest.raises(PathConflictError) as exc_info:
            set_path(record, "a.b.c", True)
        assert exc_info.value.ancestor == "a.b"
        assert record == {"a": {"b": "legacy-v1"}}

    def test_conflicting_ancestor(self) -> None:
        assert conflicting_ancestor({"a": ["x"]}, "a.b") == "a"
        assert conflicting_ancestor({"a": {"b": 1}}, "a.b.c.d") == "a.b"
        assert conflicting_ancestor({"a": {}}, "a.b.c") is None
        assert conflicting_ancestor({}, "a.b") is None
        assert conflicting_ancestor({"a": None}, "a.b") == "a"


class TestIsEmpty:
    """Tests for is_empty."""

    @pytest.mark.parametrize("value", [None, MISSING, "", "   ", [], {}, (), set()])
    def test_empty_values(self, value: object) -> None:
        """None, MISSING, blank strings and empty collections are empty."""
        assert is_empty(value) is True

    @pytest.mark.parametrize("value", [False, 0, 0.0, "x", [None], {"a": None}])
    def test_non_empty_values(self, value: object) -> None:
        """False and 0 are legitimate values."""
        assert is_empty(value) is False


class TestHashing:
    """Tests for hashing helpers."""

    def test_content_hash_ignores_key_order(self) -> None:
        """Canonical JSON sorts keys."""
        assert content_hash({"a": 1, "b": 2}) == content_hash({"b": 2, "a": 1})

    def test_content_hash_length(self) -> None:
        """Digest is truncated to the requested length."""
        assert len(content_hash({"a": 1}, length=12)) == 12

    def test_hash_value_null(self) -> None:
        """Absent values hash to 'null'."""
        assert hash_value(None) == "null"
        assert hash_value(MISSING) == "null"

    def test_hash_value_prefix(self) -> None:
        """Present values carry a sha256 prefix."""
        assert hash_value("Ava").startswith("sha256:")
        assert hash_value(["a"]) != hash_value(["b"])

    def test_config_hash_only_covers_agent_settings(self) -> None:
        """Top-level fields outside aiAgentSettings do not change the hash."""
        first = config_hash({"_id": "a", "aiAgentSettings": {"aiName": "Ava"}})
        second = config_hash({"_id": "b", "aiAgentSettings": {"aiName": "Ava"}})
        assert first == second
        assert config_hash(None) == config_hash({})


class TestValuePreview:
    """Tests for value_preview."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (MISSING, "undefined"),
            (None, "null"),
            (True, "true"),
            (False, "false"),
            (3, "3"),
            ("Ava", '"Ava"'),
            ([1, 2], "[2 items]"),
            ({"a": 1}, "{1 keys}"),
        ],
    )
    def test_preview(self, value: object, expected: str) -> None:
        """Values render to short strings."""
        assert value_preview(value) == expected

    def test_long_string_truncated(self) -> None:
        """Strings longer than 30 characters are cut."""
        preview = value_preview("x" * 40)
        assert preview == '"' + "x" * 30 + '..."'
