"""Tests for context value kinds and path helpers."""

import pytest

from fillplate.core.values import (
    ValueKind,
    format_path,
    format_value,
    get_path,
    is_member,
    kind_of,
    parse_path,
    set_path,
)


class TestKindOf:
    def test_bool_is_not_number(self):
        assert kind_of(True) is ValueKind.BOOLEAN
        assert kind_of(1) is ValueKind.NUMBER
        assert kind_of(1.5) is ValueKind.NUMBER

    def test_containers_and_null(self):
        assert kind_of(None) is ValueKind.NULL
        assert kind_of("x") is ValueKind.STRING
        assert kind_of([]) is ValueKind.ARRAY
        assert kind_of({}) is ValueKind.OBJECT

    def test_rejects_foreign_objects(self):
        with pytest.raises(TypeError):
            kind_of(object())


class TestPaths:
    def test_format_mixed_path(self):
        assert format_path(("user", "tags", 0, "label")) == "user.tags[0].label"
        assert format_path(()) == "<root>"

    def test_parse_round_trips_format(self):
        assert parse_path("user.tags[0].label") == ("user", "tags", 0, "label")
        assert parse_path("[2].x") == (2, "x")

    @pytest.mark.parametrize("text", ["", ".a", "a..b", "a[x]"])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_path(text)

    def test_get_path_missing_returns_default(self):
        tree = {"a": {"b": [1, 2]}}
        assert get_path(tree, ("a", "b", 1)) == 2
        assert get_path(tree, ("a", "b", 5)) is None
        assert get_path(tree, ("a", "c"), default="-") == "-"
        assert get_path(tree, ("a", "b", "x")) is None

    def test_set_path_creates_intermediate_objects(self):
        assert set_path(None, ("user", "name"), "alice") == {"user": {"name": "alice"}}

    def test_set_path_into_existing_list(self):
        tree = {"items": [{"id": 1}, None]}
        set_path(tree, ("items", 1, "id"), 2)
        assert tree == {"items": [{"id": 1}, {"id": 2}]}

    def test_set_path_refuses_to_overwrite_scalar_parent(self):
        with pytest.raises(TypeError):
            set_path({"a": 1}, ("a", "b"), 2)

    def test_set_path_builds_lists_in_order(self):
        tree = set_path(None, ("tags", 0), "x")
        set_path(tree, ("tags", 1), "y")
        assert tree == {"tags": ["x", "y"]}

    def test_set_path_rejects_gap_in_list(self):
        with pytest.raises(IndexError):
            set_path({"tags": []}, ("tags", 2), "z")


class TestMembership:
    def test_kinds_are_kept_apart(self):
        assert is_member(True, [True, False])
        assert not is_member(True, [1, 0])
        assert not is_member(1, [True])
        assert is_member(1, [1.0])

    def test_format_value(self):
        assert format_value(True) == "true"
        assert format_value(None) == "null"
        assert format_value(["a", 1]) == '["a", 1]'
        assert format_value(2.5) == "2.5"
