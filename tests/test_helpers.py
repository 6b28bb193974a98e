"""Tests for the built-in template helpers."""

import pytest

from fillplate.core.errors import InvalidPattern, RenderError
from fillplate.rendering.helpers import (
    HelperRegistry,
    camel,
    default_registry,
    kebab,
    lookup,
    pascal,
    regex_extract,
    regex_match,
    regex_replace,
    snake,
)


class TestRegexHelpers:
    def test_replace_every_match(self):
        assert regex_replace("[0-9]+", "#", "a1b22c333") == "a#b#c#"

    def test_replace_with_group_reference(self):
        assert regex_replace(r"(\w+)@(\w+)", r"\2:\1", "me@host") == "host:me"

    def test_match(self):
        assert regex_match(r"\d+\.\d+", "version 3.11 final") == "3.11"
        assert regex_match("[0-9]+", "abc") == ""

    def test_extract_by_number_and_name(self):
        pattern = r"(?P<major>\d+)\.(\d+)"
        assert regex_extract(pattern, "v1.22") == "1"
        assert regex_extract(pattern, "v1.22", "2") == "22"
        assert regex_extract(pattern, "v1.22", "major") == "1"
        assert regex_extract(pattern, "no version") == ""

    def test_extract_unknown_group(self):
        with pytest.raises(InvalidPattern):
            regex_extract(r"(\d+)", "42", "9")

    @pytest.mark.parametrize("pattern", ["(", "[a-", "*x"])
    def test_invalid_pattern(self, pattern):
        with pytest.raises(InvalidPattern) as excinfo:
            regex_replace(pattern, "", "text")
        assert excinfo.value.pattern == pattern

    def test_bad_replacement_reference(self):
        with pytest.raises(InvalidPattern):
            regex_replace(r"(\d)", r"\5", "1")


class TestCaseHelpers:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("HTTPServer", "http_server"),
            ("userName", "user_name"),
            ("user name", "user_name"),
            ("version2Beta", "version_2_beta"),
            ("already_snake", "already_snake"),
            ("Café Menü", "café_menü"),
            ("straße größe", "straße_größe"),
            ("ÜberGröße", "über_größe"),
        ],
    )
    def test_snake(self, text, expected):
        assert snake(text) == expected

    def test_other_cases(self):
        assert kebab("userName") == "user-name"
        assert pascal("user-name") == "UserName"
        assert camel("user name") == "userName"
        assert camel("") == ""

    def test_non_ascii_letters_are_kept(self):
        assert camel("straße größe") == "straßeGröße"
        assert pascal("émile zola") == "ÉmileZola"
        assert kebab("Café Menü") == "café-menü"
        assert snake("日本 語") == "日本_語"


class TestLookup:
    def test_reads_nested_path(self):
        context = {"user": {"tags": ["a", "b"]}}
        assert lookup("user.tags[1]", context=context) == "b"
        assert lookup("user.missing", context=context) == ""

    def test_bad_path(self):
        with pytest.raises(RenderError) as excinfo:
            lookup("user..name", context={})
        assert excinfo.value.helper == "lookup"


class TestRegistry:
    def test_default_helpers(self):
        registry = default_registry()
        for name in ("regex_match", "regex_extract", "regex_replace", "snake", "lookup"):
            assert name in registry
        assert registry.get("snake").as_filter is True
        assert registry.get("lookup").takes_context is True

    def test_names_must_be_identifiers(self):
        registry = HelperRegistry()
        with pytest.raises(ValueError):
            registry.register("not-valid", str)

    def test_later_registration_replaces(self):
        registry = HelperRegistry()
        registry.register("shout", str.upper)
        registry.register("shout", str.lower)
        assert len(registry) == 1
        assert registry.get("shout").func is str.lower
