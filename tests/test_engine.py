"""Tests for template compilation and rendering."""

from pathlib import Path

import pytest

from fillplate.core.errors import InvalidPattern, ParseError, RenderError, UnknownHelper
from fillplate.rendering.engine import TemplateEngine, compile_template, render_template
from fillplate.rendering.helpers import HelperRegistry


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


class TestCompile:
    def test_unknown_helper_call(self, engine):
        with pytest.raises(UnknownHelper) as excinfo:
            engine.compile("{{ shout(name) }} {{ whisper(name) }}", "greeting.j2")
        assert excinfo.value.names == ["shout", "whisper"]
        assert excinfo.value.template == "greeting.j2"

    def test_unknown_filter(self, engine):
        with pytest.raises(UnknownHelper) as excinfo:
            engine.compile("{{ name | shout }}")
        assert excinfo.value.names == ["shout"]

    def test_template_defined_callables_are_allowed(self, engine):
        source = (
            "{% macro greet(n) %}hi {{ n }}{% endmacro %}"
            "{% set ns = namespace(total=0) %}"
            "{{ greet('x') }} {{ range(2) | join(',') }} {{ items.keys() | list }}"
        )
        template = engine.compile(source)
        assert render_template(template, {"items": {"a": 1}}) == "hi x 0,1 ['a']"

    def test_syntax_error_has_line(self, engine):
        with pytest.raises(ParseError) as excinfo:
            engine.compile("first line\n{% if %}\n", "broken.j2")
        assert excinfo.value.source == "broken.j2"
        assert excinfo.value.line == 2

    def test_records_helpers_used(self, engine):
        template = engine.compile("{{ snake(a) }}{{ b | upper | trim }}{{ c | default('x') }}")
        assert template.helpers == frozenset({"snake", "upper", "trim"})

    def test_load_template(self, engine, tmp_path: Path):
        path = tmp_path / "hello.j2"
        path.write_text("Hello {{ name }}\n", encoding="utf-8")
        template = engine.load_template(path)
        assert template.name == str(path)
        assert engine.render(template, {"name": "Ann"}) == "Hello Ann\n"
        with pytest.raises(FileNotFoundError):
            engine.load_template(tmp_path / "missing.j2")


class TestRender:
    def test_report_example(self):
        template = compile_template("{{ title }}: {% for t in tags %}{{ t }} {% endfor %}")
        assert render_template(template, {"title": "Report", "tags": []}) == "Report: "
        assert render_template(template, {"title": "Report"}) == "Report: "
        assert render_template(template, {"title": "R", "tags": ["a", "b"]}) == "R: a b "

    def test_helpers_as_calls_and_filters(self, engine):
        template = engine.compile(
            '{{ regex_replace("[0-9]+", "#", code) }} {{ name | snake }} {{ kebab(name) }}'
        )
        context = {"code": "a1b22c333", "name": "HTTPServer"}
        assert engine.render(template, context) == "a#b#c# http_server http-server"

    def test_helper_arguments_are_strings(self, engine):
        template = engine.compile("{{ upper(flag) }} {{ upper(count) }} {{ upper(nothing) }}|")
        assert engine.render(template, {"flag": True, "count": 3, "nothing": None}) == "TRUE 3 |"

    def test_lookup_helper(self, engine):
        template = engine.compile('{{ lookup("user.tags[1]") }}')
        assert engine.render(template, {"user": {"tags": ["a", "b"]}}) == "b"

    def test_missing_paths_render_empty(self, engine):
        template = engine.compile("[{{ user.name }}][{{ user.name | upper }}]")
        assert engine.render(template, {}) == "[][]"

    def test_strict_mode_rejects_missing_paths(self):
        engine = TemplateEngine(strict=True)
        template = engine.compile("{{ user.name }}", "strict.j2")
        with pytest.raises(RenderError) as excinfo:
            engine.render(template, {})
        assert excinfo.value.template == "strict.j2"

    def test_invalid_pattern_propagates(self, engine):
        template = engine.compile('{{ regex_match("(", text) }}')
        with pytest.raises(InvalidPattern):
            engine.render(template, {"text": "abc"})

    def test_failing_helper_is_named(self):
        def explode(value):
            raise ZeroDivisionError("boom")

        registry = HelperRegistry()
        registry.register("explode", explode)
        engine = TemplateEngine(registry)
        template = engine.compile("{{ explode(x) }}", "custom.j2")
        with pytest.raises(RenderError) as excinfo:
            engine.render(template, {"x": 1})
        assert excinfo.value.helper == "explode"
        assert excinfo.value.template == "custom.j2"
        assert str(excinfo.value).startswith("custom.j2: ")

    def test_non_mapping_context_is_this(self, engine):
        template = engine.compile("{{ this | join(',') }}")
        assert engine.render(template, [1, 2]) == "1,2"
        assert engine.render(engine.compile("[{{ this }}]"), None) == "[]"

    def test_trailing_newline_is_kept(self, engine):
        assert engine.render(engine.compile("x\n"), {}) == "x\n"
