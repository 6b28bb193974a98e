"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from fillplate.cli import app
from fillplate.settings import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ("FILLPLATE_INTERACTIVE", "FILLPLATE_STRICT", "FILLPLATE_DEFAULT_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def report_files(write_file):
    template = write_file("report.j2", "{{ title }}: {% for t in tags %}{{ t }} {% endfor %}")
    schema = write_file(
        "schema.yaml",
        "type: object\nrequired: [title]\nproperties:\n  title: string\n"
        "  tags:\n    items: string\n",
    )
    return template, schema


def test_render_to_file(report_files, write_file, tmp_path: Path):
    template, schema = report_files
    data = write_file("data.json", '{"title": "Report", "tags": []}')
    output = tmp_path / "out" / "report.txt"

    result = runner.invoke(
        app,
        ["render", "-t", str(template), "-s", str(schema), "-d", str(data), "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8") == "Report: "


def test_overrides_render_to_stdout(report_files):
    template, schema = report_files
    result = runner.invoke(
        app,
        ["render", "-t", str(template), "-s", str(schema), "--set", "title=From CLI"],
    )
    assert result.exit_code == 0, result.output
    assert "From CLI: " in result.stdout


def test_indexed_override(report_files):
    template, schema = report_files
    result = runner.invoke(
        app,
        [
            "render", "-t", str(template), "-s", str(schema),
            "--set", "title=T", "--set", "tags[0]=a", "--set", "tags[1]=b",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "T: a b " in result.stdout


def test_non_interactive_missing_field_fails(report_files):
    template, schema = report_files
    result = runner.invoke(
        app, ["render", "-t", str(template), "-s", str(schema), "--non-interactive"]
    )
    assert result.exit_code == 1


def test_interactive_prompt(report_files):
    template, schema = report_files
    result = runner.invoke(
        app, ["render", "-t", str(template), "-s", str(schema)], input="Typed\n"
    )
    assert result.exit_code == 0, result.output
    assert "Typed: " in result.stdout


def test_environment_prefix(report_files, monkeypatch):
    template, schema = report_files
    monkeypatch.setenv("REPORT_TITLE", "From env")
    result = runner.invoke(
        app,
        ["render", "-t", str(template), "-s", str(schema), "--env-prefix", "REPORT_"],
    )
    assert result.exit_code == 0, result.output
    assert "From env: " in result.stdout


def test_template_or_project_required(report_files, tmp_path: Path):
    template, _ = report_files
    result = runner.invoke(
        app, ["render", "-t", str(template), "-p", str(tmp_path / "fillplate.yaml")]
    )
    assert result.exit_code == 2

    result = runner.invoke(app, ["render"])
    assert result.exit_code == 2


def test_malformed_override(report_files):
    template, _ = report_files
    result = runner.invoke(app, ["render", "-t", str(template), "--set", "novalue"])
    assert result.exit_code == 2


def test_init_then_render_project(tmp_path: Path):
    project_dir = tmp_path / "starter"
    result = runner.invoke(app, ["init", "--dir", str(project_dir)])
    assert result.exit_code == 0, result.output
    assert (project_dir / "fillplate.yaml").exists()

    result = runner.invoke(
        app,
        [
            "render",
            "-p",
            str(project_dir / "fillplate.yaml"),
            "--non-interactive",
            "--set",
            "project.name=Demo App",
            "--set",
            "author=Ann",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "# Demo App" in result.stdout
    assert "Package: `demo_app`" in result.stdout
    assert "License: MIT" in result.stdout

    result = runner.invoke(app, ["init", "--dir", str(project_dir)])
    assert result.exit_code == 1
    result = runner.invoke(app, ["init", "--dir", str(project_dir), "--force"])
    assert result.exit_code == 0
