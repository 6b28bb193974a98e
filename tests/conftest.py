"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from fillplate.core.models import SchemaNode
from fillplate.schema.loader import schema_from_value
from fillplate.settings import Settings


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a text file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def user_schema() -> SchemaNode:
    """Object schema requiring user.name (string)."""
    return schema_from_value(
        {
            "type": "object",
            "required": ["user"],
            "properties": {
                "user": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "name": {"type": "string"},
                        "nickname": {"type": "string"},
                    },
                }
            },
        }
    )


@pytest.fixture
def report_schema() -> SchemaNode:
    """title (required string) and tags (optional array of strings)."""
    return schema_from_value(
        {
            "type": "object",
            "properties": {
                "title": {"type": "string", "required": True},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
        }
    )


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from FILLPLATE_* variables in the environment."""
    return Settings(
        interactive=False,
        strict=False,
        max_answer_attempts=3,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
