from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.models import DataFormat


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FILLPLATE_", case_sensitive=False)

    interactive: bool = True
    strict: bool = False
    max_answer_attempts: int = Field(default=3, ge=1)
    default_format: DataFormat = DataFormat.YAML
    log_level: str = "INFO"
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    keep_trailing_newline: bool = True
    file_mode: int = 0o644


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
