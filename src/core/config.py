"""
Application settings.

Read once from environment variables (prefix BOARDRULES_), validated by pydantic.
"""

import logging
import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from src.core.exceptions import ConfigurationError

ENV_PREFIX = "BOARDRULES_"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str = "sqlite:///./boardrules.db"
    echo_sql: bool = False
    log_level: str = "INFO"
    # Reject positions where a side does not have exactly one king/general
    require_kings: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Collect the BOARDRULES_* variables. Missing ones fall back to the defaults."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        try:
            return cls(**values)
        except ValidationError as error:
            raise ConfigurationError(f"Invalid settings: {error}") from error


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
