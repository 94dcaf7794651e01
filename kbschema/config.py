"""
Configuration for kbschema.

All configuration is done via environment variables prefixed with
KBSCHEMA_. The schema engine itself takes explicit arguments; only the
default schema loader and the command line tool read these settings.

Invariants:
    - All settings have defaults that reproduce the standard behaviour
    - Unknown bootstrap class names are ignored by the registry
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """kbschema configuration."""

    log_level: str = Field(default="WARNING", description="Log level for the command line tool")

    # Classes created out of band, always placed in the first level
    bootstrap_classes: list[str] = Field(default=["V", "E", "User", "UserGroup"])

    model_config = {"env_prefix": "KBSCHEMA_"}
