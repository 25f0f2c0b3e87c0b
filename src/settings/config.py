from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from errors import ModChangesError

CONFIG_FILENAME = "modchanges.toml"

DEFAULT_DESCRIPTOR_FILENAME = "pom.xml"
DEFAULT_COMMAND_TIMEOUT_SECONDS = 300.0


class ModChangesConfig(BaseModel):
    """Configuration for change detection in a multi-module project."""

    model_config = ConfigDict(extra="forbid")

    descriptor_filename: str = Field(
        default=DEFAULT_DESCRIPTOR_FILENAME,
        description="Build descriptor file name looked up in every tracked directory",
    )
    command_timeout_seconds: float = Field(
        default=DEFAULT_COMMAND_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout applied to every git query",
    )
    marker_format: str = Field(
        default="%H",
        description=(
            "git log --format placeholder used as the last-modification marker "
            "of a module directory"
        ),
    )
    git_executable: str = Field(
        default="git",
        description="Name or path of the git executable",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for module directories to include (empty = all)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for module directories to exclude",
    )

    @field_validator("descriptor_filename")
    @classmethod
    def validate_descriptor_filename(cls, v: str) -> str:
        """The descriptor must be a bare file name, never a path."""
        if not v.strip():
            msg = "descriptor_filename must not be blank"
            raise ValueError(msg)
        if "/" in v or "\\" in v:
            msg = f"descriptor_filename must be a file name, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("marker_format")
    @classmethod
    def validate_marker_format(cls, v: str) -> str:
        if "%" not in v:
            msg = f"marker_format must contain a git log placeholder, got '{v}'"
            raise ValueError(msg)
        return v


class ConfigError(ModChangesError):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> ModChangesConfig:
    """Load configuration from modchanges.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return ModChangesConfig()

    try:
        with config_path.open("rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ModChangesConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
