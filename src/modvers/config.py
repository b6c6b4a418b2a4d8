from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "modvers.toml"

Method = Literal["text", "import", "subprocess"]
OutputFormat = Literal["text", "jsonl"]

DEFAULT_VERSION_ATTRIBUTES = ("__version__", "VERSION")


class ModversConfig(BaseModel):
    """Configuration for modvers runs."""

    model_config = ConfigDict(extra="forbid")

    method: Method = Field(
        default="text",
        description="Version resolution method: text, import or subprocess",
    )
    version_attributes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VERSION_ATTRIBUTES),
        description="Module attributes holding the version, in lookup order",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Extra directories searched before the interpreter path",
    )
    show_files: bool = Field(
        default=False,
        description="Append the module's source file to each result",
    )
    format: OutputFormat = Field(
        default="text",
        description="Output format: text or jsonl",
    )

    @field_validator("version_attributes", mode="before")
    @classmethod
    def validate_version_attributes(cls, v: Any) -> Any:
        """Require a non-empty list of identifiers."""
        if not isinstance(v, list) or not v:
            msg = "version_attributes must be a non-empty list of names"
            raise ValueError(msg)

        for name in v:
            if not isinstance(name, str) or not name.isidentifier():
                msg = f"Invalid version attribute {name!r}: must be an identifier"
                raise ValueError(msg)

        return v


class ConfigError(Exception):
    """Raised for invalid configuration or an invalid request."""


def resolve_include_dirs(root: Path, include: list[str]) -> list[str]:
    """Resolve configured include dirs, relative ones against ``root``."""
    resolved: list[str] = []
    for entry in include:
        path = Path(entry).expanduser()
        if not path.is_absolute():
            path = root / path
        resolved.append(str(path.resolve()))
    return resolved


def load_config(root: Path) -> ModversConfig:
    """Load configuration from modvers.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return ModversConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ModversConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_VERSION_ATTRIBUTES",
    "ConfigError",
    "Method",
    "ModversConfig",
    "OutputFormat",
    "load_config",
    "resolve_include_dirs",
]
