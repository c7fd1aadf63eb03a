"""Configuration management for orchview.

orchview.yaml schema:
- paths: directories searched for views, in order
- extensions: file extensions tried for each view name, in order

Both keys may also sit under a top-level ``view:`` mapping.
Relative paths are resolved against the directory holding the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from orchview.compiler import DEFAULT_EXTENSIONS, ViewFinder
from orchview.exceptions import ConfigError

CONFIG_FILENAME = "orchview.yaml"


class ViewConfig(BaseModel):
    """View lookup configuration."""

    paths: list[Path] = Field(
        default_factory=lambda: [Path("resources/views")],
        description="Directories searched for view files",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Extensions tried for each view name",
    )

    @field_validator("extensions")
    @classmethod
    def check_extensions(cls, value: list[str]) -> list[str]:
        for ext in value:
            if not ext.startswith("."):
                raise ValueError(f"Extension must start with '.': {ext!r}")
        return value

    def relative_to(self, base: Path) -> "ViewConfig":
        """Return a copy whose relative paths are anchored at ``base``."""
        paths = [p if p.is_absolute() else base / p for p in self.paths]
        return self.model_copy(update={"paths": paths})

    def finder(self) -> ViewFinder:
        return ViewFinder(self.paths, self.extensions)


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find orchview.yaml in the start directory or its parents."""
    cwd = start or Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_view_config(path: Path) -> ViewConfig:
    """Load orchview.yaml from path."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    if isinstance(data.get("view"), dict):
        data = data["view"]

    try:
        config = ViewConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc

    return config.relative_to(path.resolve().parent)
