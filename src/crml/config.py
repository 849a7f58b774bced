"""Configuration management for crml builds.

Schema (``crml.json`` or ``crml.yaml``):
- root_dir: directory holding the ``*.crml`` templates
- output_dir: directory the generated module is written to
- include: list of [template name, props type name] pairs
- dialect: "rust" (default) or "python"
- extension: template file extension (default ".crml")
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from crml.errors import ConfigError

CONFIG_FILENAMES = ("crml.json", "crml.yaml", "crml.yml")


class CrmlConfig(BaseModel):
    """Main crml configuration."""

    root_dir: Path = Field(
        default=Path("templates"), description="Template source directory"
    )
    output_dir: Path = Field(
        default=Path("src/crml"), description="Directory for the generated module"
    )
    include: list[tuple[str, str]] = Field(
        default_factory=list, description="Templates to build with their props type"
    )
    dialect: Literal["rust", "python"] = Field(
        default="rust", description="Language of the generated code"
    )
    extension: str = Field(default=".crml", description="Template file extension")

    def resolve_paths(self, base_dir: Path) -> "CrmlConfig":
        """Return a copy with relative directories anchored at ``base_dir``."""
        return self.model_copy(
            update={
                "root_dir": _anchor(self.root_dir, base_dir),
                "output_dir": _anchor(self.output_dir, base_dir),
            }
        )


def _anchor(path: Path, base_dir: Path) -> Path:
    return path if path.is_absolute() else base_dir / path


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find a crml config file in ``start`` (default: cwd) or its parents."""
    cwd = start or Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        for filename in CONFIG_FILENAMES:
            candidate = parent / filename
            if candidate.exists():
                return candidate
    return None


def load_config(path: Path) -> CrmlConfig:
    """Load a crml config from a JSON or YAML file.

    Relative ``root_dir``/``output_dir`` values are resolved against the
    directory containing the config file.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            data = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping at the top level: {path}")

    try:
        config = CrmlConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {path}: {exc}") from exc

    return config.resolve_paths(path.parent)


def save_config(config: CrmlConfig, path: Path) -> None:
    """Save config as JSON or YAML depending on the file suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix == ".json":
            json.dump(data, f, indent=2)
            f.write("\n")
        else:
            yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
