"""Project scaffolding for `crml init`."""

from __future__ import annotations

from pathlib import Path

from crml.config import CrmlConfig, save_config
from crml.errors import CrmlError, UnknownDialectError

SAMPLE_TEMPLATE = """\
/ Rendered by the generated `index` function
{binding}
<!DOCTYPE html>
%html
%head
  %title={{title}}
%/head
%body
  %main.content
    %h1={{title}}
    %p
      Edit this file and run `crml build`.
%/body
%/html
"""

SAMPLE_BINDINGS = {
    "rust": "- let title = &page.title",
    "python": "- title = page.title",
}


class AlreadyInitializedError(CrmlError):
    """Raised when a crml config already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"crml is already initialized: {path}")


def check_already_initialized(config_path: Path) -> None:
    """Raise AlreadyInitializedError if config exists at `config_path`."""
    if config_path.exists():
        raise AlreadyInitializedError(config_path)


def scaffold(root: Path, dialect: str = "rust", config_name: str = "crml.json") -> Path:
    """Create a crml config and a sample template under `root`.

    Returns:
        Path of the written config file.
    """
    if dialect not in SAMPLE_BINDINGS:
        raise UnknownDialectError(dialect)

    config_path = root / config_name
    check_already_initialized(config_path)

    config = CrmlConfig(include=[("index", "IndexProps")], dialect=dialect)
    save_config(config, config_path)

    template_path = root / config.root_dir / f"index{config.extension}"
    if not template_path.exists():
        template_path.parent.mkdir(parents=True, exist_ok=True)
        template_path.write_text(
            SAMPLE_TEMPLATE.format(binding=SAMPLE_BINDINGS[dialect]), encoding="utf-8"
        )

    return config_path
