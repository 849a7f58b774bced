"""Shared utilities for CLI commands"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Optional

import yaml
from rich.console import Console
from rich.logging import RichHandler

from crml.errors import CrmlError

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the crml CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level - shows compiled templates and written files
    - Debug (CRML_DEBUG=1): DEBUG level - shows includes, template loading
    """
    if os.environ.get("CRML_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=bool(os.environ.get("CRML_DEBUG")),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("crml")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def to_namespace(value: Any) -> Any:
    """Convert nested dicts to attribute-accessible namespaces."""
    if isinstance(value, dict):
        return SimpleNamespace(**{k: to_namespace(v) for k, v in value.items()})
    if isinstance(value, list):
        return [to_namespace(v) for v in value]
    return value


def load_data(path: Optional[Path]) -> Any:
    """Load a page data record from a JSON or YAML file."""
    if path is None:
        return SimpleNamespace()

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CrmlError(f"Failed to parse data file {path}: {exc}") from exc
    return to_namespace(data if data is not None else {})
