"""Resolver - maps template names to source text.

The compiler never reads files itself; included templates are looked up
through a Resolver so tests can run against in-memory templates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from crml.errors import TemplateNotFoundError

log = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".crml"


class Resolver:
    """Base resolver; subclasses implement :meth:`resolve`."""

    def resolve(self, name: str) -> str:
        """Return the source text of template ``name``.

        Raises:
            TemplateNotFoundError: If no template has that name.
        """
        raise NotImplementedError


class FileResolver(Resolver):
    """Loads ``<root_dir>/<name><extension>`` from disk."""

    def __init__(
        self, root_dir: Optional[Path] = None, extension: str = DEFAULT_EXTENSION
    ):
        """Initialize resolver with optional template root directory.

        Args:
            root_dir: Directory holding the templates. Defaults to the cwd.
            extension: File extension appended to template names.
        """
        self.root_dir = Path(root_dir) if root_dir is not None else Path.cwd()
        self.extension = extension

    def path_for(self, name: str) -> Path:
        return self.root_dir / f"{name}{self.extension}"

    def resolve(self, name: str) -> str:
        path = self.path_for(name)
        if not path.is_file():
            raise TemplateNotFoundError(name, str(path))

        log.debug("Loading template %s from %s", name, path)
        return path.read_text(encoding="utf-8")


class DictResolver(Resolver):
    """Serves templates from an in-memory mapping."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self.templates: Dict[str, str] = dict(templates or {})

    def resolve(self, name: str) -> str:
        try:
            return self.templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None
