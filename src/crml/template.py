"""Template runtime - compiles a template to a Python function and calls it.

Example:
    >>> Template.from_string("%p=Hello {page.name}").render(Page(name="you"))
    '<p>Hello you</p>'
"""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from crml.compiler.compiler import Compiler
from crml.compiler.renderer import PythonRenderer, function_ident
from crml.compiler.resolver import FileResolver, Resolver
from crml.compiler.spec import Statement, TemplateFunction

log = logging.getLogger(__name__)


class Template:
    """A compiled template rendered through the Python dialect."""

    def __init__(
        self,
        name: str,
        source: Optional[str] = None,
        resolver: Optional[Resolver] = None,
        globals: Optional[Dict[str, Any]] = None,
        path: Optional[Path] = None,
    ):
        """
        Args:
            name: Template name; resolved through ``resolver`` when no source
                is given.
            source: Template source text.
            resolver: Resolver for the template itself and its includes.
            globals: Extra names visible to host code in the template.
            path: Template file, compiled directly when given.
        """
        self.name = name
        self.source = source
        self.path = Path(path) if path is not None else None
        self.compiler = Compiler(resolver=resolver)
        self.globals = dict(globals or {})

    @classmethod
    def from_string(
        cls,
        source: str,
        name: str = "template",
        resolver: Optional[Resolver] = None,
        **kwargs: Any,
    ) -> "Template":
        return cls(name, source=source, resolver=resolver, **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> "Template":
        """Load a template file; includes resolve next to it."""
        path = Path(path)
        resolver = kwargs.pop("resolver", None) or FileResolver(path.parent, path.suffix)
        return cls(path.stem, resolver=resolver, path=path, **kwargs)

    @cached_property
    def statements(self) -> List[Statement]:
        if self.path is not None:
            return self.compiler.compile_file(self.path)
        if self.source is None:
            return self.compiler.compile_template(self.name)
        return self.compiler.compile(self.source, name=self.name)

    @cached_property
    def code(self) -> str:
        """Source of the generated Python function."""
        fn = TemplateFunction(name=self.name, props_type="", body=self.statements)
        return PythonRenderer().render_function(fn)

    @cached_property
    def function(self) -> Callable[[Any], str]:
        namespace: Dict[str, Any] = dict(self.globals)
        exec(compile(self.code, f"<crml:{self.name}>", "exec"), namespace)
        log.debug("Compiled template %s", self.name)
        return namespace[function_ident(self.name)]

    def render(self, page: Any = None) -> str:
        """Render the template with ``page`` as its data record."""
        return self.function(page)
