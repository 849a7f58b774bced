"""Renderer - converts the statement IR to source code in a target dialect."""

from __future__ import annotations

import keyword
import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple, Type

from jinja2 import Environment

from crml.compiler.spec import (
    Fragment,
    HostCode,
    HostExpr,
    Newline,
    SlotMarker,
    Statement,
    TemplateFunction,
    TemplateModule,
)
from crml.errors import UnknownDialectError

log = logging.getLogger(__name__)

BUFFER = "crml_rendered"


RUST_FUNCTION = '''\
/// Render the `{{ fn.name }}.crml` template with the given [`{{ fn.props_type }}`] properties.
///
/// # Arguments
/// * `page` - [`{{ fn.props_type }}`]
///
/// # Returns
/// Rendered string.
pub fn {{ ident }}(page: {{ fn.props_type }}) -> String {
    let mut {{ buffer }} = String::new();
{{ body | indent(4, first=True) }}
    {{ buffer }}
}
'''

RUST_MODULE = """\
// This file is @generated.
mod data;
use data::*;

{{ functions | join(separator) }}
"""

PYTHON_FUNCTION = '''\
def {{ ident }}(page{% if fn.props_type %}: {{ fn.props_type }}{% endif %}) -> str:
    """Render the ``{{ fn.name }}`` template."""
    {{ buffer }} = []
{{ body | indent(4, first=True) }}
    return "".join({{ buffer }})
'''

PYTHON_MODULE = """\
# This file is @generated.
from __future__ import annotations

from .data import *  # noqa: F401,F403


{{ functions | join(separator) }}
"""


def get_renderer_env() -> Environment:
    """Create the Jinja2 Environment used for function and module wrappers."""
    return Environment(keep_trailing_newline=True, autoescape=False)


def function_ident(name: str) -> str:
    """Turn a template name (possibly a path) into a function identifier."""
    ident = re.sub(r"\W", "_", name)
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


def split_holes(html: str) -> List[Tuple[bool, str]]:
    """Split a formatted fragment into literal text and ``{expr}`` holes.

    ``{{`` and ``}}`` stand for literal braces. An unterminated or empty hole
    is kept as text.

    Returns:
        List of (is_expr, text) pairs in source order.
    """
    parts: List[Tuple[bool, str]] = []
    text = ""
    i = 0
    while i < len(html):
        char = html[i]
        if char in "{}" and html[i + 1 : i + 2] == char:
            text += char
            i += 2
            continue
        if char != "{":
            text += char
            i += 1
            continue

        depth = 1
        j = i + 1
        while j < len(html) and depth:
            if html[j] == "{":
                depth += 1
            elif html[j] == "}":
                depth -= 1
            j += 1

        expr = html[i + 1 : j - 1]
        if depth or not expr.strip():
            text += html[i:j]
        else:
            if text:
                parts.append((False, text))
                text = ""
            parts.append((True, expr.strip()))
        i = j

    if text:
        parts.append((False, text))
    return parts


def quote(text: str) -> str:
    """Double-quoted string literal body, valid in Rust and Python."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


class Renderer:
    """Renders statement IR to text; one subclass per dialect."""

    dialect = ""
    module_filename = ""
    function_template = ""
    module_template = ""
    function_separator = "\n\n"

    def __init__(self) -> None:
        self.env = get_renderer_env()

    def render_body(self, statements: Sequence[Statement]) -> str:
        raise NotImplementedError

    def render_function(self, fn: TemplateFunction) -> str:
        """Render one compiled template as a complete function."""
        tmpl = self.env.from_string(self.function_template)
        return tmpl.render(
            fn=fn,
            ident=function_ident(fn.name),
            buffer=BUFFER,
            body=self.render_body(fn.body),
        )

    def render_module(self, module: TemplateModule) -> str:
        """Render every function of a build into one module."""
        tmpl = self.env.from_string(self.module_template)
        return tmpl.render(
            functions=[self.render_function(fn).rstrip("\n") for fn in module.functions],
            separator=self.function_separator,
        )


class RustRenderer(Renderer):
    dialect = "rust"
    module_filename = "mod.rs"
    function_template = RUST_FUNCTION
    module_template = RUST_MODULE

    def render_body(self, statements: Sequence[Statement]) -> str:
        return "\n".join(self._render_statement(stmt) for stmt in statements)

    def _render_statement(self, stmt: Statement) -> str:
        if isinstance(stmt, HostCode):
            return f"{stmt.text}{self._line(stmt.line)}"
        if isinstance(stmt, HostExpr):
            return (
                f'{BUFFER}.push_str(&format!("{{}}", {stmt.expr}));'
                f"{self._line(stmt.line)}"
            )
        if isinstance(stmt, Fragment):
            if stmt.formatted:
                call = f'{BUFFER}.push_str(&format!("{quote(stmt.html)}"));'
            else:
                call = f'{BUFFER}.push_str("{quote(stmt.html)}");'
            return f"{call}{self._line(stmt.line)}"
        if isinstance(stmt, Newline):
            return f'{BUFFER}.push_str("\\n");'
        if isinstance(stmt, SlotMarker):
            return f"// {stmt.placeholder}"
        raise TypeError(f"Unknown statement: {stmt!r}")

    @staticmethod
    def _line(line: Optional[int]) -> str:
        return "" if line is None else f"//line: {line}"


class PythonRenderer(Renderer):
    """Python dialect.

    Host code uses brace-delimited blocks like the Rust dialect; a line ending
    in ``{`` opens an indented block and a line starting with ``}`` closes one,
    so ``} else {`` works as expected.
    """

    dialect = "python"
    module_filename = "__init__.py"
    function_template = PYTHON_FUNCTION
    module_template = PYTHON_MODULE
    function_separator = "\n\n\n"

    def render_body(self, statements: Sequence[Statement]) -> str:
        lines: List[str] = []
        # statements emitted so far in each open block
        blocks: List[int] = []

        def put(text: str, counts: bool = True) -> None:
            lines.append("    " * len(blocks) + text)
            if counts and blocks:
                blocks[-1] += 1

        def close_block(line: Optional[int]) -> None:
            if not blocks:
                log.warning("Unbalanced '}' in host code at line %s", line)
                return
            if blocks[-1] == 0:
                put("pass")
            blocks.pop()

        for stmt in statements:
            if isinstance(stmt, HostCode):
                text = stmt.text.strip()
                if text.endswith(";"):
                    text = text[:-1].rstrip()
                if text.startswith("}"):
                    close_block(stmt.line)
                    text = text[1:].strip()
                if text.endswith("{"):
                    put(f"{text[:-1].rstrip()}:{self._line(stmt.line)}")
                    blocks.append(0)
                elif text:
                    put(f"{text}{self._line(stmt.line)}")
            elif isinstance(stmt, HostExpr):
                put(f"{BUFFER}.append(str({stmt.expr})){self._line(stmt.line)}")
            elif isinstance(stmt, Fragment):
                parts = split_holes(stmt.html) if stmt.formatted else [(False, stmt.html)]
                for is_expr, text in parts:
                    if is_expr:
                        put(f"{BUFFER}.append(str({text})){self._line(stmt.line)}")
                    else:
                        put(f'{BUFFER}.append("{quote(text)}"){self._line(stmt.line)}')
            elif isinstance(stmt, Newline):
                put(f'{BUFFER}.append("\\n")')
            elif isinstance(stmt, SlotMarker):
                put(f"# {stmt.placeholder}", counts=False)
            else:
                raise TypeError(f"Unknown statement: {stmt!r}")

        if blocks:
            log.warning("%d unclosed block(s) in host code", len(blocks))
        while blocks:
            close_block(None)

        return "\n".join(lines)

    @staticmethod
    def _line(line: Optional[int]) -> str:
        return "" if line is None else f"  # line: {line}"


RENDERERS: Dict[str, Type[Renderer]] = {
    RustRenderer.dialect: RustRenderer,
    PythonRenderer.dialect: PythonRenderer,
}


def get_renderer(dialect: str) -> Renderer:
    """Return a renderer for ``dialect`` ("rust" or "python")."""
    try:
        return RENDERERS[dialect]()
    except KeyError:
        raise UnknownDialectError(dialect) from None
