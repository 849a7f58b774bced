"""Compiler IR spec - the statement buffer produced for one template."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


SLOT_PLACEHOLDER = "<!-- crml:slot {name} -->"


@dataclass
class HostCode:
    """A verbatim host-language statement."""

    text: str
    line: Optional[int] = None


@dataclass
class HostExpr:
    """A host expression whose value is appended to the output."""

    expr: str
    line: Optional[int] = None


@dataclass
class Fragment:
    """Literal HTML appended to the output.

    When ``formatted`` is set, ``{expr}`` holes are interpolated and ``{{``/``}}``
    stand for literal braces.
    """

    html: str
    line: Optional[int] = None
    formatted: bool = True


@dataclass
class Newline:
    line: Optional[int] = None


@dataclass
class SlotMarker:
    """A named hole filled by a template that includes this one."""

    name: str
    line: Optional[int] = None

    @property
    def placeholder(self) -> str:
        return SLOT_PLACEHOLDER.format(name=self.name)


Statement = Union[HostCode, HostExpr, Fragment, Newline, SlotMarker]


@dataclass
class TemplateFunction:
    """One compiled template, rendered as a function taking ``page``."""

    name: str
    props_type: str
    body: List[Statement] = field(default_factory=list)


@dataclass
class TemplateModule:
    """A generated module holding every template of a build."""

    functions: List[TemplateFunction] = field(default_factory=list)
