"""Token and element descriptor types produced by the tokenizer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional


# Reserved tag forms understood by the code generator
CLOSE_PREFIX = "/"
RAW_BLOCK_PREFIX = "!"
SLOT_MARKER = "@slot"
SLOT_BLOCK_PREFIX = "@"

# Newline marker carried by blank lines
NEWLINE = "\n"


class TokenKind(enum.Enum):
    COMMENT = "comment"  # / ...
    HOST_STATEMENT = "host_statement"  # - let a = 1
    HOST_EXPRESSION = "host_expression"  # = a
    ELEMENT = "element"  # %div.class#id[attr]
    RAW_PASSTHROUGH = "raw_passthrough"  # @<b>{not interpolated}</b>
    RAW = "raw"  # anything else


@dataclass
class ElementDescriptor:
    """A parsed ``tag.class#id[attr]`` selector."""

    tag: str = ""
    classes: Optional[List[str]] = None
    id: Optional[str] = None
    attributes: Optional[List[str]] = None

    @property
    def is_close(self) -> bool:
        return self.tag.startswith(CLOSE_PREFIX)

    @property
    def is_raw_block(self) -> bool:
        return self.tag.startswith(RAW_BLOCK_PREFIX)

    @property
    def is_raw_block_close(self) -> bool:
        return self.tag.startswith(CLOSE_PREFIX + RAW_BLOCK_PREFIX)

    @property
    def is_slot_marker(self) -> bool:
        return self.tag == SLOT_MARKER

    @property
    def is_slot_block(self) -> bool:
        return not self.is_slot_marker and self.tag.startswith(SLOT_BLOCK_PREFIX)

    @property
    def slot_name(self) -> str:
        """Declared name of a slot marker (its first attribute)."""
        return self.attributes[0] if self.attributes else ""

    @property
    def include_target(self) -> str:
        """Template named by a slot-block directive."""
        return self.tag[len(SLOT_BLOCK_PREFIX) :]

    @property
    def target_slot(self) -> str:
        """Slot targeted by a slot-block directive (its first class)."""
        return self.classes[0] if self.classes else ""

    def render(self) -> str:
        """Render the opening tag, e.g. ``<div class="a b " id="x" k=v>``."""
        class_string = ""
        id_string = ""
        attributes_string = ""

        if self.classes is not None:
            class_string = ' class="' + "".join(f"{c} " for c in self.classes) + '"'

        if self.id is not None:
            id_string = f' id="{self.id}"'

        if self.attributes is not None:
            attributes_string = "".join(f" {a}" for a in self.attributes)

        return f"<{self.tag}{class_string}{id_string}{attributes_string}>"


@dataclass(frozen=True)
class Token:
    """One source line, classified and (for markup) pre-rendered.

    ``indent`` is the measured indentation, or ``None`` when the line must
    never take part in auto-closing (pinned elements, blank lines, comments).
    ``column`` always holds the measured indentation.
    """

    kind: TokenKind
    raw: str
    html: str = ""
    indent: Optional[int] = 0
    column: int = 0
    line: int = 0
    selector: Optional[ElementDescriptor] = field(default=None, compare=False)
    source: str = ""

    @property
    def is_newline(self) -> bool:
        return self.kind is TokenKind.RAW and self.raw == NEWLINE
