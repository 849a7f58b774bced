"""Selector parser - turns ``tag.class#id[attr]`` into an ElementDescriptor."""

from __future__ import annotations

import enum
import logging

from crml.ast.spec import ElementDescriptor

log = logging.getLogger(__name__)


class Mode(enum.Enum):
    TAG = "tag"
    CLASS = "class"
    ID = "id"
    ATTRIBUTE = "attribute"


_SWITCHES = {
    ".": Mode.CLASS,
    "#": Mode.ID,
    "[": Mode.ATTRIBUTE,
    "]": Mode.TAG,
}


def _flush(state: ElementDescriptor, mode: Mode, buffer: str) -> None:
    """Save ``buffer`` into the field for ``mode``.

    The tag and the id are set at most once; later values are dropped.
    """
    if mode is Mode.TAG:
        if not state.tag:
            state.tag = buffer
        elif buffer:
            log.debug("Ignoring extra tag text %r (tag is %r)", buffer, state.tag)
    elif mode is Mode.CLASS:
        if state.classes is None:
            state.classes = []
        state.classes.append(buffer)
    elif mode is Mode.ID:
        if state.id is None:
            state.id = buffer
        else:
            log.debug("Ignoring duplicate id %r (id is %r)", buffer, state.id)
    else:
        if state.attributes is None:
            state.attributes = []
        state.attributes.append(buffer)


def parse_selector(text: str) -> ElementDescriptor:
    """Parse a selector in a single left-to-right scan.

    Malformed input is accepted as-is: an unclosed ``[`` swallows the rest of
    the string into one attribute and a repeated ``#id`` is ignored.

    Args:
        text: Selector text without the leading ``%``.

    Returns:
        The parsed ElementDescriptor.
    """
    state = ElementDescriptor()
    mode = Mode.TAG
    buffer = ""

    for char in text:
        next_mode = _SWITCHES.get(char)
        if next_mode is None or (mode is Mode.ATTRIBUTE and char != "]"):
            buffer += char
            continue

        _flush(state, mode, buffer)
        buffer = ""
        mode = next_mode

    if mode is Mode.ATTRIBUTE:
        log.debug("Unterminated attribute bracket in selector: %s", text)

    _flush(state, mode, buffer)
    return state
