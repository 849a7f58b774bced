"""Compiler - turns a token stream into the statement buffer of a template."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from crml.ast.parser import Parser
from crml.ast.spec import (
    CLOSE_PREFIX,
    RAW_BLOCK_PREFIX,
    SLOT_BLOCK_PREFIX,
    Token,
    TokenKind,
)
from crml.compiler.resolver import FileResolver, Resolver
from crml.compiler.spec import (
    SLOT_PLACEHOLDER,
    Fragment,
    HostCode,
    HostExpr,
    Newline,
    SlotMarker,
    Statement,
    TemplateFunction,
)
from crml.errors import IncludeCycleError, IncludeDepthError, SlotNotFoundError

log = logging.getLogger(__name__)

# Elements whose content is whitespace/brace sensitive; these must be closed
# explicitly and are never interpolated.
WHITESPACE_SENSITIVE = frozenset({"script", "style", "pre", "html", "body", "head"})

DEFAULT_MAX_DEPTH = 16


def escape_braces(html: str) -> str:
    """Neutralize interpolation braces so they are emitted literally."""
    return html.replace("{", "{{").replace("}", "}}")


def split_on_slot(
    statements: Sequence[Statement], slot: str, template: str = ""
) -> Tuple[List[Statement], List[Statement]]:
    """Split a compiled template around the placeholder of ``slot``.

    Returns:
        (head, tail) - everything before and after the first matching marker.

    Raises:
        SlotNotFoundError: If the template declares no such slot.
    """
    placeholder = SLOT_PLACEHOLDER.format(name=slot)
    for i, stmt in enumerate(statements):
        if isinstance(stmt, SlotMarker) and stmt.placeholder == placeholder:
            return list(statements[:i]), list(statements[i + 1 :])
    raise SlotNotFoundError(template, slot)


class GeneratorState:
    """Open-element stacks and output buffer for one compile invocation.

    ``indents`` and ``tags`` always have the same length; each index is one
    open element frame.
    """

    def __init__(self) -> None:
        self.indents: List[Optional[int]] = []
        self.tags: List[str] = []
        self.pending_tails: List[List[Statement]] = []
        self.output: List[Statement] = []

    def push(self, indent: Optional[int], tag: str) -> None:
        self.indents.append(indent)
        self.tags.append(tag)

    def pop(self) -> Optional[str]:
        if not self.tags:
            return None
        self.indents.pop()
        return self.tags.pop()

    def emit(self, stmt: Statement) -> None:
        self.output.append(stmt)

    @property
    def top_tag(self) -> str:
        return self.tags[-1] if self.tags else ""

    @property
    def top_indent(self) -> Optional[int]:
        return self.indents[-1] if self.indents else 0

    @property
    def in_raw_block(self) -> bool:
        return self.top_tag.startswith(RAW_BLOCK_PREFIX)

    @property
    def in_literal_block(self) -> bool:
        """True inside whitespace-sensitive elements and raw blocks."""
        return self.top_tag in WHITESPACE_SENSITIVE or self.in_raw_block

    def top_closable(self) -> bool:
        """Whether the top frame may be closed automatically."""
        tag = self.top_tag
        return (
            bool(tag)
            and self.top_indent is not None
            and tag not in WHITESPACE_SENSITIVE
            and not tag.startswith(RAW_BLOCK_PREFIX)
            and not tag.startswith(SLOT_BLOCK_PREFIX)
        )

    def close_top(self) -> None:
        self.emit(Fragment(f"</{self.pop()}>"))


class Compiler:
    """Compiles CRML template source into a statement buffer."""

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        parser: Optional[Parser] = None,
    ):
        """Initialize compiler.

        Args:
            resolver: Looks up included templates by name. Defaults to a
                FileResolver over the current directory.
            max_depth: Longest include chain allowed.
            parser: Tokenizer to use.
        """
        self.resolver = resolver or FileResolver()
        self.max_depth = max_depth
        self.parser = parser or Parser()

    def compile(self, source: str, name: Optional[str] = None) -> List[Statement]:
        """Compile template source text.

        Args:
            source: Template source.
            name: Template name, used to detect include cycles.

        Returns:
            The finalized statement buffer.
        """
        chain = [name] if name else []
        return self.generate(self.parser.parse(source), chain=chain)

    def compile_template(self, name: str) -> List[Statement]:
        """Resolve template ``name`` and compile it."""
        return self.compile(self.resolver.resolve(name), name=name)

    def compile_file(self, path: Path) -> List[Statement]:
        path = Path(path)
        return self.generate(self.parser.parse_file(path), chain=[path.stem])

    def compile_function(self, name: str, props_type: str) -> TemplateFunction:
        """Compile template ``name`` into a function taking ``props_type``."""
        return TemplateFunction(
            name=name, props_type=props_type, body=self.compile_template(name)
        )

    def generate(
        self,
        tokens: Iterable[Token],
        state: Optional[GeneratorState] = None,
        chain: Sequence[str] = (),
    ) -> List[Statement]:
        """Run the generator over a token sequence.

        Args:
            tokens: Tokens in source order.
            state: Generator state to use; a fresh one by default.
            chain: Names of the templates currently being compiled.

        Returns:
            The finalized statement buffer.
        """
        state = state if state is not None else GeneratorState()
        chain = list(chain)

        for token in tokens:
            self._auto_close(state, token)
            self._dispatch(state, token, chain)

        # Close what is still open, stopping at elements that must be closed
        # explicitly
        while state.tags and state.top_closable():
            state.close_top()

        if state.tags:
            log.debug("Left open at end of template: %s", ", ".join(state.tags))

        for tail in state.pending_tails:
            state.output.extend(tail)

        return state.output

    def _auto_close(self, state: GeneratorState, token: Token) -> None:
        """Close open elements the token dedents past."""
        if token.selector is None and token.indent is None:
            return

        # an explicit close keeps the frame at its own level for itself
        strict = token.selector is not None and token.selector.is_close

        while state.tags and state.top_closable():
            top = state.top_indent
            if top < token.column or (strict and top == token.column):
                break
            state.close_top()

    def _dispatch(self, state: GeneratorState, token: Token, chain: List[str]) -> None:
        kind = token.kind

        if kind is TokenKind.COMMENT:
            return

        if kind is TokenKind.HOST_STATEMENT:
            text = token.raw
            if not text.endswith("{") and text != "}":
                text += ";"
            state.emit(HostCode(text, line=token.line))
            return

        if kind is TokenKind.HOST_EXPRESSION:
            state.emit(HostExpr(token.raw, line=token.line))
            return

        if token.is_newline:
            state.emit(Newline(line=token.line))
            return

        selector = token.selector

        if state.in_raw_block and not (selector and selector.is_raw_block_close):
            state.emit(Fragment(escape_braces(token.source), line=token.line))
            return

        if selector is None:
            if kind is TokenKind.RAW_PASSTHROUGH:
                state.emit(Fragment(token.html, line=token.line, formatted=False))
                return
            html = token.html
            if state.in_literal_block:
                html = escape_braces(html)
            state.emit(Fragment(html, line=token.line))
            return

        if selector.is_close:
            target = selector.tag[len(CLOSE_PREFIX) :]
            if not selector.is_raw_block_close and target in state.tags:
                # close elements opened inside the target first
                while state.top_tag != target:
                    state.close_top()
            closed = state.pop()
            if closed is None:
                log.debug("Line %d closes %s with nothing open", token.line, selector.tag)
            if not selector.is_raw_block_close:
                state.emit(Fragment(token.html, line=token.line))
            return

        state.push(token.indent, selector.tag)

        if selector.is_slot_marker:
            state.emit(SlotMarker(selector.slot_name, line=token.line))
            state.pop()
            return

        if selector.is_raw_block:
            return

        if selector.is_slot_block:
            self._include(state, selector.include_target, selector.target_slot, chain)
            return

        literal = state.in_literal_block
        html = token.html
        if "</" in html:
            # element closed itself (inline content)
            state.pop()
        if literal:
            html = escape_braces(html)
        state.emit(Fragment(html, line=token.line))

    def _include(
        self, state: GeneratorState, target: str, slot: str, chain: List[str]
    ) -> None:
        """Wrap the current output in the ``slot`` of template ``target``."""
        next_chain = chain + [target]
        if target in chain:
            raise IncludeCycleError(next_chain)
        if len(next_chain) > self.max_depth:
            raise IncludeDepthError(next_chain, self.max_depth)

        log.debug("Including %s into slot %s", target, slot)
        included = self.generate(
            self.parser.parse(self.resolver.resolve(target)), chain=next_chain
        )
        head, tail = split_on_slot(included, slot, target)

        state.output[:0] = head
        state.pending_tails.append(tail)
