"""Tokenizer - turns template source into a lazy stream of line tokens."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from crml.ast.selector import parse_selector
from crml.ast.spec import NEWLINE, Token, TokenKind

PIN = "~"
INLINE = "="
ESCAPE = "\\"


def measure_indent(line: str) -> int:
    """Count leading spaces and tabs, one unit each."""
    count = 0
    for char in line:
        if char not in " \t":
            break
        count += 1
    return count


def split_inline(body: str) -> Tuple[str, Optional[str]]:
    """Split an element body into selector text and inline content.

    The first ``=`` outside ``[...]`` starts the inline content; ``\\=`` is a
    literal ``=`` in the selector.

    Returns:
        (selector, content) where content is None when there is no inline part.
    """
    selector = []
    depth = 0
    i = 0
    while i < len(body):
        char = body[i]
        if char == ESCAPE and body[i + 1 : i + 2] == INLINE:
            selector.append(INLINE)
            i += 2
            continue
        if char == "[":
            depth += 1
        elif char == "]" and depth:
            depth -= 1
        elif char == INLINE and depth == 0:
            return "".join(selector), body[i + 1 :]
        selector.append(char)
        i += 1
    return "".join(selector), None


def tokenize_line(line: str, number: int = 0) -> Token:
    """Classify one source line by its first non-whitespace character."""
    line = line.rstrip("\r")
    column = measure_indent(line)
    text = line.strip()

    if not text:
        return Token(
            kind=TokenKind.RAW,
            raw=NEWLINE,
            html=NEWLINE,
            indent=None,
            column=0,
            line=number,
            source=NEWLINE,
        )

    sigil, rest = text[0], text[1:]

    if sigil == "/" and not rest.startswith(">"):
        return Token(
            kind=TokenKind.COMMENT,
            raw=rest,
            indent=None,
            column=column,
            line=number,
            source=text,
        )

    if sigil == "-":
        return Token(
            kind=TokenKind.HOST_STATEMENT,
            raw=rest.strip(),
            indent=column,
            column=column,
            line=number,
            source=text,
        )

    if sigil == "=":
        return Token(
            kind=TokenKind.HOST_EXPRESSION,
            raw=rest.strip(),
            indent=column,
            column=column,
            line=number,
            source=text,
        )

    if sigil == "%":
        return _element(rest, text, column, number)

    if sigil == "@":
        return Token(
            kind=TokenKind.RAW_PASSTHROUGH,
            raw=rest,
            html=rest,
            indent=column,
            column=column,
            line=number,
            source=text,
        )

    return Token(
        kind=TokenKind.RAW,
        raw=text,
        html=text,
        indent=column,
        column=column,
        line=number,
        source=text,
    )


def _element(body: str, text: str, column: int, number: int) -> Token:
    indent: Optional[int] = column
    if body.startswith(PIN):
        indent = None
        body = body[len(PIN) :]

    selector_text, content = split_inline(body)
    selector = parse_selector(selector_text)

    html = selector.render()
    raw = selector_text
    if content is not None:
        html = f"{html}{content}</{selector.tag}>"
        raw = f"{selector_text}{content}"

    return Token(
        kind=TokenKind.ELEMENT,
        raw=raw,
        html=html,
        indent=indent,
        column=column,
        line=number,
        selector=selector,
        source=text,
    )


class TokenStream:
    """Forward-only iterator producing one Token per source line."""

    def __init__(self, lines: List[str]):
        self._lines = lines
        self._cursor = 0

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self._cursor >= len(self._lines):
            raise StopIteration
        number = self._cursor
        self._cursor += 1
        return tokenize_line(self._lines[number], number)


class Parser:
    _file_loader: Callable[[str], str]

    def __init__(self, file_loader: Callable[[str], str] | None = None):
        self._file_loader = file_loader or read_file

    def parse(self, source: str) -> TokenStream:
        """Begin tokenizing ``source``; lines are produced lazily."""
        return TokenStream(source.split("\n"))

    def parse_file(self, filepath: str | Path) -> TokenStream:
        return self.parse(self._file_loader(str(filepath)))


def read_file(filepath: str) -> str:
    with open(filepath, "r", encoding="utf-8") as file:
        return file.read()
