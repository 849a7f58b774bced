"""CRML AST - tokenizer and selector parser."""

from crml.ast.parser import Parser, TokenStream, tokenize_line
from crml.ast.selector import parse_selector
from crml.ast.spec import ElementDescriptor, Token, TokenKind

__all__ = [
    "Parser",
    "TokenStream",
    "tokenize_line",
    "parse_selector",
    "ElementDescriptor",
    "Token",
    "TokenKind",
]
