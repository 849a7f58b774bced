"""CRML - compiles indentation-based markup templates to Rust or Python code."""

from crml._version import __version__
from crml.compiler import Compiler, DictResolver, FileResolver, get_renderer
from crml.template import Template

__all__ = [
    "__version__",
    "Compiler",
    "DictResolver",
    "FileResolver",
    "get_renderer",
    "Template",
]
