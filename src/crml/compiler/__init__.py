"""CRML Compiler - transforms template tokens into Rust or Python code."""

from crml.compiler.compiler import Compiler, GeneratorState
from crml.compiler.renderer import PythonRenderer, Renderer, RustRenderer, get_renderer
from crml.compiler.resolver import DictResolver, FileResolver, Resolver
from crml.compiler.spec import TemplateFunction, TemplateModule

__all__ = [
    "Compiler",
    "GeneratorState",
    "Renderer",
    "RustRenderer",
    "PythonRenderer",
    "get_renderer",
    "Resolver",
    "FileResolver",
    "DictResolver",
    "TemplateFunction",
    "TemplateModule",
]
