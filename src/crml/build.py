"""Batch build - compiles every configured template into one module."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from crml.compiler.compiler import Compiler
from crml.compiler.renderer import Renderer, get_renderer
from crml.compiler.resolver import FileResolver
from crml.compiler.spec import TemplateModule
from crml.config import CrmlConfig

log = logging.getLogger(__name__)


def make_compiler(config: CrmlConfig) -> Compiler:
    """Create a compiler reading templates from the configured root."""
    return Compiler(resolver=FileResolver(config.root_dir, config.extension))


def build_module(
    config: CrmlConfig, compiler: Optional[Compiler] = None
) -> TemplateModule:
    """Compile each ``(template, props type)`` pair of ``config.include``.

    Args:
        config: Build configuration.
        compiler: Compiler to use; one over ``config.root_dir`` by default.

    Returns:
        TemplateModule with one function per included template, in order.
    """
    compiler = compiler or make_compiler(config)
    module = TemplateModule()

    for name, props_type in config.include:
        log.info("Compiling %s (%s)", name, props_type)
        module.functions.append(compiler.compile_function(name, props_type))

    return module


def render_module_text(
    config: CrmlConfig, renderer: Optional[Renderer] = None
) -> str:
    """Compile and render the whole build to source text."""
    renderer = renderer or get_renderer(config.dialect)
    return renderer.render_module(build_module(config))


def output_path(config: CrmlConfig) -> Path:
    return config.output_dir / get_renderer(config.dialect).module_filename


def build(config: CrmlConfig) -> Path:
    """Build the configured templates and write the generated module.

    Args:
        config: Build configuration.

    Returns:
        Path of the generated module.
    """
    text = render_module_text(config)
    path = output_path(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    log.info("Wrote %d template(s) to %s", len(config.include), path)
    return path
