"""CRML CLI Main Entry Point

Usage:
    crml build                        # Build every template listed in crml.json
    crml build -c path/crml.yaml      # Use a specific config file
    crml build --dry-run              # Print the generated module
    crml compile index                # Print the function for one template
    crml render index --data page.json
    crml init                         # Create crml.json and a sample template
    crml -V                           # Show version
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from crml._version import __version__
from crml.build import build as build_templates, render_module_text
from crml.cli.errors import exit_with_error, handle_error
from crml.cli.utils import console, load_data, setup_logging
from crml.compiler import Compiler, FileResolver, get_renderer
from crml.config import CrmlConfig, find_config_file, load_config
from crml.project import scaffold
from crml.template import Template

typer_app = typer.Typer(help="Compile CRML templates to Rust or Python.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"crml {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """CRML - indentation-based HTML templates compiled to code."""


def get_config(config_path: Optional[Path], required: bool = True) -> CrmlConfig:
    """Load the config at `config_path`, or the nearest one above the cwd."""
    path = config_path or find_config_file()
    if path is None:
        if required:
            exit_with_error(
                "No crml.json found in current directory or parents. "
                "Run 'crml init' to create one."
            )
        return CrmlConfig()
    return load_config(path)


@typer_app.command()
def build(
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to crml.json / crml.yaml."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the generated module instead of writing it."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """Compile every configured template into one generated module."""
    setup_logging(verbose)

    try:
        config = get_config(config_path)
        if dry_run:
            typer.echo(render_module_text(config), nl=False)
            return
        path = build_templates(config)
    except Exception as e:
        handle_error(e)

    console.print(f"[green]✓[/green] Wrote {len(config.include)} template(s) to {path}")


@typer_app.command("compile")
def compile_template(
    name: str = typer.Argument(..., help="Template name, relative to the root."),
    root: Optional[Path] = typer.Option(
        None, "-r", "--root", help="Template directory (default: from config)."
    ),
    dialect: Optional[str] = typer.Option(
        None, "-d", "--dialect", help="Output dialect: rust or python."
    ),
    props: Optional[str] = typer.Option(
        None, "-p", "--props", help="Type of the page argument."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """Print the generated function for a single template."""
    setup_logging(verbose)

    try:
        config = get_config(None, required=False)
        renderer = get_renderer(dialect or config.dialect)
        if props is None:
            props = dict(config.include).get(name, "")
        if not props and renderer.dialect == "rust":
            props = "Props"

        compiler = Compiler(resolver=FileResolver(root or config.root_dir, config.extension))
        fn = compiler.compile_function(name, props)
        typer.echo(renderer.render_function(fn), nl=False)
    except Exception as e:
        handle_error(e)


@typer_app.command()
def render(
    name: str = typer.Argument(..., help="Template name, relative to the root."),
    root: Optional[Path] = typer.Option(
        None, "-r", "--root", help="Template directory (default: from config)."
    ),
    data: Optional[Path] = typer.Option(
        None, "--data", help="JSON or YAML file passed to the template as `page`."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """Render a template with Python host code and print the HTML."""
    setup_logging(verbose)

    try:
        config = get_config(None, required=False)
        resolver = FileResolver(root or config.root_dir, config.extension)
        page = load_data(data)
        typer.echo(Template(name, resolver=resolver).render(page))
    except Exception as e:
        handle_error(e)


@typer_app.command()
def init(
    dialect: str = typer.Option("rust", "-d", "--dialect", help="rust or python."),
    yaml_config: bool = typer.Option(
        False, "--yaml", help="Write crml.yaml instead of crml.json."
    ),
) -> None:
    """Create a crml config and a sample template in the current directory."""
    setup_logging()

    try:
        config_name = "crml.yaml" if yaml_config else "crml.json"
        config_path = scaffold(Path.cwd(), dialect=dialect, config_name=config_name)
    except Exception as e:
        handle_error(e)

    console.print(f"[green]✓[/green] Created {config_path.name}")
    console.print("Run [bold]crml build[/bold] to generate templates.")


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    typer_app(args=argv)


if __name__ == "__main__":
    app()
