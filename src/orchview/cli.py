"""orchview CLI Main Entry Point

Usage:
    orchview render welcome                    # Render views/welcome.html
    orchview render emails.invoice -d data.yaml
    orchview render home -s title=Hello -o out.html
    orchview make-view layouts.app             # Scaffold a new view file
    orchview --version
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from orchview._version import __version__
from orchview.config import ViewConfig, find_config_file, load_view_config
from orchview.engines import TemplateEngine
from orchview.exceptions import OrchviewError
from orchview.scaffold import make_view, view_title

log = logging.getLogger(__name__)

console = Console(stderr=True)

typer_app = typer.Typer(no_args_is_help=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the orchview CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (ORCHVIEW_DEBUG=1): DEBUG level - shows view resolution,
      ignored include data and expressions that rendered empty
    """
    if os.environ.get("ORCHVIEW_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=bool(os.environ.get("ORCHVIEW_DEBUG")),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("orchview")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=exit_code)


def load_config(config_path: Optional[Path], extra_paths: List[Path]) -> ViewConfig:
    """Config from -c, else orchview.yaml from cwd or parents, else defaults."""
    if config_path is not None:
        config = load_view_config(config_path)
    else:
        found = find_config_file()
        config = load_view_config(found) if found else ViewConfig()

    if extra_paths:
        config = config.model_copy(update={"paths": list(extra_paths) + config.paths})
    return config


def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Parse key=value pairs; values are read as YAML scalars."""
    data: Dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got {item!r}", param_hint="--set")
        try:
            data[key.strip()] = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            data[key.strip()] = raw
    return data


def load_data(data_path: Optional[Path]) -> Dict[str, Any]:
    """Load the render context from a YAML or JSON file."""
    if data_path is None:
        return {}
    if not data_path.exists():
        exit_with_error(f"Data file not found: {data_path}")

    try:
        with open(data_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        exit_with_error(f"Invalid YAML in {data_path}: {exc}")

    if not isinstance(data, dict):
        exit_with_error(f"Data file must contain a mapping: {data_path}")
    return data


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"orchview {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Render Blade-style directive templates."""


@typer_app.command()
def render(
    view: str = typer.Argument(..., help="Dotted view name, e.g. emails.invoice"),
    data_path: Optional[Path] = typer.Option(
        None, "-d", "--data", help="YAML or JSON file with the view data."
    ),
    assignments: List[str] = typer.Option(
        [], "-s", "--set", help="Extra data as key=value (repeatable)."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to orchview.yaml."
    ),
    paths: List[Path] = typer.Option(
        [], "-p", "--path", help="Extra view directory searched first (repeatable)."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write output to file instead of stdout."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Render a view with data."""
    setup_logging(verbose)

    data = load_data(data_path)
    data.update(parse_assignments(assignments))

    try:
        config = load_config(config_path, paths)
        engine = TemplateEngine(resolver=config.finder())
        log.info("Rendering [%s] from %s", view, ", ".join(str(p) for p in config.paths))
        html = asyncio.run(engine.render(view, data))
    except (OrchviewError, FileNotFoundError) as exc:
        exit_with_error(str(exc))

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html, encoding="utf-8")
        log.info("Wrote %s", output)
    else:
        typer.echo(html, nl=False)


@typer_app.command("make-view")
def make_view_command(
    name: str = typer.Argument(..., help="Dotted view name, e.g. layouts.app"),
    path: Optional[Path] = typer.Option(
        None, "-p", "--path", help="Views directory (default: first configured path)."
    ),
    ext: str = typer.Option(".html", "-e", "--ext", help="File extension."),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to orchview.yaml."
    ),
) -> None:
    """Create a new view file."""
    setup_logging()

    try:
        if path is None:
            config = load_config(config_path, [])
            path = config.paths[0] if config.paths else Path("resources/views")
        created = make_view(name, path, ext)
    except (OrchviewError, FileNotFoundError) as exc:
        exit_with_error(str(exc))

    title = view_title(name)
    typer.secho(f"View created successfully: {created}", fg=typer.colors.GREEN)
    typer.echo("")
    typer.echo("Render it with:")
    typer.echo(f"  orchview render {name} -s title='{title}'")


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
