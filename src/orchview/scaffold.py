"""Scaffolding for new view files (``orchview make-view``)."""

from __future__ import annotations

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from orchview.exceptions import ViewExistsError

TEMPLATES_DIR = Path(__file__).parent / "templates"
VIEW_STUB = "view.html.j2"


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def view_title(name: str) -> str:
    """Title for a view name: 'emails.order-shipped' -> 'Order Shipped'."""
    last = name.split(".")[-1].replace("-", " ")
    return re.sub(r"\b\w", lambda m: m.group().upper(), last)


def view_path(name: str, views_path: Path, ext: str = ".html") -> Path:
    """File a dotted view name maps to: 'layouts.app' -> {views}/layouts/app.html."""
    return views_path / f"{name.replace('.', '/')}{ext}"


def render_view_stub(name: str) -> str:
    """Render the starter template for a new view."""
    return _get_env().get_template(VIEW_STUB).render(view_name=name)


def make_view(name: str, views_path: Path, ext: str = ".html") -> Path:
    """Create a new view file from the stub.

    Args:
        name: Dotted view name, e.g. "layouts.app".
        views_path: Base directory of the views.
        ext: File extension including the dot.

    Returns:
        Path to the created file.

    Raises:
        ViewExistsError: If the file already exists.
    """
    path = view_path(name, views_path, ext)
    if path.exists():
        raise ViewExistsError(path)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_view_stub(name), encoding="utf-8")
    return path
