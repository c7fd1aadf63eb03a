"""Shared fixtures: a temporary views directory and a compiler that reads it."""

from pathlib import Path

import pytest

from orchview.compiler import DirectiveCompiler, ViewFinder


@pytest.fixture
def views_dir(tmp_path) -> Path:
    path = tmp_path / "views"
    path.mkdir()
    return path


@pytest.fixture
def write_view(views_dir):
    """Write a view file by dotted name, e.g. write_view("layouts.app", "...")."""

    def write(name: str, text: str, ext: str = ".html") -> Path:
        path = views_dir / f"{name.replace('.', '/')}{ext}"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return write


@pytest.fixture
def compiler(views_dir) -> DirectiveCompiler:
    return DirectiveCompiler(resolver=ViewFinder([views_dir]))
