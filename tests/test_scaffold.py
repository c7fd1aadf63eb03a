"""Tests for view scaffolding."""

import asyncio

import pytest

from orchview.compiler import DirectiveCompiler
from orchview.exceptions import ViewExistsError
from orchview.scaffold import make_view, render_view_stub, view_path, view_title


def test_view_title():
    assert view_title("emails.order-shipped") == "Order Shipped"
    assert view_title("welcome") == "Welcome"
    assert view_title("layouts.app") == "App"


def test_view_path(tmp_path):
    assert view_path("layouts.app", tmp_path) == tmp_path / "layouts" / "app.html"
    assert view_path("home", tmp_path, ".orchestr.html") == tmp_path / "home.orchestr.html"


def test_stub_contents():
    stub = render_view_stub("emails.welcome")
    assert "<title>{{ title }}</title>" in stub
    assert "<h1>{{ title }}</h1>" in stub
    assert "<!-- view: emails.welcome -->" in stub
    assert stub.endswith("\n")


def test_stub_compiles():
    html = asyncio.run(DirectiveCompiler().compile(render_view_stub("home"), {"title": "<Hi>"}))
    assert "<h1>&lt;Hi&gt;</h1>" in html


def test_make_view(tmp_path):
    path = make_view("emails.order-shipped", tmp_path)

    assert path == tmp_path / "emails" / "order-shipped.html"
    assert "<!-- view: emails.order-shipped -->" in path.read_text()


def test_make_view_refuses_to_overwrite(tmp_path):
    path = make_view("home", tmp_path)
    path.write_text("custom")

    with pytest.raises(ViewExistsError, match="View already exists"):
        make_view("home", tmp_path)
    assert path.read_text() == "custom"
