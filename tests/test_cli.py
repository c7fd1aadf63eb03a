"""Tests for the orchview CLI."""

import pytest
from typer.testing import CliRunner

from orchview import __version__
from orchview.cli import typer_app

runner = CliRunner()


@pytest.fixture(autouse=True)
def in_tmp_path(tmp_path, monkeypatch):
    """Run every command from an empty directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ORCHVIEW_DEBUG", raising=False)


def test_version():
    result = runner.invoke(typer_app, ["--version"])
    assert result.exit_code == 0
    assert f"orchview {__version__}" in result.output


def test_render_with_assignments(write_view, views_dir):
    write_view("welcome", "Hello {{ name }}, {{ count + 1 }}")

    result = runner.invoke(
        typer_app,
        ["render", "welcome", "-p", str(views_dir), "-s", "name=Ann", "-s", "count=3"],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout == "Hello Ann, 4"


def test_render_with_data_file(tmp_path, write_view, views_dir):
    write_view("list", "@foreach(items as i)<{{ i }}>@endforeach")
    data = tmp_path / "data.yaml"
    data.write_text("items: [a, b]\n")

    result = runner.invoke(typer_app, ["render", "list", "-p", str(views_dir), "-d", str(data)])
    assert result.exit_code == 0, result.output
    assert result.stdout == "&lt;a&gt;&lt;b&gt;"


def test_render_to_output_file(tmp_path, write_view, views_dir):
    write_view("page", "<p>{{ title }}</p>")
    out = tmp_path / "build" / "page.html"

    result = runner.invoke(
        typer_app,
        ["render", "page", "-p", str(views_dir), "-s", "title=Home", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "<p>Home</p>"
    assert result.stdout == ""


def test_render_uses_config_file(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "home.tpl").write_text("{{ msg }}")
    (tmp_path / "orchview.yaml").write_text("view:\n  paths: [templates]\n  extensions: ['.tpl']\n")

    result = runner.invoke(typer_app, ["render", "home", "-s", "msg=found"])
    assert result.exit_code == 0, result.output
    assert result.stdout == "found"


def test_render_missing_view(views_dir):
    result = runner.invoke(typer_app, ["render", "nope", "-p", str(views_dir)])
    assert result.exit_code == 1
    assert "Error: View [nope] not found" in result.output


def test_render_missing_data_file(views_dir):
    result = runner.invoke(typer_app, ["render", "x", "-p", str(views_dir), "-d", "nope.yaml"])
    assert result.exit_code == 1
    assert "Data file not found" in result.output


def test_render_bad_assignment(write_view, views_dir):
    write_view("welcome", "hi")
    result = runner.invoke(typer_app, ["render", "welcome", "-p", str(views_dir), "-s", "novalue"])
    assert result.exit_code != 0


def test_make_view(tmp_path):
    views = tmp_path / "views"
    result = runner.invoke(typer_app, ["make-view", "emails.order-shipped", "-p", str(views)])

    assert result.exit_code == 0, result.output
    assert (views / "emails" / "order-shipped.html").exists()
    assert "View created successfully" in result.output
    assert "Order Shipped" in result.output


def test_make_view_existing(tmp_path):
    views = tmp_path / "views"
    runner.invoke(typer_app, ["make-view", "home", "-p", str(views)])
    result = runner.invoke(typer_app, ["make-view", "home", "-p", str(views)])

    assert result.exit_code == 1
    assert "View already exists" in result.output


def test_make_view_uses_configured_path(tmp_path):
    (tmp_path / "orchview.yaml").write_text("paths: [templates]\n")

    result = runner.invoke(typer_app, ["make-view", "home", "-e", ".orchestr.html"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "templates" / "home.orchestr.html").exists()


def test_render_invalid_data_file(tmp_path, views_dir):
    data = tmp_path / "data.yaml"
    data.write_text("items: [a\n")

    result = runner.invoke(typer_app, ["render", "x", "-p", str(views_dir), "-d", str(data)])
    assert result.exit_code == 1
    assert "Invalid YAML" in result.output


def test_render_undecodable_view(views_dir):
    (views_dir / "bad.html").write_bytes(b"\xff\xfe")

    result = runner.invoke(typer_app, ["render", "bad", "-p", str(views_dir)])
    assert result.exit_code == 1
    assert "Could not read template" in result.output
