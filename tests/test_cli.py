"""Smoke tests for the CLI."""

import pytest
from typer.testing import CliRunner

from postdesk.cli import app
from postdesk.settings import settings
from tests.conftest import write_post


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture
def use_content(monkeypatch, content_dir):
    monkeypatch.setattr(settings, "CONTENT_DIR", str(content_dir))
    monkeypatch.setattr(settings, "ALLOWED_LAYOUTS", [])
    return content_dir


def test_help(runner):
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "lint" in result.output
    assert "new" in result.output


def test_lint_defaults_to_content_dir(runner, use_content):
    result = runner.invoke(app, ["lint"])

    # the draft has no summary but drafts don't need one
    assert result.exit_code == 0, result.output
    assert "3 file(s) checked" in result.output


def test_lint_fails_on_errors(runner, tmp_path):
    bad = write_post(tmp_path, "bad.mdx", "no header\n")

    result = runner.invoke(app, ["lint", str(bad)])

    assert result.exit_code == 1
    assert "FM001" in result.output
    assert "1 error(s)" in result.output


def test_lint_strict_fails_on_warnings(runner, tmp_path):
    post = write_post(
        tmp_path,
        "warn.mdx",
        """
        ---
        title: T
        date: 2024-01-01
        ---
        body
        """,
    )

    assert runner.invoke(app, ["lint", str(post)]).exit_code == 0
    result = runner.invoke(app, ["lint", "--strict", str(post)])
    assert result.exit_code == 1
    assert "FM030" in result.output


def test_lint_missing_path(runner, tmp_path):
    result = runner.invoke(app, ["lint", str(tmp_path / "nope.mdx")])

    assert result.exit_code == 2
    assert "No such file" in result.output


def test_lint_empty_directory(runner, tmp_path):
    result = runner.invoke(app, ["lint", str(tmp_path)])

    assert result.exit_code == 0
    assert "No posts found" in result.output


def test_list_shows_published_posts(runner, use_content):
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0, result.output
    assert "hello-world" in result.output
    assert "2023/older" in result.output
    assert "wip" not in result.output


def test_list_with_drafts_and_tag(runner, use_content):
    drafts = runner.invoke(app, ["list", "--drafts"])
    tagged = runner.invoke(app, ["list", "--tag", "intro"])

    assert "wip" in drafts.output
    assert "hello-world" in tagged.output
    assert "2023/older" not in tagged.output


def test_list_empty(runner, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "CONTENT_DIR", str(tmp_path))

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    assert "No posts found" in result.output


def test_new_creates_post(runner, use_content):
    result = runner.invoke(app, ["new", "Fresh Post", "--tag", "a", "--tag", "b", "--summary", "S"])

    assert result.exit_code == 0, result.output
    path = use_content / "blog" / "fresh-post.mdx"
    assert path.exists()
    text = path.read_text(encoding="utf-8")
    assert "title: Fresh Post" in text
    assert "- a\n- b" in text


def test_new_refuses_existing(runner, use_content):
    result = runner.invoke(app, ["new", "Hello World"])

    assert result.exit_code == 1
    assert "already exists" in result.output
