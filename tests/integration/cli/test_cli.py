"""Integration tests for the CLI commands"""

import pytest
from typer.testing import CliRunner

from mdsite.cli.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def project(tmp_path, monkeypatch):
    """Run each test inside a temp project with its own manifest DB and one post."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDSITE_DB_URL", f"sqlite:///{tmp_path}/test.db")
    posts = tmp_path / "_posts"
    posts.mkdir()
    (posts / "2014-03-07-functors.md").write_text(
        "---\ntitle: Functors\n---\n```haskell\nfmap id = id\n```\n", encoding="utf-8",
    )
    return tmp_path


def test_build_cmd(project):
    result = runner.invoke(app, ["build", "--out-dir", str(project / "dist")])
    assert result.exit_code == 0, result.output
    assert (project / "dist" / "posts" / "2014-03-07-functors.html").exists()
    assert (project / "dist" / "index.html").exists()
    assert "1 created" in result.output


def test_build_cmd_second_run_unchanged(project):
    runner.invoke(app, ["build"])
    result = runner.invoke(app, ["build"])
    assert result.exit_code == 0, result.output
    assert "1 unchanged" in result.output


def test_build_cmd_no_manifest(project):
    result = runner.invoke(app, ["build", "--no-manifest"])
    assert result.exit_code == 0, result.output
    assert "1 written" in result.output
    assert not (project / "test.db").exists()


def test_build_cmd_missing_content_dir(project):
    result = runner.invoke(app, ["build", "nowhere"])
    assert result.exit_code == 1
    assert "Content directory not found" in result.output


def test_build_cmd_invalid_config(project):
    (project / "config.yaml").write_text("key: [unclosed\n")
    result = runner.invoke(app, ["build"])
    assert result.exit_code == 1
    assert "Invalid config.yaml" in result.output


def test_render_cmd(project):
    result = runner.invoke(app, ["render", "_posts/2014-03-07-functors.md"])
    assert result.exit_code == 0, result.output
    assert '<code class="language-haskell" data-lang="haskell">fmap id = id\n</code>' in result.output


def test_list_cmd_empty(project):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "No pages recorded" in result.output


def test_list_cmd_after_build(project):
    runner.invoke(app, ["build"])
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    assert "2014-03-07-functors" in result.output


def test_init_cmd_reset(project):
    runner.invoke(app, ["build"])
    result = runner.invoke(app, ["init", "--reset"])
    assert result.exit_code == 0, result.output
    assert "Existing manifest cleared." in result.output
    assert runner.invoke(app, ["list"]).exit_code == 1
