"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdsite.config import Settings, load_config
from mdsite.core.parse import load_file
from mdsite.core.pipeline import BuildReport, run_build
from mdsite.core.render import render_document
from mdsite.crud.database import init_db, make_engine, reset_db
from mdsite.crud.pages import list_pages


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _echo_build(report: BuildReport, output_dir: Path) -> None:
    """Print per-page status, failures, and a summary line."""
    for status, identifier, path in report.pages:
        if status != "unchanged":
            typer.echo(f"  {status}: {identifier} -> {path}")
    for identifier in report.removed:
        typer.echo(f"  removed: {identifier}")
    for source, reason in report.failures:
        typer.echo(f"  failed: {source} ({reason})", err=True)
    counts = report.counts
    summary = ", ".join(f"{counts[k]} {k}" for k in ("written", "created", "updated", "unchanged", "failed") if counts.get(k))
    typer.echo(f"Built {len(report.pages)} page(s) to {output_dir}/" + (f" - {summary}" if summary else ""))


def build_cmd(
    content: Annotated[Optional[str], typer.Argument(help="Directory of markdown posts")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    title: Annotated[Optional[str], typer.Option("--site-title", help="Title shown on the index page")] = None,
    no_manifest: Annotated[bool, typer.Option("--no-manifest", help="Rewrite every page; skip the build manifest")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
    ):
    """Render all documents in CONTENT into the output directory, newest first."""
    _setup_logging(verbose)
    settings = _settings(overrides={
        "content_dir": content, "output_dir": out, "parser_config": parser, "site_title": title,
    })
    content_dir = Path(settings.content_dir)
    if not content_dir.exists():
        _fail(f"Content directory not found: {content_dir}")

    engine = None
    if not no_manifest:
        engine = make_engine(settings.db_url)
        init_db(engine)

    try:
        report = run_build(settings, engine)
    except Exception as e:
        _fail("Build failed", e)
    _echo_build(report, Path(settings.output_dir))


def render_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file to render")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
    ):
    """Print the rendered HTML body of a single document."""
    _setup_logging(verbose)
    settings = _settings(overrides={"parser_config": parser})
    try:
        doc = load_file(path)
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)
    page = render_document(doc, settings.parser_config, settings.default_layout, settings.comments_default)
    typer.echo(page.html, nl=False)


def list_cmd():
    """List page identifiers recorded in the build manifest."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        records = list_pages(session)
    if not records:
        typer.echo("No pages recorded. Run 'mdsite build' first.")
        raise typer.Exit(1)
    for r in records:
        typer.echo(f"{r.identifier}\t{r.output_path}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate the manifest tables")] = False,
    ):
    """Initialize the build manifest schema. Use --reset to forget previous builds."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing manifest cleared.")
    else:
        init_db(engine)
    typer.echo(f"Manifest initialized at: {settings.db_url}")
