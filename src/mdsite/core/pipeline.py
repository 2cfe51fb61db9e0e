"""Pipeline step functions: load, render, and build orchestration"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from jinja2 import TemplateError
from sqlalchemy.engine import Engine
from sqlmodel import Session

from mdsite.config import Settings
from mdsite.core.export import (
    POSTS_DIR, build_page, make_environment, order_documents, page_url, write_index, write_page,
)
from mdsite.core.models import Document, RenderedDocument
from mdsite.core.parse import discover_files, load_file
from mdsite.core.render import render_document
from mdsite.crud.pages import page_hash, page_status, prune_missing, record_page


LOGGER = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Outcome of a build: per-page status, failures, and the index files written."""
    pages: list[tuple[str, str, Path]] = field(default_factory=list)   # (status, identifier, path)
    failures: list[tuple[str, str]] = field(default_factory=list)      # (source, reason)
    removed: list[str] = field(default_factory=list)
    index: tuple[Path, Path] | None = None

    @property
    def counts(self) -> dict[str, int]:
        counts = Counter(status for status, _, _ in self.pages)
        counts["failed"] = len(self.failures)
        return dict(counts)

    def fail(self, source, reason: str) -> None:
        LOGGER.error("Skipping %s: %s", source, reason)
        self.failures.append((str(source), reason))


def load_documents(path: Path, report: BuildReport) -> list[Document]:
    """Load every markdown file under path; unreadable files are recorded on the report and skipped."""
    docs: list[Document] = []
    seen: dict[str, str] = {}
    for p in discover_files(path):
        try:
            doc = load_file(p)
        except (OSError, UnicodeDecodeError) as e:
            report.fail(p, f"unreadable: {e}")
            continue
        key = str(doc.identifier)
        if key in seen:
            report.fail(p, f"duplicate identifier {key!r} (already loaded from {seen[key]})")
            continue
        seen[key] = doc.path
        LOGGER.debug("Loaded %s as %s", p, key)
        docs.append(doc)
    return docs


def render_documents(docs: list[Document], settings: Settings, report: BuildReport) -> list[RenderedDocument]:
    """Render documents, newest first. A document that fails to render is reported and dropped."""
    rendered = []
    for doc in docs:
        try:
            rendered.append(render_document(
                doc, settings.parser_config, settings.default_layout, settings.comments_default,
            ))
        except Exception as e:
            report.fail(doc.path, f"render failed: {e}")
    return order_documents(rendered)


def _write_pages(
    pages: list[RenderedDocument],
    settings: Settings,
    output_dir: Path,
    report: BuildReport,
    session: Session | None,
    ) -> None:
    """Build and write each page; a page that cannot be built or written is reported and skipped."""
    env = make_environment()
    built_at = datetime.now()
    for page in pages:
        identifier, url = str(page.identifier), page_url(page)
        try:
            html = build_page(page, env, settings.site_title, settings.base_url, settings.default_layout)
        except TemplateError as e:
            report.fail(page.document.path, f"layout failed: {e}")
            continue

        html_hash = page_hash(html)
        status = "written"
        if session is not None:
            status = page_status(session, identifier, url, html_hash)
            dest = output_dir / url
            if status == "unchanged" and dest.is_file():
                report.pages.append((status, identifier, dest))
                continue

        try:
            dest = write_page(page, html, output_dir)
        except OSError as e:
            report.fail(page.document.path, f"write failed: {e}")
            continue

        if session is not None:
            record_page(session, identifier, page.document.path, url, html_hash, built_at)
        report.pages.append((status, identifier, dest))


def _prune(session: Session, pages: list[RenderedDocument], output_dir: Path, report: BuildReport) -> None:
    """Drop manifest entries and output pages for documents that no longer exist."""
    removed = prune_missing(session, {str(p.identifier) for p in pages})
    for identifier in removed:
        stale = output_dir / POSTS_DIR / f"{identifier}.html"
        if stale.exists():
            stale.unlink()
        LOGGER.info("Removed stale page %s", identifier)
    report.removed = removed


def run_build(settings: Settings, engine: Engine | None = None) -> BuildReport:
    """Load, render, and write the whole site described by settings.

    With an engine, unchanged pages (same HTML hash as the manifest) are not rewritten
    and pages whose source disappeared are removed. Without one, every page is written.
    """
    content_dir = Path(settings.content_dir)
    output_dir = Path(settings.output_dir)
    report = BuildReport()

    docs = load_documents(content_dir, report)
    if not docs:
        LOGGER.warning("No markdown documents found under %s", content_dir)
    pages = render_documents(docs, settings, report)

    if engine is None:
        _write_pages(pages, settings, output_dir, report, None)
    else:
        with Session(engine) as session:
            _write_pages(pages, settings, output_dir, report, session)
            _prune(session, pages, output_dir, report)
            session.commit()

    try:
        report.index = write_index(pages, output_dir, make_environment(), settings.site_title, settings.base_url)
    except (OSError, TemplateError) as e:
        report.fail(output_dir / "index.html", f"index failed: {e}")
    LOGGER.info("Built %d page(s) into %s", len(report.pages), output_dir)
    return report
