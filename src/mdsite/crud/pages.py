"""Build manifest persistence: page hashing, upsert, lookup, listing, and pruning"""

import hashlib
from datetime import datetime
from pathlib import Path

from sqlmodel import Session, select

from mdsite.core.parse import parse_identifier
from mdsite.crud.models import PageRecord


def page_hash(html: str) -> str:
    """Hex SHA-256 of a built page (64 chars, matches the String(64) hash column)."""
    return hashlib.sha256(html.encode("utf-8")).hexdigest()


def get_by_identifier(session: Session, identifier: str) -> PageRecord | None:
    """Return the PageRecord for the given identifier, or None if not found."""
    return session.exec(select(PageRecord).where(PageRecord.identifier == identifier)).one_or_none()


def list_pages(session: Session) -> list[PageRecord]:
    """Return all records newest first, undated identifiers after dated ones (same order as the site index)."""
    records = session.exec(select(PageRecord)).all()
    return sorted(records, key=lambda r: parse_identifier(Path(f"{r.identifier}.md")).sort_key, reverse=True)


def page_status(session: Session, identifier: str, output_path: str, html_hash: str) -> str:
    """Return what record_page would report ('created', 'updated', 'unchanged') without writing."""
    record = get_by_identifier(session, identifier)
    if record is None:
        return 'created'
    if record.hash == html_hash and record.output_path == output_path:
        return 'unchanged'
    return 'updated'


def record_page(
    session: Session,
    identifier: str,
    source_path: str,
    output_path: str,
    html_hash: str,
    built_at: datetime | None = None,
    ) -> tuple[PageRecord, str]:
    """Upsert the manifest entry for a page.

    Returns (record, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    """
    status = page_status(session, identifier, output_path, html_hash)
    record = get_by_identifier(session, identifier)
    if status == 'unchanged':
        return record, status

    if record is None:
        record = PageRecord(identifier=identifier, source_path=source_path, output_path=output_path, hash=html_hash)
    record.source_path = source_path
    record.output_path = output_path
    record.hash = html_hash
    record.built_at = built_at or datetime.now()
    session.add(record)
    session.flush()
    return record, status


def prune_missing(session: Session, identifiers: set[str]) -> list[str]:
    """Delete records whose identifier is not in identifiers. Returns the removed identifiers."""
    removed = []
    for record in session.exec(select(PageRecord)).all():
        if record.identifier not in identifiers:
            removed.append(record.identifier)
            session.delete(record)
    session.flush()
    return sorted(removed)
