"""File discovery, lenient frontmatter extraction, and document loading"""

import logging
import re
from datetime import date
from pathlib import Path

import yaml

from mdsite.core.models import Document, DocumentId, MetaValue
from mdsite.core.utils.slug import slugify


LOGGER = logging.getLogger(__name__)

DELIMITER = '---'
MD_EXTENSIONS = {'.md', '.markdown'}
DATED_STEM_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)$')
KEY_RE = re.compile(r'^[A-Za-z_][\w-]*$')
BOOLEANS = {'true': True, 'false': False}


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def _scalar(value: str) -> MetaValue:
    """Interpret a raw frontmatter value: true/false and quoted strings, else the literal text."""
    if value.lower() in BOOLEANS:
        return BOOLEANS[value.lower()]
    if value[:1] not in ('"', "'"):
        return value
    try:
        loaded = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    return loaded if isinstance(loaded, str) else value


def parse_frontmatter(text: str) -> tuple[dict[str, MetaValue], str]:
    """Return (metadata, body). Unparseable lines are skipped; an unclosed header means no header."""
    lines = text.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return {}, text

    close = next((i for i in range(1, len(lines)) if _is_delimiter(lines[i])), None)
    if close is None:
        return {}, text

    metadata: dict[str, MetaValue] = {}
    for line in lines[1:close]:
        if not line.strip() or line[:1].isspace() or line.lstrip().startswith('#'):
            continue
        key, sep, value = line.partition(':')
        key, value = key.strip(), value.strip()
        if not sep or not KEY_RE.match(key):
            LOGGER.debug("Ignoring frontmatter line: %r", line.rstrip())
            continue
        metadata[key] = _scalar(value)
    return metadata, ''.join(lines[close + 1:])


def parse_identifier(path: Path) -> DocumentId:
    """Derive a DocumentId from a 'YYYY-MM-DD-slug' file stem; undated stems get no date."""
    stem = path.stem
    m = DATED_STEM_RE.match(stem)
    if m:
        year, month, day, rest = m.groups()
        try:
            published = date(int(year), int(month), int(day))
        except ValueError:
            published = None
        if published is not None:
            return DocumentId(published=published, slug=slugify(rest) or 'untitled')
    return DocumentId(slug=slugify(stem) or 'untitled')


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown files under path, or [path] if a single markdown file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def load_text(path: Path, text: str) -> Document:
    """Build a Document from already-read file content."""
    metadata, body = parse_frontmatter(text)
    return Document(
        identifier=parse_identifier(path),
        path=str(path),
        metadata=metadata,
        body=body,
    )


def load_file(path: Path) -> Document:
    """Read and parse a single markdown file. Raises OSError/UnicodeDecodeError on unreadable input."""
    return load_text(path, path.read_text(encoding='utf-8-sig'))
