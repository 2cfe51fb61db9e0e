"""Slug generation for document identifiers"""

import re
import unicodedata


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated ASCII slug."""
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[^\w\s-]', '', text.lower())
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def titleize(slug: str) -> str:
    """Turn a slug back into a display title ('the-expression-problem' -> 'The Expression Problem')."""
    return ' '.join(w.capitalize() for w in slug.split('-') if w)
