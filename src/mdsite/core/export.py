"""Site assembly: order rendered documents, build HTML pages + JSON index, write output files"""

import json
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from mdsite.core.models import RenderedDocument


LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
DOCUMENT_LAYOUTS = {"post", "page"}
POSTS_DIR = "posts"


def order_documents(pages: list[RenderedDocument]) -> list[RenderedDocument]:
    """Newest first by identifier (date, then slug); undated documents sort after dated ones."""
    return sorted(pages, key=lambda p: p.identifier.sort_key, reverse=True)


def page_url(page: RenderedDocument) -> str:
    """Output path of a page relative to the site root."""
    return f"{POSTS_DIR}/{page.identifier}.html"


def make_environment() -> Environment:
    """Jinja2 environment over the bundled layout templates."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )
    env.globals["page_url"] = page_url
    return env


def resolve_layout(layout: str, default_layout: str = "post") -> str:
    """Return the template layout for a page; unknown layouts fall back to default_layout."""
    if layout in DOCUMENT_LAYOUTS:
        return layout
    fallback = default_layout if default_layout in DOCUMENT_LAYOUTS else "post"
    LOGGER.debug("Unknown layout %r, using %r", layout, fallback)
    return fallback


def build_page(
    page: RenderedDocument,
    env: Environment,
    site_title: str = "Blog",
    base_url: str = "/",
    default_layout: str = "post",
    ) -> str:
    """Render one document into its full HTML layout."""
    template = env.get_template(f"{resolve_layout(page.layout, default_layout)}.html")
    return template.render(page=page, site_title=site_title, base_url=base_url)


def build_index(
    pages: list[RenderedDocument],
    env: Environment,
    site_title: str = "Blog",
    base_url: str = "/",
    ) -> str:
    """Render the index page listing pages newest first."""
    return env.get_template("index.html").render(
        pages=order_documents(pages), site_title=site_title, base_url=base_url,
    )


def build_index_json(pages: list[RenderedDocument]) -> dict:
    """Machine-readable index: one entry per page, newest first."""
    return {
        "pages": [
            {
                "id": str(p.identifier),
                "title": p.title,
                "date": p.identifier.published.isoformat() if p.identifier.published else None,
                "layout": p.layout,
                "comments": p.comments,
                "url": page_url(p),
                "source": p.document.path,
                "languages": p.languages,
            }
            for p in order_documents(pages)
        ],
    }


def write_page(page: RenderedDocument, html: str, output_dir: Path) -> Path:
    """Write a built page to output_dir/posts/<identifier>.html. Returns the written path."""
    dest = output_dir / page_url(page)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(html, encoding="utf-8")
    return dest


def write_index(
    pages: list[RenderedDocument],
    output_dir: Path,
    env: Environment,
    site_title: str = "Blog",
    base_url: str = "/",
    ) -> tuple[Path, Path]:
    """Write index.html and index.json. Returns (html_path, json_path)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / "index.html"
    json_path = output_dir / "index.json"
    html_path.write_text(build_index(pages, env, site_title, base_url), encoding="utf-8")
    json_path.write_text(json.dumps(build_index_json(pages), indent=2), encoding="utf-8")
    return html_path, json_path
