"""Markdown-to-HTML rendering with language-tagged fenced code blocks"""

from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml, unescapeAll

from mdsite.core.models import CodeBlock, Document, MetaValue, RenderedDocument
from mdsite.core.utils.slug import titleize


TRUTHY = {'true', 'yes', 'on', '1'}
FALSY = {'false', 'no', 'off', '0'}


def _fence_language(token) -> str:
    """First word of the fence info string ('haskell' for ```haskell {.numbered}), else ''."""
    info = unescapeAll(token.info).strip() if token.info else ''
    return info.split(maxsplit=1)[0] if info else ''


def _render_fence(self, tokens, idx, options, env) -> str:
    token = tokens[idx]
    lang = _fence_language(token)
    attrs = ''
    if lang:
        attrs = f' class="{options.langPrefix}{escapeHtml(lang)}" data-lang="{escapeHtml(lang)}"'
    return f'<pre><code{attrs}>{escapeHtml(token.content)}</code></pre>\n'


@lru_cache(maxsize=None)
def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build (once per preset) a MarkdownIt instance with the fence renderer installed."""
    md = MarkdownIt(preset, options_update={"linkify": False, "langPrefix": "language-"})
    md.add_render_rule('fence', _render_fence)
    return md


def extract_code_blocks(tokens: list) -> list[CodeBlock]:
    """Return fenced code blocks in document order, content untouched."""
    return [
        CodeBlock(language=_fence_language(tok), code=tok.content)
        for tok in tokens
        if tok.type == 'fence'
    ]


def render_markdown(body: str, preset: str = 'gfm-like') -> tuple[str, list[CodeBlock]]:
    """Render a markdown body to HTML. Returns (html, code_blocks)."""
    md = make_parser(preset)
    env: dict = {}
    tokens = md.parse(body, env)
    return md.renderer.render(tokens, md.options, env), extract_code_blocks(tokens)


def _as_flag(value: MetaValue | None, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUTHY:
        return True
    if isinstance(value, str) and value.strip().lower() in FALSY:
        return False
    return default


def _as_text(value: MetaValue | None) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def render_document(
    doc: Document,
    preset: str = 'gfm-like',
    default_layout: str = 'post',
    comments_default: bool = False,
    ) -> RenderedDocument:
    """Render a Document, filling title/layout/comments from defaults where metadata lacks them."""
    html, code_blocks = render_markdown(doc.body, preset)
    meta = doc.metadata
    return RenderedDocument(
        document=doc,
        title=_as_text(meta.get('title')) or titleize(doc.identifier.slug),
        layout=_as_text(meta.get('layout')) or default_layout,
        comments=_as_flag(meta.get('comments'), comments_default),
        html=html,
        code_blocks=code_blocks,
    )
