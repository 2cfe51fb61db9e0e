"""Data models for the load, render, and assemble pipeline"""

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


MetaValue = Union[bool, str]


class DocumentId(BaseModel):
    """Sortable document identifier: optional publication date + slug."""
    model_config = ConfigDict(frozen=True)

    published: Optional[date] = None
    slug: str = Field(..., min_length=1)

    def __str__(self) -> str:
        if self.published is None:
            return self.slug
        return f"{self.published.isoformat()}-{self.slug}"

    @property
    def sort_key(self) -> tuple[date, str]:
        return (self.published or date.min, self.slug)


class Document(BaseModel):
    """A loaded source post. Never mutated after load."""
    model_config = ConfigDict(frozen=True)

    identifier: DocumentId
    path: str
    metadata: dict[str, MetaValue] = {}
    body: str


class CodeBlock(BaseModel):
    """A fenced code listing; language is '' when the fence declares none."""
    model_config = ConfigDict(frozen=True)

    language: str = ""
    code: str


class RenderedDocument(BaseModel):
    """A Document with its resolved presentation fields and HTML body."""
    model_config = ConfigDict(frozen=True)

    document: Document
    title: str
    layout: str
    comments: bool
    html: str
    code_blocks: list[CodeBlock] = []

    @property
    def identifier(self) -> DocumentId:
        return self.document.identifier

    @property
    def languages(self) -> list[str]:
        """Distinct code languages in first-seen order."""
        return list(dict.fromkeys(b.language for b in self.code_blocks if b.language))
