"""Database table definitions for the build manifest"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class PageRecord(SQLModel, table=True):
    """The last written state of one output page, keyed by document identifier"""
    __tablename__ = "pages"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    identifier: str = Field(..., index=True, unique=True, nullable=False)
    source_path: str = Field(..., sa_column=Column(Text, nullable=False))
    output_path: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    built_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
