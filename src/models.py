"""
Data models — PageDB (document JSON) + schémas d'entrée/sortie de l'API
SQLAlchemy (SQLite) + Pydantic v2
"""
from datetime import datetime
from typing import List, Optional

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class PageDB(Base):
    """Une page = un document JSON (page_builder.Page sérialisée)."""
    __tablename__ = "pages"
    slug:       Mapped[str]      = mapped_column(sa.String, primary_key=True)
    title:      Mapped[str]      = mapped_column(sa.String, default="")
    document:   Mapped[str]      = mapped_column(sa.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ── API ────────────────────────────────────────────────────────────────

class PageCreate(BaseModel):
    slug:        str           = Field(..., pattern=r"^[a-z0-9][a-z0-9-]*$")
    title:       str           = ""
    description: Optional[str] = None


class PageSummary(BaseModel):
    slug:     str
    title:    str
    sections: int


class InsertCustomCode(BaseModel):
    index: Optional[int] = None


class SourceUpdate(BaseModel):
    # None = éditeur vidé
    source: Optional[str] = None


class MoveSection(BaseModel):
    delta: int


class SourceInput(BaseModel):
    source: str = ""


class CompileReport(BaseModel):
    ok:             bool
    stage:          Optional[str]  = None
    message:        Optional[str]  = None
    source_excerpt: Optional[str]  = None
    lowered:        Optional[str]  = None
    callable:       bool           = False


class PagesList(BaseModel):
    pages: List[PageSummary]
