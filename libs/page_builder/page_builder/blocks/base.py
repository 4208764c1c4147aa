"""
Section de base du page builder.
Chaque variante est discriminée par `kind`.
"""
import uuid
from typing import Optional

from pydantic import BaseModel, Field


class BaseSection(BaseModel):
    """Section de base (classe parente de toutes les sections)."""
    kind: str
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    visible: bool = True
    css_class: Optional[str] = None
