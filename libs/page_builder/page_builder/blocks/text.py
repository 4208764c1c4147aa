"""Section Texte — paragraphes simples (une ligne vide sépare deux paragraphes)."""
from typing import Literal, Optional

from .base import BaseSection


class TextSection(BaseSection):
    kind: Literal["text"] = "text"
    title: Optional[str] = None
    content: str = ""
    alignment: Literal["left", "center", "right"] = "left"
    font_color: Optional[str] = None
    background_color: Optional[str] = None
