"""Section Hero — titre + description sur fond image ou couleur."""
from typing import Literal, Optional

from .base import BaseSection


class HeroSection(BaseSection):
    kind: Literal["hero"] = "hero"
    title: str = ""
    description: str = ""
    background_image: Optional[str] = None
    background_color: Optional[str] = None
    font_color: Optional[str] = None
    height: str = "60vh"
    align: Literal["left", "center", "right"] = "center"
