"""
Sections — exports publics + SectionUnion discriminé.
"""
from typing import Annotated, Union

from pydantic import Field

from custom_code import CustomBlock

from .base import BaseSection
from .divider import DividerSection
from .gallery import GalleryImage, GallerySection
from .hero import HeroSection
from .text import TextSection

# Union discriminée par kind (CustomBlock inclus)
SectionUnion = Annotated[
    Union[
        HeroSection,
        TextSection,
        DividerSection,
        GallerySection,
        CustomBlock,
    ],
    Field(discriminator="kind"),
]

SECTION_TYPES = (HeroSection, TextSection, DividerSection, GallerySection, CustomBlock)

__all__ = [
    "BaseSection",
    "HeroSection", "TextSection", "DividerSection",
    "GallerySection", "GalleryImage",
    "CustomBlock",
    "SectionUnion", "SECTION_TYPES",
]
