"""
Page Builder — pages modulaires composées de sections typées.

Usage:
    >>> from page_builder import Page, HeroSection, render_page
    >>> from custom_code import create_default
    >>> page = Page(slug="demo", title="Démo")
    >>> page.add_section(HeroSection(title="Bienvenue"))
    >>> page.add_section(create_default())
    >>> html = render_page(page)
"""
from .blocks import (
    SECTION_TYPES,
    BaseSection,
    CustomBlock,
    DividerSection,
    GalleryImage,
    GallerySection,
    HeroSection,
    SectionUnion,
    TextSection,
)
from .renderer.html import render_page, render_section
from .schemas import Page

__version__ = "0.3.0"

__all__ = [
    "Page",
    "BaseSection", "HeroSection", "TextSection", "DividerSection",
    "GallerySection", "GalleryImage", "CustomBlock",
    "SectionUnion", "SECTION_TYPES",
    "render_page", "render_section",
]
