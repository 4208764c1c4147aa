"""Section Galerie — intègre une galerie existante par son slug (images fournies à l'insertion)."""
from typing import List, Literal, Optional

from pydantic import BaseModel

from .base import BaseSection


class GalleryImage(BaseModel):
    src: str
    alt: str = ""
    caption: Optional[str] = None


class GallerySection(BaseSection):
    kind: Literal["gallery-embed"] = "gallery-embed"
    gallery_slug: str = ""
    title: Optional[str] = None
    columns: int = 3
    images: List[GalleryImage] = []
