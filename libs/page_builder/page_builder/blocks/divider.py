"""Section Séparateur — ligne horizontale."""
from typing import Literal

from .base import BaseSection


class DividerSection(BaseSection):
    kind: Literal["divider"] = "divider"
    style: Literal["solid", "dashed", "dotted"] = "solid"
    color: str = "#e5e7eb"
    thickness: int = 1
