"""
Schéma Page — agrégat ordonné de sections.

Les opérations modifient la page en mémoire ; la persistance est à la charge
de l'application (src.database).
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from custom_code import CustomBlock

from .blocks import SectionUnion


class Page(BaseModel):
    slug: str = Field(..., description="Identifiant URL de la page")
    title: str = ""
    description: Optional[str] = None
    lang: str = "fr"
    sections: List[SectionUnion] = Field(default_factory=list)

    def _index_of(self, section_id: str) -> int:
        for i, section in enumerate(self.sections):
            if section.id == section_id:
                return i
        raise KeyError(section_id)

    def get_section(self, section_id: str):
        return self.sections[self._index_of(section_id)]

    def add_section(self, section, index: Optional[int] = None):
        """Insère une section (en fin de page par défaut). Retourne la section."""
        if index is None:
            self.sections.append(section)
        else:
            self.sections.insert(max(0, min(index, len(self.sections))), section)
        return section

    def remove_section(self, section_id: str):
        return self.sections.pop(self._index_of(section_id))

    def move_section(self, section_id: str, delta: int) -> int:
        """Déplace une section de `delta` rangs (borné). Retourne le nouvel index."""
        i = self._index_of(section_id)
        target = max(0, min(i + delta, len(self.sections) - 1))
        section = self.sections.pop(i)
        self.sections.insert(target, section)
        return target

    def set_source(self, section_id: str, new_source: str) -> CustomBlock:
        """Remplace le source d'un bloc custom-code (copie : le bloc est immuable)."""
        i = self._index_of(section_id)
        current = self.sections[i]
        if not isinstance(current, CustomBlock):
            raise TypeError(f"section {section_id} n'est pas un bloc custom-code ({current.kind})")
        updated = current.with_source(new_source)
        self.sections[i] = updated
        return updated
