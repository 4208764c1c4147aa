"""
Source Model + surface d'édition des blocs de code personnalisé.
"""
import uuid
from typing import Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SOURCE = """() => (
  <div style={{padding:20, color: '#333'}}>
    <p style={{textAlign: 'center'}}><b>This is a sample custom insert!</b></p>
  </div>
)"""


class CustomBlock(BaseModel):
    """Bloc de code auteur. Immuable : une édition produit une copie."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: Literal["custom-code"] = "custom-code"
    source: str = ""

    def with_source(self, source: str) -> "CustomBlock":
        return self.model_copy(update={"source": source})


def create_default() -> CustomBlock:
    return CustomBlock(source=DEFAULT_SOURCE)


class SourceEditor:
    """
    Éditeur de texte brut d'un bloc.
    Aucune validation à la saisie : le source invalide n'apparaît qu'au montage suivant.
    """

    def __init__(self, block: CustomBlock, on_change: Callable[[str], None]):
        self.block_id = block.id
        self.initial_source = block.source
        self._on_change = on_change

    def on_change(self, new_source: Optional[str]) -> None:
        # éditeur vidé → None
        self._on_change(new_source or "")
