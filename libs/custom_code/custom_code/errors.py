"""
Échecs du pipeline — renvoyés comme données, jamais levés vers le rendu.

TransformError : source malformé (parse / abaissement)
BindError      : échec à l'évaluation du code abaissé
RenderError    : exception pendant l'appel de la fabrique de composant
"""
from typing import Literal, Optional

from pydantic import BaseModel


class PipelineFailure(BaseModel):
    stage: Literal["transform", "bind", "render"]
    message: str
    source_excerpt: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class TransformError(PipelineFailure):
    stage: Literal["transform"] = "transform"


class BindError(PipelineFailure):
    stage: Literal["bind"] = "bind"


class RenderError(PipelineFailure):
    stage: Literal["render"] = "render"
