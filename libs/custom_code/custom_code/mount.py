"""
Mount Boundary — CustomBlock → élément rendable, sans jamais lever.

  transform ─✗→ nœud d'erreur (stage=transform)
     │
    bind ─────✗→ nœud d'erreur (stage=bind)
     │
  valeur non appelable → contenu vide
  appelable → appel sans argument + résolution ─✗→ nœud d'erreur (stage=render)

Aucun cache : chaque montage recompile depuis `block.source`.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .bind import bind
from .element import FRAGMENT, Element, resolve
from .errors import PipelineFailure, RenderError
from .runtime import UNDEFINED, JSCallable, JSThrow, describe_thrown
from .source import CustomBlock
from .transform import transform

log = logging.getLogger(__name__)

_STAGE_LABELS = {
    "transform": "Code invalide",
    "bind": "Évaluation impossible",
    "render": "Erreur au rendu",
}


@dataclass
class CompiledUnit:
    lowered: Optional[str] = None
    value: Any = None
    failure: Optional[PipelineFailure] = None


def compile_block(block: CustomBlock) -> CompiledUnit:
    """transform + bind d'un bloc (valeur liée ou premier échec)."""
    transformed = transform(block.source)
    if transformed.error is not None:
        return CompiledUnit(failure=transformed.error)
    bound = bind(transformed.lowered)
    if bound.error is not None:
        return CompiledUnit(lowered=transformed.lowered, failure=bound.error)
    return CompiledUnit(lowered=transformed.lowered, value=bound.value)


def error_node(failure: PipelineFailure) -> Element:
    """Placeholder inerte : aucun contenu interactif."""
    children: List[Any] = [
        Element("strong", {}, [f"{_STAGE_LABELS[failure.stage]} :"]),
        " ",
        Element("span", {"className": "custom-code-error__message"}, [failure.message]),
    ]
    if failure.source_excerpt:
        children.append(Element("pre", {"className": "custom-code-error__excerpt"}, [failure.source_excerpt]))
    return Element("div", {
        "className": "custom-code-error",
        "role": "alert",
        "data-stage": failure.stage,
    }, children)


def render_component(value: JSCallable) -> Tuple[List[Any], Optional[RenderError]]:
    """Appelle la fabrique sans argument et résout l'arbre rendu."""
    try:
        return resolve(value.call(UNDEFINED, [])), None
    except JSThrow as thrown:
        return [], RenderError(message=describe_thrown(thrown.value))
    except RecursionError:
        return [], RenderError(message="RangeError: Maximum call stack size exceeded")
    except Exception as e:
        return [], RenderError(message=f"{type(e).__name__}: {e}")


def _wrap(block: CustomBlock, children: List[Any]) -> Element:
    return Element("div", {"className": "custom-code", "data-block-id": block.id}, children)


def mount(block: CustomBlock) -> Element:
    """Élément rendable du bloc : contenu de l'auteur ou nœud d'erreur."""
    unit = compile_block(block)
    if unit.failure is None:
        if not isinstance(unit.value, JSCallable):
            return _wrap(block, [Element(FRAGMENT)])
        nodes, unit.failure = render_component(unit.value)
        if unit.failure is None:
            return _wrap(block, nodes)
    log.warning("custom-code %s: échec %s: %s", block.id, unit.failure.stage, unit.failure.message)
    return _wrap(block, [error_node(unit.failure)])
