"""
Étape Bind — évalue le code abaissé avec `React` pour seule liaison externe.

Le code est enveloppé dans une fonction à un paramètre :

    function __custom_code__(React) { return (
    <code abaissé>
    ); }

puis relu (grammaire `javascript`), vérifié (aucun identifiant libre hors
`React` et intrinsèques) et exécuté. La valeur retournée est la fabrique
de composant, ou n'importe quelle autre valeur (42, null…).
"""
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .element import REACT
from .errors import BindError
from .grammar import describe_syntax_error, find_syntax_error, parse, significant_children
from .runtime import INTRINSIC_NAMES, UNDEFINED, Interpreter, JSThrow, build_intrinsics, free_identifiers

log = logging.getLogger(__name__)

WRAPPER_NAME = "__custom_code__"
HOST_PARAMETER = "React"


class BindResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: Any = None
    error: Optional[BindError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def wrap(lowered: str) -> str:
    return f"function {WRAPPER_NAME}({HOST_PARAMETER}) {{ return (\n{lowered}\n); }}"


def _wrapper_function(root):
    """La déclaration enveloppe, si le code abaissé n'en est pas sorti."""
    statements = significant_children(root)
    if len(statements) != 1 or statements[0].type != "function_declaration":
        return None
    fn = statements[0]
    body = significant_children(fn.child_by_field_name("body"))
    if len(body) != 1 or body[0].type != "return_statement":
        return None
    return fn


def bind(lowered: str, host: Any = REACT) -> BindResult:
    """Évalue `lowered` → valeur. Ne lève jamais : l'échec est renvoyé."""
    wrapped = wrap(lowered)
    excerpt = lowered.strip().splitlines()[0][:120] if lowered.strip() else None
    try:
        tree, data = parse(wrapped, "javascript")
        root = tree.root_node
        bad = find_syntax_error(root)
        if bad is not None:
            message, _ = describe_syntax_error(bad, data)
            return BindResult(error=BindError(message=message, source_excerpt=excerpt))
        fn_node = _wrapper_function(root)
        if fn_node is None:
            return BindResult(error=BindError(
                message="SyntaxError: code escapes its enclosing expression",
                source_excerpt=excerpt,
            ))
        allowed = INTRINSIC_NAMES | {HOST_PARAMETER, WRAPPER_NAME}
        free = free_identifiers(root, data, allowed)
        if free:
            return BindResult(error=BindError(
                message=f"ReferenceError: {free[0]} is not defined", source_excerpt=excerpt,
            ))
        interpreter = Interpreter(data, build_intrinsics())
        factory = interpreter.instantiate(fn_node)
        value = factory.call(UNDEFINED, [host])
    except JSThrow as thrown:
        return BindResult(error=BindError(message=str(thrown), source_excerpt=excerpt))
    except RecursionError:
        return BindResult(error=BindError(
            message="RangeError: Maximum call stack size exceeded", source_excerpt=excerpt,
        ))
    except Exception as e:
        log.warning("bind: %s: %s", type(e).__name__, e)
        return BindResult(error=BindError(message=f"{type(e).__name__}: {e}", source_excerpt=excerpt))
    return BindResult(value=value)
