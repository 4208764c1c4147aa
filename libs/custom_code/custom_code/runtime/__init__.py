"""
Runtime d'exécution du code abaissé : valeurs, propriétés, intrinsèques,
interpréteur et analyse des identifiants libres.
"""
from .intrinsics import INTRINSIC_NAMES, build_intrinsics
from .interpreter import Interpreter, JSFunction
from .scope_analysis import free_identifiers
from .values import (
    UNDEFINED, JSCallable, JSObject, JSThrow, NativeFunction,
    describe_thrown, is_callable, native, to_string,
)

__all__ = [
    "INTRINSIC_NAMES", "build_intrinsics",
    "Interpreter", "JSFunction", "free_identifiers",
    "UNDEFINED", "JSCallable", "JSObject", "JSThrow", "NativeFunction",
    "describe_thrown", "is_callable", "native", "to_string",
]
