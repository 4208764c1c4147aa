"""
Valeurs du runtime — modèle objet JavaScript minimal côté Python.

Correspondance :
  undefined → UNDEFINED        null    → None
  boolean   → bool             number  → float
  string    → str              array   → list
  object    → JSObject         function → JSCallable (JSFunction / NativeFunction)

Les objets hôtes (éléments de rendu) exposent `js_get(key)` pour la lecture
de propriétés depuis le code généré.
"""
import math
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional


class _Undefined:
    __slots__ = ()

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


# ── Exceptions ──────────────────────────────────────────────────────────────

class JSThrow(Exception):
    """Valeur levée par `throw` (ou par le runtime) et non rattrapée."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(describe_thrown(value))


def make_error(name: str, message: str = "") -> "JSObject":
    return JSObject({"name": name, "message": message}, class_name="Error")


def throw_error(name: str, message: str) -> None:
    raise JSThrow(make_error(name, message))


def describe_thrown(value: Any) -> str:
    """Message lisible d'une valeur levée : `Error: boom`, ou la valeur convertie."""
    if isinstance(value, JSObject) and value.class_name == "Error":
        name = to_string(value.get("name"))
        message = to_string(value.get("message"))
        return f"{name}: {message}" if message else name
    return to_string(value)


# ── Objets ──────────────────────────────────────────────────────────────────

class JSObject:
    """Objet JS : dictionnaire ordonné de propriétés. `frozen` interdit toute écriture."""

    def __init__(self, props: Optional[Dict[str, Any]] = None, frozen: bool = False,
                 class_name: str = "Object"):
        self.props: Dict[str, Any] = dict(props or {})
        self.frozen = frozen
        self.class_name = class_name

    def get(self, key: str) -> Any:
        return self.props.get(key, UNDEFINED)

    def set(self, key: str, value: Any) -> None:
        if self.frozen:
            throw_error("TypeError", f"Cannot assign to read only property '{key}' of object")
        self.props[key] = value

    def delete(self, key: str) -> bool:
        if self.frozen:
            throw_error("TypeError", f"Cannot delete property '{key}' of object")
        self.props.pop(key, None)
        return True

    def __repr__(self) -> str:
        return f"JSObject({self.props!r})"


class JSCallable:
    """Base commune des fonctions appelables depuis le code généré."""
    name = ""
    constructable = False

    def call(self, this: Any, args: List[Any]) -> Any:
        raise NotImplementedError

    def construct(self, args: List[Any]) -> Any:
        throw_error("TypeError", f"{self.name or 'anonymous'} is not a constructor")


class NativeFunction(JSCallable):
    """Fonction fournie par l'hôte : `fn(this, args) -> valeur`."""

    def __init__(self, fn: Callable[[Any, List[Any]], Any], name: str = "",
                 constructable: bool = False):
        self.fn = fn
        self.name = name
        self.constructable = constructable

    def call(self, this: Any, args: List[Any]) -> Any:
        return self.fn(this, list(args))

    def construct(self, args: List[Any]) -> Any:
        if not self.constructable:
            return super().construct(args)
        return self.fn(UNDEFINED, list(args))

    def __repr__(self) -> str:
        return f"NativeFunction({self.name})"


def native(name: str, constructable: bool = False):
    """Décorateur : transforme `fn(this, args)` en NativeFunction."""
    def wrap(fn):
        return NativeFunction(fn, name=name, constructable=constructable)
    return wrap


def arg(args: List[Any], index: int) -> Any:
    return args[index] if index < len(args) else UNDEFINED


def is_callable(value: Any) -> bool:
    return isinstance(value, JSCallable)


def is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


# ── Conversions ─────────────────────────────────────────────────────────────

def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_to_string(x: float) -> str:
    """Number → String selon les règles JS (1.0 → "1", 1e21 → "1e+21")."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == int(x) and abs(x) < 2 ** 53:
        return str(int(x))
    if x == int(x) and abs(x) < 1e21:
        # chiffres les plus courts (repr), sans exposant
        return format(Decimal(repr(float(x))).normalize(), "f")
    text = repr(float(x))
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exp = int(exponent)
    if -7 < exp < 0:
        negative = mantissa.startswith("-")
        digits = mantissa.lstrip("-").replace(".", "")
        return ("-" if negative else "") + "0." + "0" * (-exp - 1) + digits
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


def to_string(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if is_number(value):
        return number_to_string(float(value))
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join("" if is_nullish(v) else to_string(v) for v in value)
    if isinstance(value, JSObject):
        if value.class_name == "Error":
            return describe_thrown(value)
        return "[object Object]"
    if isinstance(value, JSCallable):
        return f"function {value.name}() {{ [native code] }}"
    return "[object Object]"


def to_number(value: Any) -> float:
    if value is UNDEFINED:
        return math.nan
    if value is None or value is False:
        return 0.0
    if value is True:
        return 1.0
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            if text[:2].lower() in ("0x", "0b", "0o"):
                return float(int(text, 0))
            if text in ("Infinity", "+Infinity"):
                return math.inf
            if text == "-Infinity":
                return -math.inf
            if text.lower() in ("inf", "+inf", "-inf", "nan", "infinity", "-infinity"):
                return math.nan
            return float(text)
        except ValueError:
            return math.nan
    if isinstance(value, list):
        return to_number(to_string(value))
    return math.nan


def to_boolean(value: Any) -> bool:
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return len(value) > 0
    return True


def to_int32(value: Any) -> int:
    x = to_number(value)
    if math.isnan(x) or math.isinf(x):
        return 0
    n = int(x) & 0xFFFFFFFF
    return n - 0x100000000 if n >= 0x80000000 else n


def to_property_key(value: Any) -> str:
    if isinstance(value, str):
        return value
    return to_string(value)


def typeof(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, JSCallable):
        return "function"
    return "object"


def strict_equals(a: Any, b: Any) -> bool:
    if is_number(a) and is_number(b):
        return float(a) == float(b)
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    return a is b


def loose_equals(a: Any, b: Any) -> bool:
    if is_nullish(a) and is_nullish(b):
        return True
    if is_nullish(a) or is_nullish(b):
        return False
    if typeof(a) == typeof(b):
        return strict_equals(a, b)
    if isinstance(a, bool):
        return loose_equals(to_number(a), b)
    if isinstance(b, bool):
        return loose_equals(a, to_number(b))
    if is_number(a) and isinstance(b, str) or isinstance(a, str) and is_number(b):
        return to_number(a) == to_number(b)
    if isinstance(a, (list, JSObject)) and not isinstance(b, (list, JSObject)):
        return loose_equals(to_string(a), b)
    if isinstance(b, (list, JSObject)) and not isinstance(a, (list, JSObject)):
        return loose_equals(a, to_string(b))
    return False


def iterate(value: Any) -> List[Any]:
    """Valeurs parcourues par `for...of` / spread."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, str):
        return list(value)
    throw_error("TypeError", f"{to_string(value) if not is_nullish(value) else typeof(value)} is not iterable")


def own_keys(value: Any) -> List[str]:
    """Clés énumérables propres (`for...in`, `Object.keys`, spread objet)."""
    if isinstance(value, JSObject):
        return list(value.props)
    if isinstance(value, (list, str)):
        return [str(i) for i in range(len(value))]
    return []


def own_entries(value: Any) -> List[tuple]:
    if isinstance(value, JSObject):
        return list(value.props.items())
    if isinstance(value, (list, str)):
        return [(str(i), v) for i, v in enumerate(value)]
    return []
