"""
Intrinsèques du langage visibles par le code généré.

Uniquement des valeurs pures (Math, JSON, constructeurs d'erreurs…) :
aucun accès fichier, réseau, stockage, console ni minuterie.
"""
import json
import math
import random
import re
from typing import Any, Dict

from .properties import get_property
from .values import (
    UNDEFINED, JSCallable, JSObject, NativeFunction,
    arg, is_number, iterate, make_error, native,
    own_entries, own_keys, throw_error,
    to_boolean, to_number, to_string,
)


# ── Erreurs ─────────────────────────────────────────────────────────────────

def _error_constructor(name: str) -> NativeFunction:
    def construct(this, args):
        message = arg(args, 0)
        return make_error(name, "" if message is UNDEFINED else to_string(message))
    return NativeFunction(construct, name=name, constructable=True)


# ── Math ────────────────────────────────────────────────────────────────────

def _math_fn(fn):
    def call(this, args):
        try:
            return float(fn(*[to_number(a) for a in args]))
        except (ValueError, OverflowError):
            return math.nan
    return call


def _js_round(x: float) -> float:
    if math.isnan(x) or math.isinf(x):
        return x
    return float(math.floor(x + 0.5))


def _js_sign(x: float) -> float:
    if math.isnan(x) or x == 0:
        return x
    return 1.0 if x > 0 else -1.0


def _js_trunc(x: float) -> float:
    if math.isnan(x) or math.isinf(x):
        return x
    return float(math.trunc(x))


def _js_floor(x: float) -> float:
    return x if math.isnan(x) or math.isinf(x) else float(math.floor(x))


def _js_ceil(x: float) -> float:
    return x if math.isnan(x) or math.isinf(x) else float(math.ceil(x))


def _js_min(*xs: float) -> float:
    if any(math.isnan(x) for x in xs):
        return math.nan
    return min(xs, default=math.inf)


def _js_max(*xs: float) -> float:
    if any(math.isnan(x) for x in xs):
        return math.nan
    return max(xs, default=-math.inf)


def _build_math() -> JSObject:
    return JSObject({
        "PI": math.pi,
        "E": math.e,
        "abs": NativeFunction(_math_fn(abs), "abs"),
        "floor": NativeFunction(_math_fn(_js_floor), "floor"),
        "ceil": NativeFunction(_math_fn(_js_ceil), "ceil"),
        "round": NativeFunction(_math_fn(_js_round), "round"),
        "trunc": NativeFunction(_math_fn(_js_trunc), "trunc"),
        "sign": NativeFunction(_math_fn(_js_sign), "sign"),
        "min": NativeFunction(_math_fn(_js_min), "min"),
        "max": NativeFunction(_math_fn(_js_max), "max"),
        "pow": NativeFunction(_math_fn(math.pow), "pow"),
        "sqrt": NativeFunction(_math_fn(math.sqrt), "sqrt"),
        "random": NativeFunction(lambda this, args: random.random(), "random"),
    }, frozen=True)


# ── JSON ────────────────────────────────────────────────────────────────────

def to_python(value: Any) -> Any:
    """Valeur JS → structure sérialisable (undefined et fonctions omis)."""
    if isinstance(value, JSObject):
        return {
            k: to_python(v) for k, v in value.props.items()
            if v is not UNDEFINED and not isinstance(v, JSCallable)
        }
    if isinstance(value, list):
        return [None if v is UNDEFINED or isinstance(v, JSCallable) else to_python(v) for v in value]
    if is_number(value):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value) if value == int(value) else float(value)
    return value


def from_python(value: Any) -> Any:
    """Structure JSON décodée → valeur JS."""
    if isinstance(value, dict):
        return JSObject({k: from_python(v) for k, v in value.items()})
    if isinstance(value, list):
        return [from_python(v) for v in value]
    if is_number(value):
        return float(value)
    return value


@native("stringify")
def _json_stringify(this, args):
    value = arg(args, 0)
    if value is UNDEFINED or isinstance(value, JSCallable):
        return UNDEFINED
    indent = arg(args, 2)
    if is_number(indent) and indent > 0:
        return json.dumps(to_python(value), indent=int(min(indent, 10)), ensure_ascii=False)
    if isinstance(indent, str) and indent:
        return json.dumps(to_python(value), indent=indent[:10], ensure_ascii=False)
    return json.dumps(to_python(value), separators=(",", ":"), ensure_ascii=False)


@native("parse")
def _json_parse(this, args):
    try:
        return from_python(json.loads(to_string(arg(args, 0))))
    except json.JSONDecodeError as e:
        throw_error("SyntaxError", f"Unexpected token in JSON at position {e.pos}")


# ── Object / Array ──────────────────────────────────────────────────────────

@native("assign")
def _object_assign(this, args):
    target = arg(args, 0)
    if not isinstance(target, JSObject):
        throw_error("TypeError", "Object.assign target must be an object")
    for source in args[1:]:
        for key, value in own_entries(source):
            target.set(key, value)
    return target


@native("freeze")
def _object_freeze(this, args):
    target = arg(args, 0)
    if isinstance(target, JSObject):
        target.frozen = True
    return target


@native("fromEntries")
def _object_from_entries(this, args):
    out = JSObject()
    for entry in iterate(arg(args, 0)):
        out.set(to_string(get_property(entry, 0)), get_property(entry, 1))
    return out


@native("from")
def _array_from(this, args):
    source, mapper = arg(args, 0), arg(args, 1)
    if isinstance(source, (list, str)):
        items = list(source)
    elif isinstance(source, JSObject):
        length = int(to_number(source.get("length"))) if is_number(source.get("length")) else 0
        items = [source.get(str(i)) for i in range(length)]
    else:
        items = []
    if isinstance(mapper, JSCallable):
        return [mapper.call(UNDEFINED, [item, float(i)]) for i, item in enumerate(items)]
    return items


# ── Fonctions globales ──────────────────────────────────────────────────────

_INT_PREFIX = re.compile(r"^\s*([+-]?)(0[xX])?([0-9a-zA-Z]*)")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)")


@native("parseInt")
def _parse_int(this, args):
    text = to_string(arg(args, 0))
    radix = int(to_number(arg(args, 1))) if is_number(arg(args, 1)) else 0
    m = _INT_PREFIX.match(text)
    sign, hex_prefix, body = m.group(1), m.group(2), m.group(3)
    if hex_prefix and radix in (0, 16):
        radix = 16
    elif radix == 0:
        radix = 10
    if not 2 <= radix <= 36:
        return math.nan
    digits = ""
    for ch in body:
        if ch.isdigit() and int(ch) < radix or ch.isalpha() and ord(ch.lower()) - 87 < radix:
            digits += ch
        else:
            break
    if not digits:
        return math.nan
    value = float(int(digits, radix))
    return -value if sign == "-" else value


@native("parseFloat")
def _parse_float(this, args):
    m = _FLOAT_PREFIX.match(to_string(arg(args, 0)))
    if not m:
        return math.nan
    text = m.group(0).strip()
    if text.lstrip("+-") == "Infinity":
        return -math.inf if text.startswith("-") else math.inf
    return float(text)


def _conversion(name: str, convert, empty: Any) -> NativeFunction:
    # sans argument : `empty` ; `undefined` explicite passe par la conversion
    return NativeFunction(lambda this, args: convert(args[0]) if args else empty,
                          name=name, constructable=False)


# Borne des tableaux alloués par `Array(n)` (pas de tableaux creux)
_MAX_ARRAY_LENGTH = 10_000_000


def _array_constructor(this, args):
    if len(args) == 1 and is_number(args[0]):
        n = args[0]
        if math.isnan(n) or math.isinf(n) or n < 0 or n != int(n) or n > _MAX_ARRAY_LENGTH:
            throw_error("RangeError", "Invalid array length")
        return [UNDEFINED] * int(n)
    return list(args)


def _with_members(fn: NativeFunction, members: Dict[str, Any]) -> NativeFunction:
    """Constructeur appelable portant aussi des membres statiques (Number.isInteger…)."""
    return _CallableNamespace(fn, members)


class _CallableNamespace(NativeFunction):
    def __init__(self, fn: NativeFunction, members: Dict[str, Any]):
        super().__init__(fn.fn, name=fn.name, constructable=fn.constructable)
        self.members = members

    def js_get(self, key: str) -> Any:
        return self.members.get(key, UNDEFINED)


def _is_integer(this, args):
    x = arg(args, 0)
    return is_number(x) and not math.isinf(x) and not math.isnan(x) and x == int(x)


def _is_finite(this, args):
    x = to_number(arg(args, 0))
    return not (math.isnan(x) or math.isinf(x))


def _is_finite_number(this, args):
    x = arg(args, 0)
    return is_number(x) and not math.isinf(x) and not math.isnan(x)


def build_intrinsics() -> Dict[str, Any]:
    """Nouvelle table d'intrinsèques (une par évaluation, rien de partagé)."""
    return {
        "undefined": UNDEFINED,
        "NaN": math.nan,
        "Infinity": math.inf,
        "Math": _build_math(),
        "JSON": JSObject({"stringify": _json_stringify, "parse": _json_parse}, frozen=True),
        "Object": _with_members(NativeFunction(lambda this, args: JSObject(), "Object"), {
            "keys": NativeFunction(lambda this, args: own_keys(arg(args, 0)), "keys"),
            "values": NativeFunction(lambda this, args: [v for _, v in own_entries(arg(args, 0))], "values"),
            "entries": NativeFunction(lambda this, args: [[k, v] for k, v in own_entries(arg(args, 0))], "entries"),
            "assign": _object_assign,
            "freeze": _object_freeze,
            "fromEntries": _object_from_entries,
        }),
        "Array": _with_members(NativeFunction(_array_constructor, "Array", constructable=True), {
            "isArray": NativeFunction(lambda this, args: isinstance(arg(args, 0), list), "isArray"),
            "from": _array_from,
            "of": NativeFunction(lambda this, args: list(args), "of"),
        }),
        "String": _conversion("String", to_string, ""),
        "Number": _with_members(_conversion("Number", to_number, 0.0), {
            "isInteger": NativeFunction(_is_integer, "isInteger"),
            "isFinite": NativeFunction(_is_finite_number, "isFinite"),
            "isNaN": NativeFunction(lambda this, args: is_number(arg(args, 0)) and math.isnan(args[0]), "isNaN"),
            "MAX_SAFE_INTEGER": float(2 ** 53 - 1),
            "MIN_SAFE_INTEGER": float(-(2 ** 53 - 1)),
        }),
        "Boolean": _conversion("Boolean", to_boolean, False),
        "Error": _error_constructor("Error"),
        "TypeError": _error_constructor("TypeError"),
        "RangeError": _error_constructor("RangeError"),
        "SyntaxError": _error_constructor("SyntaxError"),
        "ReferenceError": _error_constructor("ReferenceError"),
        "parseInt": _parse_int,
        "parseFloat": _parse_float,
        "isNaN": NativeFunction(lambda this, args: math.isnan(to_number(arg(args, 0))), "isNaN"),
        "isFinite": NativeFunction(_is_finite, "isFinite"),
    }


INTRINSIC_NAMES = frozenset(build_intrinsics())


def instance_of(value: Any, constructor: Any) -> bool:
    """`instanceof` restreint aux constructeurs intrinsèques."""
    if not isinstance(constructor, JSCallable):
        throw_error("TypeError", "Right-hand side of 'instanceof' is not callable")
    name = constructor.name
    if name == "Array":
        return isinstance(value, list)
    if name == "Object":
        return isinstance(value, (JSObject, list, JSCallable))
    if isinstance(value, JSObject) and value.class_name == "Error":
        return name == "Error" or to_string(value.get("name")) == name
    return False

