"""
Accès aux propriétés — lecture/écriture + méthodes des types primitifs.

Les méthodes de String/Array/Number sont résolues à la lecture
(`"abc".toUpperCase` renvoie une NativeFunction liée à la valeur).
"""
import functools
import math
from typing import Any, Callable, Dict, List

from .values import (
    UNDEFINED, JSCallable, JSObject, NativeFunction,
    arg, is_nullish, is_number, number_to_string,
    strict_equals, throw_error, to_boolean, to_number,
    to_property_key, to_string, typeof,
)


def _index(key: str) -> int:
    """Index de tableau valide, ou -1."""
    if key.isdigit() and (key == "0" or not key.startswith("0")):
        return int(key)
    return -1


def _to_integer(value: Any) -> int:
    n = to_number(value)
    if math.isnan(n):
        return 0
    if math.isinf(n):
        return 2 ** 31 if n > 0 else -2 ** 31
    return int(n)


def _relative(value: Any, length: int, default: int) -> int:
    if value is UNDEFINED:
        return default
    n = _to_integer(value)
    if n < 0:
        return max(length + n, 0)
    return min(n, length)


def _callback(fn: Any, method: str) -> JSCallable:
    if not isinstance(fn, JSCallable):
        throw_error("TypeError", f"{to_string(fn)} is not a function (in Array.prototype.{method})")
    return fn


def _same_value_zero(a: Any, b: Any) -> bool:
    if is_number(a) and is_number(b) and math.isnan(a) and math.isnan(b):
        return True
    return strict_equals(a, b)


# ── Array.prototype ──────────────────────────────────────────────────────────

def _flatten(items: List[Any], depth: float) -> List[Any]:
    out: List[Any] = []
    for item in items:
        if isinstance(item, list) and depth >= 1:
            out.extend(_flatten(item, depth - 1))
        else:
            out.append(item)
    return out


def _sort_key(compare: Any):
    if not isinstance(compare, JSCallable):
        return lambda v: (v is UNDEFINED, to_string(v))

    def cmp(a, b):
        r = to_number(compare.call(UNDEFINED, [a, b]))
        if math.isnan(r) or r == 0:
            return 0
        return -1 if r < 0 else 1
    return functools.cmp_to_key(cmp)


def _array_method(arr: List[Any], name: str) -> Any:
    def each(fn: JSCallable):
        for i, item in enumerate(list(arr)):
            yield item, fn.call(UNDEFINED, [item, float(i), arr])

    def m_map(this, args):
        return [r for _, r in each(_callback(arg(args, 0), "map"))]

    def m_filter(this, args):
        return [item for item, r in each(_callback(arg(args, 0), "filter")) if to_boolean(r)]

    def m_for_each(this, args):
        for _ in each(_callback(arg(args, 0), "forEach")):
            pass
        return UNDEFINED

    def m_reduce(this, args):
        fn = _callback(arg(args, 0), "reduce")
        items = list(arr)
        if len(args) > 1:
            acc, start = args[1], 0
        elif items:
            acc, start = items[0], 1
        else:
            throw_error("TypeError", "Reduce of empty array with no initial value")
        for i in range(start, len(items)):
            acc = fn.call(UNDEFINED, [acc, items[i], float(i), arr])
        return acc

    def m_find(this, args):
        for item, r in each(_callback(arg(args, 0), "find")):
            if to_boolean(r):
                return item
        return UNDEFINED

    def m_find_index(this, args):
        for i, (_, r) in enumerate(each(_callback(arg(args, 0), "findIndex"))):
            if to_boolean(r):
                return float(i)
        return -1.0

    def m_some(this, args):
        return any(to_boolean(r) for _, r in each(_callback(arg(args, 0), "some")))

    def m_every(this, args):
        return all(to_boolean(r) for _, r in each(_callback(arg(args, 0), "every")))

    def m_includes(this, args):
        return any(_same_value_zero(item, arg(args, 0)) for item in arr)

    def m_index_of(this, args):
        for i, item in enumerate(arr):
            if strict_equals(item, arg(args, 0)):
                return float(i)
        return -1.0

    def m_join(this, args):
        sep = "," if arg(args, 0) is UNDEFINED else to_string(args[0])
        return sep.join("" if is_nullish(v) else to_string(v) for v in arr)

    def m_slice(this, args):
        start = _relative(arg(args, 0), len(arr), 0)
        end = _relative(arg(args, 1), len(arr), len(arr))
        return arr[start:end]

    def m_concat(this, args):
        out = list(arr)
        for a in args:
            if isinstance(a, list):
                out.extend(a)
            else:
                out.append(a)
        return out

    def m_push(this, args):
        arr.extend(args)
        return float(len(arr))

    def m_pop(this, args):
        return arr.pop() if arr else UNDEFINED

    def m_shift(this, args):
        return arr.pop(0) if arr else UNDEFINED

    def m_unshift(this, args):
        arr[0:0] = args
        return float(len(arr))

    def m_reverse(this, args):
        arr.reverse()
        return arr

    def m_sort(this, args):
        arr.sort(key=_sort_key(arg(args, 0)))
        return arr

    def m_flat(this, args):
        depth = 1.0 if arg(args, 0) is UNDEFINED else to_number(args[0])
        return _flatten(arr, depth)

    def m_flat_map(this, args):
        return _flatten(m_map(this, args), 1)

    def m_fill(this, args):
        start = _relative(arg(args, 1), len(arr), 0)
        end = _relative(arg(args, 2), len(arr), len(arr))
        for i in range(start, end):
            arr[i] = arg(args, 0)
        return arr

    def m_entries(this, args):
        return [[float(i), v] for i, v in enumerate(arr)]

    def m_keys(this, args):
        return [float(i) for i in range(len(arr))]

    def m_at(this, args):
        i = _to_integer(arg(args, 0))
        i = i + len(arr) if i < 0 else i
        return arr[i] if 0 <= i < len(arr) else UNDEFINED

    methods: Dict[str, Callable] = {
        "map": m_map, "filter": m_filter, "forEach": m_for_each, "reduce": m_reduce,
        "find": m_find, "findIndex": m_find_index, "some": m_some, "every": m_every,
        "includes": m_includes, "indexOf": m_index_of, "join": m_join, "slice": m_slice,
        "concat": m_concat, "push": m_push, "pop": m_pop, "shift": m_shift,
        "unshift": m_unshift, "reverse": m_reverse, "sort": m_sort, "flat": m_flat,
        "flatMap": m_flat_map, "fill": m_fill, "entries": m_entries, "keys": m_keys,
        "at": m_at,
    }
    method = methods.get(name)
    if method is None:
        return UNDEFINED
    return NativeFunction(method, name=name)


# ── String.prototype ─────────────────────────────────────────────────────────

def _string_method(s: str, name: str) -> Any:
    def m_split(this, args):
        sep, limit = arg(args, 0), arg(args, 1)
        if sep is UNDEFINED:
            parts = [s]
        elif to_string(sep) == "":
            parts = list(s)
        else:
            parts = s.split(to_string(sep))
        if limit is not UNDEFINED:
            parts = parts[:max(_to_integer(limit), 0)]
        return parts

    def m_replace(this, args):
        pattern, replacement = to_string(arg(args, 0)), arg(args, 1)
        if isinstance(replacement, JSCallable):
            if pattern not in s:
                return s
            return s.replace(pattern, to_string(replacement.call(UNDEFINED, [pattern])), 1)
        return s.replace(pattern, to_string(replacement), 1)

    def m_replace_all(this, args):
        pattern, replacement = to_string(arg(args, 0)), arg(args, 1)
        if isinstance(replacement, JSCallable):
            return s.replace(pattern, to_string(replacement.call(UNDEFINED, [pattern])))
        return s.replace(pattern, to_string(replacement))

    def m_slice(this, args):
        start = _relative(arg(args, 0), len(s), 0)
        end = _relative(arg(args, 1), len(s), len(s))
        return s[start:end]

    def m_substring(this, args):
        def clamp(v, default):
            if v is UNDEFINED:
                return default
            n = to_number(v)
            return 0 if math.isnan(n) else min(max(int(n), 0), len(s))
        a, b = clamp(arg(args, 0), 0), clamp(arg(args, 1), len(s))
        return s[min(a, b):max(a, b)]

    def m_index_of(this, args):
        return float(s.find(to_string(arg(args, 0))))

    def m_pad(left: bool):
        def pad(this, args):
            width = _to_integer(arg(args, 0))
            fill = " " if arg(args, 1) is UNDEFINED else to_string(args[1])
            if width <= len(s) or not fill:
                return s
            padding = (fill * width)[:width - len(s)]
            return padding + s if left else s + padding
        return pad

    def m_char_at(this, args):
        i = _to_integer(arg(args, 0))
        return s[i] if 0 <= i < len(s) else ""

    def m_at(this, args):
        i = _to_integer(arg(args, 0))
        i = i + len(s) if i < 0 else i
        return s[i] if 0 <= i < len(s) else UNDEFINED

    def m_repeat(this, args):
        count = to_number(arg(args, 0))
        if math.isnan(count):
            count = 0
        if count < 0 or math.isinf(count):
            throw_error("RangeError", f"Invalid count value: {number_to_string(count)}")
        return s * int(count)

    methods: Dict[str, Callable] = {
        "toUpperCase": lambda this, args: s.upper(),
        "toLowerCase": lambda this, args: s.lower(),
        "trim": lambda this, args: s.strip(),
        "trimStart": lambda this, args: s.lstrip(),
        "trimEnd": lambda this, args: s.rstrip(),
        "includes": lambda this, args: to_string(arg(args, 0)) in s,
        "startsWith": lambda this, args: s.startswith(to_string(arg(args, 0))),
        "endsWith": lambda this, args: s.endswith(to_string(arg(args, 0))),
        "concat": lambda this, args: s + "".join(to_string(a) for a in args),
        "toString": lambda this, args: s,
        "split": m_split, "replace": m_replace, "replaceAll": m_replace_all,
        "slice": m_slice, "substring": m_substring, "indexOf": m_index_of,
        "padStart": m_pad(True), "padEnd": m_pad(False), "charAt": m_char_at,
        "at": m_at, "repeat": m_repeat,
    }
    method = methods.get(name)
    if method is None:
        return UNDEFINED
    return NativeFunction(method, name=name)


# ── Number.prototype ─────────────────────────────────────────────────────────

def _number_method(x: float, name: str) -> Any:
    def m_to_fixed(this, args):
        digits = _to_integer(arg(args, 0))
        if not 0 <= digits <= 100:
            throw_error("RangeError", "toFixed() digits argument must be between 0 and 100")
        if math.isnan(x) or math.isinf(x):
            return number_to_string(x)
        return f"{x:.{digits}f}"

    def m_to_string(this, args):
        radix = arg(args, 0)
        if radix is UNDEFINED or to_number(radix) == 10:
            return number_to_string(x)
        base = int(to_number(radix))
        if not 2 <= base <= 36 or x != int(x):
            throw_error("RangeError", "toString() radix must be between 2 and 36")
        n, digits = abs(int(x)), ""
        while True:
            n, r = divmod(n, base)
            digits = "0123456789abcdefghijklmnopqrstuvwxyz"[r] + digits
            if n == 0:
                break
        return ("-" if x < 0 else "") + digits

    methods = {"toFixed": m_to_fixed, "toString": m_to_string}
    method = methods.get(name)
    if method is None:
        return UNDEFINED
    return NativeFunction(method, name=name)


# ── Function.prototype ───────────────────────────────────────────────────────

def _function_member(fn: JSCallable, name: str) -> Any:
    if name == "name":
        return fn.name
    if name == "call":
        return NativeFunction(lambda this, args: fn.call(arg(args, 0), args[1:]), name="call")
    if name == "apply":
        def apply(this, args):
            extra = arg(args, 1)
            return fn.call(arg(args, 0), list(extra) if isinstance(extra, list) else [])
        return NativeFunction(apply, name="apply")
    if name == "bind":
        def bind(this, args):
            bound_this, bound_args = arg(args, 0), args[1:]
            return NativeFunction(lambda _, more: fn.call(bound_this, bound_args + more),
                                  name=f"bound {fn.name}")
        return NativeFunction(bind, name="bind")
    return UNDEFINED


# ── Points d'entrée ──────────────────────────────────────────────────────────

def get_property(obj: Any, key: Any) -> Any:
    name = to_property_key(key)
    if is_nullish(obj):
        throw_error("TypeError", f"Cannot read properties of {typeof(obj) if obj is UNDEFINED else 'null'} (reading '{name}')")
    if isinstance(obj, JSObject):
        if name in obj.props:
            return obj.props[name]
        if name == "hasOwnProperty":
            return NativeFunction(lambda this, args: to_property_key(arg(args, 0)) in obj.props,
                                  name="hasOwnProperty")
        if name == "toString":
            return NativeFunction(lambda this, args: to_string(obj), name="toString")
        return UNDEFINED
    if isinstance(obj, list):
        if name == "length":
            return float(len(obj))
        i = _index(name)
        if i >= 0:
            return obj[i] if i < len(obj) else UNDEFINED
        if name == "toString":
            return NativeFunction(lambda this, args: to_string(obj), name="toString")
        return _array_method(obj, name)
    if isinstance(obj, str):
        if name == "length":
            return float(len(obj))
        i = _index(name)
        if i >= 0:
            return obj[i] if i < len(obj) else UNDEFINED
        return _string_method(obj, name)
    if isinstance(obj, bool):
        if name == "toString":
            return NativeFunction(lambda this, args: to_string(obj), name="toString")
        return UNDEFINED
    if is_number(obj):
        return _number_method(float(obj), name)
    if isinstance(obj, JSCallable):
        statics = getattr(obj, "js_get", None)
        if statics is not None and statics(name) is not UNDEFINED:
            return statics(name)
        return _function_member(obj, name)
    js_get = getattr(obj, "js_get", None)
    if js_get is not None:
        return js_get(name)
    return UNDEFINED


def set_property(obj: Any, key: Any, value: Any) -> Any:
    name = to_property_key(key)
    if is_nullish(obj):
        throw_error("TypeError", f"Cannot set properties of {'undefined' if obj is UNDEFINED else 'null'} (setting '{name}')")
    if isinstance(obj, JSObject):
        obj.set(name, value)
        return value
    if isinstance(obj, list):
        if name == "length":
            n = max(_to_integer(value), 0)
            del obj[n:]
            obj.extend([UNDEFINED] * (n - len(obj)))
            return value
        i = _index(name)
        if i < 0:
            throw_error("TypeError", f"Cannot set property '{name}' on array")
        if i >= len(obj):
            obj.extend([UNDEFINED] * (i + 1 - len(obj)))
        obj[i] = value
        return value
    throw_error("TypeError", f"Cannot assign to property '{name}' of {typeof(obj)}")


def delete_property(obj: Any, key: Any) -> bool:
    name = to_property_key(key)
    if isinstance(obj, JSObject):
        return obj.delete(name)
    if isinstance(obj, list):
        i = _index(name)
        if 0 <= i < len(obj):
            obj[i] = UNDEFINED
        return True
    return True


def has_property(obj: Any, key: Any) -> bool:
    """Opérateur `in`."""
    name = to_property_key(key)
    if isinstance(obj, JSObject):
        return name in obj.props
    if isinstance(obj, list):
        return name == "length" or 0 <= _index(name) < len(obj)
    throw_error("TypeError", f"Cannot use 'in' operator to search for '{name}' in {to_string(obj)}")
