"""
Hôte de rendu — descripteurs d'éléments + poignée `React` injectée au code.

  React.createElement(type, props, ...children) → Element
  resolve(node)                                 → liste plate de str / Element hôtes

Les composants (fonctions) sont développés à la résolution, sans état :
les hooks renvoient leur valeur initiale et des mises à jour sans effet
(rendu serveur unique).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .runtime.values import (
    UNDEFINED, JSCallable, JSObject, NativeFunction,
    arg, is_nullish, is_number, number_to_string, own_entries, throw_error, to_string,
)


class _Fragment:
    __slots__ = ()

    def __repr__(self) -> str:
        return "Fragment"


FRAGMENT = _Fragment()


@dataclass
class Element:
    type: Any
    props: Dict[str, Any] = field(default_factory=dict)
    children: List[Any] = field(default_factory=list)
    key: Optional[str] = None

    def js_get(self, name: str) -> Any:
        if name == "type":
            return self.type
        if name == "key":
            return self.key
        if name == "props":
            return JSObject(self._props_with_children(), frozen=True)
        return UNDEFINED

    def _props_with_children(self) -> Dict[str, Any]:
        props = dict(self.props)
        if len(self.children) == 1:
            props["children"] = self.children[0]
        elif self.children:
            props["children"] = list(self.children)
        return props


Node = Union[str, Element]


# ── React.createElement ─────────────────────────────────────────────────────

def create_element(this, args):
    element_type, config = arg(args, 0), arg(args, 1)
    props: Dict[str, Any] = {}
    key = None
    if isinstance(config, JSObject):
        for name, value in own_entries(config):
            if name == "key":
                key = None if is_nullish(value) else to_string(value)
            elif name != "ref":
                props[name] = value
    children = list(args[2:])
    if not children and "children" in props:
        given = props["children"]
        children = list(given) if isinstance(given, list) else [given]
    props.pop("children", None)
    return Element(element_type, props, children, key)


# ── Résolution ──────────────────────────────────────────────────────────────

def resolve(node: Any) -> List[Node]:
    """Développe composants et fragments → nœuds hôtes (texte ou balise)."""
    if node is None or node is UNDEFINED or isinstance(node, bool):
        return []
    if isinstance(node, str):
        return [node] if node else []
    if is_number(node):
        return [number_to_string(float(node))]
    if isinstance(node, list):
        out: List[Node] = []
        for item in node:
            out.extend(resolve(item))
        return out
    if isinstance(node, Element):
        if node.type is FRAGMENT:
            return resolve(node.children)
        if isinstance(node.type, str):
            return [Element(node.type, dict(node.props), resolve(node.children), node.key)]
        if isinstance(node.type, JSCallable):
            props = JSObject(node._props_with_children())
            return resolve(node.type.call(UNDEFINED, [props]))
        throw_error("TypeError", f"Element type is invalid: got {to_string(node.type)}")
    if isinstance(node, JSCallable):
        return []
    throw_error("TypeError", f"Objects are not valid as a React child (found: {to_string(node)})")


# ── Children / hooks ────────────────────────────────────────────────────────

def _flatten_children(children: Any) -> List[Any]:
    if isinstance(children, list):
        out: List[Any] = []
        for child in children:
            out.extend(_flatten_children(child))
        return out
    if is_nullish(children) or isinstance(children, bool):
        return []
    return [children]


def _children_map(this, args):
    fn = arg(args, 1)
    items = _flatten_children(arg(args, 0))
    if not isinstance(fn, JSCallable):
        return items
    return [fn.call(UNDEFINED, [child, float(i)]) for i, child in enumerate(items)]


def _use_state(this, args):
    initial = arg(args, 0)
    if isinstance(initial, JSCallable):
        initial = initial.call(UNDEFINED, [])
    return [initial, NativeFunction(lambda this, args: UNDEFINED, name="setState")]


def _use_reducer(this, args):
    initial = arg(args, 1)
    init = arg(args, 2)
    if isinstance(init, JSCallable):
        initial = init.call(UNDEFINED, [initial])
    return [initial, NativeFunction(lambda this, args: UNDEFINED, name="dispatch")]


def _use_memo(this, args):
    factory = arg(args, 0)
    if not isinstance(factory, JSCallable):
        throw_error("TypeError", "useMemo requires a function")
    return factory.call(UNDEFINED, [])


def _no_op(this, args):
    return UNDEFINED


def _create_context(this, args):
    default = arg(args, 0)
    provider = NativeFunction(lambda this, args: get_children(arg(args, 0)), "Provider")
    return JSObject({"Provider": provider, "_currentValue": default}, frozen=True)


def _use_context(this, args):
    context = arg(args, 0)
    if not isinstance(context, JSObject):
        throw_error("TypeError", "useContext requires a context object")
    return context.get("_currentValue")


def get_children(props: Any) -> Any:
    return props.get("children") if isinstance(props, JSObject) else UNDEFINED


def _build_react() -> JSObject:
    return JSObject({
        "createElement": NativeFunction(create_element, "createElement"),
        "Fragment": FRAGMENT,
        "isValidElement": NativeFunction(lambda this, args: isinstance(arg(args, 0), Element), "isValidElement"),
        "Children": JSObject({
            "toArray": NativeFunction(lambda this, args: _flatten_children(arg(args, 0)), "toArray"),
            "count": NativeFunction(lambda this, args: float(len(_flatten_children(arg(args, 0)))), "count"),
            "map": NativeFunction(_children_map, "map"),
        }, frozen=True),
        "useState": NativeFunction(_use_state, "useState"),
        "useReducer": NativeFunction(_use_reducer, "useReducer"),
        "useMemo": NativeFunction(_use_memo, "useMemo"),
        "useCallback": NativeFunction(lambda this, args: arg(args, 0), "useCallback"),
        "useRef": NativeFunction(lambda this, args: JSObject({"current": arg(args, 0)}), "useRef"),
        "useEffect": NativeFunction(_no_op, "useEffect"),
        "useLayoutEffect": NativeFunction(_no_op, "useLayoutEffect"),
        "createContext": NativeFunction(_create_context, "createContext"),
        "useContext": NativeFunction(_use_context, "useContext"),
    }, frozen=True)


# Poignée partagée entre tous les blocs : gelée, donc non modifiable par le code
REACT = _build_react()
