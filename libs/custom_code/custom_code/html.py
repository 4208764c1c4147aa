"""
Sérialisation HTML des nœuds hôtes résolus (équivalent renderToStaticMarkup).

  className → class, htmlFor → for
  style     → objet → déclarations CSS (kebab-case, px sur les nombres)
  on*, fonctions, key/ref → ignorés
"""
import html
import math
import re
from typing import Any, Iterable, List

from .element import resolve
from .runtime.values import JSCallable, JSObject, is_nullish, is_number, number_to_string, own_entries, to_string

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_ATTRIBUTE_ALIASES = {"className": "class", "htmlFor": "for"}
_SKIPPED_PROPS = frozenset({"children", "key", "ref", "dangerouslySetInnerHTML",
                            "suppressContentEditableWarning", "suppressHydrationWarning"})
_VALID_ATTRIBUTE = re.compile(r"^[A-Za-z_:][A-Za-z0-9_:.\-]*$")
_EVENT_HANDLER = re.compile(r"^on[A-Z]")
_STRINGIFIED_BOOLEAN = re.compile(r"^(data|aria)-")
_UPPER = re.compile(r"([A-Z])")

# Propriétés CSS numériques sans unité
UNITLESS = frozenset({
    "animationIterationCount", "aspectRatio", "borderImageOutset", "borderImageSlice",
    "borderImageWidth", "boxFlex", "boxFlexGroup", "boxOrdinalGroup", "columnCount",
    "columns", "flex", "flexGrow", "flexPositive", "flexShrink", "flexNegative",
    "flexOrder", "gridArea", "gridRow", "gridRowEnd", "gridRowSpan", "gridRowStart",
    "gridColumn", "gridColumnEnd", "gridColumnSpan", "gridColumnStart", "fontWeight",
    "lineClamp", "lineHeight", "opacity", "order", "orphans", "scale", "tabSize",
    "widows", "zIndex", "zoom", "fillOpacity", "floodOpacity", "stopOpacity",
    "strokeDasharray", "strokeDashoffset", "strokeMiterlimit", "strokeOpacity",
    "strokeWidth",
})


def css_property(name: str) -> str:
    if name.startswith("--"):
        return name
    kebab = _UPPER.sub(lambda m: "-" + m.group(1).lower(), name)
    if kebab.startswith("ms-"):
        kebab = "-" + kebab
    elif re.match(r"^(webkit|moz|o)-", kebab):
        kebab = "-" + kebab
    return kebab


def css_value(name: str, value: Any) -> str:
    if is_number(value):
        number = float(value)
        if number != 0 and name not in UNITLESS and not name.startswith("--") and math.isfinite(number):
            return number_to_string(number) + "px"
        return number_to_string(number)
    return to_string(value).strip()


def style_to_css(style: Any) -> str:
    """Objet style → `prop:valeur;prop:valeur` (entrées nulles / booléennes omises)."""
    if isinstance(style, str):
        return style
    parts: List[str] = []
    for name, value in own_entries(style):
        if is_nullish(value) or isinstance(value, bool) or value == "":
            continue
        parts.append(f"{css_property(name)}:{css_value(name, value)}")
    return ";".join(parts)


def _attributes(props: dict) -> str:
    out: List[str] = []
    for name, value in props.items():
        if name in _SKIPPED_PROPS or _EVENT_HANDLER.match(name):
            continue
        if is_nullish(value) or isinstance(value, JSCallable):
            continue
        attr = _ATTRIBUTE_ALIASES.get(name, name)
        if not _VALID_ATTRIBUTE.match(attr):
            continue
        if isinstance(value, bool) and _STRINGIFIED_BOOLEAN.match(attr):
            out.append(f' {attr}="{"true" if value else "false"}"')
            continue
        if value is False:
            continue
        if name == "style":
            css = style_to_css(value)
            if css:
                out.append(f' style="{html.escape(css)}"')
            continue
        if value is True:
            out.append(f' {attr}=""')
            continue
        if isinstance(value, JSObject):
            continue
        out.append(f' {attr}="{html.escape(to_string(value))}"')
    return "".join(out)


def _inner_html(props: dict) -> Any:
    raw = props.get("dangerouslySetInnerHTML")
    if isinstance(raw, JSObject):
        value = raw.get("__html")
        if not is_nullish(value):
            return to_string(value)
    return None


def _render(nodes: Iterable[Any], out: List[str]) -> None:
    for node in nodes:
        if isinstance(node, str):
            out.append(html.escape(node))
            continue
        tag = node.type
        out.append(f"<{tag}{_attributes(node.props)}")
        if tag in VOID_ELEMENTS:
            out.append("/>")
            continue
        out.append(">")
        inner = _inner_html(node.props)
        if inner is not None:
            out.append(inner)
        else:
            _render(node.children, out)
        out.append(f"</{tag}>")


def render_to_html(node: Any) -> str:
    """Valeur rendue (élément, texte, tableau…) → HTML statique."""
    out: List[str] = []
    _render(resolve(node), out)
    return "".join(out)
