"""
Étape Transform — source auteur (JSX + TypeScript) → expression JavaScript simple.

Pipeline :
  parse("tsx")        →  arbre tree-sitter (erreur → TransformError)
  _Lowerer.emit()     →  texte : types retirés, JSX → React.createElement(...)
  normalisation       →  ni espaces de bord ni `;` final

Le texte est recopié tel quel hors des nœuds réécrits : même source,
même sortie octet pour octet.
"""
import html
import json
import logging
import re
from typing import List, Optional

from pydantic import BaseModel
from tree_sitter import Node

from .errors import TransformError
from .grammar import describe_syntax_error, find_syntax_error, node_text, parse, significant_children

log = logging.getLogger(__name__)

# Nœuds TypeScript sans effet à l'exécution : supprimés
_TYPE_ONLY = frozenset({
    "type_annotation", "type_parameters", "type_arguments",
    "interface_declaration", "type_alias_declaration", "ambient_declaration",
    "omitting_type_annotation", "opting_type_annotation", "adding_type_annotation",
    "asserts_annotation", "type_predicate_annotation", "accessibility_modifier",
    "override_modifier",
})

# Nœuds réduits à leur expression (`x as T`, `x satisfies T`, `x!`)
_UNWRAP = frozenset({"as_expression", "satisfies_expression", "non_null_expression"})

_JSX_STRUCTURAL = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_expression"})
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_LINE_BREAK = re.compile(r"\r\n|\n|\r")


class _LoweringError(Exception):
    """Construction valide syntaxiquement mais sans équivalent JavaScript."""


class TransformResult(BaseModel):
    lowered: Optional[str] = None
    error: Optional[TransformError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def clean_jsx_text(raw: str) -> str:
    """Règles d'espacement JSX : lignes rognées, lignes vides ignorées, entités décodées."""
    lines = _LINE_BREAK.split(html.unescape(raw))
    last_non_empty = -1
    for i, line in enumerate(lines):
        if re.search(r"[^ \t]", line):
            last_non_empty = i
    out = ""
    for i, line in enumerate(lines):
        trimmed = line.replace("\t", " ")
        if i != 0:
            trimmed = trimmed.lstrip(" ")
        if i != len(lines) - 1:
            trimmed = trimmed.rstrip(" ")
        if trimmed:
            if i != last_non_empty:
                trimmed += " "
            out += trimmed
    return out


def _js_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


class _Lowerer:
    """Réécrit un arbre `tsx` en texte JavaScript sans JSX ni types."""

    def __init__(self, data: bytes):
        self.data = data

    def text(self, node: Node) -> str:
        return node_text(node, self.data)

    def emit(self, node: Node) -> str:
        if node.type in _TYPE_ONLY:
            return ""
        if node.type in _UNWRAP:
            return self.emit(node.named_children[0])
        handler = getattr(self, "_lower_" + node.type, None)
        if handler is not None:
            return handler(node)
        return self.splice(node)

    def splice(self, node: Node) -> str:
        """Recopie le source du nœud en réécrivant chaque enfant."""
        if node.child_count == 0:
            return self.text(node)
        out: List[str] = []
        cursor = node.start_byte
        for child in node.children:
            out.append(self.data[cursor:child.start_byte].decode("utf-8"))
            out.append(self.emit(child))
            cursor = child.end_byte
        out.append(self.data[cursor:node.end_byte].decode("utf-8"))
        return "".join(out)

    # ── Paramètres typés ────────────────────────────────────────────────────

    def _lower_required_parameter(self, node: Node) -> str:
        pattern = node.child_by_field_name("pattern")
        value = node.child_by_field_name("value")
        out = self.emit(pattern) if pattern is not None else ""
        if value is not None:
            out += " = " + self.emit(value)
        return out

    _lower_optional_parameter = _lower_required_parameter

    def _is_this_parameter(self, node: Node) -> bool:
        if node.type not in ("required_parameter", "optional_parameter"):
            return False
        pattern = node.child_by_field_name("pattern")
        return pattern is not None and pattern.type == "this"

    def _lower_formal_parameters(self, node: Node) -> str:
        # `this: T` ne déclare que le type de `this`
        params = significant_children(node)
        kept = [p for p in params if not self._is_this_parameter(p)]
        if len(kept) == len(params):
            return self.splice(node)
        return "(" + ", ".join(self.emit(p) for p in kept) + ")"

    # ── Enums ───────────────────────────────────────────────────────────────

    def _enum_key(self, node: Node) -> str:
        if node.type == "string":
            return self.text(node)
        if node.type == "computed_property_name":
            return self.emit(significant_children(node)[0])
        return _js_string(self.text(node))

    def _lower_enum_declaration(self, node: Node) -> str:
        """`enum E { A = 1, B }` → objet à correspondance inverse, comme tsc."""
        name = self.text(node.child_by_field_name("name"))
        statements: List[str] = []
        previous: Optional[str] = None
        for i, member in enumerate(significant_children(node.child_by_field_name("body"))):
            if member.type == "enum_assignment":
                key = self._enum_key(member.child_by_field_name("name"))
                value = member.child_by_field_name("value")
            else:
                key, value = self._enum_key(member), None
            if value is not None and value.type in ("string", "template_string"):
                statements.append(f"{name}[{key}] = {self.emit(value)};")
                previous = None
                continue
            if value is not None:
                expression = self.emit(value)
            elif i == 0:
                expression = "0"
            elif previous is not None:
                expression = f"{name}[{previous}] + 1"
            else:
                raise _LoweringError("SyntaxError: Enum member must have initializer")
            statements.append(f"{name}[{name}[{key}] = {expression}] = {key};")
            previous = key
        body = " ".join(statements + [f"return {name};"])
        return f"var {name} = (({name}) => {{ {body} }})({{}});"

    # ── JSX ─────────────────────────────────────────────────────────────────

    def _element_type(self, name: Optional[Node]) -> str:
        if name is None:
            return "React.Fragment"
        tag = self.text(name)
        if name.type == "identifier" and (tag[:1].islower() or "-" in tag):
            return _js_string(tag)
        if name.type in ("jsx_namespace_name", "property_identifier"):
            return _js_string(tag)
        return tag

    def _expression_inside(self, node: Node) -> Optional[Node]:
        inner = significant_children(node)
        return inner[0] if inner else None

    def _props(self, attributes: List[Node]) -> str:
        entries: List[str] = []
        for attr in attributes:
            if attr.type == "jsx_expression":
                inner = self._expression_inside(attr)
                if inner is not None:
                    entries.append(self.emit(inner))
                continue
            parts = significant_children(attr)
            name = self.text(parts[0])
            key = name if _IDENTIFIER.match(name) else _js_string(name)
            if len(parts) < 2:
                entries.append(f"{key}: true")
                continue
            value = parts[1]
            if value.type == "string":
                raw = self.text(value)[1:-1]
                entries.append(f"{key}: {_js_string(html.unescape(raw))}")
            elif value.type == "jsx_expression":
                inner = self._expression_inside(value)
                entries.append(f"{key}: {self.emit(inner) if inner is not None else 'undefined'}")
            else:
                entries.append(f"{key}: {self.emit(value)}")
        if not entries:
            return "null"
        return "{" + ", ".join(entries) + "}"

    def _children(self, node: Node, start: int, end: int) -> List[str]:
        out: List[str] = []
        cursor = start
        structural = [c for c in node.children
                      if c.type in _JSX_STRUCTURAL and c.start_byte >= start and c.end_byte <= end]
        for child in structural:
            text = clean_jsx_text(self.data[cursor:child.start_byte].decode("utf-8"))
            if text:
                out.append(_js_string(text))
            if child.type == "jsx_expression":
                inner = self._expression_inside(child)
                if inner is not None:
                    out.append(self.emit(inner))
            else:
                out.append(self.emit(child))
            cursor = child.end_byte
        text = clean_jsx_text(self.data[cursor:end].decode("utf-8"))
        if text:
            out.append(_js_string(text))
        return out

    def _create_element(self, tag: Node, children: List[str]) -> str:
        name = tag.child_by_field_name("name")
        attributes = [c for c in tag.named_children if c.type in ("jsx_attribute", "jsx_expression")]
        args = [self._element_type(name), self._props(attributes)] + children
        return "React.createElement(" + ", ".join(args) + ")"

    def _lower_jsx_element(self, node: Node) -> str:
        open_tag = node.child_by_field_name("open_tag") or node.children[0]
        close_tag = node.child_by_field_name("close_tag") or node.children[-1]
        children = self._children(node, open_tag.end_byte, close_tag.start_byte)
        return self._create_element(open_tag, children)

    def _lower_jsx_self_closing_element(self, node: Node) -> str:
        return self._create_element(node, [])


def _single_expression(root: Node) -> Optional[Node]:
    """Le seul nœud exécutable du programme (expression, ou déclaration de fonction)."""
    statements = significant_children(root)
    if len(statements) != 1:
        return None
    statement = statements[0]
    if statement.type == "function_declaration":
        return statement
    if statement.type != "expression_statement":
        return None
    inner = significant_children(statement)
    return inner[0] if len(inner) == 1 else None


def normalize(lowered: str) -> str:
    """Retire les espaces de bord et les `;` finaux."""
    text = lowered.strip()
    while text.endswith(";"):
        text = text[:-1].rstrip()
    return text


def transform(source: str) -> TransformResult:
    """Parse + abaisse un source auteur. Ne lève jamais : l'échec est renvoyé."""
    if source is None or not source.strip():
        return TransformResult(error=TransformError(message="SyntaxError: empty source"))
    try:
        tree, data = parse(source, "tsx")
        root = tree.root_node
        bad = find_syntax_error(root)
        if bad is not None:
            message, excerpt = describe_syntax_error(bad, data)
            return TransformResult(error=TransformError(message=message, source_excerpt=excerpt))
        expression = _single_expression(root)
        if expression is None:
            return TransformResult(error=TransformError(
                message="SyntaxError: source must be a single expression",
                source_excerpt=source.strip().splitlines()[0][:120],
            ))
        lowered = normalize(_Lowerer(data).emit(expression))
    except _LoweringError as e:
        return TransformResult(error=TransformError(message=str(e)))
    except Exception as e:
        log.exception("transform: échec inattendu")
        return TransformResult(error=TransformError(message=f"{type(e).__name__}: {e}"))
    if not lowered:
        return TransformResult(error=TransformError(message="SyntaxError: empty expression"))
    return TransformResult(lowered=lowered)
