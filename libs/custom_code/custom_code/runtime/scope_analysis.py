"""
Analyse statique des identifiants libres du code abaissé.

Un identifiant lu sans être déclaré dans une portée englobante (paramètre,
var/let/const, fonction, catch, for-in/of) ni fourni par l'environnement
est « libre ». Le code généré n'a droit qu'à `React` et aux intrinsèques :
tout identifiant libre est refusé avant exécution.

La portée retenue est celle de la fonction (pas de distinction de bloc),
ce qui ne peut qu'élargir l'ensemble des noms liés.
"""
from typing import Iterable, List, Set

from tree_sitter import Node

from ..grammar import node_text, significant_children
from .interpreter import _FUNCTION_TYPES

_PATTERN_HOLDERS = frozenset({"object_pattern", "array_pattern", "pair_pattern",
                              "assignment_pattern", "object_assignment_pattern", "rest_pattern"})


def pattern_names(node: Node, data: bytes) -> List[str]:
    """Noms introduits par un motif de liaison."""
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [node_text(node, data)]
    if node.type not in _PATTERN_HOLDERS:
        return []
    if node.type == "pair_pattern":
        return pattern_names(node.child_by_field_name("value"), data)
    if node.type in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_names(node.child_by_field_name("left"), data)
    names: List[str] = []
    for child in significant_children(node):
        names.extend(pattern_names(child, data))
    return names


def _declared_in(body: Node, data: bytes, out: Set[str]) -> None:
    """Noms déclarés dans un corps de fonction, sans entrer dans les fonctions imbriquées."""
    for child in body.named_children:
        t = child.type
        if t == "variable_declarator":
            out.update(pattern_names(child.child_by_field_name("name"), data))
        elif t == "function_declaration":
            out.add(node_text(child.child_by_field_name("name"), data))
            continue
        elif t == "class_declaration":
            out.add(node_text(child.child_by_field_name("name"), data))
        elif t == "catch_clause":
            param = child.child_by_field_name("parameter")
            if param is not None:
                out.update(pattern_names(param, data))
        elif t == "for_in_statement":
            declares = child.child_by_field_name("kind") is not None or any(
                c.type in ("var", "let", "const") for c in child.children if not c.is_named)
            if declares:
                out.update(pattern_names(child.child_by_field_name("left"), data))
        if t in _FUNCTION_TYPES:
            continue
        _declared_in(child, data, out)


def _function_bindings(fn: Node, data: bytes) -> Set[str]:
    names: Set[str] = set()
    single = fn.child_by_field_name("parameter")
    if single is not None:
        names.update(pattern_names(single, data))
    params = fn.child_by_field_name("parameters")
    if params is not None:
        for param in significant_children(params):
            names.update(pattern_names(param, data))
    own = fn.child_by_field_name("name")
    if own is not None and fn.type != "method_definition":
        names.add(node_text(own, data))
    if fn.type != "arrow_function":
        names.add("arguments")
    body = fn.child_by_field_name("body")
    if body is not None:
        _declared_in(body, data, names)
    return names


def free_identifiers(root: Node, data: bytes, known: Iterable[str]) -> List[str]:
    """Identifiants libres, dans l'ordre de première apparition."""
    found: List[str] = []
    program: Set[str] = set(known)
    _declared_in(root, data, program)

    def walk(node: Node, bound: Set[str]) -> None:
        if node.type in _FUNCTION_TYPES:
            bound = bound | _function_bindings(node, data)
        elif node.type in ("identifier", "shorthand_property_identifier"):
            name = node_text(node, data)
            if name not in bound and name not in found:
                found.append(name)
            return
        elif node.type == "unary_expression":
            operator = node.child_by_field_name("operator")
            argument = node.child_by_field_name("argument")
            if operator is not None and operator.type == "typeof" and argument.type == "identifier":
                return
        for child in node.named_children:
            walk(child, bound)

    walk(root, program)
    return found
