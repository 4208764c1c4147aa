"""
Accès aux grammaires tree-sitter + localisation des erreurs de syntaxe.

  tsx        → source auteur (JSX + annotations TypeScript)
  javascript → code abaissé, relu par l'étape de liaison

Un parser neuf par appel : l'API tourne dans le threadpool FastAPI et un
Parser tree-sitter n'est pas partageable entre threads.
"""
from typing import Optional, Tuple

from tree_sitter import Node, Tree
from tree_sitter_language_pack import get_parser


def parse(source: str, language: str) -> Tuple[Tree, bytes]:
    data = source.encode("utf-8")
    return get_parser(language).parse(data), data


def node_text(node: Node, data: bytes) -> str:
    return data[node.start_byte:node.end_byte].decode("utf-8")


def significant_children(node: Node) -> list:
    """Enfants nommés hors commentaires."""
    return [c for c in node.named_children if c.type != "comment"]


def find_syntax_error(node: Node) -> Optional[Node]:
    """Premier nœud ERROR ou MISSING (ordre du source), ou None."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = find_syntax_error(child)
        if found is not None:
            return found
    return node


def _position(node: Node, data: bytes) -> Tuple[int, int, str]:
    row, column = node.start_point[0], node.start_point[1]
    lines = data.split(b"\n")
    line = lines[row] if row < len(lines) else b""
    col = len(line[:column].decode("utf-8", errors="ignore"))
    return row + 1, col, line.decode("utf-8", errors="replace").rstrip("\r")


def describe_syntax_error(node: Node, data: bytes) -> Tuple[str, str]:
    """(message façon Babel, extrait de la ligne fautive avec caret)."""
    line_no, col, line = _position(node, data)
    if node.is_missing:
        message = f'SyntaxError: Missing "{node.type}" ({line_no}:{col})'
    else:
        snippet = node_text(node, data).strip().splitlines()
        near = f' near "{snippet[0][:30]}"' if snippet else ""
        message = f"SyntaxError: Unexpected token{near} ({line_no}:{col})"
    gutter = f"{line_no} | "
    excerpt = f"{gutter}{line}\n{' ' * (len(gutter) + col)}^"
    return message, excerpt
