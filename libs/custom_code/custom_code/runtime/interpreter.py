"""
Évaluateur — parcourt l'arbre tree-sitter `javascript` du code abaissé.

Sous-ensemble exécuté : déclarations (avec déstructuration), fonctions et
flèches, contrôle de flux usuel, try/catch/finally, littéraux, chaînage
optionnel, opérateurs arithmétiques / logiques / binaires.

Non supporté (SyntaxError levée en JS) : classes, générateurs, async/await,
expressions régulières, BigInt, templates étiquetés.

Chaque Interpreter ne partage rien : une instance par évaluation.
"""
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Set

from tree_sitter import Node

from ..grammar import node_text, significant_children
from .intrinsics import instance_of
from .properties import delete_property, get_property, has_property, set_property
from .values import (
    UNDEFINED, JSCallable, JSObject, JSThrow,
    is_nullish, iterate, loose_equals, number_to_string, own_entries, own_keys,
    strict_equals, throw_error, to_boolean, to_int32, to_number, to_property_key,
    to_string, typeof,
)

_FUNCTION_TYPES = frozenset({"function_expression", "function", "arrow_function",
                             "function_declaration", "method_definition"})
_CHAIN_TYPES = frozenset({"member_expression", "subscript_expression", "call_expression"})
_UNSUPPORTED = {
    "class": "classes", "class_declaration": "classes", "regex": "regular expressions",
    "await_expression": "await", "yield_expression": "generators",
    "generator_function": "generators", "generator_function_declaration": "generators",
    "import": "import", "import_statement": "import", "export_statement": "export",
    "meta_property": "meta properties", "with_statement": "with",
    "debugger_statement": "debugger",
}


# ── Signaux de contrôle ─────────────────────────────────────────────────────

class _ReturnSignal(Exception):
    def __init__(self, value: Any):
        self.value = value


class _BreakSignal(Exception):
    pass


class _ContinueSignal(Exception):
    pass


class _ShortCircuit(Exception):
    """`a?.b` sur a nullish : abandonne toute la chaîne."""


# ── Portées ─────────────────────────────────────────────────────────────────

class Scope:
    def __init__(self, parent: Optional["Scope"] = None, function_scope: bool = False):
        self.parent = parent
        self.function_scope = function_scope or parent is None
        self.vars: Dict[str, Any] = {}
        self.consts: Set[str] = set()

    def declare(self, name: str, value: Any, const: bool = False) -> None:
        self.vars[name] = value
        if const:
            self.consts.add(name)

    def copy(self) -> "Scope":
        """Même parent, liaisons recopiées (une portée par itération de `for (let …)`)."""
        fresh = Scope(self.parent, self.function_scope)
        fresh.vars = dict(self.vars)
        fresh.consts = set(self.consts)
        return fresh

    def function_root(self) -> "Scope":
        scope = self
        while not scope.function_scope:
            scope = scope.parent
        return scope

    def find(self, name: str) -> Optional["Scope"]:
        scope = self
        while scope is not None:
            if name in scope.vars:
                return scope
            scope = scope.parent
        return None

    def lookup(self, name: str) -> Any:
        scope = self.find(name)
        if scope is None:
            throw_error("ReferenceError", f"{name} is not defined")
        return scope.vars[name]

    def assign(self, name: str, value: Any) -> None:
        scope = self.find(name)
        if scope is None:
            throw_error("ReferenceError", f"{name} is not defined")
        if name in scope.consts:
            throw_error("TypeError", "Assignment to constant variable.")
        scope.vars[name] = value


# ── Fonctions JS ────────────────────────────────────────────────────────────

class JSFunction(JSCallable):
    def __init__(self, interp: "Interpreter", node: Node, closure: Scope, name: str = ""):
        self.interp = interp
        self.node = node
        self.closure = closure
        self.is_arrow = node.type == "arrow_function"
        self.name = name
        self.constructable = not self.is_arrow and node.type != "method_definition"

    def call(self, this: Any, args: List[Any]) -> Any:
        return self.interp.invoke(self, this, list(args))

    def construct(self, args: List[Any]) -> Any:
        if not self.constructable:
            return super().construct(args)
        instance = JSObject()
        result = self.call(instance, args)
        return result if isinstance(result, (JSObject, list, JSCallable)) else instance

    def __repr__(self) -> str:
        return f"JSFunction({self.name or 'anonymous'})"


# ── Littéraux ───────────────────────────────────────────────────────────────

_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_CONTINUATIONS = ("\n", "\r\n", "\r", "\u2028", "\u2029")


def decode_escapes(raw: str) -> str:
    """Séquences d'échappement JS → texte (paires de substitution recomposées)."""
    def repl(m: "re.Match") -> str:
        e = m.group(1)
        if e[0] == "u" and len(e) > 1:
            return chr(int(e[2:-1] if e[1] == "{" else e[1:], 16))
        if e[0] == "x" and len(e) == 3:
            return chr(int(e[1:], 16))
        if e in _LINE_CONTINUATIONS:
            return ""
        return _SIMPLE_ESCAPES.get(e, e)
    text = _ESCAPE.sub(repl, raw)
    try:
        return text.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        return text


def parse_number(text: str) -> float:
    text = text.replace("_", "")
    if text.endswith("n"):
        throw_error("SyntaxError", "BigInt literals are not supported")
    lower = text.lower()
    if lower[:2] in ("0x", "0o", "0b"):
        return float(int(lower, 0))
    if len(text) > 1 and text[0] == "0" and text.isdigit():
        return float(int(text, 8)) if all(c in "01234567" for c in text) else float(text)
    return float(text)


# ── Arithmétique ────────────────────────────────────────────────────────────

def _primitive(value: Any) -> Any:
    if isinstance(value, (list, JSObject, JSCallable)):
        return to_string(value)
    return value


def _add(a: Any, b: Any) -> Any:
    a, b = _primitive(a), _primitive(b)
    if isinstance(a, str) or isinstance(b, str):
        return to_string(a) + to_string(b)
    return to_number(a) + to_number(b)


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _modulo(a: float, b: float) -> float:
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def _power(a: float, b: float) -> float:
    if math.isnan(b):
        return math.nan
    if b == 0:
        return 1.0
    if math.isnan(a) or (abs(a) == 1 and math.isinf(b)):
        return math.nan
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and b % 2 == 1 else math.inf
    except ValueError:
        return math.inf if a == 0 else math.nan


def _compare(a: Any, b: Any, op: str) -> bool:
    a, b = _primitive(a), _primitive(b)
    if isinstance(a, str) and isinstance(b, str):
        x, y = a, b
    else:
        x, y = to_number(a), to_number(b)
        if math.isnan(x) or math.isnan(y):
            return False
    if op == "<":
        return x < y
    if op == ">":
        return x > y
    if op == "<=":
        return x <= y
    return x >= y


def _uint32(value: Any) -> int:
    return to_int32(value) & 0xFFFFFFFF


def _arithmetic(op: str, a: Any, b: Any) -> Any:
    if op == "+":
        return _add(a, b)
    if op in ("<", ">", "<=", ">="):
        return _compare(a, b, op)
    if op == "==":
        return loose_equals(a, b)
    if op == "!=":
        return not loose_equals(a, b)
    if op == "===":
        return strict_equals(a, b)
    if op == "!==":
        return not strict_equals(a, b)
    if op == "in":
        return has_property(b, a)
    if op == "instanceof":
        return instance_of(a, b)
    if op in ("&", "|", "^", "<<", ">>"):
        x, y = to_int32(a), to_int32(b)
        if op == "&":
            result = x & y
        elif op == "|":
            result = x | y
        elif op == "^":
            result = x ^ y
        elif op == "<<":
            result = x << (y & 31)
        else:
            result = x >> (y & 31)
        return float(to_int32(result))
    if op == ">>>":
        return float(_uint32(a) >> (to_int32(b) & 31))
    x, y = to_number(a), to_number(b)
    if op == "-":
        return x - y
    if op == "*":
        try:
            return x * y
        except OverflowError:
            return math.inf
    if op == "/":
        return _divide(x, y)
    if op == "%":
        return _modulo(x, y)
    if op == "**":
        return _power(x, y)
    throw_error("SyntaxError", f"Unsupported operator {op}")


# ── Interpréteur ────────────────────────────────────────────────────────────

class Interpreter:
    def __init__(self, data: bytes, env: Dict[str, Any]):
        self.data = data
        self.globals = Scope()
        self.globals.declare("this", UNDEFINED)
        for name, value in env.items():
            self.globals.declare(name, value)

    def text(self, node: Node) -> str:
        return node_text(node, self.data)

    def _unsupported(self, node: Node) -> None:
        what = _UNSUPPORTED.get(node.type, node.type)
        throw_error("SyntaxError", f"Unsupported syntax: {what}")

    # ── Fonctions ───────────────────────────────────────────────────────────

    def instantiate(self, node: Node, scope: Optional[Scope] = None, name: str = "") -> JSFunction:
        """Valeur fonction pour une déclaration / expression / flèche."""
        scope = scope or self.globals
        own = node.child_by_field_name("name")
        if own is not None and node.type != "method_definition":
            name = self.text(own)
        fn = JSFunction(self, node, scope, name)
        if own is not None and node.type in ("function_expression", "function"):
            # une expression nommée se voit elle-même
            inner = Scope(scope)
            inner.declare(fn.name, fn, const=True)
            fn.closure = inner
        return fn

    def invoke(self, fn: JSFunction, this: Any, args: List[Any]) -> Any:
        scope = Scope(fn.closure, function_scope=True)
        if not fn.is_arrow:
            scope.declare("this", this)
            scope.declare("arguments", list(args))
        node = fn.node
        single = node.child_by_field_name("parameter")
        if single is not None:
            self.bind_pattern(single, args[0] if args else UNDEFINED, scope, "let")
        else:
            params = node.child_by_field_name("parameters")
            self.bind_parameters(params, args, scope)
        body = node.child_by_field_name("body")
        if body.type != "statement_block":
            return self.evaluate(body, scope)
        try:
            self.exec_statements(significant_children(body), scope)
        except _ReturnSignal as signal:
            return signal.value
        return UNDEFINED

    def bind_parameters(self, params: Optional[Node], args: List[Any], scope: Scope) -> None:
        if params is None:
            return
        for i, param in enumerate(significant_children(params)):
            if param.type == "rest_pattern":
                self.bind_pattern(significant_children(param)[0], list(args[i:]), scope, "let")
                break
            self.bind_pattern(param, args[i] if i < len(args) else UNDEFINED, scope, "let")

    # ── Motifs (déstructuration) ────────────────────────────────────────────

    def bind_pattern(self, node: Node, value: Any, scope: Scope, kind: Optional[str]) -> None:
        """Lie `value` au motif. kind None → affectation, sinon déclaration."""
        t = node.type
        if t in ("identifier", "shorthand_property_identifier_pattern", "undefined"):
            self._bind_name(self.text(node), value, scope, kind)
        elif t in ("assignment_pattern", "object_assignment_pattern"):
            if value is UNDEFINED:
                value = self.evaluate(node.child_by_field_name("right"), scope)
            self.bind_pattern(node.child_by_field_name("left"), value, scope, kind)
        elif t == "array_pattern":
            items = iterate(value)
            index = 0
            for child in node.children:
                if child.type == ",":
                    index += 1
                    continue
                if not child.is_named or child.type == "comment":
                    continue
                if child.type == "rest_pattern":
                    self.bind_pattern(significant_children(child)[0], items[index:], scope, kind)
                    break
                self.bind_pattern(child, items[index] if index < len(items) else UNDEFINED, scope, kind)
        elif t == "object_pattern":
            if is_nullish(value):
                throw_error("TypeError", f"Cannot destructure '{to_string(value)}' as it is {to_string(value)}.")
            used: List[str] = []
            for child in significant_children(node):
                if child.type == "rest_pattern":
                    rest = JSObject({k: v for k, v in own_entries(value) if k not in used})
                    self.bind_pattern(significant_children(child)[0], rest, scope, kind)
                elif child.type == "pair_pattern":
                    key = self.property_key(child.child_by_field_name("key"), scope)
                    used.append(key)
                    self.bind_pattern(child.child_by_field_name("value"), get_property(value, key), scope, kind)
                elif child.type == "object_assignment_pattern":
                    left = child.child_by_field_name("left")
                    key = self.text(left)
                    used.append(key)
                    self.bind_pattern(child, get_property(value, key), scope, kind)
                else:
                    key = self.text(child)
                    used.append(key)
                    self._bind_name(key, get_property(value, key), scope, kind)
        elif t in ("member_expression", "subscript_expression") and kind is None:
            self.assign_target(node, value, scope)
        elif t == "parenthesized_expression":
            self.bind_pattern(significant_children(node)[0], value, scope, kind)
        else:
            throw_error("SyntaxError", f"Invalid destructuring target: {self.text(node)}")

    def _bind_name(self, name: str, value: Any, scope: Scope, kind: Optional[str]) -> None:
        if kind is None:
            scope.assign(name, value)
        elif kind == "var":
            scope.function_root().declare(name, value)
        else:
            scope.declare(name, value, const=kind == "const")

    def assign_target(self, node: Node, value: Any, scope: Scope) -> Any:
        if node.type == "identifier":
            scope.assign(self.text(node), value)
        elif node.type == "member_expression":
            obj = self.evaluate(node.child_by_field_name("object"), scope)
            set_property(obj, self.text(node.child_by_field_name("property")), value)
        elif node.type == "subscript_expression":
            obj = self.evaluate(node.child_by_field_name("object"), scope)
            key = self.evaluate(node.child_by_field_name("index"), scope)
            set_property(obj, key, value)
        elif node.type == "parenthesized_expression":
            return self.assign_target(significant_children(node)[0], value, scope)
        else:
            self.bind_pattern(node, value, scope, None)
        return value

    # ── Instructions ────────────────────────────────────────────────────────

    def exec_statements(self, statements: Iterable[Node], scope: Scope) -> None:
        statements = list(statements)
        for st in statements:
            if st.type == "function_declaration":
                fn = self.instantiate(st, scope)
                scope.declare(fn.name, fn)
        for st in statements:
            if st.type != "function_declaration":
                self.execute(st, scope)

    def execute(self, node: Node, scope: Scope) -> None:
        t = node.type
        if t in ("comment", "empty_statement", "function_declaration"):
            return
        handler = getattr(self, "_exec_" + t, None)
        if handler is None:
            self._unsupported(node)
        handler(node, scope)

    def _exec_expression_statement(self, node: Node, scope: Scope) -> None:
        for child in significant_children(node):
            self.evaluate(child, scope)

    def _exec_lexical_declaration(self, node: Node, scope: Scope) -> None:
        kind_node = node.child_by_field_name("kind")
        kind = kind_node.type if kind_node is not None else node.children[0].type
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            value_node = declarator.child_by_field_name("value")
            value = self.evaluate(value_node, scope) if value_node is not None else UNDEFINED
            target = declarator.child_by_field_name("name")
            if isinstance(value, JSFunction) and not value.name and target.type == "identifier":
                value.name = self.text(target)
            self.bind_pattern(target, value, scope, kind)

    def _exec_variable_declaration(self, node: Node, scope: Scope) -> None:
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            value_node = declarator.child_by_field_name("value")
            target = declarator.child_by_field_name("name")
            if value_node is None:
                root = scope.function_root()
                if target.type == "identifier" and self.text(target) not in root.vars:
                    root.declare(self.text(target), UNDEFINED)
                continue
            self.bind_pattern(target, self.evaluate(value_node, scope), scope, "var")

    def _exec_statement_block(self, node: Node, scope: Scope) -> None:
        self.exec_statements(significant_children(node), Scope(scope))

    def _exec_return_statement(self, node: Node, scope: Scope) -> None:
        children = significant_children(node)
        raise _ReturnSignal(self.evaluate(children[0], scope) if children else UNDEFINED)

    def _exec_throw_statement(self, node: Node, scope: Scope) -> None:
        raise JSThrow(self.evaluate(significant_children(node)[0], scope))

    def _exec_if_statement(self, node: Node, scope: Scope) -> None:
        if to_boolean(self.evaluate(node.child_by_field_name("condition"), scope)):
            self.execute(node.child_by_field_name("consequence"), scope)
            return
        alternative = node.child_by_field_name("alternative")
        if alternative is not None:
            branch = significant_children(alternative) if alternative.type == "else_clause" else [alternative]
            for st in branch:
                self.execute(st, scope)

    def _exec_labeled_statement(self, node: Node, scope: Scope) -> None:
        body = node.child_by_field_name("body") or significant_children(node)[-1]
        try:
            self.execute(body, scope)
        except _BreakSignal:
            pass

    def _exec_break_statement(self, node: Node, scope: Scope) -> None:
        raise _BreakSignal()

    def _exec_continue_statement(self, node: Node, scope: Scope) -> None:
        raise _ContinueSignal()

    def _loop_body(self, body: Node, scope: Scope) -> bool:
        """Exécute une itération. False → `break`."""
        try:
            self.execute(body, scope)
        except _BreakSignal:
            return False
        except _ContinueSignal:
            pass
        return True

    def _clause(self, node: Optional[Node]) -> Optional[Node]:
        """Partie d'un `for(;;)` : expression, instruction-expression ou vide."""
        if node is None or node.type == "empty_statement":
            return None
        if node.type == "expression_statement":
            children = significant_children(node)
            return children[0] if children else None
        return node

    def _exec_for_statement(self, node: Node, scope: Scope) -> None:
        loop = Scope(scope)
        init = node.child_by_field_name("initializer")
        if init is not None and init.type in ("lexical_declaration", "variable_declaration"):
            self.execute(init, loop)
        elif self._clause(init) is not None:
            self.evaluate(self._clause(init), loop)
        condition = self._clause(node.child_by_field_name("condition"))
        increment = self._clause(node.child_by_field_name("increment"))
        body = node.child_by_field_name("body")
        per_iteration = init is not None and init.type == "lexical_declaration"
        current = loop.copy() if per_iteration else loop
        while condition is None or to_boolean(self.evaluate(condition, current)):
            if not self._loop_body(body, Scope(current)):
                break
            if per_iteration:
                current = current.copy()
            if increment is not None:
                self.evaluate(increment, current)

    def _exec_for_in_statement(self, node: Node, scope: Scope) -> None:
        kind_node = node.child_by_field_name("kind")
        operator_node = node.child_by_field_name("operator")
        kind = kind_node.type if kind_node is not None else None
        operator = operator_node.type if operator_node is not None else None
        for child in node.children:
            if child.is_named:
                continue
            if kind is None and child.type in ("var", "let", "const"):
                kind = child.type
            if operator is None and child.type in ("in", "of"):
                operator = child.type
        left = node.child_by_field_name("left")
        right = self.evaluate(node.child_by_field_name("right"), scope)
        body = node.child_by_field_name("body")
        if operator == "of":
            items = iterate(right)
        else:
            items = [] if is_nullish(right) else own_keys(right)
        for item in items:
            iteration = Scope(scope)
            self.bind_pattern(left, item, iteration, kind)
            if not self._loop_body(body, iteration):
                break

    def _exec_while_statement(self, node: Node, scope: Scope) -> None:
        condition = node.child_by_field_name("condition")
        body = node.child_by_field_name("body")
        while to_boolean(self.evaluate(condition, scope)):
            if not self._loop_body(body, scope):
                break

    def _exec_do_statement(self, node: Node, scope: Scope) -> None:
        condition = node.child_by_field_name("condition")
        body = node.child_by_field_name("body")
        while True:
            if not self._loop_body(body, scope):
                break
            if not to_boolean(self.evaluate(condition, scope)):
                break

    def _exec_switch_statement(self, node: Node, scope: Scope) -> None:
        value = self.evaluate(node.child_by_field_name("value"), scope)
        cases = [c for c in significant_children(node.child_by_field_name("body"))
                 if c.type in ("switch_case", "switch_default")]
        start = None
        for i, case in enumerate(cases):
            if case.type == "switch_case":
                test = case.child_by_field_name("value")
                if strict_equals(value, self.evaluate(test, scope)):
                    start = i
                    break
        if start is None:
            start = next((i for i, c in enumerate(cases) if c.type == "switch_default"), None)
        if start is None:
            return
        inner = Scope(scope)
        try:
            for case in cases[start:]:
                test = case.child_by_field_name("value")
                for st in significant_children(case):
                    if test is not None and st.id == test.id:
                        continue
                    self.execute(st, inner)
        except _BreakSignal:
            pass

    def _exec_try_statement(self, node: Node, scope: Scope) -> None:
        handler = node.child_by_field_name("handler")
        finalizer = node.child_by_field_name("finalizer")
        try:
            try:
                self.execute(node.child_by_field_name("body"), scope)
            except JSThrow as thrown:
                if handler is None:
                    raise
                self._catch(handler, thrown.value, scope)
        finally:
            if finalizer is not None:
                self.execute(finalizer.child_by_field_name("body"), scope)

    def _catch(self, handler: Node, value: Any, scope: Scope) -> None:
        inner = Scope(scope)
        param = handler.child_by_field_name("parameter")
        if param is not None:
            self.bind_pattern(param, value, inner, "let")
        self.execute(handler.child_by_field_name("body"), inner)

    # ── Expressions ─────────────────────────────────────────────────────────

    def evaluate(self, node: Node, scope: Scope) -> Any:
        t = node.type
        if t in _CHAIN_TYPES:
            try:
                return self._chain(node, scope)
            except _ShortCircuit:
                return UNDEFINED
        handler = getattr(self, "_eval_" + t, None)
        if handler is None:
            self._unsupported(node)
        return handler(node, scope)

    def _eval_identifier(self, node: Node, scope: Scope) -> Any:
        return scope.lookup(self.text(node))

    _eval_shorthand_property_identifier = _eval_identifier

    def _eval_this(self, node: Node, scope: Scope) -> Any:
        return scope.lookup("this")

    def _eval_number(self, node: Node, scope: Scope) -> Any:
        return parse_number(self.text(node))

    def _eval_string(self, node: Node, scope: Scope) -> Any:
        return decode_escapes(self.text(node)[1:-1])

    def _eval_template_string(self, node: Node, scope: Scope) -> Any:
        out: List[str] = []
        cursor = node.start_byte + 1
        for child in node.children:
            if child.type != "template_substitution":
                continue
            out.append(decode_escapes(self.data[cursor:child.start_byte].decode("utf-8")))
            out.append(to_string(_primitive(self.evaluate(significant_children(child)[0], scope))))
            cursor = child.end_byte
        out.append(decode_escapes(self.data[cursor:node.end_byte - 1].decode("utf-8")))
        return "".join(out)

    def _eval_true(self, node: Node, scope: Scope) -> Any:
        return True

    def _eval_false(self, node: Node, scope: Scope) -> Any:
        return False

    def _eval_null(self, node: Node, scope: Scope) -> Any:
        return None

    def _eval_undefined(self, node: Node, scope: Scope) -> Any:
        return UNDEFINED

    def _eval_parenthesized_expression(self, node: Node, scope: Scope) -> Any:
        return self.evaluate(significant_children(node)[-1], scope)

    def _eval_sequence_expression(self, node: Node, scope: Scope) -> Any:
        value = UNDEFINED
        for child in significant_children(node):
            value = self.evaluate(child, scope)
        return value

    def _eval_array(self, node: Node, scope: Scope) -> Any:
        out: List[Any] = []
        pending_hole = True
        for child in node.children:
            if child.type == ",":
                if pending_hole:
                    out.append(UNDEFINED)
                pending_hole = True
                continue
            if not child.is_named or child.type == "comment":
                continue
            pending_hole = False
            if child.type == "spread_element":
                out.extend(iterate(self.evaluate(significant_children(child)[0], scope)))
            else:
                out.append(self.evaluate(child, scope))
        return out

    def property_key(self, node: Node, scope: Scope) -> str:
        if node.type == "computed_property_name":
            return to_property_key(self.evaluate(significant_children(node)[0], scope))
        if node.type == "string":
            return self._eval_string(node, scope)
        if node.type == "number":
            return number_to_string(parse_number(self.text(node)))
        return self.text(node)

    def _eval_object(self, node: Node, scope: Scope) -> Any:
        obj = JSObject()
        for child in significant_children(node):
            if child.type == "pair":
                key = self.property_key(child.child_by_field_name("key"), scope)
                value = self.evaluate(child.child_by_field_name("value"), scope)
                if isinstance(value, JSFunction) and not value.name:
                    value.name = key
                obj.set(key, value)
            elif child.type == "shorthand_property_identifier":
                obj.set(self.text(child), self.evaluate(child, scope))
            elif child.type == "spread_element":
                source = self.evaluate(significant_children(child)[0], scope)
                for key, value in own_entries(source):
                    obj.set(key, value)
            elif child.type == "method_definition":
                if any(c.type in ("get", "set", "async", "*") for c in child.children):
                    self._unsupported(child)
                key = self.property_key(child.child_by_field_name("name"), scope)
                obj.set(key, self.instantiate(child, scope, name=key))
            else:
                self._unsupported(child)
        return obj

    def _eval_arrow_function(self, node: Node, scope: Scope) -> Any:
        return self.instantiate(node, scope)

    _eval_function_expression = _eval_arrow_function
    _eval_function = _eval_arrow_function

    def _eval_ternary_expression(self, node: Node, scope: Scope) -> Any:
        if to_boolean(self.evaluate(node.child_by_field_name("condition"), scope)):
            return self.evaluate(node.child_by_field_name("consequence"), scope)
        return self.evaluate(node.child_by_field_name("alternative"), scope)

    def _eval_binary_expression(self, node: Node, scope: Scope) -> Any:
        op = node.child_by_field_name("operator").type
        left = self.evaluate(node.child_by_field_name("left"), scope)
        if op == "&&":
            return self.evaluate(node.child_by_field_name("right"), scope) if to_boolean(left) else left
        if op == "||":
            return left if to_boolean(left) else self.evaluate(node.child_by_field_name("right"), scope)
        if op == "??":
            return self.evaluate(node.child_by_field_name("right"), scope) if is_nullish(left) else left
        right = self.evaluate(node.child_by_field_name("right"), scope)
        return _arithmetic(op, left, right)

    def _eval_unary_expression(self, node: Node, scope: Scope) -> Any:
        op = node.child_by_field_name("operator").type
        argument = node.child_by_field_name("argument")
        if op == "typeof":
            if argument.type == "identifier" and scope.find(self.text(argument)) is None:
                return "undefined"
            return typeof(self.evaluate(argument, scope))
        if op == "delete":
            if argument.type == "member_expression":
                obj = self.evaluate(argument.child_by_field_name("object"), scope)
                return delete_property(obj, self.text(argument.child_by_field_name("property")))
            if argument.type == "subscript_expression":
                obj = self.evaluate(argument.child_by_field_name("object"), scope)
                return delete_property(obj, self.evaluate(argument.child_by_field_name("index"), scope))
            return True
        value = self.evaluate(argument, scope)
        if op == "!":
            return not to_boolean(value)
        if op == "-":
            return -to_number(value)
        if op == "+":
            return to_number(value)
        if op == "~":
            return float(~to_int32(value))
        if op == "void":
            return UNDEFINED
        throw_error("SyntaxError", f"Unsupported operator {op}")

    def _eval_update_expression(self, node: Node, scope: Scope) -> Any:
        argument = node.child_by_field_name("argument")
        prefix = node.children[0].type in ("++", "--")
        op = node.child_by_field_name("operator").type
        old = to_number(self.evaluate(argument, scope))
        new = old + 1 if op == "++" else old - 1
        self.assign_target(argument, new, scope)
        return new if prefix else old

    def _eval_assignment_expression(self, node: Node, scope: Scope) -> Any:
        left = node.child_by_field_name("left")
        value = self.evaluate(node.child_by_field_name("right"), scope)
        if isinstance(value, JSFunction) and not value.name and left.type == "identifier":
            value.name = self.text(left)
        return self.assign_target(left, value, scope)

    def _eval_augmented_assignment_expression(self, node: Node, scope: Scope) -> Any:
        left = node.child_by_field_name("left")
        op = node.child_by_field_name("operator").type[:-1]
        current = self.evaluate(left, scope)
        if op == "&&":
            if not to_boolean(current):
                return current
            value = self.evaluate(node.child_by_field_name("right"), scope)
        elif op == "||":
            if to_boolean(current):
                return current
            value = self.evaluate(node.child_by_field_name("right"), scope)
        elif op == "??":
            if not is_nullish(current):
                return current
            value = self.evaluate(node.child_by_field_name("right"), scope)
        else:
            value = _arithmetic(op, current, self.evaluate(node.child_by_field_name("right"), scope))
        return self.assign_target(left, value, scope)

    def _eval_new_expression(self, node: Node, scope: Scope) -> Any:
        constructor = self.evaluate(node.child_by_field_name("constructor"), scope)
        arguments = node.child_by_field_name("arguments")
        args = self.arguments(arguments, scope) if arguments is not None else []
        if not isinstance(constructor, JSCallable):
            throw_error("TypeError", f"{self.text(node.child_by_field_name('constructor'))} is not a constructor")
        return constructor.construct(args)

    def arguments(self, node: Node, scope: Scope) -> List[Any]:
        if node.type == "template_string":
            throw_error("SyntaxError", "Unsupported syntax: tagged templates")
        out: List[Any] = []
        for child in significant_children(node):
            if child.type == "spread_element":
                out.extend(iterate(self.evaluate(significant_children(child)[0], scope)))
            else:
                out.append(self.evaluate(child, scope))
        return out

    # ── Chaînes membre / appel ──────────────────────────────────────────────

    def _optional(self, node: Node) -> bool:
        return any(c.type == "optional_chain" for c in node.children)

    def _chain_value(self, node: Node, scope: Scope) -> Any:
        if node.type in _CHAIN_TYPES:
            return self._chain(node, scope)
        return self.evaluate(node, scope)

    def _reference(self, node: Node, scope: Scope):
        """(objet, clé) d'un accès membre, ou None si hors chaîne."""
        if node.type == "member_expression":
            obj = self._chain_value(node.child_by_field_name("object"), scope)
            if self._optional(node) and is_nullish(obj):
                raise _ShortCircuit()
            return obj, self.text(node.child_by_field_name("property"))
        obj = self._chain_value(node.child_by_field_name("object"), scope)
        if self._optional(node) and is_nullish(obj):
            raise _ShortCircuit()
        return obj, self.evaluate(node.child_by_field_name("index"), scope)

    def _chain(self, node: Node, scope: Scope) -> Any:
        if node.type != "call_expression":
            obj, key = self._reference(node, scope)
            return get_property(obj, key)
        callee = node.child_by_field_name("function")
        this = UNDEFINED
        if callee.type in ("member_expression", "subscript_expression"):
            this, key = self._reference(callee, scope)
            fn = get_property(this, key)
        elif callee.type == "parenthesized_expression":
            fn = self.evaluate(callee, scope)
        else:
            fn = self._chain_value(callee, scope)
        if self._optional(node) and is_nullish(fn):
            raise _ShortCircuit()
        args = self.arguments(node.child_by_field_name("arguments"), scope)
        if not isinstance(fn, JSCallable):
            throw_error("TypeError", f"{self.text(callee)} is not a function")
        return fn.call(this, args)
