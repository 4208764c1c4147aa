"""
Tests de l'étape bind — évaluation du code abaissé avec `React` seul.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from custom_code import DEFAULT_SOURCE, REACT, bind, transform
from custom_code.bind import wrap
from custom_code.runtime import UNDEFINED, JSCallable


# ── Valeurs ───────────────────────────────────────────────────────────────

class TestBindValues:
    def test_default_source_is_callable(self):
        result = bind(transform(DEFAULT_SOURCE).lowered)
        assert result.ok
        assert isinstance(result.value, JSCallable)

    def test_plain_number(self):
        assert bind("42").value == 42.0

    def test_null(self):
        result = bind("null")
        assert result.ok
        assert result.value is None

    def test_intrinsics_available(self):
        assert bind("Math.max(1, 2)").value == 2.0
        assert bind("JSON.stringify({a: [1, 'x']})").value == '{"a":[1,"x"]}'

    def test_typeof_unknown_name(self):
        assert bind("typeof process").value == "undefined"

    def test_react_is_injected(self):
        result = bind("React")
        assert result.value is REACT

    def test_custom_host(self):
        assert bind("React.answer", host=None).error.message.startswith("TypeError")

    def test_wrapper_text(self):
        assert wrap("42") == "function __custom_code__(React) { return (\n42\n); }"


# ── Échecs ────────────────────────────────────────────────────────────────

class TestBindFailures:
    @pytest.mark.parametrize("name", ["fetch", "window", "document", "require", "globalThis"])
    def test_free_identifier_rejected(self, name):
        result = bind(f"() => {name}")
        assert not result.ok
        assert result.error.stage == "bind"
        assert result.error.message == f"ReferenceError: {name} is not defined"

    def test_local_names_allowed(self):
        result = bind("(() => { const x = 1; function f(y) { return x + y; } return f(2); })()")
        assert result.value == 3.0

    def test_thrown_error(self):
        result = bind("(() => { throw new Error('x') })()")
        assert result.error.message == "Error: x"

    def test_thrown_string(self):
        result = bind("(() => { throw 'plain' })()")
        assert result.error.message == "plain"

    def test_escape_attempt(self):
        result = bind("1); (function(){")
        assert not result.ok
        assert result.error.stage == "bind"

    def test_const_reassignment(self):
        result = bind("(() => { const x = 1; x = 2; })()")
        assert result.error.message.startswith("TypeError")

    def test_recursion_limit(self):
        result = bind("(() => { const f = () => f(); return f(); })()")
        assert result.error.message == "RangeError: Maximum call stack size exceeded"


# ── Isolation ─────────────────────────────────────────────────────────────

class TestIsolation:
    def test_react_is_frozen(self):
        result = bind("React.createElement = null")
        assert result.error.message.startswith("TypeError")
        assert isinstance(REACT.get("createElement"), JSCallable)

    def test_intrinsics_frozen(self):
        assert bind("Math.answer = 42").error.message.startswith("TypeError")
        assert bind("Math.answer").value is UNDEFINED

    def test_class_declaration_reported_as_unsupported(self):
        """Une classe déclarée n'est pas un identifiant libre : l'erreur nomme la vraie cause."""
        result = bind("(() => { class A {} return 1; })()")
        assert result.error.message == "SyntaxError: Unsupported syntax: classes"
