"""
Tests de l'interpréteur — sous-ensemble JavaScript exécuté par bind.
"""
import sys, os, math
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from custom_code import bind
from custom_code.runtime import UNDEFINED


def run(code: str):
    result = bind(code)
    assert result.ok, result.error
    return result.value


def iife(body: str):
    return run("(() => { " + body + " })()")


# ── Opérateurs ────────────────────────────────────────────────────────────

class TestOperators:
    def test_arithmetic(self):
        assert run("7 % 3") == 1.0
        assert run("2 ** 10") == 1024.0
        assert run("1 / 0") == math.inf
        assert math.isnan(run("0 / 0"))

    def test_coercion(self):
        assert run("'5' * '2'") == 10.0
        assert run("'5' + 2") == "52"
        assert run("String(0.1 + 0.2)") == "0.30000000000000004"

    def test_equality(self):
        assert run("1 === 1") is True
        assert run("'1' == 1") is True
        assert run("null == undefined") is True
        assert run("null === undefined") is False

    def test_nullish_and_optional_chaining(self):
        assert run("null ?? 'x'") == "x"
        assert run("0 ?? 'x'") == 0.0
        assert run("({a: null}).a?.b") is UNDEFINED

    def test_template_string(self):
        assert run("`a${1 + 1}b`") == "a2b"


# ── Instructions ──────────────────────────────────────────────────────────

class TestStatements:
    def test_for_with_continue(self):
        assert iife("let s = 0; for (let i = 0; i < 5; i++) { if (i === 3) continue; s += i; } return s;") == 7.0

    def test_while_with_break(self):
        assert iife("let n = 0; while (true) { n++; if (n > 4) break; } return n;") == 5.0

    def test_for_of(self):
        assert iife("let s = ''; for (const c of ['a', 'b']) { s += c; } return s;") == "ab"

    def test_switch(self):
        code = ("((v) => { switch (v) { case 1: return 'one'; case 2: return 'two'; "
                "default: return 'other' } })")
        assert run(code + "(2)") == "two"
        assert run(code + "(9)") == "other"

    def test_try_catch(self):
        assert iife("try { null.x } catch (e) { return e.message }") == \
            "Cannot read properties of null (reading 'x')"

    def test_function_hoisting_and_recursion(self):
        assert iife("return fact(5); function fact(n) { return n <= 1 ? 1 : n * fact(n - 1); }") == 120.0

    def test_closure_counter(self):
        assert iife("let c = 0; const inc = () => ++c; inc(); inc(); return c;") == 2.0


# ── Motifs ────────────────────────────────────────────────────────────────

class TestPatterns:
    def test_nested_destructuring(self):
        code = "(({a, b: [c, ...d] = []}) => a + c + d.length)({a: 1, b: [2, 3, 4]})"
        assert run(code) == 5.0

    def test_default_values(self):
        assert run("(({x = 3}) => x)({})") == 3.0

    def test_spread(self):
        assert run("[...[1, 2], 3].length") == 3.0
        assert run("({...{a: 1}, b: 2}).a") == 1.0


# ── Bibliothèque ──────────────────────────────────────────────────────────

class TestBuiltins:
    def test_array_methods(self):
        assert run("[1, 2, 3].map(x => x * 2).join('-')") == "2-4-6"
        assert run("[3, 1, 2].sort().join('')") == "123"
        assert run("[1, 2, 3, 4].filter(x => x % 2).length") == 2.0
        assert run("[1, 2, 3].reduce((a, b) => a + b, 0)") == 6.0

    def test_string_methods(self):
        assert run("'abc'.toUpperCase()") == "ABC"
        assert run("'a,b'.split(',').length") == 2.0

    def test_object_keys_order(self):
        assert run("Object.keys({b: 1, a: 2}).join()") == "b,a"

    def test_json_round(self):
        assert run("JSON.parse('{\"n\": 2}').n") == 2.0

    @pytest.mark.parametrize("code,expected", [
        ("typeof 1", "number"),
        ("typeof 'x'", "string"),
        ("typeof null", "object"),
        ("typeof (() => 1)", "function"),
        ("typeof undefined", "undefined"),
    ])
    def test_typeof(self, code, expected):
        assert run(code) == expected


# ── Portées de boucle ─────────────────────────────────────────────────────

class TestLoopScopes:
    def test_let_binding_per_iteration(self):
        """Chaque itération de `for (let …)` a sa propre copie de la variable."""
        code = "const fs = []; for (let i = 0; i < 3; i++) fs.push(() => i); return fs.map(f => f()).join();"
        assert iife(code) == "0,1,2"

    def test_var_binding_shared(self):
        code = "const fs = []; for (var i = 0; i < 3; i++) fs.push(() => i); return fs.map(f => f()).join();"
        assert iife(code) == "3,3,3"

    def test_let_mutation_inside_body_carried_over(self):
        assert iife("let out = ''; for (let i = 0; i < 6; i++) { out += i; i++; } return out;") == "024"


# ── Conversions et constructeurs ──────────────────────────────────────────

class TestConversions:
    def test_string_of_undefined(self):
        assert run("String(undefined)") == "undefined"
        assert run("String()") == ""
        assert run("String((function () { return this; })())") == "undefined"

    def test_number_of_undefined(self):
        assert math.isnan(run("Number(undefined)"))
        assert run("Number()") == 0.0

    def test_boolean_without_argument(self):
        assert run("Boolean()") is False

    def test_array_length_argument(self):
        assert run("Array(3).fill(0).join()") == "0,0,0"
        assert run("Array(3).length") == 3.0
        assert run("Array(1, 2).join()") == "1,2"
        assert run("Array('3').length") == 1.0

    def test_new_array(self):
        assert run("new Array(5).length") == 5.0
        assert run("new Array().length") == 0.0

    @pytest.mark.parametrize("length", ["-1", "1.5", "NaN", "Infinity"])
    def test_invalid_array_length(self, length):
        assert bind(f"Array({length})").error.message == "RangeError: Invalid array length"

    def test_large_integers_printed_shortest(self):
        assert run("String(123456789012345680000)") == "123456789012345680000"
        assert run("String(2 ** 53)") == "9007199254740992"
        assert run("String(1e20)") == "100000000000000000000"
        assert run("String(1e21)") == "1e+21"
