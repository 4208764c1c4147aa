"""
Tests de l'étape transform — JSX/TSX → expression JavaScript simple.
"""
import sys, os, socket
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from custom_code import DEFAULT_SOURCE, transform
from custom_code.grammar import parse
from custom_code.transform import clean_jsx_text, normalize


def lower(source: str) -> str:
    result = transform(source)
    assert result.ok, result.error
    return result.lowered


# ── Source par défaut ─────────────────────────────────────────────────────

class TestDefaultSource:
    def test_default_lowers(self):
        lowered = lower(DEFAULT_SOURCE)
        assert lowered.startswith("() => (")
        assert 'React.createElement("b", null, "This is a sample custom insert!")' in lowered

    def test_style_objects_kept(self):
        lowered = lower(DEFAULT_SOURCE)
        assert "React.createElement(\"div\", {style: {padding:20, color: '#333'}}" in lowered
        assert "React.createElement(\"p\", {style: {textAlign: 'center'}}" in lowered

    def test_no_jsx_left(self):
        assert "<" not in lower(DEFAULT_SOURCE)

    def test_deterministic(self):
        """Même source → même sortie, à l'octet près."""
        assert lower(DEFAULT_SOURCE) == lower(DEFAULT_SOURCE)


# ── JSX ───────────────────────────────────────────────────────────────────

class TestJsx:
    def test_host_tag_is_string(self):
        assert lower("<div/>") == 'React.createElement("div", null)'

    def test_component_tag_is_reference(self):
        assert lower('<Card title="a &amp; b" />') == 'React.createElement(Card, {title: "a & b"})'

    def test_member_tag_is_reference(self):
        assert lower("<React.Fragment>x</React.Fragment>") == \
            'React.createElement(React.Fragment, null, "x")'

    def test_fragment(self):
        assert lower("() => <><i>x</i></>") == \
            '() => React.createElement(React.Fragment, null, React.createElement("i", null, "x"))'

    def test_boolean_and_dashed_attributes(self):
        assert lower('<input disabled data-id="x" />') == \
            'React.createElement("input", {disabled: true, "data-id": "x"})'

    def test_spread_attributes(self):
        assert lower('<div {...rest} id="a" />') == \
            'React.createElement("div", {...rest, id: "a"})'

    def test_expression_children(self):
        assert lower("<b>{name}!</b>") == 'React.createElement("b", null, name, "!")'

    def test_empty_expression_container_dropped(self):
        assert lower("<b>{/* note */}x</b>") == 'React.createElement("b", null, "x")'

    def test_multiline_text_collapsed(self):
        source = "() => <p>\n  Hello\n  world\n</p>"
        assert lower(source) == '() => React.createElement("p", null, "Hello world")'

    def test_nested_jsx_in_expression(self):
        lowered = lower("<ul>{items.map(i => <li key={i}>{i}</li>)}</ul>")
        assert 'React.createElement("li", {key: i}, i)' in lowered


# ── TypeScript ────────────────────────────────────────────────────────────

class TestTypeScript:
    def test_return_type_removed(self):
        lowered = lower("(): JSX.Element => <span>{(1 as number)}</span>")
        assert "JSX.Element" not in lowered
        assert "as number" not in lowered
        assert lowered.startswith("() =>")

    def test_parameter_types_removed(self):
        lowered = lower("(props: {name: string}) => <b>{props.name}</b>")
        assert lowered.startswith("(props) =>")

    def test_non_null_unwrapped(self):
        assert lower("value!") == "value"

    def test_this_parameter_removed(self):
        lowered = lower("function App(this: void, {n = 1}: {n?: number}) { return <b>{n}</b>; }")
        assert lowered.startswith("function App({n = 1}) {")

    def test_this_parameter_alone(self):
        assert lower("(function (this: Window) { return 1; })").startswith("(function () {")

    def test_numeric_enum(self):
        lowered = lower("() => { enum E { A = 1, B } return E.B; }")
        assert 'var E = ((E) => { E[E["A"] = 1] = "A"; E[E["B"] = E["A"] + 1] = "B"; return E; })({});' in lowered

    def test_enum_defaults_to_zero(self):
        lowered = lower("() => { enum D { Up, Down } return D.Down; }")
        assert 'D[D["Up"] = 0] = "Up"; D[D["Down"] = D["Up"] + 1] = "Down";' in lowered

    def test_string_enum(self):
        lowered = lower("() => { enum C { Red = \"red\" } return C.Red; }")
        assert 'C["Red"] = "red";' in lowered

    def test_enum_member_without_initializer_after_string(self):
        result = transform("() => { enum C { Red = \"red\", Blue } return C.Blue; }")
        assert result.error.message == "SyntaxError: Enum member must have initializer"


# ── Échecs ────────────────────────────────────────────────────────────────

class TestFailures:
    @pytest.mark.parametrize("source", ["", "   ", "\n\t"])
    def test_empty_source(self, source):
        result = transform(source)
        assert not result.ok
        assert result.error.stage == "transform"
        assert result.error.message == "SyntaxError: empty source"

    def test_unclosed_tag(self):
        result = transform("() => (<div>")
        assert result.lowered is None
        assert result.error.message.startswith("SyntaxError")
        assert result.error.stage == "transform"

    def test_several_statements(self):
        result = transform("1; 2")
        assert result.error.message == "SyntaxError: source must be a single expression"

    def test_grammars_bundled(self, monkeypatch):
        """Les grammaires sont embarquées : le parse ne touche pas au réseau."""
        def refuse(*args, **kwargs):
            raise OSError("network disabled")
        monkeypatch.setattr(socket.socket, "connect", refuse)
        monkeypatch.setattr(socket, "create_connection", refuse)
        for language in ("tsx", "javascript", "typescript"):
            tree, _ = parse("1", language)
            assert not tree.root_node.has_error

    def test_never_raises(self):
        for source in ["(", "<", "}{", "() => <a></b>", "let x = 1", "\x00"]:
            result = transform(source)
            assert result.ok or result.error.message


# ── Helpers ───────────────────────────────────────────────────────────────

class TestHelpers:
    def test_clean_jsx_text(self):
        assert clean_jsx_text("\n  Hello\n  world\n") == "Hello world"
        assert clean_jsx_text("  a b  ") == "  a b  "
        assert clean_jsx_text("\n   \n") == ""
        assert clean_jsx_text("x &lt; y") == "x < y"

    def test_normalize(self):
        assert normalize("  foo();; ") == "foo()"
        assert normalize("a") == "a"
