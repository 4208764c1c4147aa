"""
Tests du montage — pipeline complet, échecs confinés au bloc.
"""
import sys, os, logging
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from custom_code import (
    CustomBlock, SourceEditor, compile_block, create_default, error_node,
    mount, render_to_html,
)
from custom_code.errors import TransformError


def html_of(source: str) -> str:
    return render_to_html(mount(CustomBlock(id="b1", source=source)))


# ── Scénarios ─────────────────────────────────────────────────────────────

class TestMountScenarios:
    def test_default_block(self):
        html = html_of(create_default().source)
        assert html == (
            '<div class="custom-code" data-block-id="b1">'
            '<div style="padding:20px;color:#333">'
            '<p style="text-align:center"><b>This is a sample custom insert!</b></p>'
            "</div></div>"
        )

    def test_simple_component(self):
        assert html_of("() => (<div>Hello</div>)") == \
            '<div class="custom-code" data-block-id="b1"><div>Hello</div></div>'

    def test_transform_failure(self):
        html = html_of("() => (<div>")
        assert 'class="custom-code-error"' in html
        assert 'data-stage="transform"' in html
        assert "SyntaxError" in html

    def test_render_failure(self):
        html = html_of("() => { throw new Error('boom') }")
        assert 'data-stage="render"' in html
        assert "Error: boom" in html

    def test_bind_failure(self):
        html = html_of("() => <div>{missing}</div>")
        assert 'data-stage="bind"' in html
        assert "ReferenceError: missing is not defined" in html

    def test_non_callable_renders_nothing(self):
        assert html_of("42") == '<div class="custom-code" data-block-id="b1"></div>'
        assert html_of("<div/>") == '<div class="custom-code" data-block-id="b1"></div>'

    def test_null_factory_result(self):
        assert html_of("() => null") == '<div class="custom-code" data-block-id="b1"></div>'


# ── Composants ────────────────────────────────────────────────────────────

class TestComponents:
    def test_local_component_with_keys(self):
        source = """() => {
  const Item = ({label}: {label: string}) => <li>{label}</li>;
  return <ul>{['a', 'b'].map(x => <Item key={x} label={x} />)}</ul>;
}"""
        assert "<ul><li>a</li><li>b</li></ul>" in html_of(source)

    def test_children_prop(self):
        source = "() => { const Box = (props) => <section>{props.children}</section>; return <Box><i>in</i></Box>; }"
        assert "<section><i>in</i></section>" in html_of(source)

    def test_hooks_initial_values(self):
        source = "() => { const [n, setN] = React.useState(() => 3); const r = React.useRef(1); return <b>{n + r.current}</b>; }"
        assert "<b>4</b>" in html_of(source)

    def test_context_default_value(self):
        source = ("() => { const Theme = React.createContext('dark'); "
                  "const Label = () => <em>{React.useContext(Theme)}</em>; "
                  "return <Theme.Provider value=\"light\"><Label /></Theme.Provider>; }")
        assert "<em>dark</em>" in html_of(source)

    def test_event_handlers_not_rendered(self):
        html = html_of("() => <button onClick={() => alert('x')}>Go</button>")
        # alert est libre : rejeté avant tout rendu
        assert 'data-stage="bind"' in html
        html = html_of("() => <button onClick={() => null}>Go</button>")
        assert "<button>Go</button>" in html

    def test_enum_values_and_reverse_lookup(self):
        assert "<b>2-A</b>" in html_of("() => { enum E { A = 1, B } return <b>{E.B}-{E[1]}</b>; }")

    def test_this_parameter_ignored(self):
        assert "<b>1</b>" in html_of("function App(this: void, n: number = 1) { return <b>{n}</b>; }")


# ── Totalité / isolation ──────────────────────────────────────────────────

class TestBoundary:
    @pytest.mark.parametrize("source", [
        "", "   ", "(", "() => (<div>", "42", "null", "() => null",
        "() => ({})", "() => <Foo />", "() => f()",
        "() => { const f = () => f(); return f(); }",
        "() => { React.createElement = null; return null; }",
        "function Widget() { return <p>w</p>; }",
    ])
    def test_mount_never_raises(self, source):
        html = html_of(source)
        assert html.startswith('<div class="custom-code" data-block-id="b1">')

    def test_failure_does_not_leak(self):
        html_of("() => { React.createElement = null; return null; }")
        assert "<b>This is a sample custom insert!</b>" in html_of(create_default().source)

    def test_recursion_reported(self):
        html = html_of("() => { const f = () => f(); return f(); }")
        assert "RangeError" in html

    def test_failure_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="custom_code.mount"):
            html_of("() => { throw new Error('boom') }")
        assert any("b1" in r.getMessage() and "render" in r.getMessage() for r in caplog.records)


# ── Édition ───────────────────────────────────────────────────────────────

class TestEditing:
    def test_edit_reflected_on_next_mount(self):
        block = create_default()
        edited = {}
        editor = SourceEditor(block, on_change=lambda s: edited.update(block=block.with_source(s)))
        editor.on_change("() => <p>Edited</p>")
        assert "<p>Edited</p>" in render_to_html(mount(edited["block"]))
        assert "This is a sample custom insert!" in render_to_html(mount(block))

    def test_cleared_editor_gives_empty_source(self):
        received = []
        editor = SourceEditor(create_default(), on_change=received.append)
        editor.on_change(None)
        assert received == [""]

    def test_block_is_immutable(self):
        block = create_default()
        with pytest.raises(Exception):
            block.source = "x"
        assert block.with_source("x").id == block.id

    def test_compile_block_not_cached(self):
        block = CustomBlock(source="42")
        assert compile_block(block).value == 42.0
        assert compile_block(block.with_source("43")).value == 43.0


# ── Nœud d'erreur ─────────────────────────────────────────────────────────

class TestErrorNode:
    def test_excerpt_rendered(self):
        node = error_node(TransformError(message="SyntaxError: x", source_excerpt="a\n^"))
        assert render_to_html(node) == (
            '<div class="custom-code-error" role="alert" data-stage="transform">'
            "<strong>Code invalide :</strong> "
            '<span class="custom-code-error__message">SyntaxError: x</span>'
            '<pre class="custom-code-error__excerpt">a\n^</pre></div>'
        )
