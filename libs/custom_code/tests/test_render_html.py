"""
Tests de l'hôte de rendu — éléments, résolution des composants, HTML statique.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from custom_code import FRAGMENT, Element, render_to_html, resolve, style_to_css
from custom_code.html import css_property, css_value
from custom_code.runtime import JSObject, JSThrow, NativeFunction


# ── Style ─────────────────────────────────────────────────────────────────

class TestStyle:
    def test_css_property(self):
        assert css_property("marginTop") == "margin-top"
        assert css_property("WebkitTransition") == "-webkit-transition"
        assert css_property("msTransform") == "-ms-transform"
        assert css_property("--brand") == "--brand"

    def test_css_value_units(self):
        assert css_value("padding", 20.0) == "20px"
        assert css_value("lineHeight", 1.5) == "1.5"
        assert css_value("margin", 0.0) == "0"
        assert css_value("color", " red ") == "red"

    def test_style_to_css(self):
        style = JSObject({"marginTop": 4.0, "lineHeight": 1.5, "color": None, "WebkitTransition": "none"})
        assert style_to_css(style) == "margin-top:4px;line-height:1.5;-webkit-transition:none"


# ── HTML ──────────────────────────────────────────────────────────────────

class TestRenderHtml:
    def test_attributes_and_escaping(self):
        node = Element("div", {"className": "a", "htmlFor": "x"}, ["x < y & z"])
        assert render_to_html(node) == '<div class="a" for="x">x &lt; y &amp; z</div>'

    def test_style_attribute(self):
        node = Element("p", {"style": JSObject({"textAlign": "center"})}, ["t"])
        assert render_to_html(node) == '<p style="text-align:center">t</p>'

    def test_void_element(self):
        assert render_to_html(Element("br")) == "<br/>"

    def test_handlers_dropped_boolean_kept(self):
        handler = NativeFunction(lambda this, args: None, "onClick")
        node = Element("input", {"disabled": True, "onClick": handler, "checked": False})
        assert render_to_html(node) == '<input disabled=""/>'

    def test_data_and_aria_booleans_stringified(self):
        node = Element("div", {"data-open": True, "aria-hidden": False, "hidden": True})
        assert render_to_html(node) == '<div data-open="true" aria-hidden="false" hidden=""></div>'

    def test_inner_html(self):
        node = Element("div", {"dangerouslySetInnerHTML": JSObject({"__html": "<i>raw</i>"})})
        assert render_to_html(node) == "<div><i>raw</i></div>"

    def test_numbers_and_empty_children(self):
        node = Element("span", {}, [3.0, " items", None, True, False])
        assert render_to_html(node) == "<span>3 items</span>"

    def test_fragment_is_transparent(self):
        node = Element("ul", {}, [Element(FRAGMENT, {}, [Element("li", {}, ["a"]), Element("li", {}, ["b"])])])
        assert render_to_html(node) == "<ul><li>a</li><li>b</li></ul>"

    def test_plain_text(self):
        assert render_to_html("a & b") == "a &amp; b"


# ── Résolution ────────────────────────────────────────────────────────────

class TestResolve:
    def test_function_component_receives_children(self):
        def box(this, args):
            return Element("section", {}, [args[0].get("children")])
        node = Element(NativeFunction(box, "Box"), {"id": "x"}, [Element("i", {}, ["in"])])
        assert render_to_html(node) == "<section><i>in</i></section>"

    def test_object_child_rejected(self):
        with pytest.raises(JSThrow):
            resolve(Element("div", {}, [JSObject({"a": 1.0})]))

    def test_nested_lists_flattened(self):
        out = resolve(["a", ["b", ["c"]]])
        assert out == ["a", "b", "c"]
