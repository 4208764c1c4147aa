"""
Tests du rendu HTML des pages et du router page_builder.
"""
import sys
from pathlib import Path

# Ajout des libs au path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "custom_code"))

from fastapi import FastAPI
from fastapi.testclient import TestClient

from custom_code import create_default
from page_builder import (
    CustomBlock, DividerSection, GalleryImage, GallerySection,
    HeroSection, Page, TextSection, render_page, render_section,
)
from page_builder.renderer.css import generate_css_variables, generate_page_css
from page_builder.router import router


def test_render_page_structure():
    page = Page(slug="p", title="Ma page", description="Desc")
    page.add_section(HeroSection(id="h", title="Bienvenue"))
    html = render_page(page)
    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Ma page</title>" in html
    assert '<meta name="description" content="Desc">' in html
    assert '<section id="section-h" class="section section--hero">' in html
    assert "Bienvenue" in html


def test_hidden_section_skipped():
    page = Page(slug="p", sections=[HeroSection(id="h", title="Caché", visible=False)])
    assert "Caché" not in render_page(page)


def test_text_is_escaped_and_split():
    html = render_section(TextSection(id="t", content="a <b>\n\nsecond"))
    assert "<p>a &lt;b&gt;</p>" in html
    assert "<p>second</p>" in html


def test_divider_and_gallery():
    assert 'border-top:2px dashed #000' in render_section(DividerSection(style="dashed", color="#000", thickness=2))
    gallery = GallerySection(gallery_slug="g", columns=2, images=[GalleryImage(src="/a.jpg", alt="A", caption="Légende")])
    html = render_section(gallery)
    assert 'data-gallery="g"' in html
    assert '<img src="/a.jpg" alt="A" loading="lazy">' in html
    assert "repeat(2,1fr)" in html


def test_custom_block_rendered_inline():
    html = render_section(create_default())
    assert "<b>This is a sample custom insert!</b>" in html
    assert 'class="section section--custom-code"' in html


def test_broken_block_isolated():
    """Un bloc cassé n'empêche pas le rendu de ses voisins."""
    page = Page(slug="p", sections=[
        CustomBlock(id="ok", source="() => <p>Premier</p>"),
        CustomBlock(id="ko", source="() => { throw new Error('boom') }"),
        CustomBlock(id="bad", source="() => (<div>"),
        TextSection(id="t", content="Après"),
    ])
    html = render_page(page)
    assert "<p>Premier</p>" in html
    assert "Error: boom" in html
    assert 'data-stage="transform"' in html
    assert "<p>Après</p>" in html
    assert html.count('class="custom-code-error"') == 2


def test_css():
    assert "--color-primary" in generate_css_variables({"color-primary": "#111"})
    css = generate_page_css()
    assert ".custom-code-error" in css


# ── Router ────────────────────────────────────────────────────────────────

def _client() -> TestClient:
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def test_router_render():
    r = _client().post("/page-builder/render", json={
        "slug": "p", "title": "T",
        "sections": [{"kind": "custom-code", "id": "b1", "source": "() => <i>ok</i>"}],
    })
    assert r.status_code == 200
    assert "<i>ok</i>" in r.text


def test_router_rejects_unknown_kind():
    r = _client().post("/page-builder/render", json={"slug": "p", "sections": [{"kind": "nope"}]})
    assert r.status_code == 422


def test_router_catalog():
    r = _client().get("/page-builder/catalog")
    kinds = [s["kind"] for s in r.json()["sections"]]
    assert kinds == ["hero", "text", "divider", "gallery-embed", "custom-code"]
