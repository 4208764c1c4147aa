"""
Tests unitaires du schéma Page — sections discriminées et opérations d'édition.
"""
import sys
from pathlib import Path

# Ajout des libs au path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "custom_code"))

import pytest

from custom_code import DEFAULT_SOURCE, create_default
from page_builder import CustomBlock, DividerSection, HeroSection, Page, TextSection


def make_page() -> Page:
    page = Page(slug="test", title="Test")
    page.add_section(HeroSection(id="hero", title="Titre"))
    page.add_section(TextSection(id="text", content="Bonjour"))
    page.add_section(CustomBlock(id="code", source="42"))
    return page


def test_page_defaults():
    """Valeurs par défaut d'une page vide."""
    page = Page(slug="vide")
    assert page.title == ""
    assert page.lang == "fr"
    assert page.sections == []


def test_sections_discriminated_by_kind():
    """Le JSON stocké redonne les bonnes classes de section."""
    page = Page.model_validate({
        "slug": "x",
        "sections": [
            {"kind": "hero", "id": "h", "title": "T"},
            {"kind": "custom-code", "id": "b1", "source": "42"},
            {"kind": "divider"},
        ],
    })
    assert isinstance(page.sections[0], HeroSection)
    assert isinstance(page.sections[1], CustomBlock)
    assert page.sections[1].source == "42"
    assert isinstance(page.sections[2], DividerSection)


def test_json_round_trip_keeps_custom_block():
    page = make_page()
    restored = Page.model_validate_json(page.model_dump_json())
    assert restored.get_section("code") == page.get_section("code")


def test_unknown_kind_rejected():
    with pytest.raises(Exception):
        Page.model_validate({"slug": "x", "sections": [{"kind": "nope"}]})


def test_add_section_default_block():
    """Le bloc inséré porte le source par défaut."""
    page = make_page()
    block = page.add_section(create_default())
    assert page.sections[-1] is block
    assert block.kind == "custom-code"
    assert block.source == DEFAULT_SOURCE


def test_add_section_at_index():
    page = make_page()
    page.add_section(DividerSection(id="d"), index=1)
    assert [s.id for s in page.sections] == ["hero", "d", "text", "code"]
    page.add_section(DividerSection(id="far"), index=99)
    assert page.sections[-1].id == "far"


def test_move_section_clamped():
    page = make_page()
    assert page.move_section("code", -1) == 1
    assert [s.id for s in page.sections] == ["hero", "code", "text"]
    assert page.move_section("code", -10) == 0
    assert page.move_section("code", 10) == 2


def test_remove_section():
    page = make_page()
    removed = page.remove_section("text")
    assert removed.id == "text"
    assert [s.id for s in page.sections] == ["hero", "code"]


def test_unknown_section():
    page = make_page()
    with pytest.raises(KeyError):
        page.get_section("absent")
    with pytest.raises(KeyError):
        page.remove_section("absent")


def test_set_source_replaces_block():
    """Le bloc est immuable : set_source installe une copie."""
    page = make_page()
    original = page.get_section("code")
    updated = page.set_source("code", "() => <p>Edited</p>")
    assert updated.id == "code"
    assert updated.source == "() => <p>Edited</p>"
    assert page.get_section("code") is updated
    assert original.source == "42"


def test_set_source_on_other_section():
    page = make_page()
    with pytest.raises(TypeError):
        page.set_source("hero", "42")
