"""
Renderer HTML — génère le HTML complet d'une Page.
Dispatch par type de section ; les blocs custom-code passent par le Mount Boundary.
"""
from html import escape
from typing import Any

from custom_code import CustomBlock, mount, render_to_html

from ..blocks import DividerSection, GallerySection, HeroSection, TextSection
from ..schemas import Page
from .css import generate_page_css


# ── Point d'entrée public ───────────────────────────────────────────────────

def render_page(page: Page, extra_head: str = "", extra_body_end: str = "") -> str:
    """Génère le HTML complet d'une page."""
    css = generate_page_css()
    sections_html = "\n".join(
        render_section(section) for section in page.sections
        if getattr(section, "visible", True)
    )
    description = f'<meta name="description" content="{escape(page.description)}">' if page.description else ""

    return f"""<!DOCTYPE html>
<html lang="{escape(page.lang)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(page.title)}</title>
  {description}
  <style>{css}</style>
  {extra_head}
</head>
<body>
{sections_html}
{extra_body_end}
</body>
</html>"""


# ── Section ─────────────────────────────────────────────────────────────────

def render_section(section: Any) -> str:
    """Enveloppe <section> commune + contenu propre au type."""
    classes = ["section", f"section--{section.kind}"]
    css_class = getattr(section, "css_class", None)
    if css_class:
        classes.append(css_class)
    inner = render_content(section)
    return f'<section id="section-{escape(section.id)}" class="{escape(" ".join(classes))}">\n  <div class="container">\n{inner}\n  </div>\n</section>'


def render_content(section: Any) -> str:
    """Dispatch vers le renderer approprié."""
    if isinstance(section, CustomBlock):    return render_custom_code(section)
    if isinstance(section, HeroSection):    return render_hero(section)
    if isinstance(section, TextSection):    return render_text(section)
    if isinstance(section, DividerSection): return render_divider(section)
    if isinstance(section, GallerySection): return render_gallery(section)

    return f"<!-- Section non implémentée : {escape(getattr(section, 'kind', '?'))} -->"


# ── Renderers ───────────────────────────────────────────────────────────────

def render_custom_code(b: CustomBlock) -> str:
    # mount ne lève jamais : un bloc cassé n'affecte pas ses voisins
    return render_to_html(mount(b))


def render_hero(s: HeroSection) -> str:
    inline_styles = [f"min-height:{s.height}"]
    if s.background_image:
        inline_styles.append(f"background-image:url('{s.background_image}')")
    elif s.background_color:
        inline_styles.append(f"background:{s.background_color}")
    if s.font_color:
        inline_styles.append(f"color:{s.font_color}")
    style_attr = escape(";".join(inline_styles))

    description = f'\n    <p class="hero__description">{escape(s.description)}</p>' if s.description else ""
    return f"""<div class="hero hero--{s.align}" style="{style_attr}">
  <div class="hero__content">
    <h1 class="hero__title">{escape(s.title)}</h1>{description}
  </div>
</div>"""


def render_text(s: TextSection) -> str:
    styles = []
    if s.font_color:
        styles.append(f"color:{s.font_color}")
    if s.background_color:
        styles.append(f"background:{s.background_color}")
    style_attr = f' style="{escape(";".join(styles))}"' if styles else ""

    title = f"<h2>{escape(s.title)}</h2>\n" if s.title else ""
    paragraphs = "\n".join(
        f"<p>{escape(p.strip())}</p>" for p in s.content.split("\n\n") if p.strip()
    )
    return f'<div class="text text--{s.alignment}"{style_attr}>\n{title}{paragraphs}\n</div>'


def render_divider(s: DividerSection) -> str:
    return f'<hr class="divider" style="border-top:{s.thickness}px {s.style} {escape(s.color)}">'


def render_gallery(s: GallerySection) -> str:
    title = f"<h2>{escape(s.title)}</h2>\n" if s.title else ""
    items = ""
    for img in s.images:
        caption = f'<figcaption class="gallery__caption">{escape(img.caption)}</figcaption>' if img.caption else ""
        items += f'<figure class="gallery__item"><img src="{escape(img.src)}" alt="{escape(img.alt)}" loading="lazy">{caption}</figure>\n'
    columns = max(1, s.columns)
    return (
        f'{title}<div class="gallery" data-gallery="{escape(s.gallery_slug)}" '
        f'style="grid-template-columns:repeat({columns},1fr)">\n{items}</div>'
    )
