"""
CSS de page — feuille statique commune + variables de thème.

  generate_css_variables(theme)  →  :root { --color-text: ...; ... }
  generate_page_css(theme)       →  variables + règles des sections
"""
from typing import Dict, Optional

DEFAULT_THEME: Dict[str, str] = {
    "color-text": "#1f2937",
    "color-muted": "#6b7280",
    "color-bg": "#ffffff",
    "color-error": "#b91c1c",
    "color-error-bg": "#fef2f2",
    "font-body": "system-ui, -apple-system, 'Segoe UI', sans-serif",
    "container-width": "1100px",
}

BASE_CSS = """
*,*::before,*::after{box-sizing:border-box}
body{margin:0;font-family:var(--font-body);color:var(--color-text);background:var(--color-bg);line-height:1.6}
img{max-width:100%;height:auto}
.section{padding:48px 24px}
.container{max-width:var(--container-width);margin:0 auto}
.hero{display:flex;align-items:center;background-size:cover;background-position:center}
.hero--left{text-align:left}.hero--center{text-align:center}.hero--right{text-align:right}
.hero__title{font-size:2.5rem;margin:0 0 16px}
.hero__description{font-size:1.15rem;margin:0}
.text--left{text-align:left}.text--center{text-align:center}.text--right{text-align:right}
.divider{border:0;margin:0}
.gallery{display:grid;gap:16px}
.gallery__caption{font-size:.9rem;color:var(--color-muted)}
.custom-code-error{border:1px solid var(--color-error);background:var(--color-error-bg);color:var(--color-error);padding:12px 16px;border-radius:6px;font-size:.95rem;pointer-events:none;user-select:text}
.custom-code-error__excerpt{margin:8px 0 0;font-size:.85rem;white-space:pre-wrap;overflow-x:auto}
"""


def generate_css_variables(theme: Optional[Dict[str, str]]) -> str:
    merged = {**DEFAULT_THEME, **(theme or {})}
    decls = ";".join(f"--{name}:{value}" for name, value in merged.items())
    return f":root{{{decls}}}"


def generate_page_css(theme: Optional[Dict[str, str]] = None) -> str:
    """CSS complet d'une page : variables de thème puis règles des sections."""
    return generate_css_variables(theme) + "\n" + BASE_CSS.strip()
