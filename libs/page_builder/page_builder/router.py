"""
Router FastAPI — endpoints page_builder.

POST /page-builder/render   → Page JSON → HTMLResponse
GET  /page-builder/catalog  → liste des sections disponibles + leurs JSON schemas
"""
from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse

from .blocks import SECTION_TYPES
from .renderer.html import render_page
from .schemas import Page

router = APIRouter(prefix="/page-builder", tags=["page_builder"])


@router.post("/render", response_class=HTMLResponse, summary="Rend une page en HTML")
def render(page: Page) -> HTMLResponse:
    """Reçoit une Page JSON, retourne le HTML complet (blocs custom-code compilés au vol)."""
    return HTMLResponse(content=render_page(page))


@router.get("/catalog", summary="Liste les sections disponibles et leurs schemas")
def catalog() -> JSONResponse:
    """Retourne le catalogue des sections avec leurs JSON schemas Pydantic."""
    catalog_data = []
    for cls in SECTION_TYPES:
        catalog_data.append({
            "kind":   cls.model_fields["kind"].default,
            "schema": cls.model_json_schema(),
        })
    return JSONResponse({"sections": catalog_data})
