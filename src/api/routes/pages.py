"""
Pages — documents page_builder stockés en SQLite.
GET    /p/{slug}                                  → HTML public
GET    /api/pages                                 → liste
POST   /api/pages                                 → création (admin)
GET    /api/pages/{slug}                          → document JSON
DELETE /api/pages/{slug}                          → suppression (admin)
POST   /api/pages/{slug}/sections/custom-code     → insère un bloc par défaut (admin)
PUT    /api/pages/{slug}/sections/{id}/source     → édition du source (admin)
POST   /api/pages/{slug}/sections/{id}/move       → réordonne (admin)
DELETE /api/pages/{slug}/sections/{id}            → supprime (admin)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from custom_code import CustomBlock, SourceEditor, create_default
from page_builder import Page, render_page

from ...database import db_delete_page, db_get_page, db_list_pages, db_save_page, get_db
from ...models import InsertCustomCode, MoveSection, PageCreate, PagesList, PageSummary, SourceUpdate
from ..auth import check_admin_token

log = logging.getLogger(__name__)
router = APIRouter(tags=["Pages"])


def _load(db: Session, slug: str) -> Page:
    page = db_get_page(db, slug)
    if page is None:
        raise HTTPException(404, f"Page '{slug}' introuvable")
    return page


def _section(page: Page, section_id: str):
    try:
        return page.get_section(section_id)
    except KeyError:
        raise HTTPException(404, f"Section '{section_id}' introuvable")


# ── Public ─────────────────────────────────────────────────────────────────────

@router.get("/p/{slug}", response_class=HTMLResponse)
def public_page(slug: str, db: Session = Depends(get_db)):
    return HTMLResponse(render_page(_load(db, slug)))


@router.get("/api/pages", response_model=PagesList)
def list_pages(db: Session = Depends(get_db)):
    summaries = []
    for row in db_list_pages(db):
        page = Page.model_validate_json(row.document)
        summaries.append(PageSummary(slug=page.slug, title=page.title, sections=len(page.sections)))
    return PagesList(pages=summaries)


@router.get("/api/pages/{slug}")
def get_page(slug: str, db: Session = Depends(get_db)):
    return _load(db, slug).model_dump(mode="json")


# ── Admin ──────────────────────────────────────────────────────────────────────

@router.post("/api/pages", status_code=201)
def create_page(body: PageCreate, request: Request, db: Session = Depends(get_db)):
    check_admin_token(request)
    if db_get_page(db, body.slug) is not None:
        raise HTTPException(409, f"Page '{body.slug}' existe déjà")
    page = Page(slug=body.slug, title=body.title, description=body.description)
    db_save_page(db, page)
    return page.model_dump(mode="json")


@router.post("/api/pages/{slug}/sections/custom-code", status_code=201)
def insert_custom_code(slug: str, request: Request, body: InsertCustomCode = InsertCustomCode(),
                       db: Session = Depends(get_db)):
    check_admin_token(request)
    page = _load(db, slug)
    block = page.add_section(create_default(), body.index)
    db_save_page(db, page)
    log.info("page %s : bloc custom-code %s inséré", slug, block.id)
    return block.model_dump()


@router.put("/api/pages/{slug}/sections/{section_id}/source")
def update_source(slug: str, section_id: str, body: SourceUpdate, request: Request,
                  db: Session = Depends(get_db)):
    check_admin_token(request)
    page = _load(db, slug)
    block = _section(page, section_id)
    if not isinstance(block, CustomBlock):
        raise HTTPException(400, f"Section '{section_id}' n'est pas un bloc custom-code")
    editor = SourceEditor(block, on_change=lambda source: page.set_source(section_id, source))
    editor.on_change(body.source)
    db_save_page(db, page)
    return page.get_section(section_id).model_dump()


@router.post("/api/pages/{slug}/sections/{section_id}/move")
def move_section(slug: str, section_id: str, body: MoveSection, request: Request,
                 db: Session = Depends(get_db)):
    check_admin_token(request)
    page = _load(db, slug)
    _section(page, section_id)
    index = page.move_section(section_id, body.delta)
    db_save_page(db, page)
    return {"ok": True, "index": index}


@router.delete("/api/pages/{slug}/sections/{section_id}")
def delete_section(slug: str, section_id: str, request: Request, db: Session = Depends(get_db)):
    check_admin_token(request)
    page = _load(db, slug)
    _section(page, section_id)
    page.remove_section(section_id)
    db_save_page(db, page)
    return {"ok": True}


@router.delete("/api/pages/{slug}")
def delete_page(slug: str, request: Request, db: Session = Depends(get_db)):
    check_admin_token(request)
    if not db_delete_page(db, slug):
        raise HTTPException(404, f"Page '{slug}' introuvable")
    return {"ok": True}
