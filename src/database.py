"""SQLite — init + session + CRUD helpers"""
import json, logging, os
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from custom_code import create_default
from page_builder import DividerSection, HeroSection, Page, TextSection

from .models import Base, PageDB

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "pages.db"))
Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
ENGINE       = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=ENGINE)


def _demo_page() -> Page:
    page = Page(slug="demo", title="Page de démonstration",
                description="Sections classiques + un bloc de code personnalisé")
    page.add_section(HeroSection(title="Bienvenue", description="Page générée par le page builder"))
    page.add_section(TextSection(content="Le bloc ci-dessous est compilé à chaque affichage."))
    page.add_section(DividerSection())
    page.add_section(create_default())
    return page


def init_db():
    Base.metadata.create_all(bind=ENGINE)
    # Seed page de démo (only if table is empty)
    with SessionLocal() as db:
        if db.query(PageDB).count() == 0:
            db_save_page(db, _demo_page())


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Pages ──
def db_get_page(db: Session, slug: str) -> Optional[Page]:
    row = db.get(PageDB, slug)
    if row is None:
        return None
    return Page.model_validate_json(row.document)

def db_save_page(db: Session, page: Page) -> PageDB:
    row = db.get(PageDB, page.slug)
    document = jd(page.model_dump(mode="json"))
    if row is None:
        row = PageDB(slug=page.slug, title=page.title, document=document)
        db.add(row)
    else:
        row.title, row.document = page.title, document
    db.commit(); db.refresh(row)
    log.info("page %s enregistrée (%d sections)", page.slug, len(page.sections))
    return row

def db_list_pages(db: Session) -> List[PageDB]:
    return db.query(PageDB).order_by(PageDB.slug).all()

def db_delete_page(db: Session, slug: str) -> bool:
    row = db.get(PageDB, slug)
    if row is None:
        return False
    db.delete(row); db.commit()
    log.info("page %s supprimée", slug)
    return True
