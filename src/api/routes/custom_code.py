"""
Blocs de code personnalisé — diagnostic, aperçu, éditeur admin.
POST /api/custom-code/compile        {source} → rapport transform + bind
POST /api/custom-code/preview        {source} → fragment HTML monté
GET  /admin/custom-code/{slug}/{id}  → UI éditeur + aperçu en direct
"""
import json
from html import escape

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from custom_code import CustomBlock, bind, mount, render_to_html, transform
from custom_code.runtime import is_callable

from ...database import db_get_page, get_db
from ...models import CompileReport, SourceInput
from ..auth import check_admin_token

router = APIRouter(tags=["Custom code"])


@router.post("/api/custom-code/compile", response_model=CompileReport)
def compile_source(body: SourceInput, request: Request):
    check_admin_token(request)
    transformed = transform(body.source)
    if transformed.error is not None:
        return CompileReport(ok=False, **transformed.error.model_dump())
    bound = bind(transformed.lowered)
    if bound.error is not None:
        return CompileReport(ok=False, lowered=transformed.lowered, **bound.error.model_dump())
    return CompileReport(ok=True, lowered=transformed.lowered, callable=is_callable(bound.value))


@router.post("/api/custom-code/preview", response_class=HTMLResponse)
def preview(body: SourceInput, request: Request):
    check_admin_token(request)
    # bloc éphémère : l'aperçu ne touche pas la page stockée
    return HTMLResponse(render_to_html(mount(CustomBlock(source=body.source))))


# ── UI admin ───────────────────────────────────────────────────────────────────

@router.get("/admin/custom-code/{slug}/{section_id}", response_class=HTMLResponse)
def editor_page(slug: str, section_id: str, request: Request, db: Session = Depends(get_db)):
    token = check_admin_token(request)
    page = db_get_page(db, slug)
    if page is None:
        raise HTTPException(404, f"Page '{slug}' introuvable")
    try:
        block = page.get_section(section_id)
    except KeyError:
        raise HTTPException(404, f"Section '{section_id}' introuvable")
    if not isinstance(block, CustomBlock):
        raise HTTPException(400, f"Section '{section_id}' n'est pas un bloc custom-code")

    initial_preview = render_to_html(mount(block))
    save_url = f"/api/pages/{slug}/sections/{section_id}/source?token={token}"
    preview_url = f"/api/custom-code/preview?token={token}"

    return HTMLResponse(f"""<!DOCTYPE html>
<html lang="fr"><head><meta charset="UTF-8">
<title>Code personnalisé — {escape(page.title or slug)}</title>
<style>
body{{font-family:'Segoe UI',sans-serif;background:#f9fafb;color:#1a1a2e;margin:0;padding:24px}}
h1{{font-size:1.2rem;margin:0 0 16px}}
.grid{{display:grid;grid-template-columns:1fr 1fr;gap:20px}}
textarea{{width:100%;height:300px;font-family:monospace;font-size:13px;padding:12px;border:1px solid #d1d5db;border-radius:8px;box-sizing:border-box}}
.preview{{background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:16px;min-height:300px}}
.status{{font-size:12px;color:#6b7280;margin-top:6px}}
.custom-code-error{{border:1px solid #b91c1c;background:#fef2f2;color:#b91c1c;padding:12px;border-radius:6px}}
</style></head>
<body>
<h1>{escape(page.title or slug)} · bloc <code>{escape(section_id)}</code></h1>
<div class="grid">
  <div>
    <textarea id="source" spellcheck="false">{escape(block.source)}</textarea>
    <div class="status" id="status">Enregistré</div>
  </div>
  <div class="preview" id="preview">{initial_preview}</div>
</div>
<script>
const SAVE_URL = {json.dumps(save_url)};
const PREVIEW_URL = {json.dumps(preview_url)};
const area = document.getElementById('source');
const status = document.getElementById('status');
let timer = null;
let seq = 0;
let saving = Promise.resolve();
area.addEventListener('input', () => {{
  status.textContent = 'Modification…';
  clearTimeout(timer);
  timer = setTimeout(push, 400);
}});
async function push() {{
  // seule la dernière frappe met à jour le statut et l'aperçu
  const mine = ++seq;
  const source = area.value;
  saving = saving.catch(() => null).then(() => fetch(SAVE_URL, {{method: 'PUT', headers: {{'Content-Type': 'application/json'}}, body: JSON.stringify({{source}})}}));
  const saved = await saving;
  if (mine !== seq) return;
  status.textContent = saved.ok ? 'Enregistré' : 'Erreur ' + saved.status;
  const res = await fetch(PREVIEW_URL, {{method: 'POST', headers: {{'Content-Type': 'application/json'}}, body: JSON.stringify({{source}})}});
  const html = await res.text();
  if (mine !== seq) return;
  document.getElementById('preview').innerHTML = html;
}}
</script>
</body></html>""")
