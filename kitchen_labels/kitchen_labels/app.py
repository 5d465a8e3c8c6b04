from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from . import __version__
from .config import Settings, get_settings
from .errors import LabelError, NotFound
from .expiry import compute_expiry, days_until_expiry, parse_production_date
from .logging import configure_logging, get_logger
from .models import LabelRecord
from .render import format_date, label_pdf_bytes
from .session import LabelSession, session_from_settings

log = get_logger(__name__)

router = APIRouter()


class PrintRequest(BaseModel):
    product_name: str
    category: str
    production_date: str


def _session(request: Request) -> LabelSession:
    return request.app.state.session


def label_to_dict(record: LabelRecord, session: LabelSession, now: Optional[datetime] = None) -> dict:
    now = now or session.clock()
    return {
        "id": record.id,
        "product_name": record.product_name,
        "category": record.category,
        "shelf_life_days": record.shelf_life_days,
        "temperature_range": record.temperature_range,
        "production_date": record.production_date.isoformat(),
        "expiry_date": record.expiry_date.isoformat(),
        "expiry_display": format_date(record.expiry_date),
        "printed_at": record.printed_at.isoformat(timespec="seconds"),
        "status": session.status_of(record, now).value,
        "days_until_expiry": days_until_expiry(record.expiry_date, now),
    }


async def _label_error(request: Request, exc: LabelError) -> JSONResponse:
    log.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        problems.append(f"{field}: {err.get('msg', 'invalid')}" if field else err.get("msg", "invalid"))
    message = "Invalid request: " + "; ".join(problems)
    log.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse({"error": message}, status_code=422)


@router.get("/", response_class=HTMLResponse)
async def index():
    return HTML_PAGE


@router.get("/api/categories")
async def list_categories(request: Request):
    return {
        "categories": [
            {
                "name": rule.name,
                "shelf_life_days": rule.shelf_life_days,
                "temperature_range": rule.temperature_range,
            }
            for rule in _session(request).catalog
        ]
    }


@router.get("/api/expiry")
async def expiry_preview(request: Request, category: str, production_date: Optional[str] = None):
    session = _session(request)
    rule = session.catalog.require(category)
    produced = parse_production_date(production_date) if production_date else session.clock().date()
    expiry = compute_expiry(produced, rule.shelf_life_days)
    return {
        "category": rule.name,
        "shelf_life_days": rule.shelf_life_days,
        "temperature_range": rule.temperature_range,
        "production_date": produced.isoformat(),
        "expiry_date": expiry.isoformat(),
        "expiry_display": format_date(expiry),
    }


@router.get("/api/labels")
async def list_labels(request: Request):
    session = _session(request)
    now = session.clock()
    return {"labels": [label_to_dict(r, session, now) for r in session.get_history()]}


@router.post("/api/labels", status_code=201)
async def print_label(request: Request, body: PrintRequest):
    session = _session(request)
    record = session.print_label(body.product_name, body.category, body.production_date)
    return label_to_dict(record, session)


@router.get("/api/labels/current")
async def current_label(request: Request):
    session = _session(request)
    record = session.get_current_preview()
    return {"label": label_to_dict(record, session) if record else None}


@router.post("/api/labels/{label_id}/reprint", status_code=201)
async def reprint_label(request: Request, label_id: str):
    session = _session(request)
    record = session.reprint(label_id)
    return label_to_dict(record, session)


@router.delete("/api/labels/{label_id}", status_code=204)
async def delete_label(request: Request, label_id: str):
    _session(request).delete(label_id)
    return Response(status_code=204)


@router.get("/api/labels/{label_id}/label.pdf")
async def label_pdf(request: Request, label_id: str):
    session = _session(request)
    record = session.find(label_id)
    if record is None:
        current = session.get_current_preview()
        if current is None or current.id != label_id:
            raise NotFound(label_id)
        record = current
    pdf_bytes = label_pdf_bytes(record, font_path=request.app.state.settings.label_font_path)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="label_{record.id}.pdf"'},
    )


def create_app(settings: Optional[Settings] = None, session: Optional[LabelSession] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    app = FastAPI(title="Kitchen Labels", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.session = session or session_from_settings(settings)
    app.add_exception_handler(LabelError, _label_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.include_router(router)
    log.info("label station ready with %d categories", len(app.state.session.catalog))
    return app


HTML_PAGE = """
<!doctype html>
<html lang="ru">
<head>
  <meta charset="utf-8">
  <title>Система печати этикеток</title>
  <style>
    :root {
      --bg: #0f172a;
      --card: #0b1224;
      --panel: #0f172a;
      --border: #1f2937;
      --accent: #f97316;
      --muted: #94a3b8;
      --ok: #22c55e;
      --warn: #facc15;
      --bad: #ef4444;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: 'Segoe UI', sans-serif;
      background: radial-gradient(circle at 10% 20%, #132040 0, #0b1329 25%, #0f172a 60%);
      color: #e5e7eb;
    }
    .container { max-width: 1200px; margin: 32px auto 48px; padding: 0 28px 40px; }
    .hero {
      background: linear-gradient(120deg, rgba(249, 115, 22, 0.12), rgba(59, 130, 246, 0.12));
      border: 1px solid var(--border);
      border-radius: 18px;
      padding: 24px;
    }
    h1 { margin: 0 0 8px; font-size: 28px; }
    .subhead { margin: 0; color: #cbd5e1; font-size: 15px; }
    .panel {
      background: var(--panel);
      border: 1px solid var(--border);
      border-radius: 16px;
      padding: 18px;
      box-shadow: 0 14px 36px rgba(0, 0, 0, 0.28);
    }
    .two-col { display: grid; grid-template-columns: 1fr 1fr; gap: 16px; align-items: start; margin-top: 18px; }
    @media (max-width: 960px) { .two-col { grid-template-columns: 1fr; } }
    label { display: block; margin: 12px 0 4px; color: var(--muted); font-size: 13px; }
    input, select {
      width: 100%; padding: 9px 10px; border-radius: 10px;
      border: 1px solid var(--border); background: var(--card); color: #e2e8f0;
    }
    button {
      background: linear-gradient(120deg, #f97316, #fbbf24);
      color: #0f172a; border: none; padding: 11px 18px; border-radius: 10px;
      font-weight: 700; cursor: pointer; margin-top: 14px;
    }
    button.small { padding: 5px 10px; margin: 0 0 0 6px; font-size: 12px; }
    button:disabled { opacity: 0.65; cursor: not-allowed; }
    .hint { color: var(--muted); font-size: 12px; margin-top: 8px; }
    .label {
      background: #fff; color: #111; border: 2px dashed #94a3b8; border-radius: 12px;
      padding: 16px; text-align: center; font-size: 14px;
    }
    .label .name { font-weight: 700; font-size: 18px; border-bottom: 1px solid #ccc; padding-bottom: 6px; }
    .label .row { display: flex; justify-content: space-between; margin: 4px 0; }
    .label .expiry { font-weight: 700; }
    .label .expiry.expiring_soon, .label .expiry.expired { color: var(--bad); }
    table { width: 100%; border-collapse: collapse; font-size: 13px; }
    th, td { text-align: left; padding: 8px; border-bottom: 1px solid var(--border); }
    .badge { padding: 3px 8px; border-radius: 999px; font-size: 12px; }
    .badge.fresh { color: var(--ok); border: 1px solid rgba(34, 197, 94, 0.4); }
    .badge.expiring_soon { color: var(--warn); border: 1px solid rgba(250, 204, 21, 0.4); }
    .badge.expired { color: var(--bad); border: 1px solid rgba(239, 68, 68, 0.4); }
    .toast { position: fixed; right: 20px; bottom: 20px; background: var(--card); border: 1px solid var(--border);
      border-radius: 12px; padding: 12px 16px; display: none; }
  </style>
</head>
<body>
  <div class="container">
    <div class="hero">
      <h1>Система печати этикеток</h1>
      <p class="subhead">Управление сроками годности для кухни ресторана</p>
    </div>

    <div class="two-col">
      <div class="panel">
        <strong>Создание этикетки</strong>
        <label for="product-name">Название продукта</label>
        <input id="product-name" placeholder="Введите название продукта" oninput="updateForm()">
        <label for="category">Категория</label>
        <select id="category" onchange="updateForm()"><option value="">Выберите категорию</option></select>
        <label for="production-date">Дата производства</label>
        <input id="production-date" type="date" onchange="updateForm()">
        <div id="category-info" class="hint"></div>
        <button id="print-btn" type="button" onclick="printLabel()" disabled>Печать этикетки</button>
      </div>
      <div class="panel">
        <strong>Предварительный просмотр</strong>
        <div id="preview" class="hint">Заполните форму для предварительного просмотра этикетки</div>
      </div>
    </div>

    <div class="panel" style="margin-top:16px;">
      <strong>Недавно напечатанные этикетки</strong>
      <div id="history" class="hint">Этикетки еще не печатались</div>
    </div>
  </div>
  <div id="toast" class="toast"></div>
  <script>
    const STATUS = { expired: 'Просрочен', expiring_soon: 'Скоро истечет', fresh: 'Свежий' };
    function toast(text) {
      const el = document.getElementById('toast');
      el.textContent = text;
      el.style.display = 'block';
      clearTimeout(window.toastTimer);
      window.toastTimer = setTimeout(() => { el.style.display = 'none'; }, 3000);
    }
    function esc(s) {
      const d = document.createElement('div');
      d.textContent = s;
      return d.innerHTML;
    }
    function ruDate(iso) {
      const [y, m, d] = iso.slice(0, 10).split('-');
      return `${d}.${m}.${y}`;
    }
    async function loadCategories() {
      const res = await fetch('/api/categories');
      const json = await res.json();
      const sel = document.getElementById('category');
      json.categories.forEach(c => {
        const opt = document.createElement('option');
        opt.value = c.name;
        opt.textContent = `${c.name} (${c.shelf_life_days} дн.)`;
        sel.appendChild(opt);
      });
    }
    async function updateForm() {
      const name = document.getElementById('product-name').value;
      const category = document.getElementById('category').value;
      const produced = document.getElementById('production-date').value;
      document.getElementById('print-btn').disabled = !name || !category;
      const info = document.getElementById('category-info');
      if (!category) { info.textContent = ''; return; }
      const qs = new URLSearchParams({ category, production_date: produced });
      const res = await fetch(`/api/expiry?${qs}`);
      if (!res.ok) { info.textContent = ''; return; }
      const e = await res.json();
      info.textContent = `Срок годности: ${e.shelf_life_days} дней · Хранить при ${e.temperature_range} · Годен до ${e.expiry_display}`;
    }
    function renderPreview(label) {
      const el = document.getElementById('preview');
      if (!label) {
        el.className = 'hint';
        el.textContent = 'Заполните форму для предварительного просмотра этикетки';
        return;
      }
      el.className = 'label';
      const warn = label.status === 'expiring_soon'
        ? `<div class="hint">Срок годности истекает через ${label.days_until_expiry} дн.</div>` : '';
      el.innerHTML = `
        <div class="name">${esc(label.product_name.toUpperCase())}</div>
        <div>${esc(label.category)}</div>
        <div class="row"><span>Изготовлено:</span><span>${ruDate(label.production_date)}</span></div>
        <div class="row expiry ${label.status}"><span>Годен до:</span><span>${label.expiry_display}</span></div>
        <div>Хранить при ${esc(label.temperature_range)}</div>
        <div><a href="/api/labels/${encodeURIComponent(label.id)}/label.pdf" target="_blank">PDF</a> · ${esc(label.id)}</div>
        ${warn}`;
    }
    function renderHistory(labels) {
      const el = document.getElementById('history');
      if (!labels.length) {
        el.className = 'hint';
        el.textContent = 'Этикетки еще не печатались';
        return;
      }
      el.className = '';
      const rows = labels.map(l => `
        <tr>
          <td>${esc(l.product_name)}</td>
          <td>${esc(l.category)}</td>
          <td>${l.expiry_display}</td>
          <td><span class="badge ${l.status}">${STATUS[l.status]}</span></td>
          <td>${l.printed_at.replace('T', ' ').slice(0, 16)}</td>
          <td>
            <button class="small" onclick="reprintLabel('${l.id}')">Печать</button>
            <button class="small" onclick="deleteLabel('${l.id}')">Удалить</button>
          </td>
        </tr>`).join('');
      el.innerHTML = `<table><thead><tr><th>Продукт</th><th>Категория</th><th>Годен до</th>
        <th>Статус</th><th>Напечатано</th><th>Действия</th></tr></thead><tbody>${rows}</tbody></table>`;
    }
    async function refresh() {
      const [hist, current] = await Promise.all([
        fetch('/api/labels').then(r => r.json()),
        fetch('/api/labels/current').then(r => r.json()),
      ]);
      renderHistory(hist.labels);
      renderPreview(current.label);
    }
    async function printLabel() {
      const body = {
        product_name: document.getElementById('product-name').value,
        category: document.getElementById('category').value,
        production_date: document.getElementById('production-date').value,
      };
      const res = await fetch('/api/labels', {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify(body),
      });
      const json = await res.json();
      if (!res.ok) { toast(json.error || 'Ошибка печати'); return; }
      toast(`Этикетка для "${json.product_name}" успешно напечатана.`);
      refresh();
    }
    async function reprintLabel(id) {
      const res = await fetch(`/api/labels/${encodeURIComponent(id)}/reprint`, { method: 'POST' });
      const json = await res.json();
      if (!res.ok) { toast(json.error || 'Ошибка печати'); return; }
      toast(`Этикетка для "${json.product_name}" перепечатана.`);
      refresh();
    }
    async function deleteLabel(id) {
      await fetch(`/api/labels/${encodeURIComponent(id)}`, { method: 'DELETE' });
      toast('Запись об этикетке удалена из истории.');
      refresh();
    }
    document.getElementById('production-date').value = new Date().toISOString().split('T')[0];
    loadCategories().then(refresh);
  </script>
</body>
</html>
"""


app = create_app()
