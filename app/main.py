import logging
from pathlib import Path

from fastapi import FastAPI, Request, UploadFile, File, HTTPException
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from . import rules
from .config import get_settings
from .grouping import group_tiles
from .loader import load_bytes, load_source
from .models import DashboardResponse, HealthResponse, LoadResult, LoadSummary
from .render import dashboard_context

logging.basicConfig(level=get_settings().log_level)

app = FastAPI(
    title="tile-dashboard",
    description="Grouped link dashboard rendered from a delimited tile table",
    version="0.1.0",
)
BASE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _summary(load: LoadResult) -> LoadSummary:
    return LoadSummary(
        source_name=load.source_name,
        delimiter=rules.DELIMITER_NAMES[load.delimiter],
        header=load.header,
        rows_parsed=load.rows_parsed,
        rows_discarded=load.rows_discarded,
        total_tiles=len(load.rows),
        fallback=load.fallback,
    )


def _render(request: Request, load: LoadResult):
    context = dashboard_context(group_tiles(load.rows), load, get_settings().title)
    return TEMPLATES.TemplateResponse(request, "dashboard.html", context)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request):
    return _render(request, load_source(get_settings().source_path))


@app.get("/groups", response_model=DashboardResponse)
def groups():
    load = load_source(get_settings().source_path)
    return DashboardResponse(groups=group_tiles(load.rows), load=_summary(load))


@app.post("/render", response_class=HTMLResponse)
async def render_upload(request: Request, file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(rules.ALLOWED_UPLOAD_SUFFIXES):
        raise HTTPException(status_code=422, detail="Only .csv, .tsv or .txt files are supported")

    raw = await file.read()
    return _render(request, load_bytes(raw, file.filename))
