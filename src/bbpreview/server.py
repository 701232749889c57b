"""FastAPI web service for BBCode previews.

Endpoints::

    GET  /              Web UI (single-page HTML).
    POST /convert       Upload a .bbcode file and receive the preview back.
    POST /convert/text  Send raw BBCode text, receive the preview.
    GET  /health        Health check.
    GET  /themes        List available theme presets.

Run::

    uvicorn bbpreview.server:app --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

from bbpreview import __version__
from bbpreview.preview import Previewer
from bbpreview.themes import ThemeManager

logger = logging.getLogger(__name__)

app = FastAPI(
    title="bbpreview",
    description="BBCode to HTML preview service",
    version=__version__,
)

# Rendered previews are shown without script execution or same-origin access.
PREVIEW_HEADERS = {
    "Content-Security-Policy": "sandbox; script-src 'none'",
    "X-Content-Type-Options": "nosniff",
}

_STATIC_DIR = Path(__file__).parent / "static"
try:
    _INDEX_HTML = (_STATIC_DIR / "index.html").read_text(encoding="utf-8")
except FileNotFoundError:
    _INDEX_HTML = "<html><body><h1>bbpreview</h1><p>Web UI not found.</p></body></html>"


def _render(text: str, theme: str, fragment: bool) -> HTMLResponse:
    try:
        previewer = Previewer(theme=theme)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    html = previewer.render_text(text, fragment_only=fragment)
    return HTMLResponse(content=html, headers=PREVIEW_HEADERS)


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Serve the web UI."""
    return HTMLResponse(content=_INDEX_HTML)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/themes")
async def list_themes() -> dict[str, list[str]]:
    """List available theme presets."""
    return {"themes": ThemeManager.PRESETS}


@app.post("/convert", response_class=HTMLResponse)
async def convert_file(
    file: UploadFile = File(...),
    theme: str = Form(ThemeManager.DEFAULT),
    encoding: str = Form("utf-8"),
    fragment: bool = Form(False),
) -> HTMLResponse:
    """Upload a BBCode file and receive its preview.

    - **file**: BBCode file (.bbcode)
    - **theme**: Theme preset name (vscode, system, custom-properties)
    - **encoding**: Source file encoding
    - **fragment**: Return only the HTML fragment
    """
    raw = await file.read()
    try:
        text = raw.decode(encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        logger.warning("Rejected upload %r: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=f"Cannot decode upload: {exc}") from exc
    return _render(text, theme, fragment)


@app.post("/convert/text", response_class=HTMLResponse)
async def convert_text(
    bbcode: str = Form(""),
    theme: str = Form(ThemeManager.DEFAULT),
    fragment: bool = Form(False),
) -> HTMLResponse:
    """Send raw BBCode text and receive its preview.

    - **bbcode**: BBCode source text
    - **theme**: Theme preset name
    - **fragment**: Return only the HTML fragment
    """
    return _render(bbcode, theme, fragment)
