"""Tests for the FastAPI web service."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from bbpreview.server import app

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_BBCODE = FIXTURE_DIR / "sample.bbcode"


@pytest.fixture
def client():
    """Create an async test client."""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
class TestHealthEndpoint:

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert "version" in data


@pytest.mark.asyncio
class TestThemesEndpoint:

    async def test_list_themes(self, client):
        resp = await client.get("/themes")
        assert resp.status_code == 200
        data = resp.json()
        assert "vscode" in data["themes"]


@pytest.mark.asyncio
class TestConvertFileEndpoint:

    async def test_convert_file_upload(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("post.bbcode", b"[b]Hello[/b]", "text/plain")},
            data={"theme": "system"},
        )
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "<strong>Hello</strong>" in resp.text
        assert "CanvasText" in resp.text

    async def test_preview_is_sandboxed(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("post.bbcode", b"x", "text/plain")},
        )
        csp = resp.headers["content-security-policy"]
        assert "sandbox" in csp
        assert "script-src 'none'" in csp

    async def test_convert_sample_fixture(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("sample.bbcode", SAMPLE_BBCODE.read_bytes(), "text/plain")},
        )
        assert resp.status_code == 200
        assert "<summary>Spoiler</summary>" in resp.text

    async def test_undecodable_upload(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("post.bbcode", b"\xff\xfe\xfa", "text/plain")},
        )
        assert resp.status_code == 400

    async def test_unknown_theme(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("post.bbcode", b"x", "text/plain")},
            data={"theme": "neon"},
        )
        assert resp.status_code == 400


@pytest.mark.asyncio
class TestConvertTextEndpoint:

    async def test_convert_text(self, client):
        resp = await client.post("/convert/text", data={"bbcode": "[i]x[/i]"})
        assert resp.status_code == 200
        assert resp.text.startswith("<!DOCTYPE html>")
        assert '<div class="container"><em>x</em></div>' in resp.text

    async def test_fragment_only(self, client):
        resp = await client.post(
            "/convert/text",
            data={"bbcode": "[url=http://x]y[/url]", "fragment": "true"},
        )
        assert resp.status_code == 200
        assert resp.text == '<a href="http://x" target="_blank" rel="noopener">y</a>'

    async def test_raw_html_is_escaped(self, client):
        resp = await client.post(
            "/convert/text",
            data={"bbcode": "<script>alert(1)</script>", "fragment": "true"},
        )
        assert resp.text == "&lt;script&gt;alert(1)&lt;/script&gt;"

    async def test_unicode_text(self, client):
        resp = await client.post(
            "/convert/text",
            data={"bbcode": "[b]한글[/b]", "fragment": "true"},
        )
        assert resp.text == "<strong>한글</strong>"


@pytest.mark.asyncio
class TestWebUI:

    async def test_index_returns_html(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert "text/html" in resp.headers.get("content-type", "")

    async def test_index_contains_key_elements(self, client):
        resp = await client.get("/")
        html = resp.text
        assert "<textarea" in html
        assert "<select" in html
        assert "<button" in html

    async def test_preview_frame_is_sandboxed(self, client):
        resp = await client.get("/")
        html = resp.text
        assert "<iframe" in html
        assert "sandbox" in html
        assert "allow-scripts" not in html
