"""
测试 HTTP 接口
"""

import asyncio
from io import BytesIO
from types import SimpleNamespace

import pytest
from docx import Document
from fastapi.testclient import TestClient

from examprint.config import RenderConfig
from examprint.errors import RenderError
from examprint.server import create_app


class FakePdfRenderer:
    """记录收到的 HTML，返回固定 PDF 内容"""

    def __init__(self, error=None, delay=0.0):
        self.launcher = SimpleNamespace(name="fake")
        self.error = error
        self.delay = delay
        self.received = []

    async def render(self, html):
        self.received.append(html)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return b"%PDF-1.4 fake"


def make_client(pdf_renderer=None, **config):
    app = create_app(RenderConfig(**config), pdf_renderer=pdf_renderer or FakePdfRenderer())
    return TestClient(app), app


def test_pdf_requires_html_or_paper():
    client, _ = make_client()
    response = client.post("/pdf", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "html or paper required"}


def test_pdf_from_html():
    renderer = FakePdfRenderer()
    client, _ = make_client(renderer)
    response = client.post("/pdf", json={"html": "<p>ready</p>"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="paper.pdf"'
    assert response.headers["cache-control"] == "no-store"
    assert response.content == b"%PDF-1.4 fake"
    assert renderer.received == ["<p>ready</p>"]


def test_pdf_from_paper_uses_request_origin(paper_data):
    renderer = FakePdfRenderer()
    client, _ = make_client(renderer)
    response = client.post("/pdf", json={"paper": paper_data})

    assert response.status_code == 200
    html = renderer.received[0]
    assert '<base href="http://testserver/">' in html
    assert 'src="http://testserver/uploads/vectors.png"' in html


def test_pdf_configured_asset_base(paper_data):
    renderer = FakePdfRenderer()
    client, _ = make_client(renderer, asset_base="https://cdn.test")
    client.post("/pdf", json={"paper": paper_data})

    assert 'src="https://cdn.test/uploads/vectors.png"' in renderer.received[0]


def test_pdf_render_failure_is_generic():
    cause = RuntimeError("chromium crashed at /tmp/secret")
    error = RenderError("Failed to generate PDF")
    error.__cause__ = cause
    client, _ = make_client(FakePdfRenderer(error=error))
    response = client.post("/pdf", json={"html": "<p></p>"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate PDF"}
    assert "secret" not in response.text


def test_pdf_timeout():
    client, _ = make_client(FakePdfRenderer(delay=5), request_timeout=0.05)
    response = client.post("/pdf", json={"html": "<p></p>"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate PDF"}


def test_word_requires_paper():
    client, _ = make_client()
    response = client.post("/word", json={"html": "<p></p>"})

    assert response.status_code == 400
    assert response.json() == {"error": "paper data required"}


def test_word_minimal_paper():
    client, _ = make_client()
    response = client.post("/word", json={"paper": {"examTitle": "Test"}})

    assert response.status_code == 200
    assert response.headers["content-type"] == (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    assert response.headers["content-disposition"] == 'attachment; filename="Test.docx"'
    doc = Document(BytesIO(response.content))
    assert doc.paragraphs[0].text == "Test"


def test_word_filename_is_sanitized(paper_data):
    paper_data["examTitle"] = "Physics / Unit Test #1"
    client, _ = make_client()
    response = client.post("/word", json={"paper": paper_data})

    assert response.headers["content-disposition"] == 'attachment; filename="Physics_Unit_Test_1.docx"'


def test_word_untitled_paper():
    client, _ = make_client()
    response = client.post("/word", json={"paper": {}})

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="paper.docx"'


def test_word_render_failure(monkeypatch):
    client, app = make_client()

    def broken(paper):
        raise RenderError("Failed to generate Word document")

    monkeypatch.setattr(app.state.docx_renderer, "render", broken)
    response = client.post("/word", json={"paper": {"examTitle": "T"}})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate Word document"}


def test_invalid_bodies():
    client, _ = make_client()

    response = client.post("/word", content=b"not json", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid JSON body"}

    response = client.post("/pdf", json=["html"])
    assert response.status_code == 400

    response = client.post("/word", json={"paper": {"sections": "nope"}})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid paper data"}


def test_pdf_rejects_non_string_html():
    renderer = FakePdfRenderer()
    client, _ = make_client(renderer)
    response = client.post("/pdf", json={"html": {"x": 1}})

    assert response.status_code == 400
    assert response.json() == {"error": "html must be a string"}
    assert renderer.received == []


def test_word_strips_control_characters(paper_data):
    paper_data["sections"][0]["questions"][0]["text"] = "pasted\x0btext"
    client, _ = make_client()
    response = client.post("/word", json={"paper": paper_data})

    assert response.status_code == 200
    doc = Document(BytesIO(response.content))
    assert "1. pastedtext" in [p.text for p in doc.paragraphs]


def test_word_renders_off_the_event_loop(monkeypatch):
    client, app = make_client()
    original = app.state.docx_renderer.render
    loops = []

    def render(paper):
        try:
            loops.append(asyncio.get_running_loop())
        except RuntimeError:
            loops.append(None)
        return original(paper)

    monkeypatch.setattr(app.state.docx_renderer, "render", render)
    response = client.post("/word", json={"paper": {"examTitle": "T"}})

    assert response.status_code == 200
    assert loops == [None]


@pytest.mark.parametrize("path", ["/word", "/api/word"])
def test_routes_mounted_under_api(path):
    client, _ = make_client()
    assert client.post(path, json={"paper": {"examTitle": "T"}}).status_code == 200


def test_math_endpoint():
    client, _ = make_client()
    response = client.post("/math", json={"text": "Solve $x$ and $$y$$"})

    assert response.status_code == 200
    body = response.json()
    assert [s["kind"] for s in body["segments"]] == ["plain", "inline", "plain", "display"]
    assert '<div class="math-display">' in body["html"]

    assert client.post("/math", json={}).json() == {"error": "text required"}


def test_health():
    client, _ = make_client()
    assert client.get("/health").json() == {"status": "ok", "browser": "fake"}
