"""
HTTP 服务

POST /pdf   {html?, paper?}  -> application/pdf
POST /word  {paper}          -> .docx
POST /math  {text}           -> 公式切分结果

同一组路由同时挂载在根路径和 /api 下。
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from rich.console import Console

from .config import RenderConfig, load_config
from .errors import InputValidationError, RenderError
from .mathtext import render_math_text, segment
from .models import Paper
from .render import DocxRenderer, HtmlRenderer, PdfRenderer, docx_filename, select_launcher
from .render.pdf import PDF_MEDIA_TYPE
from .render.word import DOCX_MEDIA_TYPE

console = Console(stderr=True)

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise InputValidationError("invalid JSON body")
    if not isinstance(body, dict):
        raise InputValidationError("invalid JSON body")
    return body


def _parse_paper(data: Any) -> Paper:
    try:
        return Paper.model_validate(data)
    except ValidationError as e:
        console.print(f"[yellow]试卷数据校验失败: {e.error_count()} 处错误[/yellow]")
        raise InputValidationError("invalid paper data") from e


def _origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


@router.post("/pdf")
async def generate_pdf(request: Request) -> Response:
    """生成 PDF：html 优先；只有 paper 时先渲染为 HTML"""
    state = request.app.state
    try:
        body = await _read_body(request)
        html = body.get("html")
        paper_data = body.get("paper")
        if html is not None and not isinstance(html, str):
            raise InputValidationError("html must be a string")
        if not html and paper_data is None:
            raise InputValidationError("html or paper required")
        if not html:
            base_href = _origin(request)
            html = state.html_renderer.render(
                _parse_paper(paper_data),
                base_href=base_href,
                asset_base=state.config.asset_base or base_href,
            )
    except InputValidationError as e:
        return _error(str(e), 400)

    try:
        pdf_bytes = await asyncio.wait_for(
            state.pdf_renderer.render(html),
            timeout=state.config.request_timeout,
        )
    except asyncio.TimeoutError:
        console.print(f"[red]PDF 生成超时（{state.config.request_timeout}s），浏览器已终止[/red]")
        return _error("Failed to generate PDF", 500)
    except RenderError as e:
        console.print(f"[red]PDF 生成错误: {e.__cause__!r}[/red]")
        return _error("Failed to generate PDF", 500)

    return Response(
        content=pdf_bytes,
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Disposition": 'attachment; filename="paper.pdf"',
            "Cache-Control": "no-store",
        },
    )


@router.post("/word")
async def generate_word(request: Request) -> Response:
    """生成 Word 文档"""
    try:
        body = await _read_body(request)
        if body.get("paper") is None:
            raise InputValidationError("paper data required")
        paper = _parse_paper(body["paper"])
    except InputValidationError as e:
        return _error(str(e), 400)

    try:
        # python-docx 为同步调用，在线程池中执行
        content = await run_in_threadpool(request.app.state.docx_renderer.render, paper)
    except RenderError as e:
        console.print(f"[red]Word 生成错误: {e.__cause__!r}[/red]")
        return _error("Failed to generate Word document", 500)

    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{docx_filename(paper.exam_title)}"',
            "Cache-Control": "no-store",
        },
    )


@router.post("/math")
async def typeset_math(request: Request) -> Response:
    """题干公式切分与排版（在线题目展示用）"""
    try:
        body = await _read_body(request)
        text = body.get("text")
        if not isinstance(text, str):
            raise InputValidationError("text required")
    except InputValidationError as e:
        return _error(str(e), 400)

    return JSONResponse({
        "segments": [seg.model_dump(mode="json") for seg in segment(text)],
        "html": render_math_text(text),
    })


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    return {"status": "ok", "browser": request.app.state.pdf_renderer.launcher.name}


def create_app(
    config: RenderConfig | None = None,
    pdf_renderer: PdfRenderer | None = None,
) -> FastAPI:
    """
    创建 FastAPI 应用

    浏览器启动策略在这里选定一次，之后所有请求共用同一策略（但各自启动独立的浏览器进程）。

    Args:
        config: 渲染配置，默认从环境变量加载
        pdf_renderer: 自定义 PDF 渲染器（测试时注入）
    """
    config = config or load_config()
    app = FastAPI(title="examprint", description="试卷 PDF / Word 渲染服务")

    app.state.config = config
    app.state.html_renderer = HtmlRenderer(brand=config.brand)
    app.state.docx_renderer = DocxRenderer()
    if pdf_renderer is None:
        launcher = select_launcher(config)
        console.print(f"[dim]浏览器启动策略: {launcher.name}[/dim]")
        pdf_renderer = PdfRenderer.from_config(config, launcher)
    app.state.pdf_renderer = pdf_renderer

    app.include_router(router)
    app.include_router(router, prefix="/api")
    return app
