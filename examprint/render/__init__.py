"""
渲染模块

负责打印 HTML、PDF 与 Word 文档的生成
"""

from .assets import resolve
from .html import HtmlRenderer, render_paper_html
from .pdf import (
    BrowserLauncher,
    LocalChromiumLauncher,
    PdfRenderer,
    ServerlessChromiumLauncher,
    select_launcher,
)
from .word import DocxRenderer, docx_filename

__all__ = [
    "resolve",
    "HtmlRenderer",
    "render_paper_html",
    "BrowserLauncher",
    "LocalChromiumLauncher",
    "PdfRenderer",
    "ServerlessChromiumLauncher",
    "select_launcher",
    "DocxRenderer",
    "docx_filename",
]
