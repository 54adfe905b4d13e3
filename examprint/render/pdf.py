"""
PDF 渲染器

使用 Playwright 在无头 Chromium 中加载 HTML 并导出分页 PDF。

浏览器启动方式（BrowserLauncher）在进程启动时选定一次：
- ServerlessChromiumLauncher: Serverless 环境中使用精简版 Chromium 可执行文件
- LocalChromiumLauncher: 本地使用 Playwright 安装的 Chromium
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from playwright.async_api import async_playwright
from rich.console import Console

from ..errors import RenderError

if TYPE_CHECKING:
    from playwright.async_api import Browser, Playwright

    from ..config import RenderConfig

console = Console(stderr=True)

PDF_MEDIA_TYPE = "application/pdf"

# 判断是否运行在 Serverless 平台的环境变量
SERVERLESS_ENV_MARKERS = ("AWS_LAMBDA_FUNCTION_NAME", "VERCEL", "K_SERVICE")

BASE_CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

SERVERLESS_CHROMIUM_ARGS = BASE_CHROMIUM_ARGS + [
    "--no-first-run",
    "--no-zygote",
    "--single-process",
]


class BrowserLauncher(ABC):
    """浏览器启动策略抽象基类"""

    @property
    @abstractmethod
    def name(self) -> str:
        """策略名称"""
        pass

    @abstractmethod
    async def launch(self, playwright: "Playwright") -> "Browser":
        """启动浏览器进程"""
        pass

    @asynccontextmanager
    async def open(self) -> AsyncIterator["Browser"]:
        """
        启动浏览器并在退出时释放

        无论正常结束、抛出异常还是被取消（请求超时），
        浏览器进程和 Playwright 驱动都会被关闭。
        """
        async with async_playwright() as playwright:
            browser = await self.launch(playwright)
            try:
                yield browser
            finally:
                await browser.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.name}>"


class ServerlessChromiumLauncher(BrowserLauncher):
    """精简版 Chromium（Lambda / Vercel / Cloud Run 等受限环境）"""

    def __init__(self, executable_path: str | None = None, args: list[str] | None = None):
        self.executable_path = executable_path
        self.args = args or list(SERVERLESS_CHROMIUM_ARGS)

    @property
    def name(self) -> str:
        return "serverless"

    async def launch(self, playwright: "Playwright") -> "Browser":
        return await playwright.chromium.launch(
            executable_path=self.executable_path,
            args=self.args,
            headless=True,
        )


class LocalChromiumLauncher(BrowserLauncher):
    """本地完整安装的 Chromium（playwright install chromium）"""

    def __init__(self, args: list[str] | None = None):
        self.args = args or list(BASE_CHROMIUM_ARGS)

    @property
    def name(self) -> str:
        return "local"

    async def launch(self, playwright: "Playwright") -> "Browser":
        return await playwright.chromium.launch(args=self.args, headless=True)


def is_serverless_environment(environ: dict[str, str] | None = None) -> bool:
    """检查是否运行在 Serverless 平台"""
    environ = os.environ if environ is None else environ
    return any(environ.get(marker) for marker in SERVERLESS_ENV_MARKERS)


def select_launcher(config: "RenderConfig", environ: dict[str, str] | None = None) -> BrowserLauncher:
    """
    根据配置选择浏览器启动策略（每个进程调用一次）

    Args:
        config: 渲染配置
        environ: 环境变量，默认 os.environ

    Returns:
        浏览器启动策略
    """
    if config.browser == "serverless":
        return ServerlessChromiumLauncher(config.chromium_executable_path)
    if config.browser == "local":
        return LocalChromiumLauncher()
    if config.chromium_executable_path or is_serverless_environment(environ):
        return ServerlessChromiumLauncher(config.chromium_executable_path)
    return LocalChromiumLauncher()


class PdfRenderer:
    """
    PDF 渲染器

    每次调用独占一个浏览器进程，调用结束即释放，不在请求之间共享
    """

    def __init__(
        self,
        launcher: BrowserLauncher,
        *,
        load_timeout: float = 30.0,
        page_format: str = "A4",
        margin: str = "10mm",
        viewport: tuple[int, int] = (1200, 800),
    ):
        """
        初始化渲染器

        Args:
            launcher: 浏览器启动策略
            load_timeout: 等待页面网络空闲的超时时间（秒）
            page_format: 纸张尺寸
            margin: 四边页边距
            viewport: 视口宽高
        """
        self.launcher = launcher
        self.load_timeout = load_timeout
        self.page_format = page_format
        self.margin = margin
        self.viewport = viewport

    @classmethod
    def from_config(cls, config: "RenderConfig", launcher: BrowserLauncher | None = None) -> "PdfRenderer":
        return cls(
            launcher or select_launcher(config),
            load_timeout=config.load_timeout,
            page_format=config.page_format,
            margin=config.page_margin,
        )

    async def render(self, html: str) -> bytes:
        """
        将 HTML 导出为 PDF

        Args:
            html: 完整的 HTML 文档

        Returns:
            PDF 文件内容

        Raises:
            RenderError: 浏览器启动、页面加载或导出失败
        """
        try:
            async with self.launcher.open() as browser:
                width, height = self.viewport
                page = await browser.new_page(viewport={"width": width, "height": height})
                # 等待网络空闲，确保远程图片加载完成
                await page.set_content(
                    html,
                    wait_until="networkidle",
                    timeout=self.load_timeout * 1000,
                )
                return await page.pdf(
                    format=self.page_format,
                    print_background=True,
                    display_header_footer=False,
                    margin={
                        "top": self.margin,
                        "bottom": self.margin,
                        "left": self.margin,
                        "right": self.margin,
                    },
                )
        except Exception as e:
            console.print(f"[red]PDF 生成失败 ({self.launcher.name}): {e!r}[/red]")
            raise RenderError("Failed to generate PDF") from e
