"""
examprint CLI 命令行入口

提供以下命令：
- html: 试卷 -> 打印用 HTML
- pdf: 试卷 -> PDF（无头 Chromium）
- word: 试卷 -> Word
- math: 查看题干公式切分结果
- outline: 查看试卷题号结构
- serve: 启动 HTTP 服务
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import load_config, load_paper
from .errors import ExamPrintError
from .mathtext import segment
from .models import OptionList, Heading, Paper, Paragraph
from .render import DocxRenderer, HtmlRenderer, PdfRenderer, docx_filename, select_launcher


app = typer.Typer(
    name="examprint",
    help="examprint - 试卷 PDF / Word 渲染工具",
    add_completion=False,
)

console = Console()


def _load(input_file: Path) -> Paper:
    try:
        return load_paper(input_file)
    except (OSError, ValueError) as e:
        console.print(f"[red]错误: 无法读取试卷文件 {input_file}: {e}[/red]")
        raise typer.Exit(code=1)


@app.command("html")
def html(
    input_file: Path = typer.Argument(..., help="试卷 JSON / YAML 文件", exists=True),
    output_file: Path = typer.Option(..., "--output", "-o", help="输出 HTML 文件路径"),
    asset_base: Optional[str] = typer.Option(None, "--asset-base", help="图片资源基础地址"),
    base_href: Optional[str] = typer.Option(None, "--base-href", help="页面 <base> 地址"),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """
    将试卷渲染为打印用 HTML
    """
    config = load_config(env_file)
    paper = _load(input_file)

    content = HtmlRenderer(brand=config.brand).render(
        paper,
        base_href=base_href,
        asset_base=asset_base or config.asset_base,
    )
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(content, encoding="utf-8")
    console.print(f"[green]✓ HTML 已生成: {output_file}[/green]")


@app.command("pdf")
def pdf(
    input_file: Path = typer.Argument(..., help="试卷 JSON / YAML 文件", exists=True),
    output_file: Path = typer.Option(Path("paper.pdf"), "--output", "-o", help="输出 PDF 文件路径"),
    asset_base: Optional[str] = typer.Option(None, "--asset-base", help="图片资源基础地址"),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """
    将试卷导出为 PDF

    需要先安装浏览器: playwright install chromium
    """
    config = load_config(env_file)
    paper = _load(input_file)

    launcher = select_launcher(config)
    console.print(Panel(
        "[bold]examprint PDF 导出[/bold]\n"
        f"考试标题: {paper.exam_title or '（未命名）'}\n"
        f"题目数量: {paper.question_count()}\n"
        f"浏览器: {launcher.name}",
        border_style="blue",
    ))

    content = HtmlRenderer(brand=config.brand).render(paper, asset_base=asset_base or config.asset_base)
    renderer = PdfRenderer.from_config(config, launcher)

    async def run() -> bytes:
        return await asyncio.wait_for(renderer.render(content), timeout=config.request_timeout)

    console.print("[cyan]📄 正在生成 PDF...[/cyan]")
    try:
        pdf_bytes = asyncio.run(run())
    except asyncio.TimeoutError:
        console.print(f"[red]错误: PDF 生成超时（{config.request_timeout}s）[/red]")
        raise typer.Exit(code=1)
    except ExamPrintError as e:
        console.print(f"[red]错误: {e} ({e.__cause__!r})[/red]")
        raise typer.Exit(code=1)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_bytes(pdf_bytes)
    console.print(f"[green]✓ PDF 已生成: {output_file}[/green]")


@app.command("word")
def word(
    input_file: Path = typer.Argument(..., help="试卷 JSON / YAML 文件", exists=True),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="输出 .docx 路径（默认按考试标题命名）"),
) -> None:
    """
    将试卷导出为 Word 文档
    """
    paper = _load(input_file)
    output_path = output_file or Path(docx_filename(paper.exam_title))

    console.print("[cyan]📝 正在生成 Word 文档...[/cyan]")
    try:
        content = DocxRenderer().render(paper)
    except ExamPrintError as e:
        console.print(f"[red]错误: {e} ({e.__cause__!r})[/red]")
        raise typer.Exit(code=1)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(content)
    console.print(f"[green]✓ Word 文档已生成: {output_path}[/green]")


@app.command("math")
def math(
    text: str = typer.Argument(..., help="题干文本，公式用 $...$ 或 $$...$$ 包裹"),
) -> None:
    """
    查看题干的公式切分结果
    """
    table = Table(title="公式切分", show_header=True)
    table.add_column("位置", justify="right")
    table.add_column("类型", style="cyan")
    table.add_column("内容")
    table.add_column("排版", justify="center")

    for seg in segment(text):
        status = "[red]✗[/red]" if seg.error else "[green]✓[/green]"
        table.add_row(f"{seg.start}-{seg.end}", seg.kind.value, seg.content, status)

    console.print(table)


@app.command("outline")
def outline(
    input_file: Path = typer.Argument(..., help="试卷 JSON / YAML 文件", exists=True),
) -> None:
    """
    查看试卷结构（分区、题号、选项字母）
    """
    paper = _load(input_file)
    display_outline(paper)


def display_outline(paper: Paper) -> None:
    """按 Word 文档块显示试卷结构"""
    table = Table(title=paper.exam_title or "试卷结构", show_header=True)
    table.add_column("分区", style="cyan")
    table.add_column("题号", justify="right")
    table.add_column("选项", justify="center")

    rows: list[list[str]] = []
    section_title = None
    for block in DocxRenderer().build(paper):
        if isinstance(block, Heading):
            section_title = block.text
        elif isinstance(block, Paragraph) and section_title is not None and block.bold:
            rows.append([section_title, block.text.split(".", 1)[0], "[dim]-[/dim]"])
        elif isinstance(block, OptionList):
            rows[-1][2] = ", ".join(block.letters)

    for row in rows:
        table.add_row(*row)
    console.print(table)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="监听地址"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="监听端口"),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """
    启动 HTTP 渲染服务
    """
    import uvicorn

    from .server import create_app

    config = load_config(env_file)
    console.print(Panel(
        "[bold]examprint 渲染服务[/bold]\n"
        f"地址: http://{host or config.host}:{port or config.port}\n"
        f"资源基础地址: {config.asset_base or '（使用请求来源）'}",
        border_style="blue",
    ))
    uvicorn.run(create_app(config), host=host or config.host, port=port or config.port)


if __name__ == "__main__":
    app()
