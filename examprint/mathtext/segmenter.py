"""
题干公式切分与排版

把题干文本切分成普通文本、行内公式（$...$）和独立公式（$$...$$）三类片段，
公式片段通过 latex2mathml 转成 MathML。用于在线题目展示，不参与打印模板。
"""

from __future__ import annotations

import re
from enum import Enum

from latex2mathml.converter import convert as latex_to_mathml
from markupsafe import escape
from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console

from ..errors import MathTypesetError

console = Console(stderr=True)

# 先匹配 $$...$$，内容中不允许出现 $$
DISPLAY_MATH = re.compile(r"\$\$((?:(?!\$\$).)+?)\$\$", re.DOTALL)
# 再匹配 $...$，内容不跨行、不含 $
INLINE_MATH = re.compile(r"\$([^$\n]+?)\$")


class SegmentKind(str, Enum):
    """片段类型"""
    PLAIN = "plain"
    INLINE = "inline"
    DISPLAY = "display"


class Segment(BaseModel):
    """切分结果片段，[start, end) 为在原文中的位置"""
    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    content: str = Field(..., description="片段内容（公式不含定界符）")
    start: int
    end: int
    markup: str = Field(default="", description="展示用 HTML/MathML")
    error: str | None = Field(default=None, description="公式排版失败原因")


def typeset(latex: str, display: bool = False) -> str:
    """
    将 LaTeX 公式转换为 MathML

    Raises:
        MathTypesetError: 公式无法解析
    """
    try:
        return latex_to_mathml(latex, display="block" if display else "inline")
    except Exception as e:
        raise MathTypesetError(str(e) or e.__class__.__name__) from e


def _find_math_spans(text: str) -> list[tuple[int, int, str, SegmentKind]]:
    """查找全部公式位置，独立公式优先，返回按起点排序的列表"""
    display = [
        (m.start(), m.end(), m.group(1), SegmentKind.DISPLAY)
        for m in DISPLAY_MATH.finditer(text)
    ]

    def overlaps_display(start: int, end: int) -> bool:
        return any(start < d_end and end > d_start for d_start, d_end, _, _ in display)

    inline = [
        (m.start(), m.end(), m.group(1), SegmentKind.INLINE)
        for m in INLINE_MATH.finditer(text)
        if not overlaps_display(m.start(), m.end())
    ]
    return sorted(display + inline, key=lambda span: span[0])


def _math_segment(text: str, start: int, end: int, content: str, kind: SegmentKind) -> Segment:
    try:
        markup = typeset(content, display=kind is SegmentKind.DISPLAY)
        return Segment(kind=kind, content=content, start=start, end=end, markup=markup)
    except MathTypesetError as e:
        console.print(f"[yellow]⚠ 公式排版失败，按原文显示: {text[start:end]!r} ({e})[/yellow]")
        raw = text[start:end]
        markup = f'<code class="math-error" title="{escape(str(e))}">{escape(raw)}</code>'
        return Segment(kind=kind, content=content, start=start, end=end, markup=markup, error=str(e))


def _plain_segment(text: str, start: int, end: int) -> Segment:
    content = text[start:end]
    return Segment(kind=SegmentKind.PLAIN, content=content, start=start, end=end, markup=str(escape(content)))


def segment(text: str) -> list[Segment]:
    """
    切分题干文本

    片段按原文顺序排列，首尾相接、无重叠、无遗漏；
    未闭合的 $ 原样保留在普通文本中。

    Args:
        text: 题干文本

    Returns:
        片段列表；空文本返回空列表
    """
    if not text:
        return []

    segments: list[Segment] = []
    cursor = 0
    for start, end, content, kind in _find_math_spans(text):
        if cursor < start:
            segments.append(_plain_segment(text, cursor, start))
        segments.append(_math_segment(text, start, end, content, kind))
        cursor = end
    if cursor < len(text):
        segments.append(_plain_segment(text, cursor, len(text)))
    return segments


def render_math_text(text: str) -> str:
    """把题干渲染成可直接插入页面的 HTML 片段"""
    parts = []
    for seg in segment(text):
        if seg.kind is SegmentKind.DISPLAY:
            parts.append(f'<div class="math-display">{seg.markup}</div>')
        elif seg.kind is SegmentKind.INLINE:
            parts.append(f'<span class="math-inline">{seg.markup}</span>')
        else:
            parts.append(f"<span>{seg.markup}</span>")
    return "".join(parts)
