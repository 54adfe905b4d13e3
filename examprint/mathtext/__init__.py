"""
公式模块

题干文本的公式切分与 MathML 排版
"""

from .segmenter import Segment, SegmentKind, render_math_text, segment, typeset

__all__ = [
    "Segment",
    "SegmentKind",
    "render_math_text",
    "segment",
    "typeset",
]
