"""
Word 导出器

直接由 Paper 生成 .docx 试卷，不依赖 HTML 渲染结果
"""

from __future__ import annotations

import re
from io import BytesIO

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_UNDERLINE
from docx.shared import Cm, Pt

from ..errors import RenderError
from ..models import (
    Align,
    Block,
    Heading,
    OptionList,
    Paper,
    Paragraph,
    QuestionType,
    format_number,
)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# XML 1.0 不允许的控制字符（从 Word 粘贴的文本常带 \x0b）
_XML_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

_ALIGNMENTS = {
    Align.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Align.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
}


class DocxRenderer:
    """
    Word 导出器

    分两步：
    1. build(): Paper -> 有序块列表（纯函数，便于测试）
    2. render(): 块列表 -> python-docx 文档 -> 字节
    """

    def __init__(self, base_font: str = "Calibri", base_size_pt: float = 11):
        self.base_font = base_font
        self.base_size_pt = base_size_pt

    def build(self, paper: Paper) -> list[Block]:
        """
        将试卷转换为块列表

        Args:
            paper: 试卷对象

        Returns:
            按文档顺序排列的块
        """
        blocks: list[Block] = []

        # 标题
        blocks.append(Paragraph(
            text=paper.exam_title, bold=True, size_pt=16,
            align=Align.CENTER, space_after_pt=10,
        ))

        # 科目
        if paper.subject:
            blocks.append(Paragraph(
                text=f"Subject: {paper.subject}", bold=True,
                align=Align.CENTER, space_after_pt=5,
            ))

        # 总分与时长
        meta_info = []
        if paper.total_marks:
            meta_info.append(f"Total Marks: {format_number(paper.total_marks)}")
        if paper.duration_mins:
            meta_info.append(f"Time: {paper.duration_mins} mins")
        if meta_info:
            blocks.append(Paragraph(
                text=" | ".join(meta_info), italic=True,
                align=Align.CENTER, space_after_pt=10,
            ))

        # 考生须知
        if paper.general_instructions:
            blocks.append(Paragraph(
                text="General Instructions:", bold=True, underline=True, space_after_pt=5,
            ))
            for index, instruction in enumerate(paper.general_instructions, 1):
                blocks.append(Paragraph(text=f"{index}. {instruction}", space_after_pt=2.5))
            blocks.append(Paragraph(text="", space_after_pt=10))

        for section in paper.sections:
            title = section.title
            if section.marks_per_question:
                title += f" (Marks per Question: {format_number(section.marks_per_question)})"
            blocks.append(Heading(text=title, level=2))

            if section.instructions:
                blocks.append(Paragraph(text=section.instructions, italic=True, space_after_pt=5))

            for number, question in enumerate(section.questions, 1):
                blocks.append(Paragraph(
                    text=f"{number}. {question.text}", bold=True,
                    space_before_pt=5, space_after_pt=2.5,
                ))
                if question.type is QuestionType.ASSERTION_REASON:
                    blocks.append(Paragraph(text=f"Assertion: {question.assertion or ''}", italic=True))
                    blocks.append(Paragraph(text=f"Reason: {question.reason or ''}", italic=True))
                if question.type is QuestionType.MCQ and question.options:
                    blocks.append(OptionList(
                        question_number=number,
                        options=[(chr(97 + i), option.text) for i, option in enumerate(question.options)],
                    ))

        return blocks

    def render(self, paper: Paper) -> bytes:
        """
        生成 .docx 文件内容

        Raises:
            RenderError: 文档生成失败
        """
        try:
            doc = Document()
            self._set_document_defaults(doc)
            for block in self.build(paper):
                self._add_block(doc, block)
            buffer = BytesIO()
            doc.save(buffer)
            return buffer.getvalue()
        except Exception as e:
            raise RenderError("Failed to generate Word document") from e

    def _set_document_defaults(self, doc: Document) -> None:
        """设置正文默认字体"""
        style = doc.styles["Normal"]
        style.font.name = self.base_font
        style.font.size = Pt(self.base_size_pt)

    def _add_block(self, doc: Document, block: Block) -> None:
        if isinstance(block, Heading):
            heading = doc.add_heading(level=block.level)
            run = heading.add_run(_xml_safe(block.text))
            run.bold = True
            run.font.size = Pt(12)
            heading.paragraph_format.space_before = Pt(10)
            heading.paragraph_format.space_after = Pt(5)
        elif isinstance(block, Paragraph):
            para = doc.add_paragraph()
            run = para.add_run(_xml_safe(block.text))
            run.bold = block.bold
            run.italic = block.italic
            if block.underline:
                run.underline = WD_UNDERLINE.SINGLE
            if block.size_pt:
                run.font.size = Pt(block.size_pt)
            para.alignment = _ALIGNMENTS[block.align]
            if block.space_before_pt is not None:
                para.paragraph_format.space_before = Pt(block.space_before_pt)
            if block.space_after_pt is not None:
                para.paragraph_format.space_after = Pt(block.space_after_pt)
        elif isinstance(block, OptionList):
            for label, text in block.options:
                para = doc.add_paragraph()
                para.add_run(_xml_safe(f"{label}) {text}"))
                para.paragraph_format.left_indent = Cm(0.75)
                para.paragraph_format.space_after = Pt(1.25)
        else:
            raise TypeError(f"未知的块类型: {block!r}")


def _xml_safe(text: str) -> str:
    return _XML_INVALID_CHARS.sub("", text)


def docx_filename(exam_title: str | None) -> str:
    """根据考试标题生成下载文件名，非 [a-z0-9-_] 字符替换为下划线"""
    stem = re.sub(r"[^a-z0-9\-_]+", "_", exam_title or "", flags=re.IGNORECASE) or "paper"
    return f"{stem}.docx"
