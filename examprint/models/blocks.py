"""
Word 文档块模型

DocxRenderer 先把 Paper 转成有序的块列表，再写入 python-docx。
块类型是封闭集合：Heading / Paragraph / OptionList，按 kind 字段区分。
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Align(str, Enum):
    """段落对齐方式"""
    LEFT = "left"
    CENTER = "center"


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class Heading(_Block):
    """标题块"""
    kind: Literal["heading"] = "heading"
    text: str
    level: int = Field(default=2, ge=1, le=9)


class Paragraph(_Block):
    """普通段落块（单个文本 run）"""
    kind: Literal["paragraph"] = "paragraph"
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    align: Align = Align.LEFT
    size_pt: float | None = Field(default=None, description="字号（磅），None 表示使用默认样式")
    space_before_pt: float | None = None
    space_after_pt: float | None = None


class OptionList(_Block):
    """选择题选项列表块"""
    kind: Literal["options"] = "options"
    question_number: int
    options: list[tuple[str, str]] = Field(default_factory=list, description="(字母, 选项文本) 列表")

    @property
    def letters(self) -> list[str]:
        return [label for label, _ in self.options]


Block = Annotated[Union[Heading, Paragraph, OptionList], Field(discriminator="kind")]
