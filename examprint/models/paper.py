"""
数据模型定义：Paper, Section, Question, Option 等试卷结构

字段名与前端出卷界面提交的 JSON 保持一致（camelCase 别名），
Python 侧使用 snake_case 属性访问。所有模型均为只读，渲染器不会修改输入。
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuestionType(str, Enum):
    """题目类型"""
    MCQ = "mcq"                           # 单选题，带选项
    ASSERTION_REASON = "assertionreason"  # 断言-理由题
    INTEGER = "integer"                   # 整数答案题
    OTHER = "other"                       # 其它（主观题等）


class _PaperModel(BaseModel):
    """试卷模型公共配置：只读、接受别名与属性名、忽略多余字段"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Option(_PaperModel):
    """选项"""
    text: str = Field(default="", description="选项文本")


class Question(_PaperModel):
    """题目数据模型"""
    text: str = Field(default="", description="题干")
    type: QuestionType = Field(default=QuestionType.OTHER, description="题目类型")
    options: list[Option] = Field(default_factory=list, description="选项列表（仅 mcq）")
    assertion: str | None = Field(default=None, description="断言（仅 assertionreason）")
    reason: str | None = Field(default=None, description="理由（仅 assertionreason）")
    integer_answer: int | None = Field(default=None, alias="integerAnswer", description="整数答案")
    diagram_url: str | None = Field(default=None, alias="diagramUrl", description="已保存的图片地址，可为 /uploads/... 相对路径")
    diagram_data_url: str | None = Field(default=None, alias="diagramDataUrl", description="内存预览图（data:image/...）")
    diagram_alt: str | None = Field(default=None, alias="diagramAlt", description="图片替代文本")

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        # 兼容未知题型（如 subjective），统一归为 other
        if isinstance(value, QuestionType):
            return value
        try:
            return QuestionType(str(value).lower())
        except ValueError:
            return QuestionType.OTHER

    @field_validator("options", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def diagram_ref(self) -> str | None:
        """图片引用：内存预览图优先于已保存地址"""
        return self.diagram_data_url or self.diagram_url


class Section(_PaperModel):
    """试卷分区（如 Section A）"""
    title: str = Field(default="", description="分区标题")
    instructions: str | None = Field(default=None, description="分区说明")
    marks_per_question: float | None = Field(default=None, alias="marksPerQuestion", description="每题分值")
    questions: list[Question] = Field(default_factory=list, description="题目列表，顺序决定题号")

    @field_validator("questions", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class PaperMeta(_PaperModel):
    """试卷附加信息"""
    duration_mins: int | None = Field(default=None, alias="durationMins", description="考试时长（分钟）")


class Paper(_PaperModel):
    """试卷数据模型"""
    exam_title: str = Field(default="", alias="examTitle", description="考试标题")
    subject: str | None = Field(default=None, description="科目")
    total_marks: float | None = Field(default=None, alias="totalMarks", description="总分")
    meta: PaperMeta = Field(default_factory=PaperMeta, description="附加信息")
    general_instructions: list[str] = Field(default_factory=list, alias="generalInstructions", description="考生须知")
    sections: list[Section] = Field(default_factory=list, description="分区列表，顺序决定排版顺序")

    @field_validator("general_instructions", "sections", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("meta", mode="before")
    @classmethod
    def _none_to_meta(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def duration_mins(self) -> int | None:
        return self.meta.duration_mins

    def question_count(self) -> int:
        """全卷题目总数"""
        return sum(len(section.questions) for section in self.sections)


def format_number(value: float | int | None) -> str:
    """分值显示：整数不带小数点（10.0 -> 10）"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
