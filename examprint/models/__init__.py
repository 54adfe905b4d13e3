"""
数据模型模块
"""

from .paper import Paper, PaperMeta, Section, Question, QuestionType, Option, format_number
from .blocks import Align, Block, Heading, OptionList, Paragraph

__all__ = [
    "Paper",
    "PaperMeta",
    "Section",
    "Question",
    "QuestionType",
    "Option",
    "format_number",
    "Align",
    "Block",
    "Heading",
    "OptionList",
    "Paragraph",
]
