"""
examprint: 试卷渲染服务
从结构化试卷描述生成打印用 PDF 与 Word 文档
"""

__version__ = "0.1.0"

from .models import Paper, Section, Question, QuestionType, Option
from .config import load_config, load_paper, save_paper, RenderConfig
from .errors import ExamPrintError, InputValidationError, RenderError, MathTypesetError
from .mathtext import segment, render_math_text
from .render import resolve, HtmlRenderer, PdfRenderer, DocxRenderer, select_launcher

__all__ = [
    # 版本
    "__version__",
    # 模型
    "Paper",
    "Section",
    "Question",
    "QuestionType",
    "Option",
    # 配置
    "load_config",
    "load_paper",
    "save_paper",
    "RenderConfig",
    # 异常
    "ExamPrintError",
    "InputValidationError",
    "RenderError",
    "MathTypesetError",
    # 公式
    "segment",
    "render_math_text",
    # 渲染
    "resolve",
    "HtmlRenderer",
    "PdfRenderer",
    "DocxRenderer",
    "select_launcher",
]
