"""
异常定义
"""

from __future__ import annotations


class ExamPrintError(Exception):
    """examprint 异常基类"""


class InputValidationError(ExamPrintError):
    """请求缺少必需输入（HTTP 400），message 即返回给调用方的原因"""


class RenderError(ExamPrintError):
    """
    渲染失败（浏览器启动失败、内容加载超时、导出失败等）

    message 是可以返回给调用方的通用提示，具体原因通过 __cause__ 链接，只在服务端输出。
    """


class MathTypesetError(ExamPrintError):
    """公式排版失败，由 MathSegmenter 内部处理，不会中断外层渲染"""
