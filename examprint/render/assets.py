"""
资源地址解析

把题目图片引用（如 /uploads/xx.png）转换为无头浏览器可以直接加载的地址。
只做字符串层面的处理，不访问网络，也不校验地址是否可达。
"""

from __future__ import annotations

import re

_ABSOLUTE_REF = re.compile(r"^(data:|https?:)", re.IGNORECASE)


def resolve(ref: str | None, base: str | None = None) -> str:
    """
    解析资源引用

    Args:
        ref: 图片引用，可以是绝对地址、data URI 或根相对路径
        base: 资源基础地址，如 https://example.com

    Returns:
        解析后的地址；ref 为空时返回空字符串
    """
    if not ref:
        return ""
    if _ABSOLUTE_REF.match(ref):
        return ref
    if base and ref.startswith("/"):
        return f"{base.rstrip('/')}{ref}"
    return ref
