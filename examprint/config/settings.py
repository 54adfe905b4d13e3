"""
配置管理模块
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..models import Paper


class RenderConfig(BaseModel):
    """渲染服务配置"""
    asset_base: str | None = Field(default=None, description="图片资源基础地址，未配置时使用请求来源")
    browser: Literal["auto", "serverless", "local"] = Field(default="auto", description="浏览器启动策略")
    chromium_executable_path: str | None = Field(default=None, description="精简版 Chromium 可执行文件路径")
    load_timeout: float = Field(default=30.0, gt=0, description="页面加载超时（秒）")
    request_timeout: float = Field(default=60.0, gt=0, description="单次 PDF 渲染总时长上限（秒）")
    page_format: str = Field(default="A4", description="纸张尺寸")
    page_margin: str = Field(default="10mm", description="页边距")
    brand: str | None = Field(default=None, description="试卷页眉品牌名称（同时用作水印）")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def load_config(env_file: str | Path | None = None) -> RenderConfig:
    """
    从环境变量加载配置

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env

    Returns:
        RenderConfig 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return RenderConfig(
        asset_base=_first_env(
            "EXAMPRINT_ASSET_BASE_URL",
            "ASSET_BASE_URL",
            "API_BASE_URL",
            "PUBLIC_BASE_URL",
        ),
        browser=os.getenv("EXAMPRINT_BROWSER", "auto").lower(),
        chromium_executable_path=os.getenv("CHROMIUM_EXECUTABLE_PATH") or None,
        load_timeout=float(os.getenv("EXAMPRINT_LOAD_TIMEOUT", "30")),
        request_timeout=float(os.getenv("EXAMPRINT_REQUEST_TIMEOUT", "60")),
        page_format=os.getenv("EXAMPRINT_PAGE_FORMAT", "A4"),
        page_margin=os.getenv("EXAMPRINT_PAGE_MARGIN", "10mm"),
        brand=os.getenv("EXAMPRINT_BRAND") or None,
        host=os.getenv("EXAMPRINT_HOST", "127.0.0.1"),
        port=int(os.getenv("EXAMPRINT_PORT", "8000")),
    )


def load_paper(file_path: str | Path) -> Paper:
    """
    从 JSON / YAML 文件加载试卷

    文件内容可以直接是试卷对象，也可以是 {"paper": {...}} 形式

    Args:
        file_path: 文件路径（.json / .yaml / .yml）

    Returns:
        Paper 实例
    """
    file_path = Path(file_path)
    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"试卷文件格式错误: {file_path}")
    if isinstance(data.get("paper"), dict):
        data = data["paper"]
    return Paper.model_validate(data)


def save_paper(paper: Paper, file_path: str | Path) -> None:
    """
    将试卷保存为 JSON / YAML 文件（camelCase 字段，省略未设置的字段）

    Args:
        paper: Paper 实例
        file_path: 输出文件路径
    """
    file_path = Path(file_path)
    data: dict[str, Any] = paper.model_dump(mode="json", by_alias=True, exclude_none=True)

    with open(file_path, "w", encoding="utf-8") as f:
        if file_path.suffix.lower() in (".yaml", ".yml"):
            yaml.dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, ensure_ascii=False, indent=2)
