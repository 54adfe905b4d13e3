"""
配置模块
"""

from .settings import (
    RenderConfig,
    load_config,
    load_paper,
    save_paper,
)

__all__ = [
    "RenderConfig",
    "load_config",
    "load_paper",
    "save_paper",
]
