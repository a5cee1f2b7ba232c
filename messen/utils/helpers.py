"""
工具函数集合 - messen 项目全局通用的辅助函数。

函数分类：
- 路径管理：ensure_dir
- 日志：setup_logging
- 动态导入：import_object
- 回调调用：maybe_await
"""

import importlib
import inspect
import sys
from pathlib import Path
from typing import Any

from loguru import logger


def ensure_dir(path: Path) -> Path:
    """
    确保目录存在，不存在则递归创建。

    参数:
        path: 目标目录路径

    返回:
        创建后的目录路径（原样返回）
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(debug: bool = False, production: bool = False) -> None:
    """
    打开 messen 日志并安装 stderr 输出。

    库默认 logger.disable("messen")，嵌入应用（如 CLI）调用本函数后才有输出。
    非生产环境会提示日志已按 debug 级别初始化。
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug or not production else "INFO")
    logger.enable("messen")
    if not production:
        logger.info("Logging initialized at debug level")


def import_object(path: str) -> Any:
    """
    按 "module:attribute" 格式导入对象。

    参数:
        path: 导入路径，如 "my_pkg.transport:FacebookTransport"

    异常:
        ValueError: 格式不正确
        ImportError / AttributeError: 模块或属性不存在
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Invalid import path: {path}")
    obj: Any = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


async def maybe_await(value: Any) -> Any:
    """回调可以是同步或异步的：返回值是 awaitable 时等待它。"""
    if inspect.isawaitable(value):
        return await value
    return value
