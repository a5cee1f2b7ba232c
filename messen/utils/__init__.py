"""
工具函数模块 - 提供 messen 项目全局通用的辅助函数。

本模块包含：
- ensure_dir：确保目录存在
- setup_logging：嵌入应用打开日志输出
- import_object：按 "module:attribute" 动态导入 transport 工厂
- maybe_await：兼容同步/异步回调
"""

from messen.utils.helpers import ensure_dir, import_object, maybe_await, setup_logging

__all__ = ["ensure_dir", "import_object", "maybe_await", "setup_logging"]
