"""
配置加载工具模块 (config/loader.py)
=================================
本模块负责 messen 配置文件的加载、保存和格式转换：
- 配置文件默认路径: ~/.messen/config.json
- 配置文件使用 camelCase（驼峰命名），Python 内部使用 snake_case（下划线命名）
- 加载时自动将 camelCase → snake_case，保存时自动将 snake_case → camelCase
- 文件损坏时降级为默认配置（环境变量仍然生效）
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from messen.config.schema import MessenConfig
from messen.utils.helpers import ensure_dir


def get_config_path() -> Path:
    """获取默认配置文件路径: ~/.messen/config.json"""
    return Path.home() / ".messen" / "config.json"


def load_config(config_path: Path | None = None) -> MessenConfig:
    """
    从 JSON 文件加载配置，若文件不存在则返回默认配置。

    加载流程：
    1. 确定配置文件路径（传入的路径 或 默认路径 ~/.messen/config.json）
    2. 读取 JSON 文件内容
    3. 将 camelCase 键名转换为 snake_case（convert_keys）
    4. 使用 Pydantic 的 model_validate 进行类型验证和反序列化

    参数:
        config_path: 可选的配置文件路径。为 None 时使用默认路径。

    返回:
        MessenConfig 配置对象实例
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            return MessenConfig.model_validate(convert_keys(data))
        except ValueError as e:
            # JSONDecodeError 与 pydantic 的 ValidationError 都是 ValueError；损坏时降级为默认配置
            logger.warning(f"Failed to load config from {path}: {e}. Using default configuration.")

    return MessenConfig()


def save_config(config: MessenConfig, config_path: Path | None = None) -> None:
    """
    将配置对象保存为 JSON 文件（camelCase 键名，带缩进）。

    参数:
        config: 要保存的配置对象
        config_path: 可选的保存路径。为 None 时使用默认路径。
    """
    path = config_path or get_config_path()
    ensure_dir(path.parent)

    data = convert_to_camel(config.model_dump())
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def convert_keys(data: dict[str, Any]) -> dict[str, Any]:
    """
    将配置文件的 camelCase 键名转换为字段名。

    MessenConfig 是扁平结构，只转换顶层键。
    示例: {"appstateFile": "..."} → {"appstate_file": "..."}
    """
    return {camel_to_snake(k): v for k, v in data.items()}


def convert_to_camel(data: dict[str, Any]) -> dict[str, Any]:
    """convert_keys 的逆操作，保存时使用。"""
    return {snake_to_camel(k): v for k, v in data.items()}


def camel_to_snake(name: str) -> str:
    """例: "appstateFile" → "appstate_file" """
    return "".join(f"_{c.lower()}" if c.isupper() and i else c.lower() for i, c in enumerate(name))


def snake_to_camel(name: str) -> str:
    """例: "appstate_file" → "appstateFile" """
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
