"""
配置模块 (config)
================
本模块是 messen 的配置系统入口，负责：
1. 定义配置数据模型（schema.py）—— 使用 pydantic-settings 定义配置项、默认值和校验
2. 加载/保存配置文件（loader.py）—— 从 JSON 文件读取配置，支持 camelCase ↔ snake_case 自动转换
"""

from messen.config.loader import get_config_path, load_config, save_config
from messen.config.schema import MessenConfig

__all__ = ["MessenConfig", "get_config_path", "load_config", "save_config"]
