"""
配置数据模型定义 (config/schema.py)
=================================
本模块使用 Pydantic 定义 messen 的配置结构。
所有配置项都有默认值，用户只需在 config.json 或环境变量中覆盖需要修改的部分。

配置项：
MessenConfig (根配置)
├── debug           - 提高 transport 日志级别，CLI 同时打开 DEBUG 日志
├── environment     - 运行环境（development / test / production）
├── appstate_file   - 会话状态（app state）持久化文件路径，进程级固定
└── transport       - CLI 使用的 transport 工厂，格式 "module:attribute"

对于 Java 开发者：
- BaseSettings 类似于 Spring 的 @ConfigurationProperties，额外支持从环境变量读取配置
- field_validator 类似于 Bean Validation 的 @Pattern / 自定义 ConstraintValidator
"""

from pathlib import Path
from typing import Literal

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings


class MessenConfig(BaseSettings):
    """
    messen 根配置类。

    继承自 Pydantic 的 BaseSettings，除了支持从 JSON 文件加载外，
    还支持从环境变量读取配置：
    - 环境变量前缀: MESSEN_
    - 示例: MESSEN_DEBUG=true、MESSEN_APPSTATE_FILE=/tmp/appstate.json
    """
    debug: bool = False  # 调试模式：transport 日志级别 info，否则 silent
    environment: Literal["development", "test", "production"] = "development"  # 运行环境
    appstate_file: str = "~/.messen/appstate.json"  # 会话状态文件路径
    transport: str = ""  # transport 工厂的导入路径，如 "my_pkg.transport:FacebookTransport"

    @field_validator("transport")
    @classmethod
    def _check_transport(cls, value: str) -> str:
        """transport 非空时必须是 "module:attribute" 格式。"""
        value = value.strip()
        if value and ":" not in value:
            raise ValueError(f"transport must look like 'module:attribute', got {value!r}")
        return value

    @property
    def appstate_path(self) -> Path:
        """获取展开后的会话状态文件绝对路径（将 ~ 展开为用户主目录）。"""
        return Path(self.appstate_file).expanduser()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    # Pydantic Settings 配置：支持 MESSEN_ 前缀的环境变量，嵌套用 __ 分隔
    model_config = ConfigDict(
        env_prefix="MESSEN_",  # 环境变量前缀
        env_nested_delimiter="__"  # 嵌套配置的分隔符
    )
