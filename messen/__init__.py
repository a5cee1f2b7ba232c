"""
messen - 聊天平台会话管理与事件分发层

模块概述：
    本文件是 messen 包的入口文件（__init__.py），定义了包的元信息并导出公共 API。
    messen 构建在外部聊天平台客户端（transport）之上，负责：

    - 建立已认证会话（优先复用缓存的 app state，否则使用凭据或交互式输入）
    - 维护当前用户和会话线程（thread）的内存缓存
    - 将原始入站事件流转换为带线程上下文的类型化回调

    作为库使用时默认关闭日志输出（logger.disable），由嵌入应用自行开启，
    CLI 入口会调用 logger.enable("messen")。
"""

from loguru import logger

# 版本号，遵循语义化版本规范（主版本.次版本.修订号）
__version__ = "0.1.0"

# 项目 logo 表情符号，用于 CLI 输出等场景的品牌标识
__logo__ = "💬"

# 库默认静默，嵌入应用通过 logger.enable("messen") 打开
logger.disable("messen")

from messen.bus.dispatcher import EventDispatcher  # noqa: E402
from messen.bus.events import (  # noqa: E402
    EnrichedEvent,
    InboundEvent,
    MessageEvent,
    ThreadEvent,
    UnknownEvent,
)
from messen.config.schema import MessenConfig  # noqa: E402
from messen.errors import (  # noqa: E402
    AuthenticationError,
    CapabilityError,
    CredentialError,
    MessenError,
    NotAuthenticatedError,
    PersistenceError,
)
from messen.session.messen import Messen, SessionStatus, not_implemented  # noqa: E402
from messen.store.appstate import AppStateStore  # noqa: E402
from messen.store.threads import ThreadCache  # noqa: E402
from messen.transport.base import SessionHandle, Transport, TransportOptions  # noqa: E402
from messen.types import AppStatePayload, Credentials, CurrentUser, Thread, User  # noqa: E402

__all__ = [
    "AppStatePayload",
    "AppStateStore",
    "AuthenticationError",
    "CapabilityError",
    "CredentialError",
    "Credentials",
    "CurrentUser",
    "EnrichedEvent",
    "EventDispatcher",
    "InboundEvent",
    "MessageEvent",
    "Messen",
    "MessenConfig",
    "MessenError",
    "NotAuthenticatedError",
    "PersistenceError",
    "SessionHandle",
    "SessionStatus",
    "Thread",
    "ThreadCache",
    "ThreadEvent",
    "Transport",
    "TransportOptions",
    "UnknownEvent",
    "User",
    "not_implemented",
]
