"""Transport 抽象接口：外部聊天平台客户端的能力边界。"""

from messen.transport.base import (
    ListenCallback,
    MfaCodeFn,
    SessionHandle,
    Transport,
    TransportOptions,
)

__all__ = ["ListenCallback", "MfaCodeFn", "SessionHandle", "Transport", "TransportOptions"]
