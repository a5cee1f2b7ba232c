"""
Transport 抽象接口模块 - 定义外部聊天平台客户端的能力边界。

messen 不实现具体的聊天平台协议，而是通过本模块定义的两个抽象类消费它：
- Transport：认证、登出、拉取用户/好友/线程等无状态操作
- SessionHandle：认证成功后得到的会话句柄，提供当前用户 ID、
  可持久化的会话状态，以及原始事件流订阅

具体平台只需继承这两个抽象类并实现其抽象方法即可接入，
这与渠道层"每个平台一个子类"的做法一致（策略模式）。

【Java 开发者类比】
- Transport 相当于 Java 的 interface + 默认无实现的 abstract class
- listen() 返回的停止函数相当于 Java 的 Subscription.cancel()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal

from messen.bus.events import InboundEvent
from messen.types import AuthPayload, SessionState, Thread, User

# listen 回调：(错误, 原始事件)，二者恰好一个非空
ListenCallback = Callable[[Any, "InboundEvent | None"], None]

# 二次验证码获取能力（通常等待外部输入）
MfaCodeFn = Callable[[], Awaitable[str]]


@dataclass(frozen=True)
class TransportOptions:
    """
    认证时传给 transport 的固定配置。

    属性:
        force_login: 强制重新登录语义
        self_listen: 是否接收自己发出的消息
        listen_events: 是否接收线程级事件（改名、成员变化等）
        log_level: transport 日志级别，debug 模式下为 "info"，否则 "silent"
    """

    force_login: bool = True
    self_listen: bool = True
    listen_events: bool = True
    log_level: Literal["silent", "info"] = "silent"

    @classmethod
    def for_debug(cls, debug: bool) -> TransportOptions:
        return cls(log_level="info" if debug else "silent")


class SessionHandle(ABC):
    """已认证的 transport 会话句柄。由 Messen 独占持有。"""

    @abstractmethod
    def get_current_user_id(self) -> str:
        """返回当前登录用户的 ID。"""
        pass

    @abstractmethod
    def get_app_state(self) -> SessionState:
        """返回可序列化的会话状态，用于下次免密恢复。"""
        pass

    @abstractmethod
    def listen(self, callback: ListenCallback) -> Callable[[], None]:
        """
        订阅原始事件流。

        transport 对每个事件调用 callback(None, event)，
        对传输层错误调用 callback(error, None)。

        返回:
            停止订阅的函数
        """
        pass


class Transport(ABC):
    """外部聊天平台客户端的抽象接口。所有操作都是异步的。"""

    @abstractmethod
    async def authenticate(
        self,
        payload: AuthPayload,
        options: TransportOptions,
        get_mfa_code: MfaCodeFn,
    ) -> SessionHandle:
        """
        使用凭据或缓存的会话状态认证。

        参数:
            payload: Credentials 或 AppStatePayload 二者之一
            options: 固定的认证配置
            get_mfa_code: 平台要求二次验证时调用

        返回:
            已认证的会话句柄
        """
        pass

    @abstractmethod
    async def logout(self, handle: SessionHandle) -> None:
        pass

    @abstractmethod
    async def fetch_user_info(self, handle: SessionHandle, user_id: str) -> User:
        pass

    @abstractmethod
    async def fetch_friends(self, handle: SessionHandle) -> list[User]:
        pass

    @abstractmethod
    async def fetch_thread_list(self, handle: SessionHandle) -> list[Thread]:
        pass

    @abstractmethod
    async def fetch_thread(self, handle: SessionHandle, thread_id: str) -> Thread | None:
        """拉取单个线程详情。线程不存在时返回 None。"""
        pass
