"""
会话模块 - 登录、登出与事件监听的编排中心。

Messen 类独占 transport 会话句柄，所有已认证状态都放在一个
AuthenticatedContext（句柄 + 线程缓存 + 当前用户）里，登录/登出时整体替换，
外部不会观察到"半初始化"的状态。

【状态机】
UNAUTHENTICATED → AUTHENTICATING → AUTHENTICATED → LOGGING_OUT → UNAUTHENTICATED

【登录流程】
1. CredentialResolver 解析认证载荷（缓存 app state / 显式凭据 / 交互输入）
2. transport.authenticate（强制登录、接收自己的消息、接收线程事件）
3. 保存 transport 的 app state（覆盖旧值）
4. 安装新的 AuthenticatedContext
5. 并发拉取：用户资料、好友列表、线程全量刷新（asyncio.gather）
6. 合并为 CurrentUser，写入线程缓存并返回

第 5 步任一失败：丢弃上下文并回到 UNAUTHENTICATED，异常原样传播。
已保存的 app state 保留，它仍然是可恢复的会话。

【能力注入】
prompt_credentials / get_mfa_code / on_message / on_thread_event
都是构造时必填的关键字参数，不可调用时立即抛出 CapabilityError。
确实不需要某个能力时，显式传入 not_implemented("name")。

【Java 开发者类比】
- Messen 类似于一个持有 Spring Security SecurityContext 的门面（Facade）
- 能力注入类似于构造器注入（Constructor Injection）
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from loguru import logger

from messen.bus.dispatcher import EventDispatcher, EventHandler
from messen.config.schema import MessenConfig
from messen.errors import (
    AuthenticationError,
    CapabilityError,
    MessenError,
    NotAuthenticatedError,
    SessionStateError,
)
from messen.session.credentials import CredentialResolver
from messen.store.appstate import AppStateStore
from messen.store.threads import ThreadCache
from messen.transport.base import SessionHandle, Transport, TransportOptions
from messen.types import AuthPayload, Credentials, CurrentUser
from messen.utils.helpers import maybe_await


class SessionStatus(str, Enum):
    """会话状态。"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    LOGGING_OUT = "logging_out"


@dataclass
class AuthenticatedContext:
    """已认证会话的全部状态，作为一个整体被安装或丢弃。"""
    handle: SessionHandle
    threads: ThreadCache
    user: CurrentUser | None = None


def not_implemented(name: str) -> Callable[..., Any]:
    """
    构造一个显式的占位能力，调用时抛出 NotImplementedError。

    用于嵌入应用有意不提供某个能力的场景，例如只使用缓存登录时
    不需要 prompt_credentials。
    """
    async def _stub(*args: Any, **kwargs: Any) -> Any:
        raise NotImplementedError(f"{name} not implemented")

    _stub.__name__ = name
    return _stub


class Messen:
    """
    会话门面：登录、登出、监听事件。

    属性:
        transport: 外部聊天平台客户端
        config: 配置对象（debug、app state 路径等）
        store: app state 存储
    """

    def __init__(
        self,
        transport: Transport,
        *,
        prompt_credentials: Callable[[], Any],
        get_mfa_code: Callable[[], Any],
        on_message: EventHandler,
        on_thread_event: EventHandler,
        config: MessenConfig | None = None,
        store: AppStateStore | None = None,
    ):
        capabilities = {
            "prompt_credentials": prompt_credentials,
            "get_mfa_code": get_mfa_code,
            "on_message": on_message,
            "on_thread_event": on_thread_event,
        }
        for name, value in capabilities.items():
            if not callable(value):
                raise CapabilityError(name, value)

        self.transport = transport
        self.config = config or MessenConfig()
        self.store = store or AppStateStore(self.config.appstate_path)
        self._prompt_credentials = prompt_credentials
        self._get_mfa_code = get_mfa_code
        self._on_message = on_message
        self._on_thread_event = on_thread_event
        self._resolver = CredentialResolver(self.store)

        self._status = SessionStatus.UNAUTHENTICATED
        self._context: AuthenticatedContext | None = None
        self._dispatcher: EventDispatcher | None = None

    # ---- 状态查询 ------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def authenticated(self) -> bool:
        return self._context is not None and self._status == SessionStatus.AUTHENTICATED

    @property
    def user(self) -> CurrentUser | None:
        return self._context.user if self._context else None

    @property
    def threads(self) -> ThreadCache | None:
        return self._context.threads if self._context else None

    @property
    def dispatcher(self) -> EventDispatcher | None:
        return self._dispatcher

    # ---- 登录 ----------------------------------------------------------------

    async def login(
        self,
        credentials: Credentials | None = None,
        use_cache: bool = True,
    ) -> CurrentUser:
        """
        登录并初始化用户与线程缓存。

        参数:
            credentials: 显式凭据（可选）；缓存命中时被忽略
            use_cache: 是否优先使用缓存的 app state

        返回:
            当前登录用户（含好友列表）

        异常:
            SessionStateError: 正在登录或登出
            CredentialError / NotImplementedError: 无法取得凭据
            AuthenticationError: transport 拒绝认证
            PersistenceError: app state 保存失败
            其他 transport 异常：用户/好友/线程拉取失败
        """
        if self._status in (SessionStatus.AUTHENTICATING, SessionStatus.LOGGING_OUT):
            raise SessionStateError(f"Cannot log in while {self._status.value}")

        # 重新登录：先整体丢弃旧上下文
        self._discard_context()
        self._status = SessionStatus.AUTHENTICATING

        try:
            payload = await self._resolver.resolve(credentials, use_cache, self._prompt)
            handle = await self._authenticate(payload)
            await self.store.save(handle.get_app_state())
            logger.debug("App state saved")
        except BaseException:
            self._status = SessionStatus.UNAUTHENTICATED
            raise

        context = AuthenticatedContext(handle=handle, threads=ThreadCache(self.transport, handle))
        self._context = context
        self._status = SessionStatus.AUTHENTICATED

        try:
            user, friends, _ = await asyncio.gather(
                self.transport.fetch_user_info(handle, handle.get_current_user_id()),
                self.transport.fetch_friends(handle),
                context.threads.refresh(),
            )
        except BaseException as e:
            logger.error(f"Login aborted while loading user and threads: {e}")
            if self._context is context:
                self._discard_context()
            raise

        current = CurrentUser.merge(user, friends)
        context.threads.set_user(current)
        context.user = current
        logger.info(f"Logged in as {current.name or current.id} ({len(context.threads)} threads cached)")
        return current

    async def _authenticate(self, payload: AuthPayload) -> SessionHandle:
        """
        调用 transport 认证，将非 messen 异常包装为 AuthenticationError。

        MFA 能力未实现时 transport 会带出 NotImplementedError，同样包装，
        原异常保留在 __cause__ 上。
        """
        options = TransportOptions.for_debug(self.config.debug)
        try:
            return await self.transport.authenticate(payload, options, self._mfa)
        except MessenError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Authentication failed: {e}") from e

    async def _prompt(self) -> Credentials:
        return await maybe_await(self._prompt_credentials())

    async def _mfa(self) -> str:
        return await maybe_await(self._get_mfa_code())

    # ---- 监听 ----------------------------------------------------------------

    def listen(self) -> EventDispatcher:
        """
        开始把 transport 事件分发到 on_message / on_thread_event。

        返回:
            正在运行的分发器；已在监听时返回同一个分发器

        异常:
            NotAuthenticatedError: 未登录
        """
        if not self.authenticated or self._context is None:
            raise NotAuthenticatedError("listen() requires an authenticated session")
        if self._dispatcher is not None and self._dispatcher.is_running:
            return self._dispatcher

        self._dispatcher = EventDispatcher(
            self._context.handle,
            self._context.threads,
            on_message=self._on_message,
            on_thread_event=self._on_thread_event,
        )
        self._dispatcher.start()
        return self._dispatcher

    def stop_listening(self) -> None:
        """停止事件分发，会话保持登录状态。"""
        if self._dispatcher is not None:
            self._dispatcher.stop()
            self._dispatcher = None

    # ---- 登出 ----------------------------------------------------------------

    async def logout(self) -> None:
        """
        停止分发、登出 transport 并清除 app state。

        transport 登出与清除 app state 并发执行，二者都结束后无条件回到
        UNAUTHENTICATED，然后再抛出其中第一个失败。

        异常:
            NotAuthenticatedError: 未登录
            SessionStateError: 正在登出
            PersistenceError: app state 清除失败
        """
        if self._status == SessionStatus.LOGGING_OUT:
            raise SessionStateError("Logout already in progress")
        if self._context is None:
            raise NotAuthenticatedError("logout() requires an authenticated session")

        handle = self._context.handle
        self._status = SessionStatus.LOGGING_OUT
        self.stop_listening()

        results = await asyncio.gather(
            self.transport.logout(handle),
            self.store.clear(),
            return_exceptions=True,
        )
        self._discard_context()

        errors = [r for r in results if isinstance(r, BaseException)]
        for error in errors:
            logger.error(f"Logout step failed: {error}")
        if errors:
            raise errors[0]
        logger.info("Logged out")

    def _discard_context(self) -> None:
        self.stop_listening()
        self._context = None
        self._status = SessionStatus.UNAUTHENTICATED
