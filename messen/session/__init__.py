"""
会话模块 - 认证会话的生命周期管理。

- CredentialResolver：决定本次登录使用缓存 app state、显式凭据还是交互输入
- Messen：持有 transport 会话句柄，编排登录 / 监听 / 登出

【架构定位】
Messen 位于 transport 与嵌入应用之间：
- 登录时通过 CredentialResolver + AppStateStore 取得并持久化会话
- 登录后持有 ThreadCache，监听时创建 EventDispatcher
- 登出时停止分发、登出 transport、清除 app state
"""

from messen.session.credentials import CredentialResolver
from messen.session.messen import AuthenticatedContext, Messen, SessionStatus, not_implemented

__all__ = ["AuthenticatedContext", "CredentialResolver", "Messen", "SessionStatus", "not_implemented"]
