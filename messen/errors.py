"""
错误类型定义模块 - messen 的异常体系。

所有 messen 自身抛出的异常都继承自 MessenError，嵌入应用可以用一个
except MessenError 捕获全部库级错误。

【错误分类】
- CredentialError：没有可用的凭据来源（缓存未命中、未提供凭据、交互输入失败）
- AuthenticationError：transport 拒绝了认证载荷
- CapabilityError：构造时传入的能力（回调）不可调用
- CacheMissError / ThreadNotFoundError：线程缓存未命中 / transport 中不存在该线程
- TransportStreamError：listen 回调错误通道送来的传输层错误（仅记录日志）
- PersistenceError / AppStateNotFoundError：app state 持久化失败 / 文件缺失或损坏
- SessionStateError / NotAuthenticatedError：当前会话状态下不允许该操作

注意：默认的占位能力（not_implemented）抛出的是内置 NotImplementedError，
不属于 MessenError 体系。
"""

from __future__ import annotations

from typing import Any


class MessenError(Exception):
    """messen 异常基类。"""


class CredentialError(MessenError):
    """没有可用的凭据来源。"""


class AuthenticationError(MessenError):
    """transport 拒绝了认证载荷（凭据错误、需要二次验证但无法完成等）。"""


class CapabilityError(MessenError, TypeError):
    """构造时传入的能力不可调用。"""

    def __init__(self, name: str, value: Any):
        super().__init__(f"Capability '{name}' must be callable, got {type(value).__name__}")
        self.name = name


class CacheMissError(MessenError):
    """线程缓存未命中。内部使用，触发拉取并回填，不会暴露给调用方。"""

    reason = "is not cached"

    def __init__(self, thread_id: str):
        super().__init__(f"Thread {thread_id} {self.reason}")
        self.thread_id = thread_id


class ThreadNotFoundError(CacheMissError):
    """transport 中不存在该线程。"""

    reason = "not found"


class TransportStreamError(MessenError):
    """listen 回调错误通道送来的传输层错误。"""

    def __init__(self, cause: Any):
        super().__init__(f"Transport stream error: {cause}")
        self.cause = cause


class PersistenceError(MessenError):
    """app state 保存或清除失败。"""


class AppStateNotFoundError(PersistenceError):
    """app state 文件不存在或内容损坏。加载时可恢复。"""


class SessionStateError(MessenError):
    """当前会话状态下不允许该操作（如并发登录、未登录时登出）。"""


class NotAuthenticatedError(SessionStateError):
    """需要已认证会话的操作在未认证状态下被调用。"""
