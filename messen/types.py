"""
核心数据类型定义模块 - 凭据、认证载荷、用户与线程。

本模块定义了 messen 中流转的基础数据结构：
- Credentials：账号/密码对，只交给 transport 认证，从不持久化
- AppStatePayload：包裹缓存的会话状态（app state），用于免密恢复会话
- AuthPayload：认证载荷，二者之一（Credentials | AppStatePayload）
- User / CurrentUser：用户资料；CurrentUser 额外携带好友列表
- Thread：会话线程（一个对话）的元数据和成员

【Java 开发者类比】
- @dataclass 等价于 Java 的 record 类或 Lombok 的 @Data
- frozen=True 等价于所有字段 final 的不可变对象
- AuthPayload 这种 Union 类型类似 Java 17 的 sealed interface
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Union

# 会话状态对 messen 来说是不透明的，只要求能被 JSON 序列化
SessionState = Any


@dataclass(frozen=True)
class Credentials:
    """
    登录凭据。

    属性:
        email: 账号标识（邮箱或手机号）
        password: 密码，repr 中会被遮盖
    """

    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class AppStatePayload:
    """缓存的会话状态载荷。transport 用它恢复会话而无需凭据。"""

    app_state: SessionState = field(repr=False)


AuthPayload = Union[Credentials, AppStatePayload]


@dataclass
class User:
    """
    用户资料。

    属性:
        id: 用户唯一标识
        name: 显示名
        first_name: 名
        vanity: 个性化用户名（主页 URL 中的短名）
        profile_url: 主页链接
        is_friend: 是否为当前用户的好友
        extra: transport 返回的其他字段，原样保留
    """

    id: str
    name: str = ""
    first_name: str = ""
    vanity: str = ""
    profile_url: str = ""
    is_friend: bool = False
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class CurrentUser(User):
    """当前登录用户 = 用户资料 + 好友列表。每次登录整体替换，不做局部修改。"""

    friends: list[User] = field(default_factory=list)

    @classmethod
    def merge(cls, user: User, friends: list[User]) -> CurrentUser:
        """合并分别拉取的用户资料与好友列表。"""
        values = {f.name: getattr(user, f.name) for f in fields(User)}
        return cls(**values, friends=list(friends))


@dataclass
class Thread:
    """
    会话线程 - 一个对话的元数据和成员。

    属性:
        id: 线程唯一标识，事件通过 thread_id 关联到线程
        name: 线程名称（群聊名称，私聊时通常为对方名字）
        participant_ids: 成员用户 ID 列表
        is_group: 是否为群聊
        extra: transport 返回的其他字段
    """

    id: str
    name: str = ""
    participant_ids: list[str] = field(default_factory=list)
    is_group: bool = False
    extra: dict[str, Any] = field(default_factory=dict)
