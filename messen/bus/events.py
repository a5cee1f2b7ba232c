"""
事件类型定义模块 - 原始入站事件与带线程上下文的增强事件。

本模块定义了事件分发管道中流转的数据结构：
- InboundEvent：transport 送来的原始事件（类型标签 + 线程 ID + 原始载荷）
- EnrichedEvent：原始事件 + 解析出的 Thread，是一个封闭的变体集合：
  - MessageEvent：普通消息（type == "message"）
  - ThreadEvent：线程级事件，如改名、成员变化（type == "event"）
  - UnknownEvent：其他类型，分发器直接忽略

新的 transport 事件类型会被归类为 UnknownEvent（失败即关闭），
而不是意外落入某个处理器。

【设计要点】
- 分发器从不修改原始事件，增强事件只持有对它的引用
- 增强事件的 thread 一定非空且 thread.id == raw.thread_id
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from messen.types import Thread

MESSAGE_TYPE = "message"
THREAD_EVENT_TYPE = "event"


@dataclass(frozen=True)
class InboundEvent:
    """
    原始入站事件。

    属性:
        type: 事件类型标签（"message"、"event"、"typ"、"read_receipt" 等）
        thread_id: 事件所属线程 ID
        payload: transport 原始载荷，messen 不解释其内容
    """

    type: str
    thread_id: str
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> InboundEvent:
        """从 transport 的原始字典构造事件。兼容 threadID / thread_id 两种键名。"""
        thread_id = raw.get("threadID", raw.get("thread_id", ""))
        return cls(type=str(raw.get("type", "")), thread_id=str(thread_id), payload=dict(raw))


@dataclass(frozen=True)
class _Enriched:
    raw: InboundEvent
    thread: Thread

    @property
    def type(self) -> str:
        return self.raw.type

    @property
    def thread_id(self) -> str:
        return self.raw.thread_id

    @property
    def payload(self) -> dict[str, Any]:
        return self.raw.payload


@dataclass(frozen=True)
class MessageEvent(_Enriched):
    """普通消息事件。"""

    @property
    def body(self) -> str:
        return str(self.payload.get("body", ""))

    @property
    def sender_id(self) -> str:
        return str(self.payload.get("senderID", self.payload.get("sender_id", "")))


@dataclass(frozen=True)
class ThreadEvent(_Enriched):
    """线程级事件（改名、成员加入/离开等）。"""

    @property
    def log_message_type(self) -> str:
        return str(self.payload.get("logMessageType", self.payload.get("log_message_type", "")))


@dataclass(frozen=True)
class UnknownEvent(_Enriched):
    """未处理的事件类型，分发器会静默忽略。"""


EnrichedEvent = Union[MessageEvent, ThreadEvent, UnknownEvent]


def classify(raw: InboundEvent, thread: Thread) -> EnrichedEvent:
    """根据事件类型标签构造对应的增强事件变体。"""
    if raw.type == MESSAGE_TYPE:
        return MessageEvent(raw=raw, thread=thread)
    if raw.type == THREAD_EVENT_TYPE:
        return ThreadEvent(raw=raw, thread=thread)
    return UnknownEvent(raw=raw, thread=thread)
