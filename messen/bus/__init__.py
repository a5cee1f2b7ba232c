"""
事件总线模块 - 将 transport 的原始事件流转换为类型化的处理器回调。

事件流向：
  transport.listen → InboundEvent → EventDispatcher
    → ThreadCache.get_thread（附加线程上下文）
    → classify（MessageEvent | ThreadEvent | UnknownEvent）
    → on_message / on_thread_event

【Java 开发者类比】
- EventDispatcher 类似于 Spring 的 ApplicationEventMulticaster
- MessageEvent / ThreadEvent 类似于 sealed interface 的两个实现类
"""

from messen.bus.dispatcher import EventDispatcher
from messen.bus.events import (
    EnrichedEvent,
    InboundEvent,
    MessageEvent,
    ThreadEvent,
    UnknownEvent,
    classify,
)

__all__ = [
    "EnrichedEvent",
    "EventDispatcher",
    "InboundEvent",
    "MessageEvent",
    "ThreadEvent",
    "UnknownEvent",
    "classify",
]
