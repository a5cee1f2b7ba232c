"""
事件分发器模块 - 订阅 transport 原始事件流并路由到类型化处理器。

每个原始事件的处理流程：
1. 传输层错误（callback 的 error 参数非空）→ 记录错误日志，继续监听
2. 通过 ThreadCache.get_thread 解析线程上下文（未命中时拉取并回填）
3. classify 构造增强事件（MessageEvent | ThreadEvent | UnknownEvent）
4. MessageEvent → on_message，ThreadEvent → on_thread_event，UnknownEvent → 忽略
5. 处理器返回 Exception 对象表示"拒绝处理"，仅记录 debug 日志；
   处理器抛出的异常记录完整堆栈后丢弃，不会中断监听

【并发设计】
transport 的回调是同步调用的；每个事件在独立的 asyncio.Task 中处理，
因此某个事件的慢速线程拉取不会阻塞后续事件的到达。
所有在途任务记录在 _tasks 中，drain() 可以等待它们全部完成。

【Java 开发者类比】
- EventDispatcher 类似于 Spring 的 ApplicationEventMulticaster + 异步 TaskExecutor
- _tasks 集合类似于持有 CompletableFuture 引用防止被 GC 回收
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from loguru import logger

from messen.bus.events import InboundEvent, MessageEvent, ThreadEvent, classify
from messen.errors import TransportStreamError
from messen.store.threads import ThreadCache
from messen.transport.base import SessionHandle
from messen.utils.helpers import maybe_await

# 处理器：接收增强事件，返回 None（成功）或 Exception（拒绝处理），可同步可异步
EventHandler = Callable[[Any], Any]


class EventDispatcher:
    """
    原始事件流到类型化处理器的分发器。

    属性:
        handle: 已认证的会话句柄（非拥有引用）
        threads: 线程缓存，用于附加线程上下文
        on_message: 消息处理器
        on_thread_event: 线程事件处理器
        _stop: transport 返回的停止订阅函数
        _tasks: 在途分发任务集合
    """

    def __init__(
        self,
        handle: SessionHandle,
        threads: ThreadCache,
        on_message: EventHandler,
        on_thread_event: EventHandler,
    ):
        self.handle = handle
        self.threads = threads
        self.on_message = on_message
        self.on_thread_event = on_thread_event
        self._stop: Callable[[], None] | None = None
        self._running = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """订阅 transport 事件流。重复调用无副作用。"""
        if self._running:
            return
        self._running = True
        self._stop = self.handle.listen(self._on_raw)
        logger.info("Listening for events")

    def stop(self) -> None:
        """停止订阅。之后到达的回调会被忽略；在途分发不会被取消。"""
        if not self._running:
            return
        self._running = False
        stop, self._stop = self._stop, None
        if stop is not None:
            stop()
        logger.info("Stopped listening for events")

    async def drain(self) -> None:
        """等待所有在途分发任务完成。"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_raw(self, error: Any, event: InboundEvent | dict | None) -> None:
        """transport 回调入口。永远不向 transport 抛出异常。"""
        if not self._running:
            return
        if error is not None:
            logger.error(f"{TransportStreamError(error)}")
            return
        if event is None:
            return
        if isinstance(event, dict):
            event = InboundEvent.from_raw(event)

        task = asyncio.get_running_loop().create_task(self._dispatch(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _dispatch(self, event: InboundEvent) -> None:
        """处理单个事件：附加线程上下文 → 分类 → 调用处理器。"""
        try:
            thread = await self.threads.get_thread(event.thread_id)
        except Exception as e:
            # 线程解析失败只影响这一个事件，绝不投递半成品
            logger.error(f"Cache miss for thread {event.thread_id}, skipping {event.type} event: {e}")
            return

        enriched = classify(event, thread)
        if isinstance(enriched, MessageEvent):
            handler, name = self.on_message, "on_message"
        elif isinstance(enriched, ThreadEvent):
            handler, name = self.on_thread_event, "on_thread_event"
        else:
            logger.debug(f"Ignoring unhandled event type '{event.type}'")
            return

        try:
            result = await maybe_await(handler(enriched))
        except Exception:
            logger.exception(f"{name} raised while handling event in thread {event.thread_id}")
            return
        if isinstance(result, Exception):
            logger.debug(f"{name} declined event in thread {event.thread_id}: {result}")
