"""
线程缓存模块 - 当前用户与会话线程的内存缓存。

本模块提供 ThreadCache 类，负责：
- 保存当前登录用户（CurrentUser），每次登录整体替换
- 维护 thread_id → Thread 的映射，按需拉取（cache-fill-on-miss）
- 全量刷新：一次性替换整个映射，不做局部合并

【并发语义】
同一个未缓存的 thread_id 被并发请求时，只会发起一次 fetch_thread：
第一个调用方创建缓存自己持有的拉取任务，所有调用方都通过 asyncio.shield 等待它，
拿到同样的结果或同样的异常（at-most-one-fetch-per-id-in-flight）。
调用方被取消不影响拉取本身，也不影响其他等待者。
transport 返回 None 或另一个 id 的线程时视为不存在，不写入缓存；
拉取失败后释放在途占位，下次调用会重新拉取。

【Java 开发者类比】
- _threads 类似于 Guava Cache 的存储层
- _inflight 类似于 ConcurrentHashMap<String, CompletableFuture<Thread>>
  的 computeIfAbsent 去重模式
"""

from __future__ import annotations

import asyncio

from loguru import logger

from messen.errors import ThreadNotFoundError
from messen.transport.base import SessionHandle, Transport
from messen.types import CurrentUser, Thread


class ThreadCache:
    """
    线程缓存。持有对 transport 和会话句柄的非拥有引用，不能比创建它的会话活得更久。

    属性:
        transport: 外部聊天平台客户端
        handle: 已认证的会话句柄
        _threads: 已缓存的线程 {thread_id: Thread}
        _inflight: 在途拉取 {thread_id: Task}
        _user: 当前登录用户
    """

    def __init__(self, transport: Transport, handle: SessionHandle):
        self.transport = transport
        self.handle = handle
        self._threads: dict[str, Thread] = {}
        self._inflight: dict[str, asyncio.Task[Thread]] = {}
        self._user: CurrentUser | None = None

    @property
    def user(self) -> CurrentUser | None:
        return self._user

    def set_user(self, user: CurrentUser) -> None:
        """整体替换当前用户记录。"""
        self._user = user

    @property
    def threads(self) -> list[Thread]:
        """已缓存线程的快照列表。"""
        return list(self._threads.values())

    def __len__(self) -> int:
        return len(self._threads)

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._threads

    async def refresh(self) -> None:
        """
        拉取完整线程列表并原子替换缓存内容。

        拉取失败时异常向上传播，旧缓存保持不变。
        """
        threads = await self.transport.fetch_thread_list(self.handle)
        self._threads = {t.id: t for t in threads}
        logger.debug(f"Thread cache refreshed with {len(self._threads)} threads")

    async def get_thread(self, thread_id: str) -> Thread:
        """
        获取线程详情：命中缓存直接返回，未命中则拉取并回填。

        拉取在缓存自己持有的任务里进行，调用方通过 asyncio.shield 等待它。
        某个调用方被取消只会让它自己停止等待，拉取继续，其他等待者照常拿到结果。

        参数:
            thread_id: 线程 ID

        返回:
            线程对象，其 id 与 thread_id 一致

        异常:
            ThreadNotFoundError: transport 中不存在该线程，或返回了另一个线程
            其他 transport 异常原样传播
        """
        cached = self._threads.get(thread_id)
        if cached is not None:
            return cached

        task = self._inflight.get(thread_id)
        if task is None:
            logger.debug(f"Thread {thread_id} not cached, fetching")
            task = asyncio.create_task(self._fetch(thread_id))
            self._inflight[thread_id] = task
            task.add_done_callback(lambda t: self._fetch_done(thread_id, t))
        return await asyncio.shield(task)

    async def _fetch(self, thread_id: str) -> Thread:
        thread = await self.transport.fetch_thread(self.handle, thread_id)
        if thread is None:
            raise ThreadNotFoundError(thread_id)
        if thread.id != thread_id:
            logger.warning(f"Transport returned thread {thread.id} for {thread_id}, discarding")
            raise ThreadNotFoundError(thread_id)
        self._threads[thread_id] = thread
        return thread

    def _fetch_done(self, thread_id: str, task: asyncio.Task[Thread]) -> None:
        if self._inflight.get(thread_id) is task:
            del self._inflight[thread_id]
        # 所有等待者都已取消时，由这里取走异常
        if not task.cancelled():
            task.exception()

    def find_thread(self, name: str) -> Thread | None:
        """按名称在已缓存线程中查找（忽略大小写的精确匹配），不会触发拉取。"""
        wanted = name.strip().lower()
        for thread in self._threads.values():
            if thread.name.lower() == wanted:
                return thread
        return None
