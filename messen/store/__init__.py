"""
存储模块 - 会话状态持久化与内存线程缓存。

- AppStateStore：app state 的磁盘存储（load / save / clear）
- ThreadCache：当前用户 + thread_id → Thread 的内存缓存
"""

from messen.store.appstate import AppStateStore
from messen.store.threads import ThreadCache

__all__ = ["AppStateStore", "ThreadCache"]
