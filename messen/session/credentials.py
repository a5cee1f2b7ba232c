"""
凭据解析模块 - 决定本次登录交给 transport 的认证载荷。

解析顺序：
1. use_cache=True 时先尝试加载缓存的 app state：
   成功 → AppStatePayload，忽略显式凭据和交互输入（可恢复的会话更便宜）
   失败（文件缺失或损坏）→ 记录 debug 日志，回退到第 2 步
2. 显式凭据存在 → 直接使用
3. 否则调用 prompt_credentials()（通常等待外部输入）

唯一会向上传播的失败来自 prompt_credentials。
"""

from __future__ import annotations

from typing import Awaitable, Callable

from loguru import logger

from messen.errors import AppStateNotFoundError, CredentialError, MessenError
from messen.store.appstate import AppStateStore
from messen.types import AppStatePayload, AuthPayload, Credentials

PromptCredentialsFn = Callable[[], Awaitable[Credentials]]


class CredentialResolver:
    """根据缓存、显式凭据和交互输入选出认证载荷。"""

    def __init__(self, store: AppStateStore):
        self.store = store

    async def resolve(
        self,
        credentials: Credentials | None,
        use_cache: bool,
        prompt_credentials: PromptCredentialsFn,
    ) -> AuthPayload:
        """
        解析认证载荷。

        参数:
            credentials: 调用方显式提供的凭据（可选）
            use_cache: 是否优先使用缓存的 app state
            prompt_credentials: 没有显式凭据时的交互输入能力

        返回:
            Credentials 或 AppStatePayload

        异常:
            CredentialError: 交互输入失败或没有返回凭据
            NotImplementedError: 交互输入能力是未实现的占位
        """
        if use_cache:
            try:
                app_state = await self.store.load()
            except AppStateNotFoundError as e:
                logger.debug(f"App state not found ({e}). Falling back to provided credentials")
            else:
                logger.debug("App state loaded successfully")
                return AppStatePayload(app_state)

        return await self._use_credentials(credentials, prompt_credentials)

    async def _use_credentials(
        self,
        credentials: Credentials | None,
        prompt_credentials: PromptCredentialsFn,
    ) -> Credentials:
        if credentials is not None:
            return credentials

        logger.debug("No credentials provided, prompting")
        try:
            prompted = await prompt_credentials()
        except (MessenError, NotImplementedError):
            raise
        except Exception as e:
            raise CredentialError(f"Credential prompt failed: {e}") from e
        if prompted is None:
            raise CredentialError("Credential prompt returned no credentials")
        return prompted
