"""
会话状态存储模块 - app state 的加载、保存和清除。

app state 是 transport 在认证成功后给出的可序列化会话状态（通常是 cookie 列表），
下次登录时交还给 transport 即可免密恢复会话。messen 不解释其内容，
只负责把它存到一个固定路径下。

【存储格式】
JSON 文件，内容就是 app state 本身（默认 ~/.messen/appstate.json）。

【失败语义】
- load：文件不存在或内容损坏抛出 AppStateNotFoundError，调用方可恢复（回退到凭据）
- save / clear：I/O 失败抛出 PersistenceError，向上传播，不静默吞掉
- clear：文件本来就不存在时视为成功
"""

import json
from pathlib import Path

from loguru import logger

from messen.errors import AppStateNotFoundError, PersistenceError
from messen.types import SessionState
from messen.utils.helpers import ensure_dir


class AppStateStore:
    """
    绑定到固定路径的 app state 存储。

    属性:
        path: 状态文件路径
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    async def load(self) -> SessionState:
        """
        读取 app state。

        异常:
            AppStateNotFoundError: 文件不存在、不可读或不是合法 JSON
        """
        if not self.path.exists():
            raise AppStateNotFoundError(f"No app state at {self.path}")
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise AppStateNotFoundError(f"Unreadable app state at {self.path}: {e}") from e

    async def save(self, state: SessionState) -> None:
        """覆盖写入 app state。"""
        try:
            ensure_dir(self.path.parent)
            self.path.write_text(json.dumps(state, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to save app state to {self.path}: {e}") from e
        logger.debug(f"App state saved to {self.path}")

    async def clear(self) -> None:
        """删除 app state 文件。"""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to clear app state at {self.path}: {e}") from e
        logger.debug(f"App state cleared at {self.path}")

    def exists(self) -> bool:
        return self.path.exists()
