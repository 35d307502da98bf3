"""SnapshotStore -- 当前 profile 快照的唯一权威引用

所有变更必须通过 update(mutator)：
1. mutator(当前快照) -> 新快照（返回同一对象视为无变更）
2. 盖章：revision + 1，updatedAt = now
3. 持久化成功后才替换引用，再通知订阅者

load / set_active 是加载（hydration），整体替换引用且不增加 revision。
update 由 asyncio.Lock 串行化，读者只会看到变更前或变更后的完整快照。
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog

from ..clock import now_local
from ..models.snapshot import Snapshot
from .profile_repo import ProfileRepository

log = structlog.get_logger()

Mutator = Callable[[Snapshot], Snapshot]
Listener = Callable[[Snapshot], Awaitable[None]]


class SnapshotStore:
    """单 profile 快照存储"""

    def __init__(
        self,
        repo: ProfileRepository,
        clock: Callable[[], datetime] = now_local,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._snapshot: Snapshot | None = None
        self._active_name: str | None = None
        self._active_code: str | None = None
        self._lock = asyncio.Lock()
        self._listeners: list[Listener] = []

    @property
    def current(self) -> Snapshot | None:
        return self._snapshot

    @property
    def active_name(self) -> str | None:
        return self._active_name

    @property
    def active_code(self) -> str | None:
        return self._active_code

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """注册快照变更监听器，返回取消函数"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_active(self, name: str, sync_code: str, snapshot: Snapshot) -> None:
        """设置激活 profile 并保存快照（不增加 revision）"""
        async with self._lock:
            await self._repo.save_snapshot(name, sync_code, snapshot)
            self._active_name = name
            self._active_code = sync_code
            self._snapshot = snapshot
        await self._notify(snapshot)

    async def load(self, name: str, sync_code: str) -> Snapshot | None:
        """从存储加载快照；不存在时返回 None 且不改变当前引用

        Raises:
            SnapshotValidationError: 存储的 JSON 已损坏
        """
        async with self._lock:
            snapshot = await self._repo.load_snapshot(name, sync_code)
            if snapshot is None:
                return None
            self._active_name = name
            self._active_code = sync_code
            self._snapshot = snapshot
        await self._notify(snapshot)
        return snapshot

    def clear(self) -> None:
        """会话结束：丢弃引用"""
        self._snapshot = None
        self._active_name = None
        self._active_code = None
        self._listeners.clear()

    async def update(self, mutator: Mutator) -> Snapshot | None:
        """应用 copy-on-write 变更

        Args:
            mutator: 旧快照 -> 新快照；抛出异常时存储保持不变

        Returns:
            变更后的快照；没有激活 profile 时返回 None；无变更时返回当前快照
        """
        async with self._lock:
            current = self._snapshot
            if current is None or self._active_name is None or self._active_code is None:
                return None

            candidate = mutator(current)
            if candidate is current:
                return current

            updated = candidate.model_copy(
                update={
                    "meta": current.meta.model_copy(
                        update={
                            "updated_at": self._clock(),
                            "revision": current.meta.revision + 1,
                        }
                    )
                }
            )
            await self._repo.save_snapshot(self._active_name, self._active_code, updated)
            self._snapshot = updated

        log.debug("snapshot_updated", revision=updated.meta.revision)
        await self._notify(updated)
        return updated

    async def _notify(self, snapshot: Snapshot) -> None:
        for listener in list(self._listeners):
            await listener(snapshot)
