"""ProfileService -- 入口流程与激活会话管理

- enter: 名称 + Sync Code 进入（已有快照则刷新 lastOpenAt，否则新建 revision 0 快照）
- resume: 启动时按记录的激活用户自动恢复会话
- logout: 清除激活用户并关闭会话

同一时刻只有一个激活会话；切换 profile 时旧会话的定时器全部拆除。
"""

from collections.abc import Callable
from datetime import datetime

import structlog
from pxgdaily.core.clock import now_local
from pxgdaily.core.config import FOCUS_SECONDS, SWEEP_INTERVAL_S, SYNC_CODE_LENGTH
from pxgdaily.core.exceptions import NoActiveProfileError, ProfileEntryError
from pxgdaily.core.models import Snapshot
from pxgdaily.core.mutations import touch_profile
from pxgdaily.core.store import ProfileRepository, SnapshotStore
from pxgdaily.core.sync_code import normalize_code

from .dailies_service import DailiesService
from .sse_hub import SSEHub

log = structlog.get_logger()


class ProfileService:
    """Profile 入口服务"""

    def __init__(
        self,
        repo: ProfileRepository,
        sse_hub: SSEHub | None = None,
        *,
        clock: Callable[[], datetime] = now_local,
        focus_seconds: float = FOCUS_SECONDS,
        sweep_interval_s: float = SWEEP_INTERVAL_S,
    ) -> None:
        self._repo = repo
        self._sse_hub = sse_hub
        self._clock = clock
        self._focus_seconds = focus_seconds
        self._sweep_interval_s = sweep_interval_s
        self._session: DailiesService | None = None

    @property
    def session(self) -> DailiesService | None:
        return self._session

    def require_session(self) -> DailiesService:
        """获取激活会话

        Raises:
            NoActiveProfileError: 没有激活的 profile
        """
        if self._session is None or self._session.snapshot is None:
            raise NoActiveProfileError()
        return self._session

    async def enter(self, display_name: str, sync_code: str) -> DailiesService:
        """进入 profile

        Raises:
            ProfileEntryError: 名称为空或 Sync Code 长度不对
        """
        name = display_name.strip()
        code = normalize_code(sync_code)

        if not name:
            raise ProfileEntryError("请输入名称")
        if len(code) != SYNC_CODE_LENGTH:
            raise ProfileEntryError(f"Sync Code 必须为 {SYNC_CODE_LENGTH} 位")

        await self._close_session()

        store = self._new_store()
        now = self._clock()
        existing = await store.load(name, code)
        if existing is not None:
            await store.update(lambda db: touch_profile(db, name, now))
            log.info("profile_entered", created=False, revision=store.current.meta.revision)
        else:
            await store.set_active(name, code, Snapshot.fresh(name, now))
            log.info("profile_entered", created=True)

        await self._repo.set_active_user(name, code)
        return await self._open_session(store)

    async def resume(self) -> DailiesService | None:
        """按记录的激活用户恢复会话；快照不存在时不恢复"""
        active = await self._repo.get_active_user()
        if active is None:
            return None

        await self._close_session()
        store = self._new_store()
        if await store.load(active.name, active.sync_code) is None:
            log.info("profile_resume_skipped", reason="snapshot_missing")
            return None
        log.info("profile_resumed")
        return await self._open_session(store)

    async def logout(self) -> None:
        """退出：清除激活用户并关闭会话"""
        await self._repo.clear_active_user()
        await self._close_session()

    async def close(self) -> None:
        """应用关闭：只关闭会话，保留激活用户记录"""
        await self._close_session()

    def _new_store(self) -> SnapshotStore:
        return SnapshotStore(self._repo, clock=self._clock)

    async def _open_session(self, store: SnapshotStore) -> DailiesService:
        session = DailiesService(
            store,
            self._sse_hub,
            clock=self._clock,
            focus_seconds=self._focus_seconds,
            sweep_interval_s=self._sweep_interval_s,
        )
        await session.open()
        self._session = session
        return session

    async def _close_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            await session.close()
