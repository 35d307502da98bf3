"""DailiesService -- 单个 profile 会话的业务逻辑

把引擎纯函数组合成 mutator 交给 SnapshotStore，并负责：
1. 每次快照变更后执行 origin 迁移 + 过期扫描
2. 定时过期扫描（SweepTicker）
3. 专注/冷却覆盖层（FocusController）
4. 快照变更与专注提示推送到 SSEHub
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog
from pxgdaily.core import mutations
from pxgdaily.core.board import build_board
from pxgdaily.core.clock import now_local
from pxgdaily.core.completion import apply_resets, is_done
from pxgdaily.core.config import FOCUS_SECONDS, SWEEP_INTERVAL_S
from pxgdaily.core.exceptions import TaskPermissionError
from pxgdaily.core.migration import normalize_legacy_completion
from pxgdaily.core.models import (
    BoardView,
    Character,
    CompletionFilter,
    FocusState,
    Period,
    Snapshot,
    Task,
)
from pxgdaily.core.origin import can_delete, can_rename, migrate_origins
from pxgdaily.core.store import SnapshotStore
from pxgdaily.core.store.snapshot_store import Mutator
from pxgdaily.core.sync_code import profile_key
from pxgdaily.core.transfer import build_export

from .focus_controller import FocusController
from .sse_hub import SSEHub, StreamMessage
from .sweep_ticker import SweepTicker

log = structlog.get_logger()


def snapshot_message(snapshot: Snapshot) -> StreamMessage:
    """快照变更推送：只携带 revision，客户端按需重新拉取"""
    return StreamMessage(
        event="snapshot",
        data={
            "revision": snapshot.meta.revision,
            "updatedAt": snapshot.meta.updated_at.isoformat(),
        },
    )


def prompt_message(state: FocusState) -> StreamMessage:
    """专注计时结束后的确认提示"""
    return StreamMessage(
        event="focus_prompt",
        data={
            "characterId": state.character_id,
            "taskId": state.task_id,
            "title": state.title,
        },
    )


class DailiesService:
    """profile 会话服务"""

    def __init__(
        self,
        store: SnapshotStore,
        sse_hub: SSEHub | None = None,
        *,
        clock: Callable[[], datetime] = now_local,
        focus_seconds: float = FOCUS_SECONDS,
        sweep_interval_s: float = SWEEP_INTERVAL_S,
    ) -> None:
        self._store = store
        self._sse_hub = sse_hub
        self._clock = clock
        self._focus = FocusController(
            focus_seconds,
            is_task_done=self._is_task_done,
            on_prompt=self._publish_prompt,
        )
        self._ticker = SweepTicker(self.sweep, interval_s=sweep_interval_s)
        self._unsubscribe = store.subscribe(self._publish_snapshot)

    # ------------------------------------------------------------------
    # 生命周期
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot | None:
        return self._store.current

    @property
    def focus(self) -> FocusController:
        return self._focus

    @property
    def ticker(self) -> SweepTicker:
        return self._ticker

    @property
    def topic(self) -> str:
        """SSE topic：profile 存储键"""
        return profile_key(self._store.active_name or "", self._store.active_code or "")

    @property
    def sync_code(self) -> str | None:
        return self._store.active_code

    async def open(self) -> None:
        """会话开始：旧版标记迁移 + origin 迁移 + 过期扫描，然后启动定时扫描"""
        now = self._clock()
        await self._store.update(
            lambda db: apply_resets(migrate_origins(normalize_legacy_completion(db, now)), now)
        )
        self._ticker.start()
        log.info("session_opened", topic=self.topic)

    async def close(self) -> None:
        """会话结束：停止定时器，清除专注覆盖层"""
        await self._ticker.stop()
        self._focus.cancel_all()
        self._unsubscribe()
        log.info("session_closed", topic=self.topic)
        self._store.clear()

    # ------------------------------------------------------------------
    # 变更入口
    # ------------------------------------------------------------------

    async def _apply(self, mutator: Mutator) -> Snapshot | None:
        before = self._store.current
        updated = await self._store.update(mutator)
        if updated is not None and updated is not before:
            await self._settle()
        return self._store.current

    async def _settle(self) -> None:
        """快照变更后的归一化：origin 迁移 + 过期扫描（无变化时不产生新 revision）"""
        now = self._clock()
        await self._store.update(lambda db: apply_resets(migrate_origins(db), now))

    async def sweep(self) -> bool:
        """执行一次过期扫描

        Returns:
            True 如果有完成状态被过期
        """
        before = self._store.current
        now = self._clock()
        updated = await self._store.update(lambda db: apply_resets(db, now))
        return updated is not None and updated is not before

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def find_character(self, character_id: str) -> Character | None:
        snapshot = self._store.current
        return snapshot.find_character(character_id) if snapshot else None

    def find_task(self, character_id: str, task_id: str) -> Task | None:
        snapshot = self._store.current
        return mutations.find_task(snapshot, character_id, task_id) if snapshot else None

    def board(self, character_id: str) -> BoardView | None:
        character = self.find_character(character_id)
        if character is None:
            return None
        return build_board(character, self._clock(), focus_phase=self._focus.phase)

    def export(self) -> dict[str, Any] | None:
        snapshot = self._store.current
        if snapshot is None or self._store.active_code is None:
            return None
        return build_export(snapshot, self._store.active_code)

    # ------------------------------------------------------------------
    # 角色
    # ------------------------------------------------------------------

    async def add_character(self, name: str) -> Character | None:
        """新增角色（带默认任务）；名称为空时无操作"""
        name = name.strip()
        if not name:
            return None
        character = mutations.new_character(name, self._clock())
        await self._apply(lambda db: mutations.add_character(db, character))
        log.info("character_added", character_id=character.id)
        return self.find_character(character.id)

    async def delete_character(self, character_id: str) -> bool:
        character = self.find_character(character_id)
        if character is None:
            return False
        self._focus.cancel_many([t.id for t in character.tasks])
        await self._apply(lambda db: mutations.remove_character(db, character_id))
        log.info("character_deleted", character_id=character_id)
        return True

    # ------------------------------------------------------------------
    # 任务
    # ------------------------------------------------------------------

    async def add_task(self, character_id: str, period: Period, title: str) -> Task | None:
        """新增用户任务；标题为空或角色不存在时无操作"""
        title = title.strip()
        if not title or self.find_character(character_id) is None:
            return None
        task = mutations.new_user_task(title, Period(period))
        await self._apply(lambda db: mutations.append_task(db, character_id, task))
        log.info("task_added", character_id=character_id, task_id=task.id)
        return self.find_task(character_id, task.id)

    async def rename_task(self, character_id: str, task_id: str, title: str) -> Task | None:
        """重命名用户任务

        Raises:
            TaskPermissionError: 系统任务不可重命名
        """
        task = self.find_task(character_id, task_id)
        if task is None:
            return None
        if not can_rename(task):
            raise TaskPermissionError(task_id, "rename")
        title = title.strip()
        if not title:
            return task
        await self._apply(lambda db: mutations.rename_task(db, character_id, task_id, title))
        return self.find_task(character_id, task_id)

    async def delete_task(self, character_id: str, task_id: str) -> bool:
        """删除用户任务

        Raises:
            TaskPermissionError: 系统任务只能归档
        """
        task = self.find_task(character_id, task_id)
        if task is None:
            return False
        if not can_delete(task):
            raise TaskPermissionError(task_id, "delete")
        self._focus.cancel(task_id)
        await self._apply(lambda db: mutations.remove_task(db, character_id, task_id))
        log.info("task_deleted", character_id=character_id, task_id=task_id)
        return True

    async def toggle_done(self, character_id: str, task_id: str) -> Task | None:
        """切换完成状态；总是先取消该任务的专注覆盖层"""
        self._focus.cancel(task_id)
        now = self._clock()
        await self._apply(lambda db: mutations.toggle_task(db, character_id, task_id, now))
        task = self.find_task(character_id, task_id)
        if task is not None:
            log.info("task_toggled", task_id=task_id, done=is_done(task, now))
        return task

    async def archive_task(self, character_id: str, task_id: str) -> Task | None:
        self._focus.cancel(task_id)
        now = self._clock()
        await self._apply(lambda db: mutations.archive_task(db, character_id, task_id, now))
        return self.find_task(character_id, task_id)

    async def restore_task(self, character_id: str, task_id: str) -> Task | None:
        await self._apply(lambda db: mutations.restore_task(db, character_id, task_id))
        return self.find_task(character_id, task_id)

    async def reorder(
        self,
        character_id: str,
        period: Period,
        ordered_ids: list[str],
        which: CompletionFilter,
    ) -> Character | None:
        now = self._clock()
        await self._apply(
            lambda db: mutations.reorder_tasks(
                db, character_id, Period(period), ordered_ids, CompletionFilter(which), now
            )
        )
        return self.find_character(character_id)

    async def import_snapshot(self, imported: Snapshot) -> Snapshot | None:
        """用导入的快照替换当前内容（revision 在当前基础上继续递增）"""
        self._focus.cancel_all()
        snapshot = await self._apply(lambda db: imported)
        log.info("snapshot_imported", characters=len(imported.characters))
        return snapshot

    # ------------------------------------------------------------------
    # 专注/冷却
    # ------------------------------------------------------------------

    async def start_focus(self, character_id: str, task_id: str) -> FocusState | None:
        """开始专注计时

        Returns:
            新状态；任务不存在、已归档、已完成或已在计时中时返回 None
        """
        now = self._clock()
        if not self._can_focus(character_id, task_id, now):
            return None

        await self._apply(lambda db: mutations.set_doing_on(db, character_id, task_id, now))
        # 写入期间任务可能已被完成或归档
        if not self._can_focus(character_id, task_id, now):
            return None
        task = self.find_task(character_id, task_id)
        return self._focus.begin(character_id, task, now)

    def _can_focus(self, character_id: str, task_id: str, now: datetime) -> bool:
        task = self.find_task(character_id, task_id)
        if task is None or task.archived_at is not None:
            return False
        return not is_done(task, now) and self._focus.can_start(task_id)

    async def resolve_focus(self, task_id: str, did_finish: bool) -> Task | None:
        """处理专注结束后的确认

        Args:
            task_id: 任务 ID
            did_finish: True 标记完成；False 仅清除 doingForKey

        Returns:
            处理后的任务；没有待确认提示时返回 None
        """
        state = self._focus.resolve(task_id)
        if state is None:
            return None
        if did_finish:
            return await self.toggle_done(state.character_id, task_id)
        await self._apply(lambda db: mutations.set_doing_off(db, state.character_id, task_id))
        return self.find_task(state.character_id, task_id)

    def is_task_done(self, task: Task) -> bool:
        return is_done(task, self._clock())

    def _is_task_done(self, character_id: str, task_id: str) -> bool:
        task = self.find_task(character_id, task_id)
        return task is not None and self.is_task_done(task)

    # ------------------------------------------------------------------
    # 推送
    # ------------------------------------------------------------------

    async def _publish_snapshot(self, snapshot: Snapshot) -> None:
        if self._sse_hub is not None:
            self._sse_hub.publish(self.topic, snapshot_message(snapshot))

    def _publish_prompt(self, state: FocusState) -> None:
        if self._sse_hub is not None:
            self._sse_hub.publish(self.topic, prompt_message(state))
