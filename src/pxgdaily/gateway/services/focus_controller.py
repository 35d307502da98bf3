"""FocusController -- 专注/冷却覆盖层

状态机（每个任务独立，不持久化）：
    IDLE -> IN_PROGRESS -> PROMPT_PENDING -> IDLE
                       \\-> IDLE（计时结束时任务已完成，静默取消）

计时器使用 loop.call_later，每个任务一个句柄，可单独取消。
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta

import structlog
from pxgdaily.core.models import FocusPhase, FocusState, Task, validate_focus_transition

log = structlog.get_logger()

DoneProbe = Callable[[str, str], bool]
PromptCallback = Callable[[FocusState], None]


class FocusController:
    """按任务 ID 管理专注状态与计时器"""

    def __init__(
        self,
        focus_seconds: float,
        is_task_done: DoneProbe,
        on_prompt: PromptCallback | None = None,
    ) -> None:
        """
        Args:
            focus_seconds: 专注计时时长
            is_task_done: (character_id, task_id) -> 任务当前是否已完成
            on_prompt: 进入 PROMPT_PENDING 时的回调
        """
        self._focus_seconds = focus_seconds
        self._is_task_done = is_task_done
        self._on_prompt = on_prompt
        self._states: dict[str, FocusState] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    def phase(self, task_id: str) -> FocusPhase:
        state = self._states.get(task_id)
        return state.phase if state else FocusPhase.IDLE

    def state(self, task_id: str) -> FocusState | None:
        return self._states.get(task_id)

    def pending_prompts(self) -> list[FocusState]:
        """所有等待确认的提示"""
        return [s for s in self._states.values() if s.phase == FocusPhase.PROMPT_PENDING]

    def can_start(self, task_id: str) -> bool:
        """单任务单计时：IN_PROGRESS 时拒绝再次开始"""
        return validate_focus_transition(self.phase(task_id), FocusPhase.IN_PROGRESS)

    def begin(self, character_id: str, task: Task, now: datetime) -> FocusState | None:
        """进入 IN_PROGRESS 并启动计时器

        调用方负责先检查任务未完成并写入 doingForKey。

        Returns:
            新状态；任务已在计时中时返回 None
        """
        if not self.can_start(task.id):
            return None

        self._drop_timer(task.id)
        state = FocusState(
            character_id=character_id,
            task_id=task.id,
            title=task.title,
            phase=FocusPhase.IN_PROGRESS,
            started_at=now,
            expires_at=now + timedelta(seconds=self._focus_seconds),
        )
        self._states[task.id] = state
        loop = asyncio.get_running_loop()
        self._timers[task.id] = loop.call_later(self._focus_seconds, self.expire, task.id)

        log.info("focus_started", task_id=task.id, character_id=character_id)
        return state

    def expire(self, task_id: str) -> FocusState | None:
        """计时结束

        Returns:
            进入 PROMPT_PENDING 的状态；任务已完成（静默取消）或不在计时中时返回 None
        """
        state = self._states.get(task_id)
        if state is None or state.phase != FocusPhase.IN_PROGRESS:
            return None
        self._timers.pop(task_id, None)

        if self._is_task_done(state.character_id, task_id):
            self.cancel(task_id)
            log.info("focus_cancelled_task_done", task_id=task_id)
            return None

        pending = state.model_copy(update={"phase": FocusPhase.PROMPT_PENDING})
        self._states[task_id] = pending
        log.info("focus_prompt_pending", task_id=task_id)

        if self._on_prompt is not None:
            self._on_prompt(pending)
        return pending

    def resolve(self, task_id: str) -> FocusState | None:
        """取走待确认提示，状态回到 IDLE

        Returns:
            被确认的状态；没有待确认提示时返回 None
        """
        state = self._states.get(task_id)
        if state is None or state.phase != FocusPhase.PROMPT_PENDING:
            return None
        del self._states[task_id]
        return state

    def cancel(self, task_id: str) -> bool:
        """静默清除覆盖层（完成、归档、删除时调用）"""
        self._drop_timer(task_id)
        return self._states.pop(task_id, None) is not None

    def cancel_many(self, task_ids: list[str]) -> None:
        for task_id in task_ids:
            self.cancel(task_id)

    def cancel_all(self) -> None:
        """会话结束：清除所有覆盖层与计时器"""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._states.clear()

    def _drop_timer(self, task_id: str) -> None:
        handle = self._timers.pop(task_id, None)
        if handle is not None:
            handle.cancel()
