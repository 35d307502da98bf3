"""FocusController 测试

测试内容：
1. 计时结束进入 PROMPT_PENDING 并回调
2. 计时结束时任务已完成则静默取消
3. 计时中拒绝再次开始
4. 取消后计时器不再触发
"""

import asyncio

from pxgdaily.core.models import FocusPhase
from pxgdaily.gateway.services.focus_controller import FocusController


class TestFocusController:
    async def test_expire_moves_to_prompt_pending(self, make_task, clock):
        prompts = []
        controller = FocusController(
            0.01, is_task_done=lambda c, t: False, on_prompt=prompts.append
        )
        task = make_task(id="t1", title="Daily 1")

        state = controller.begin("char-1", task, clock())
        assert state.phase == FocusPhase.IN_PROGRESS
        assert (state.expires_at - state.started_at).total_seconds() == 0.01

        await asyncio.sleep(0.05)
        assert controller.phase("t1") == FocusPhase.PROMPT_PENDING
        assert [p.title for p in prompts] == ["Daily 1"]
        assert controller.pending_prompts()[0].task_id == "t1"

    async def test_expire_cancels_silently_when_done(self, make_task, clock):
        prompts = []
        controller = FocusController(0.01, is_task_done=lambda c, t: True, on_prompt=prompts.append)
        controller.begin("char-1", make_task(id="t1"), clock())

        await asyncio.sleep(0.05)
        assert controller.phase("t1") == FocusPhase.IDLE
        assert prompts == []

    async def test_second_start_rejected(self, make_task, clock):
        controller = FocusController(60, is_task_done=lambda c, t: False)
        task = make_task(id="t1")
        assert controller.begin("char-1", task, clock()) is not None
        assert controller.can_start("t1") is False
        assert controller.begin("char-1", task, clock()) is None
        controller.cancel_all()

    async def test_restart_from_prompt_pending(self, make_task, clock):
        controller = FocusController(60, is_task_done=lambda c, t: False)
        task = make_task(id="t1")
        controller.begin("char-1", task, clock())
        controller.expire("t1")
        assert controller.phase("t1") == FocusPhase.PROMPT_PENDING
        assert controller.begin("char-1", task, clock()).phase == FocusPhase.IN_PROGRESS
        controller.cancel_all()

    async def test_cancel_stops_timer(self, make_task, clock):
        prompts = []
        controller = FocusController(
            0.01, is_task_done=lambda c, t: False, on_prompt=prompts.append
        )
        controller.begin("char-1", make_task(id="t1"), clock())
        assert controller.cancel("t1") is True

        await asyncio.sleep(0.05)
        assert prompts == []
        assert controller.phase("t1") == FocusPhase.IDLE
        assert controller.cancel("t1") is False

    async def test_resolve(self, make_task, clock):
        controller = FocusController(60, is_task_done=lambda c, t: False)
        controller.begin("char-1", make_task(id="t1"), clock())
        assert controller.resolve("t1") is None  # 仍在计时中
        controller.expire("t1")
        resolved = controller.resolve("t1")
        assert resolved.task_id == "t1"
        assert controller.phase("t1") == FocusPhase.IDLE

    async def test_independent_timers_per_task(self, make_task, clock):
        controller = FocusController(60, is_task_done=lambda c, t: False)
        controller.begin("char-1", make_task(id="a"), clock())
        controller.begin("char-1", make_task(id="b"), clock())
        controller.cancel_many(["a"])
        assert controller.phase("a") == FocusPhase.IDLE
        assert controller.phase("b") == FocusPhase.IN_PROGRESS
        controller.cancel_all()
        assert controller.phase("b") == FocusPhase.IDLE
