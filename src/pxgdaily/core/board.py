"""看板构建 -- 把角色任务列表按周期拆分为 open / done 两个列表"""

from collections.abc import Callable
from datetime import datetime

from .completion import is_done, is_doing_now
from .models.board import BoardView, PeriodView, TaskView
from .models.enums import FocusPhase, Period
from .models.task import Character


def build_board(
    character: Character,
    now: datetime,
    focus_phase: Callable[[str], FocusPhase] | None = None,
) -> BoardView:
    """构建角色看板

    Args:
        character: 目标角色
        now: 判断完成状态的时间点
        focus_phase: 可选，task_id -> 当前专注状态

    Returns:
        BoardView；各列表保持任务在角色中的原始顺序，归档任务按归档时间倒序
    """
    buckets: dict[Period, dict] = {
        period: {"open": [], "done": []} for period in Period
    }
    archived = []

    for task in character.tasks:
        if task.archived_at:
            archived.append(task)
            continue

        done = is_done(task, now)
        view = TaskView(
            task=task,
            done=done,
            doing_now=is_doing_now(task, now),
            focus_phase=focus_phase(task.id) if focus_phase else FocusPhase.IDLE,
        )
        buckets[task.period]["done" if done else "open"].append(view)

    periods = {}
    for period, bucket in buckets.items():
        total = len(bucket["open"]) + len(bucket["done"])
        done_count = len(bucket["done"])
        periods[period] = PeriodView(
            open=bucket["open"],
            done=bucket["done"],
            total=total,
            done_count=done_count,
            all_done=total > 0 and done_count == total,
        )

    archived.sort(key=lambda t: t.archived_at or "", reverse=True)

    return BoardView(
        character_id=character.id,
        character_name=character.name,
        periods=periods,
        archived=archived,
    )
