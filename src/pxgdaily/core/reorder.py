"""子分组重排 -- 把拖拽后的局部顺序写回完整任务列表

看板上同一周期的 open / done 是两个独立可拖拽列表，但它们都是同一个
混合周期、交错排列的任务序列的视图。重排只替换子分组占据的原位置，
其它周期、已归档任务以及互补的另一半列表保持原位不动。
"""

from datetime import datetime

from .completion import is_done
from .models.enums import CompletionFilter, Period
from .models.task import Task


def reorder_subgroup(
    tasks: list[Task],
    period: Period,
    ordered_ids: list[str],
    which: CompletionFilter,
    now: datetime,
) -> list[Task]:
    """按 ordered_ids 重排 (period, 未归档, which) 子分组

    Args:
        tasks: 角色的完整有序任务列表
        period: 目标周期
        ordered_ids: 调用方期望的子分组顺序（可能过期或不完整）
        which: open / done
        now: 用于判断完成状态的时间点

    Returns:
        新的任务列表；子分组不足 2 个成员时返回原列表
    """
    want_done = CompletionFilter(which) == CompletionFilter.DONE
    positions: list[int] = []
    group: list[Task] = []

    for index, task in enumerate(tasks):
        if task.period != period or task.archived_at:
            continue
        if is_done(task, now) != want_done:
            continue
        positions.append(index)
        group.append(task)

    if len(group) <= 1:
        return tasks

    by_id = {task.id: task for task in group}
    reordered: list[Task] = []
    placed: set[str] = set()

    for task_id in ordered_ids:
        task = by_id.get(task_id)
        if task is not None and task_id not in placed:
            reordered.append(task)
            placed.add(task_id)

    # 拖拽载荷中缺失的成员按原相对顺序追加
    reordered.extend(task for task in group if task.id not in placed)

    next_tasks = list(tasks)
    for position, task in zip(positions, reordered, strict=True):
        next_tasks[position] = task
    return next_tasks
