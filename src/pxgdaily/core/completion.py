"""完成状态机 -- Open / Done 由 resetAt 与当前时间推导

- Done: resetAt 有值且 now < resetAt
- Open: 其他所有情况（包括 resetAt 无法解析）

本模块只处理单个 Task 的纯函数变换；快照层面的组合见 mutations.py。
"""

from datetime import datetime

import structlog

from .clock import format_instant, parse_instant, to_reference
from .models.snapshot import Snapshot
from .models.task import Task
from .periods import period_key
from .reset_rules import compute_reset_at

log = structlog.get_logger()

# 清除完成状态时一并清空的四个字段
_CLEARED_COMPLETION: dict[str, None] = {
    "done_for_key": None,
    "doing_for_key": None,
    "done_at": None,
    "reset_at": None,
}


def is_done(task: Task, now: datetime) -> bool:
    """任务在 now 时刻是否处于 Done"""
    reset_at = parse_instant(task.reset_at)
    if reset_at is None:
        return False
    return to_reference(now) < reset_at


def is_expired(task: Task, now: datetime) -> bool:
    """resetAt 已设置但无法解析或已过期"""
    if not task.reset_at:
        return False
    reset_at = parse_instant(task.reset_at)
    return reset_at is None or to_reference(now) >= reset_at


def has_completion_marks(task: Task) -> bool:
    return any(getattr(task, field) is not None for field in _CLEARED_COMPLETION)


def clear_completion(task: Task) -> Task:
    """回到 Open：清空四个完成字段"""
    return task.model_copy(update=_CLEARED_COMPLETION)


def mark_done(task: Task, now: datetime) -> Task:
    """标记完成并计算过期时间"""
    local = to_reference(now)
    return task.model_copy(
        update={
            "done_for_key": period_key(task.period, local),
            "doing_for_key": None,
            "done_at": format_instant(local),
            "reset_at": format_instant(compute_reset_at(task, local)),
        }
    )


def toggle(task: Task, now: datetime) -> Task:
    """Done -> Open，Open -> Done；归档任务不变"""
    if task.archived_at is not None:
        return task
    if is_done(task, now):
        return clear_completion(task)
    return mark_done(task, now)


def mark_doing(task: Task, now: datetime) -> Task:
    """设置进行中标记（仅提示用途）；归档任务不变"""
    if task.archived_at is not None:
        return task
    return task.model_copy(
        update={"doing_for_key": period_key(task.period, to_reference(now))}
    )


def clear_doing(task: Task) -> Task:
    if task.doing_for_key is None:
        return task
    return task.model_copy(update={"doing_for_key": None})


def archive(task: Task, now: datetime) -> Task:
    """归档：强制回到 Open 并记录归档时间"""
    return task.model_copy(
        update={**_CLEARED_COMPLETION, "archived_at": format_instant(now)}
    )


def restore(task: Task) -> Task:
    """取消归档：只清空 archivedAt，不恢复完成状态"""
    if task.archived_at is None:
        return task
    return task.model_copy(update={"archived_at": None})


def is_doing_now(task: Task, now: datetime) -> bool:
    return task.doing_for_key is not None and task.doing_for_key == period_key(
        task.period, to_reference(now)
    )


def apply_resets(snapshot: Snapshot, now: datetime) -> Snapshot:
    """过期扫描：resetAt 无法解析或已过期的任务回到 Open

    幂等；没有任何任务变化时返回同一个快照对象。
    """
    expired = 0
    next_characters = []

    for character in snapshot.characters:
        next_tasks = []
        character_expired = 0
        for task in character.tasks:
            if is_expired(task, now):
                next_tasks.append(clear_completion(task))
                character_expired += 1
            else:
                next_tasks.append(task)
        if character_expired:
            expired += character_expired
            next_characters.append(character.model_copy(update={"tasks": next_tasks}))
        else:
            next_characters.append(character)

    if not expired:
        return snapshot

    log.info("completions_expired", count=expired)
    return snapshot.model_copy(update={"characters": next_characters})
