"""旧版完成标记迁移 -- 把只有 doneForKey/doingForKey 的旧快照规范化到 resetAt 模型

规则（只处理没有 resetAt 的任务）：
1. 已归档任务：清空所有完成/进行中字段（恢复归档不变式）
2. doneForKey 等于当前周期键：转换为真实完成，resetAt 按 doneAt（缺失时按 now）计算
3. doneForKey 已过期：清空 doneForKey / doneAt
4. doingForKey 不等于当前周期键：清空
"""

from datetime import datetime

import structlog

from .clock import format_instant, parse_instant, to_reference
from .completion import clear_completion, has_completion_marks
from .models.snapshot import Snapshot
from .models.task import Task
from .periods import period_key
from .reset_rules import compute_reset_at

log = structlog.get_logger()


def normalize_task(task: Task, now: datetime) -> Task:
    """规范化单个任务的旧版标记；无需变更时返回原对象"""
    if task.archived_at:
        return clear_completion(task) if has_completion_marks(task) else task

    if task.reset_at:
        return task

    local = to_reference(now)
    current_key = period_key(task.period, local)
    update: dict[str, str | None] = {}

    if task.done_for_key is not None:
        if task.done_for_key == current_key:
            done_at = parse_instant(task.done_at) or local
            update["done_at"] = format_instant(done_at)
            update["reset_at"] = format_instant(compute_reset_at(task, done_at))
            update["doing_for_key"] = None
        else:
            update["done_for_key"] = None
            update["done_at"] = None
    elif task.done_at is not None:
        update["done_at"] = None

    if "doing_for_key" not in update and task.doing_for_key not in (None, current_key):
        update["doing_for_key"] = None

    if not update:
        return task
    return task.model_copy(update=update)


def normalize_legacy_completion(snapshot: Snapshot, now: datetime) -> Snapshot:
    """对整份快照执行旧版标记迁移；无变化时返回同一个快照对象"""
    migrated = 0
    next_characters = []

    for character in snapshot.characters:
        next_tasks = [normalize_task(task, now) for task in character.tasks]
        changed = sum(1 for old, new in zip(character.tasks, next_tasks) if old is not new)
        if changed:
            migrated += changed
            next_characters.append(character.model_copy(update={"tasks": next_tasks}))
        else:
            next_characters.append(character)

    if not migrated:
        return snapshot

    log.info("legacy_completion_normalized", count=migrated)
    return snapshot.model_copy(update={"characters": next_characters})
