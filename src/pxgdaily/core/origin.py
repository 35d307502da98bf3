"""Origin 分类迁移 -- 为缺少 origin 的任务一次性分配来源

按 (period, 规范化标题) 匹配签名表：命中为 system，否则为 user。
已分配的 origin 永不重新计算，即使之后标题被改成（或改离）某个默认签名。
"""

import structlog

from .defaults import DEFAULT_TASK_SIGNATURES, normalize_title
from .models.enums import Period, TaskOrigin
from .models.snapshot import Snapshot
from .models.task import Task

log = structlog.get_logger()

SYSTEM_SIGNATURES: frozenset[tuple[Period, str]] = frozenset(
    (period, normalize_title(title)) for period, title in DEFAULT_TASK_SIGNATURES
)


def task_signature(task: Task) -> tuple[Period, str]:
    """任务签名：(period, 规范化标题)"""
    return (task.period, normalize_title(task.title))


def classify(task: Task) -> TaskOrigin:
    """根据签名表判断任务来源"""
    if task_signature(task) in SYSTEM_SIGNATURES:
        return TaskOrigin.SYSTEM
    return TaskOrigin.USER


def can_rename(task: Task) -> bool:
    """只有用户创建的任务可以重命名"""
    return task.origin == TaskOrigin.USER


def can_delete(task: Task) -> bool:
    """只有用户创建的任务可以删除；系统任务只能归档"""
    return task.origin == TaskOrigin.USER


def migrate_origins(snapshot: Snapshot) -> Snapshot:
    """为所有缺少 origin 的任务分配来源

    幂等；没有需要分配的任务时返回同一个快照对象。
    """
    assigned = 0
    next_characters = []

    for character in snapshot.characters:
        if all(task.origin is not None for task in character.tasks):
            next_characters.append(character)
            continue

        next_tasks = []
        for task in character.tasks:
            if task.origin is None:
                task = task.model_copy(update={"origin": classify(task)})
                assigned += 1
            next_tasks.append(task)
        next_characters.append(character.model_copy(update={"tasks": next_tasks}))

    if not assigned:
        return snapshot

    log.info("task_origins_assigned", count=assigned)
    return snapshot.model_copy(update={"characters": next_characters})
