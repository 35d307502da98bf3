"""系统默认任务 -- 签名表 + 新角色的默认任务列表

签名表是 Origin 分类的唯一依据：(period, 规范化标题) 命中即为系统任务。
"""

from ulid import ULID

from .models.enums import Period, TaskOrigin
from .models.task import Task

# 新角色的默认任务，按此顺序生成
DEFAULT_TASKS: list[tuple[Period, str]] = [
    (Period.DAILY, "Daily 1"),
    (Period.WEEKLY, "Weekly 1"),
    (Period.MONTHLY, "Monthly 1"),
]

# 签名表：默认任务 + 滚动窗口任务
DEFAULT_TASK_SIGNATURES: list[tuple[Period, str]] = [
    *DEFAULT_TASKS,
    (Period.MONTHLY, "Clones"),
]


def normalize_title(title: str | None) -> str:
    """标题规范化：去首尾空白 + 小写"""
    return (title or "").strip().lower()


def default_tasks() -> list[Task]:
    """为新角色生成默认任务（origin=system）"""
    return [
        Task(
            id=str(ULID()),
            title=title,
            period=period,
            origin=TaskOrigin.SYSTEM,
        )
        for period, title in DEFAULT_TASKS
    ]
