"""重置时间计算 -- 任务完成后何时自动回到 Open

- daily:   明天的 H:M
- weekly:  下一周周一的 H:M（即使本周的重置时刻还没到，也总是落在下一周边界）
- monthly: 下个月 1 日的 H:M；滚动窗口任务例外，固定为 now + 30 天的同一时刻
"""

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from .clock import to_reference
from .config import RESET_HOUR, RESET_MINUTE, ROLLING_WINDOW_DAYS, ROLLING_WINDOW_TITLE
from .defaults import normalize_title
from .models.enums import Period
from .models.task import Task


def _at_reset_time(instant: datetime, hour: int, minute: int) -> datetime:
    return instant.replace(hour=hour, minute=minute, second=0, microsecond=0)


def is_rolling_window(task: Task) -> bool:
    """是否为固定时长冷却的月度任务"""
    return task.period == Period.MONTHLY and normalize_title(task.title) == ROLLING_WINDOW_TITLE


def compute_reset_at(
    task: Task,
    now: datetime,
    *,
    hour: int = RESET_HOUR,
    minute: int = RESET_MINUTE,
) -> datetime:
    """计算任务在 now 完成时的过期时间点

    Args:
        task: 被标记完成的任务
        now: 完成时间（naive 视为参考时区）
        hour: 重置时刻（时）
        minute: 重置时刻（分）

    Returns:
        参考时区下的过期时间点
    """
    local = to_reference(now)

    if task.period == Period.DAILY:
        return _at_reset_time(local + timedelta(days=1), hour, minute)

    if task.period == Period.WEEKLY:
        next_week = local + timedelta(weeks=1)
        monday = next_week - timedelta(days=next_week.weekday())
        return _at_reset_time(monday, hour, minute)

    if is_rolling_window(task):
        return local + timedelta(days=ROLLING_WINDOW_DAYS)

    first_of_next_month = (local + relativedelta(months=1)).replace(day=1)
    return _at_reset_time(first_of_next_month, hour, minute)
