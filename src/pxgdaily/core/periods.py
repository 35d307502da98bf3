"""周期键计算 -- 把时间点映射为所属的日/周/月周期标识

使用传入时间的墙上时间字段（调用方负责先转换到参考时区）。
"""

from collections.abc import Callable
from datetime import datetime

from .models.enums import Period


def daily_key(instant: datetime) -> str:
    """YYYY-MM-DD"""
    return f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"


def monthly_key(instant: datetime) -> str:
    """YYYY-MM"""
    return f"{instant.year:04d}-{instant.month:02d}"


def weekly_key(instant: datetime) -> str:
    """ISO-8601 周标识 YYYY-Www

    ISO 周以周四所在的年份为准，年初年末的日期可能属于相邻年份，
    例如 2023-01-01（周日）属于 2022-W52。
    """
    iso_year, iso_week, _ = instant.date().isocalendar()
    return f"{iso_year:04d}-W{iso_week:02d}"


_KEY_FUNCS: dict[Period, Callable[[datetime], str]] = {
    Period.DAILY: daily_key,
    Period.WEEKLY: weekly_key,
    Period.MONTHLY: monthly_key,
}


def period_key(period: Period, instant: datetime) -> str:
    """计算时间点在指定周期下的周期键"""
    return _KEY_FUNCS[Period(period)](instant)
