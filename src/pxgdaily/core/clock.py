"""参考时区时间工具

所有重置计算都在同一个固定民用时区内完成。
时间戳解析失败一律返回 None，由调用方降级处理（视为已过期 / Open）。
"""

from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from .config import RESET_TIMEZONE


@lru_cache(maxsize=1)
def reference_timezone() -> ZoneInfo:
    """获取重置时钟使用的参考时区"""
    return ZoneInfo(RESET_TIMEZONE)


def now_local() -> datetime:
    """参考时区下的当前时间"""
    return datetime.now(reference_timezone())


def to_reference(instant: datetime) -> datetime:
    """转换到参考时区；naive 时间视为参考时区的墙上时间"""
    tz = reference_timezone()
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def parse_instant(value: str | None) -> datetime | None:
    """解析 ISO 8601 时间戳

    Returns:
        带时区的 datetime；空值或无法解析时返回 None
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    return to_reference(parsed)


def format_instant(instant: datetime) -> str:
    """格式化为带偏移的 ISO 8601（毫秒精度），如 2024-03-06T07:40:00.000-03:00"""
    return to_reference(instant).isoformat(timespec="milliseconds")
