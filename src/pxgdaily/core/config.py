"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、重置时钟（时区 + 时分）、专注计时时长、扫描间隔等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("PXGDAILY_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "PXGDAILY_DB_PATH",
        str(_get_base_dir() / "sqlite" / "pxgdaily.db"),
    )


# 重置时钟使用的固定民用时区（所有用户共用，不做自动探测）
RESET_TIMEZONE: str = os.environ.get("PXGDAILY_RESET_TZ", "America/Sao_Paulo")

# 每日/每周/每月重置的时刻
RESET_HOUR: int = int(os.environ.get("PXGDAILY_RESET_HOUR", "7"))
RESET_MINUTE: int = int(os.environ.get("PXGDAILY_RESET_MINUTE", "40"))

# 专注计时时长（秒），默认 1 小时
FOCUS_SECONDS: int = int(os.environ.get("PXGDAILY_FOCUS_SECONDS", "3600"))

# 完成状态过期扫描间隔（秒）
SWEEP_INTERVAL_S: int = int(os.environ.get("PXGDAILY_SWEEP_INTERVAL_S", "60"))

# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("PXGDAILY_SSE_HEARTBEAT_INTERVAL", "15")
)

# 滚动窗口月度任务：按标题识别，完成后固定 30 天冷却而非日历重置
ROLLING_WINDOW_TITLE: str = "clones"
ROLLING_WINDOW_DAYS: int = 30

# Sync Code 长度
SYNC_CODE_LENGTH: int = 4
