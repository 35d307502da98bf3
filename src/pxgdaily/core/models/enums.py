"""枚举定义

包含 Period 周期、TaskOrigin 来源、CompletionFilter 完成分组、FocusPhase 专注状态机，
以及 VALID_FOCUS_TRANSITIONS 合法流转映射。
"""

from enum import StrEnum


class Period(StrEnum):
    """任务周期"""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class TaskOrigin(StrEnum):
    """任务来源 -- 只分配一次，之后不可变"""

    SYSTEM = "system"
    USER = "user"


class CompletionFilter(StrEnum):
    """看板上同一周期的两个独立拖拽列表"""

    OPEN = "open"
    DONE = "done"


class FocusPhase(StrEnum):
    """专注/冷却覆盖层状态机（不持久化）"""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    PROMPT_PENDING = "prompt_pending"


# 专注状态合法流转；回到 IDLE 即覆盖层被清除（确认、拒绝或被取消）
VALID_FOCUS_TRANSITIONS: dict[FocusPhase, set[FocusPhase]] = {
    FocusPhase.IDLE: {FocusPhase.IN_PROGRESS},
    FocusPhase.IN_PROGRESS: {FocusPhase.PROMPT_PENDING, FocusPhase.IDLE},
    FocusPhase.PROMPT_PENDING: {FocusPhase.IDLE, FocusPhase.IN_PROGRESS},
}


def validate_focus_transition(from_phase: FocusPhase, to_phase: FocusPhase) -> bool:
    """验证专注状态流转是否合法

    Args:
        from_phase: 当前状态
        to_phase: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_FOCUS_TRANSITIONS.get(from_phase, set())
    return to_phase in allowed
