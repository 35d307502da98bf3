"""pxgdaily Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .board import BoardView, PeriodView, TaskView
from .enums import (
    VALID_FOCUS_TRANSITIONS,
    CompletionFilter,
    FocusPhase,
    Period,
    TaskOrigin,
    validate_focus_transition,
)
from .focus import FocusState
from .snapshot import ExportDocument, ProfileInfo, Snapshot, SnapshotMeta
from .task import Character, Task

__all__ = [
    # 枚举
    "Period",
    "TaskOrigin",
    "CompletionFilter",
    "FocusPhase",
    # 状态机
    "VALID_FOCUS_TRANSITIONS",
    "validate_focus_transition",
    # Task / Character
    "Task",
    "Character",
    # Snapshot
    "Snapshot",
    "SnapshotMeta",
    "ProfileInfo",
    "ExportDocument",
    # Focus
    "FocusState",
    # Board
    "BoardView",
    "PeriodView",
    "TaskView",
]
