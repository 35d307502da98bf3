"""看板视图模型 -- 按周期拆分 open / done，归档任务单独列出"""

from pydantic import Field

from .base import SnapshotModel
from .enums import FocusPhase, Period
from .task import Task


class TaskView(SnapshotModel):
    """看板上的单个任务"""

    task: Task
    done: bool = False
    doing_now: bool = Field(default=False, description="doingForKey 等于当前周期键")
    focus_phase: FocusPhase = FocusPhase.IDLE


class PeriodView(SnapshotModel):
    """单个周期的两个列表及统计"""

    open: list[TaskView] = Field(default_factory=list)
    done: list[TaskView] = Field(default_factory=list)
    total: int = 0
    done_count: int = 0
    all_done: bool = False


class BoardView(SnapshotModel):
    """角色看板"""

    character_id: str
    character_name: str
    periods: dict[Period, PeriodView]
    archived: list[Task] = Field(default_factory=list, description="按归档时间倒序")
