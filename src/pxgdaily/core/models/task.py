"""Task / Character Domain Model

Task 的时间字段（archivedAt / doneAt / resetAt）按原样保存 ISO 8601 文本：
无法解析的值不会让整份快照校验失败，而是在读取时降级为 Open。
"""

from datetime import datetime

from pydantic import Field

from .base import SnapshotModel
from .enums import Period, TaskOrigin


class Task(SnapshotModel):
    """Task 数据模型 -- 一个周期性（或一次性）任务

    不变式：
    - archived_at 有值时，done_for_key / doing_for_key / done_at / reset_at 必须全部为空
    - origin 只分配一次，之后不再改变
    """

    id: str = Field(description="唯一标识")
    title: str = Field(description="显示标题")
    period: Period = Field(description="周期")
    origin: TaskOrigin | None = Field(default=None, description="来源，首次迁移时分配")
    archived_at: str | None = Field(default=None, description="归档时间")
    done_for_key: str | None = Field(default=None, description="旧版完成标记（周期键）")
    doing_for_key: str | None = Field(default=None, description="进行中标记（周期键）")
    done_at: str | None = Field(default=None, description="最近一次完成时间")
    reset_at: str | None = Field(default=None, description="当前完成状态的过期时间")


class Character(SnapshotModel):
    """Character 数据模型 -- profile 下的一个角色

    tasks 的顺序即显示/拖拽顺序，除显式重排外原样保留。
    """

    id: str = Field(description="唯一标识")
    name: str = Field(description="角色名")
    created_at: datetime = Field(description="创建时间")
    tasks: list[Task] = Field(default_factory=list, description="有序任务列表")

    def find_task(self, task_id: str) -> Task | None:
        """按 ID 查找任务"""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
