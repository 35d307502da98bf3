"""FocusState -- 专注/冷却覆盖层的瞬时状态

只存在于内存中，重新加载即丢失。IDLE 状态不保存实例（映射中不存在即为 IDLE）。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import FocusPhase


class FocusState(BaseModel):
    """单个任务的专注状态"""

    model_config = ConfigDict(frozen=True)

    character_id: str = Field(description="所属角色 ID")
    task_id: str = Field(description="任务 ID")
    title: str = Field(description="任务标题（用于确认提示）")
    phase: FocusPhase = Field(default=FocusPhase.IN_PROGRESS, description="当前状态")
    started_at: datetime = Field(description="开始时间")
    expires_at: datetime = Field(description="计时结束时间")
