"""Snapshot (Profile Database) Domain Model

快照是整个 profile 的根聚合。只通过 SnapshotStore.update 产生新版本，
每次变更 revision 单调递增并刷新 updatedAt。
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from .base import SnapshotModel
from .task import Character


class ProfileInfo(SnapshotModel):
    """Profile 元数据"""

    display_name: str = Field(description="玩家显示名")
    created_at: datetime = Field(description="创建时间")
    last_open_at: datetime = Field(description="最近一次进入时间")


class SnapshotMeta(SnapshotModel):
    """快照版本信息"""

    updated_at: datetime = Field(description="最近一次变更时间")
    revision: int = Field(default=0, ge=0, description="单调递增的版本号")


class Snapshot(SnapshotModel):
    """Profile 数据库快照（schema v1）"""

    schema_version: Literal[1] = Field(default=1, description="Schema 版本号")
    sync_code_hash: str | None = Field(default=None, description="Sync Code 摘要（预留）")
    profile: ProfileInfo = Field(description="Profile 元数据")
    meta: SnapshotMeta = Field(description="版本信息")
    characters: list[Character] = Field(default_factory=list, description="有序角色列表")

    @classmethod
    def fresh(cls, display_name: str, now: datetime) -> "Snapshot":
        """首次使用某个名称时创建的空快照（revision 0）"""
        return cls(
            profile=ProfileInfo(
                display_name=display_name,
                created_at=now,
                last_open_at=now,
            ),
            meta=SnapshotMeta(updated_at=now, revision=0),
        )

    def find_character(self, character_id: str) -> Character | None:
        """按 ID 查找角色"""
        for character in self.characters:
            if character.id == character_id:
                return character
        return None


class ExportDocument(SnapshotModel):
    """导出文件格式：{exportVersion: 1, syncCode, db}"""

    export_version: Literal[1] = Field(default=1, description="导出格式版本")
    sync_code: str = Field(description="导出时的 Sync Code")
    db: Snapshot = Field(description="完整快照")
