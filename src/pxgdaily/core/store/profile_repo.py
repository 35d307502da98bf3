"""ProfileRepository -- 快照与激活用户在键值存储上的读写

键格式：
- 快照: pxgDaily:DB:<NAME>::<CODE>（名称与 Sync Code 均规范化）
- 激活用户: pxgDaily:ACTIVE_USER
"""

import json

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models.snapshot import Snapshot
from ..sync_code import ACTIVE_USER_KEY, KEY_PREFIX, profile_key
from ..transfer import parse_snapshot_json
from .protocols import KeyValueStore

log = structlog.get_logger()


class ActiveUser(BaseModel):
    """最近一次进入的 profile"""

    name: str = Field(description="显示名（原样）")
    sync_code: str = Field(alias="syncCode", description="Sync Code")

    model_config = ConfigDict(populate_by_name=True)


class ProfileRepository:
    """Profile 快照仓库"""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def save_snapshot(self, name: str, sync_code: str, snapshot: Snapshot) -> None:
        """保存快照（整体覆盖）"""
        await self._kv.set(
            profile_key(name, sync_code),
            snapshot.model_dump_json(by_alias=True, exclude_none=True),
        )

    async def load_snapshot(self, name: str, sync_code: str) -> Snapshot | None:
        """读取快照

        Raises:
            SnapshotValidationError: 存储的 JSON 已损坏
        """
        raw = await self._kv.get(profile_key(name, sync_code))
        if raw is None:
            return None
        return parse_snapshot_json(raw, source="storage")

    async def delete_snapshot(self, name: str, sync_code: str) -> None:
        await self._kv.delete(profile_key(name, sync_code))

    async def list_profiles(self) -> list[str]:
        """列出所有已存储 profile 的 NAME::CODE"""
        keys = await self._kv.list_keys(KEY_PREFIX)
        return [key[len(KEY_PREFIX):] for key in keys]

    async def set_active_user(self, name: str, sync_code: str) -> None:
        user = ActiveUser(name=name, sync_code=sync_code)
        await self._kv.set(ACTIVE_USER_KEY, user.model_dump_json(by_alias=True))

    async def get_active_user(self) -> ActiveUser | None:
        """读取激活用户；记录损坏时视为没有激活用户"""
        raw = await self._kv.get(ACTIVE_USER_KEY)
        if raw is None:
            return None
        try:
            return ActiveUser.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            log.warning("active_user_record_invalid", raw_length=len(raw))
            return None

    async def clear_active_user(self) -> None:
        await self._kv.delete(ACTIVE_USER_KEY)
