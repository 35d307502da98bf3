"""pxgdaily Core Store -- SQLite 键值持久化 + 快照存储

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .kv_store import SqliteKeyValueStore
from .profile_repo import ActiveUser, ProfileRepository
from .protocols import KeyValueStore
from .snapshot_store import SnapshotStore
from .sqlite_init import init_db, verify_wal_mode


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.kv_store = SqliteKeyValueStore(conn)
        self.profile_repo = ProfileRepository(self.kv_store)


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "ProfileRepository",
    "ActiveUser",
    "SnapshotStore",
    "init_db",
    "verify_wal_mode",
]
