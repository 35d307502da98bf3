"""SQLite 键值存储与 ProfileRepository 测试

测试内容：
1. kv 读写、覆盖、删除、前缀列举
2. WAL 模式生效
3. 快照保存/读取、激活用户记录
4. 存储数据损坏时的处理
"""

import pytest
from pxgdaily.core.exceptions import SnapshotValidationError
from pxgdaily.core.store import verify_wal_mode
from pxgdaily.core.sync_code import ACTIVE_USER_KEY, profile_key


class TestSqliteKeyValueStore:
    async def test_set_get_overwrite(self, store_group):
        kv = store_group.kv_store
        assert await kv.get("k") is None
        await kv.set("k", "v1")
        await kv.set("k", "v2")
        assert await kv.get("k") == "v2"

    async def test_delete_missing_is_noop(self, store_group):
        kv = store_group.kv_store
        await kv.delete("missing")
        await kv.set("k", "v")
        await kv.delete("k")
        assert await kv.get("k") is None

    async def test_list_keys_by_prefix(self, store_group):
        kv = store_group.kv_store
        for key in ["pxgDaily:DB:B::X", "pxgDaily:DB:A::X", "pxgDaily:ACTIVE_USER", "other"]:
            await kv.set(key, "{}")
        assert await kv.list_keys("pxgDaily:DB:") == ["pxgDaily:DB:A::X", "pxgDaily:DB:B::X"]
        assert len(await kv.list_keys()) == 4

    async def test_prefix_with_like_wildcards_is_literal(self, store_group):
        kv = store_group.kv_store
        await kv.set("a%b", "1")
        await kv.set("axb", "2")
        assert await kv.list_keys("a%") == ["a%b"]

    async def test_wal_mode(self, store_group):
        assert await verify_wal_mode(store_group.conn) is True


class TestProfileRepository:
    async def test_save_and_load_snapshot(self, store_group, make_snapshot, make_task):
        repo = store_group.profile_repo
        snapshot = make_snapshot([make_task(id="t1")], revision=3)
        await repo.save_snapshot("Ash", "ab2c", snapshot)

        loaded = await repo.load_snapshot("ASH", "AB2C")
        assert loaded == snapshot
        assert await repo.list_profiles() == ["ASH::AB2C"]

    async def test_load_missing(self, store_group):
        assert await store_group.profile_repo.load_snapshot("nobody", "ZZZZ") is None

    async def test_corrupt_snapshot_raises(self, store_group):
        await store_group.kv_store.set(profile_key("Ash", "AB2C"), "{broken")
        with pytest.raises(SnapshotValidationError):
            await store_group.profile_repo.load_snapshot("Ash", "AB2C")

    async def test_delete_snapshot(self, store_group, make_snapshot):
        repo = store_group.profile_repo
        await repo.save_snapshot("Ash", "AB2C", make_snapshot())
        await repo.delete_snapshot("Ash", "AB2C")
        assert await repo.load_snapshot("Ash", "AB2C") is None

    async def test_active_user_roundtrip(self, store_group):
        repo = store_group.profile_repo
        assert await repo.get_active_user() is None
        await repo.set_active_user("Ash", "AB2C")
        active = await repo.get_active_user()
        assert active.name == "Ash"
        assert active.sync_code == "AB2C"
        await repo.clear_active_user()
        assert await repo.get_active_user() is None

    async def test_active_user_record_format(self, store_group):
        await store_group.profile_repo.set_active_user("Ash", "AB2C")
        raw = await store_group.kv_store.get(ACTIVE_USER_KEY)
        assert '"syncCode"' in raw

    async def test_invalid_active_user_treated_as_none(self, store_group):
        await store_group.kv_store.set(ACTIVE_USER_KEY, "not json")
        assert await store_group.profile_repo.get_active_user() is None
