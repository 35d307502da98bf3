"""FastAPI lifespan 测试

测试内容：
1. 启动时 DB 初始化 + 自动恢复上次的 profile
2. 激活用户的快照损坏时保持未登录
3. 关闭时会话与连接清理
"""

import pytest
from fastapi import FastAPI
from pxgdaily.core.models import Snapshot
from pxgdaily.core.store import create_store_group
from pxgdaily.core.sync_code import profile_key
from pxgdaily.gateway.main import lifespan


@pytest.fixture
def db_path(tmp_path, monkeypatch) -> str:
    path = str(tmp_path / "sqlite" / "lifespan.db")
    monkeypatch.setenv("PXGDAILY_DB_PATH", path)
    return path


class TestLifespan:
    async def test_startup_without_active_user(self, db_path):
        app = FastAPI()
        async with lifespan(app):
            assert app.state.store_group.conn is not None
            assert app.state.sse_hub is not None
            assert app.state.profile_service.session is None

    async def test_startup_resumes_active_profile(self, db_path, clock):
        group = await create_store_group(db_path)
        await group.profile_repo.save_snapshot("Ash", "AB2C", Snapshot.fresh("Ash", clock()))
        await group.profile_repo.set_active_user("Ash", "AB2C")
        await group.conn.close()

        app = FastAPI()
        async with lifespan(app):
            session = app.state.profile_service.session
            assert session is not None
            assert session.sync_code == "AB2C"
            assert session.ticker.running
        assert not session.ticker.running

    async def test_corrupt_snapshot_keeps_logged_out(self, db_path):
        group = await create_store_group(db_path)
        await group.kv_store.set(profile_key("Ash", "AB2C"), "{broken")
        await group.profile_repo.set_active_user("Ash", "AB2C")
        await group.conn.close()

        app = FastAPI()
        async with lifespan(app):
            assert app.state.profile_service.session is None
