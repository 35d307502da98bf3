"""gateway 测试配置 -- 会话服务 + FastAPI app fixture（绕过 lifespan）"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pxgdaily.core.models import Snapshot
from pxgdaily.core.store import SnapshotStore
from pxgdaily.gateway.services.dailies_service import DailiesService
from pxgdaily.gateway.services.profile_service import ProfileService
from pxgdaily.gateway.services.sse_hub import SSEHub

# 测试中的专注计时时长（秒）
FAST_FOCUS_SECONDS = 0.05


@pytest_asyncio.fixture
async def hub() -> SSEHub:
    return SSEHub()


@pytest_asyncio.fixture
async def snapshot_store(store_group, clock) -> SnapshotStore:
    """已激活 Ash / AB2C 空快照的 SnapshotStore"""
    store = SnapshotStore(store_group.profile_repo, clock=clock)
    await store.set_active("Ash", "AB2C", Snapshot.fresh("Ash", clock()))
    return store


@pytest_asyncio.fixture
async def session(snapshot_store, hub, clock) -> AsyncGenerator[DailiesService, None]:
    service = DailiesService(
        snapshot_store,
        hub,
        clock=clock,
        focus_seconds=FAST_FOCUS_SECONDS,
        sweep_interval_s=3600,
    )
    await service.open()
    yield service
    await service.close()


@pytest_asyncio.fixture
async def profile_service(store_group, hub, clock) -> AsyncGenerator[ProfileService, None]:
    service = ProfileService(
        store_group.profile_repo,
        hub,
        clock=clock,
        focus_seconds=FAST_FOCUS_SECONDS,
        sweep_interval_s=3600,
    )
    yield service
    await service.close()


@pytest_asyncio.fixture
async def test_app(store_group, hub, profile_service):
    """测试用 app：手动初始化 app.state（ASGITransport 不执行 lifespan）"""
    from pxgdaily.gateway.main import create_app

    app = create_app()
    app.state.store_group = store_group
    app.state.sse_hub = hub
    app.state.profile_service = profile_service
    return app


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def entered(client: AsyncClient) -> AsyncClient:
    """已进入 Ash / AB2C 并创建角色 Red 的 client"""
    resp = await client.post(
        "/api/profile/enter", json={"displayName": "Ash", "syncCode": "AB2C"}
    )
    assert resp.status_code == 200
    resp = await client.post("/api/characters", json={"name": "Red"})
    assert resp.status_code == 201
    return client
