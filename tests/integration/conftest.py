"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pxgdaily.gateway.services.profile_service import ProfileService
from pxgdaily.gateway.services.sse_hub import SSEHub


@pytest_asyncio.fixture
async def integration_app(store_group, clock):
    """集成测试用 FastAPI app：定时扫描间隔缩短到 20ms"""
    from pxgdaily.gateway.main import create_app

    app = create_app()
    sse_hub = SSEHub()
    profile_service = ProfileService(
        store_group.profile_repo,
        sse_hub,
        clock=clock,
        focus_seconds=0.05,
        sweep_interval_s=0.02,
    )
    app.state.store_group = store_group
    app.state.sse_hub = sse_hub
    app.state.profile_service = profile_service

    yield app

    await profile_service.close()


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
