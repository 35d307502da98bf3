"""健康检查测试"""

from httpx import AsyncClient


class TestHealth:
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_ready(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["checks"]["sqlite"] == "ok"
        assert data["checks"]["active_profile"] == "none"

    async def test_ready_reports_active_profile(self, entered: AsyncClient):
        resp = await entered.get("/ready")
        assert resp.json()["checks"]["active_profile"] == "ok"
