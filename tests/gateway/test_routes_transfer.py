"""导入/导出路由测试"""

from httpx import AsyncClient


class TestTransferRoutes:
    async def test_export(self, entered: AsyncClient):
        resp = await entered.get("/api/export")
        assert resp.status_code == 200
        doc = resp.json()
        assert doc["exportVersion"] == 1
        assert doc["syncCode"] == "AB2C"
        assert doc["db"]["characters"][0]["name"] == "Red"

    async def test_import_roundtrip_continues_revision(self, entered: AsyncClient):
        doc = (await entered.get("/api/export")).json()
        revision = doc["db"]["meta"]["revision"]
        doc["db"]["characters"][0]["name"] = "Imported"

        resp = await entered.post("/api/import", json=doc)
        assert resp.status_code == 200
        assert resp.json() == {"revision": revision + 1, "characters": 1}

        profile = (await entered.get("/api/profile")).json()
        assert profile["db"]["characters"][0]["name"] == "Imported"

    async def test_import_bare_snapshot(self, entered: AsyncClient):
        doc = (await entered.get("/api/export")).json()
        resp = await entered.post("/api/import", json=doc["db"])
        assert resp.status_code == 200

    async def test_import_invalid_document(self, entered: AsyncClient):
        before = (await entered.get("/api/profile")).json()["db"]["meta"]["revision"]
        resp = await entered.post("/api/import", json={"schemaVersion": 2, "characters": []})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "INVALID_SNAPSHOT"

        after = (await entered.get("/api/profile")).json()["db"]["meta"]["revision"]
        assert after == before

    async def test_export_requires_active_profile(self, client: AsyncClient):
        resp = await client.get("/api/export")
        assert resp.status_code == 409
