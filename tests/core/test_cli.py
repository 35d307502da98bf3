"""CLI 测试 -- python -m pxgdaily.core"""

import json
import sys

import pytest
from pxgdaily.core.__main__ import export_profile, list_profiles, main, sweep_profile
from pxgdaily.core.store import create_store_group


@pytest.fixture
def db_path(tmp_path, monkeypatch) -> str:
    path = str(tmp_path / "sqlite" / "cli.db")
    monkeypatch.setenv("PXGDAILY_DB_PATH", path)
    return path


async def _seed(db_path: str, snapshot) -> None:
    group = await create_store_group(db_path)
    try:
        await group.profile_repo.save_snapshot("Ash", "AB2C", snapshot)
    finally:
        await group.conn.close()


class TestCli:
    def test_new_code(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["pxgdaily", "new-code"])
        main()
        assert len(capsys.readouterr().out.strip()) == 4

    def test_unknown_command_exits(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["pxgdaily", "bogus"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1

    async def test_list_profiles(self, db_path, make_snapshot, capsys):
        await _seed(db_path, make_snapshot())
        await list_profiles()
        assert capsys.readouterr().out.strip() == "ASH::AB2C"

    async def test_export(self, db_path, make_snapshot, capsys):
        await _seed(db_path, make_snapshot(revision=2))
        assert await export_profile("ash", "ab2c") == 0
        doc = json.loads(capsys.readouterr().out)
        assert doc["exportVersion"] == 1
        assert doc["db"]["meta"]["revision"] == 2

    async def test_export_missing_profile(self, db_path):
        assert await export_profile("nobody", "ZZZZ") == 1

    async def test_sweep_expires_stale_completion(self, db_path, make_snapshot, make_task, capsys):
        stale = make_task(id="t1", reset_at="2000-01-01T07:40:00.000-03:00")
        await _seed(db_path, make_snapshot([stale], revision=1))

        assert await sweep_profile("Ash", "AB2C") == 0
        assert "1 -> 2" in capsys.readouterr().out

        group = await create_store_group(db_path)
        try:
            snapshot = await group.profile_repo.load_snapshot("Ash", "AB2C")
        finally:
            await group.conn.close()
        assert snapshot.characters[0].tasks[0].reset_at is None
