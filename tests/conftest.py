"""pxgdaily 测试配置 -- 共享 fixture：固定时钟、任务/快照工厂、临时数据库"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from pxgdaily.core.clock import reference_timezone
from pxgdaily.core.models import Character, Period, Snapshot, Task, TaskOrigin
from pxgdaily.core.store import StoreGroup, create_store_group


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def at() -> Callable[..., datetime]:
    """参考时区的时间构造器：at(2024, 3, 5, 8, 0)"""

    def _at(*args: int) -> datetime:
        return datetime(*args, tzinfo=reference_timezone())

    return _at


@pytest.fixture
def clock(at) -> FakeClock:
    """固定在 2024-03-05（周二）08:00 的时钟"""
    return FakeClock(at(2024, 3, 5, 8, 0))


@pytest.fixture
def make_task() -> Callable[..., Task]:
    counter = iter(range(1, 10_000))

    def _make(
        title: str = "Custom",
        period: Period = Period.DAILY,
        origin: TaskOrigin | None = TaskOrigin.USER,
        **fields,
    ) -> Task:
        task_id = fields.pop("id", f"task-{next(counter)}")
        return Task(id=task_id, title=title, period=period, origin=origin, **fields)

    return _make


@pytest.fixture
def make_snapshot(clock) -> Callable[..., Snapshot]:
    """构造只含一个角色（id=char-1）的快照"""

    def _make(tasks: list[Task] | None = None, revision: int = 0) -> Snapshot:
        snapshot = Snapshot.fresh("Ash", clock())
        character = Character(
            id="char-1", name="Red", created_at=clock(), tasks=tasks or []
        )
        return snapshot.model_copy(
            update={
                "characters": [character],
                "meta": snapshot.meta.model_copy(update={"revision": revision}),
            }
        )

    return _make


@pytest_asyncio.fixture
async def store_group(tmp_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """临时 SQLite 数据库上的 StoreGroup"""
    group = await create_store_group(str(tmp_path / "sqlite" / "test.db"))
    yield group
    await group.conn.close()
