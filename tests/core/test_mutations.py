"""快照变换测试

测试内容：
1. 引用不存在的角色/任务时返回同一个快照
2. 新角色带默认任务
3. 任务增删改与重排
"""

from pxgdaily.core import mutations
from pxgdaily.core.models import CompletionFilter, Period, TaskOrigin


class TestNoop:
    def test_unknown_character(self, make_snapshot, make_task, clock):
        snapshot = make_snapshot([make_task(id="t1")])
        assert mutations.toggle_task(snapshot, "ghost", "t1", clock()) is snapshot
        assert mutations.remove_character(snapshot, "ghost") is snapshot

    def test_unknown_task(self, make_snapshot, make_task, clock):
        snapshot = make_snapshot([make_task(id="t1")])
        assert mutations.toggle_task(snapshot, "char-1", "ghost", clock()) is snapshot
        assert mutations.remove_task(snapshot, "char-1", "ghost") is snapshot
        assert mutations.rename_task(snapshot, "char-1", "ghost", "X") is snapshot

    def test_rename_same_title(self, make_snapshot, make_task):
        snapshot = make_snapshot([make_task(id="t1", title="Same")])
        assert mutations.rename_task(snapshot, "char-1", "t1", "Same") is snapshot

    def test_reorder_without_change(self, make_snapshot, make_task, clock):
        snapshot = make_snapshot([make_task(id="a"), make_task(id="b")])
        result = mutations.reorder_tasks(
            snapshot, "char-1", Period.DAILY, ["a", "b"], CompletionFilter.OPEN, clock()
        )
        assert result is snapshot


class TestCharacters:
    def test_new_character_has_default_tasks(self, clock):
        character = mutations.new_character("Blue", clock())
        assert len(character.tasks) == 3
        assert all(t.origin == TaskOrigin.SYSTEM for t in character.tasks)
        assert character.created_at == clock()

    def test_add_and_remove(self, make_snapshot, clock):
        snapshot = make_snapshot()
        character = mutations.new_character("Blue", clock())
        added = mutations.add_character(snapshot, character)
        assert [c.name for c in added.characters] == ["Red", "Blue"]
        removed = mutations.remove_character(added, character.id)
        assert [c.name for c in removed.characters] == ["Red"]
        # 原快照不可变
        assert [c.name for c in snapshot.characters] == ["Red"]


class TestTasks:
    def test_append_user_task(self, make_snapshot):
        task = mutations.new_user_task("Shiny hunt", Period.WEEKLY)
        snapshot = mutations.append_task(make_snapshot(), "char-1", task)
        stored = mutations.find_task(snapshot, "char-1", task.id)
        assert stored.origin == TaskOrigin.USER
        assert stored.period == Period.WEEKLY

    def test_rename(self, make_snapshot, make_task):
        snapshot = make_snapshot([make_task(id="t1", title="Old")])
        renamed = mutations.rename_task(snapshot, "char-1", "t1", "New")
        assert mutations.find_task(renamed, "char-1", "t1").title == "New"

    def test_toggle_then_doing_off(self, make_snapshot, make_task, clock):
        snapshot = make_snapshot([make_task(id="t1")])
        doing = mutations.set_doing_on(snapshot, "char-1", "t1", clock())
        assert mutations.find_task(doing, "char-1", "t1").doing_for_key == "2024-03-05"
        off = mutations.set_doing_off(doing, "char-1", "t1")
        assert mutations.find_task(off, "char-1", "t1").doing_for_key is None
        assert mutations.set_doing_off(off, "char-1", "t1") is off

    def test_reorder(self, make_snapshot, make_task, clock):
        snapshot = make_snapshot([make_task(id="a"), make_task(id="b"), make_task(id="c")])
        result = mutations.reorder_tasks(
            snapshot, "char-1", Period.DAILY, ["c", "a", "b"], CompletionFilter.OPEN, clock()
        )
        assert [t.id for t in result.characters[0].tasks] == ["c", "a", "b"]


class TestTouchProfile:
    def test_updates_display_name_and_last_open(self, make_snapshot, clock):
        snapshot = make_snapshot()
        later = clock.advance(days=2)
        touched = mutations.touch_profile(snapshot, "ASH", later)
        assert touched.profile.display_name == "ASH"
        assert touched.profile.last_open_at == later
        assert touched.profile.created_at == snapshot.profile.created_at
