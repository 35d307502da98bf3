"""快照变换 -- 供 SnapshotStore.update 使用的 copy-on-write mutator

所有函数都是纯函数：输入旧快照，输出新快照。
引用不存在的角色/任务时原样返回同一个快照对象（no-op），不抛异常。
"""

from collections.abc import Callable
from datetime import datetime

from ulid import ULID

from . import completion
from .defaults import default_tasks
from .models.enums import CompletionFilter, Period, TaskOrigin
from .models.snapshot import Snapshot
from .models.task import Character, Task
from .reorder import reorder_subgroup

TaskFn = Callable[[Task], Task]
CharacterFn = Callable[[Character], Character]


def find_task(snapshot: Snapshot, character_id: str, task_id: str) -> Task | None:
    """按 (角色 ID, 任务 ID) 查找任务"""
    character = snapshot.find_character(character_id)
    if character is None:
        return None
    return character.find_task(task_id)


def update_character(snapshot: Snapshot, character_id: str, fn: CharacterFn) -> Snapshot:
    """对单个角色应用变换；角色不存在或变换无变化时返回原快照"""
    changed = False
    next_characters = []
    for character in snapshot.characters:
        if character.id == character_id:
            updated = fn(character)
            changed = changed or updated is not character
            next_characters.append(updated)
        else:
            next_characters.append(character)

    if not changed:
        return snapshot
    return snapshot.model_copy(update={"characters": next_characters})


def update_task(snapshot: Snapshot, character_id: str, task_id: str, fn: TaskFn) -> Snapshot:
    """对单个任务应用变换；任务不存在或变换无变化时返回原快照"""

    def apply(character: Character) -> Character:
        changed = False
        next_tasks = []
        for task in character.tasks:
            if task.id == task_id:
                updated = fn(task)
                changed = changed or updated is not task
                next_tasks.append(updated)
            else:
                next_tasks.append(task)
        if not changed:
            return character
        return character.model_copy(update={"tasks": next_tasks})

    return update_character(snapshot, character_id, apply)


# ---------------------------------------------------------------------------
# 角色
# ---------------------------------------------------------------------------


def new_character(name: str, now: datetime) -> Character:
    """创建带默认任务列表的新角色"""
    return Character(
        id=str(ULID()),
        name=name,
        created_at=now,
        tasks=default_tasks(),
    )


def add_character(snapshot: Snapshot, character: Character) -> Snapshot:
    return snapshot.model_copy(update={"characters": [*snapshot.characters, character]})


def remove_character(snapshot: Snapshot, character_id: str) -> Snapshot:
    if snapshot.find_character(character_id) is None:
        return snapshot
    return snapshot.model_copy(
        update={"characters": [c for c in snapshot.characters if c.id != character_id]}
    )


# ---------------------------------------------------------------------------
# 任务
# ---------------------------------------------------------------------------


def new_user_task(title: str, period: Period) -> Task:
    """用户创建的任务，origin 直接为 user"""
    return Task(id=str(ULID()), title=title, period=period, origin=TaskOrigin.USER)


def append_task(snapshot: Snapshot, character_id: str, task: Task) -> Snapshot:
    return update_character(
        snapshot,
        character_id,
        lambda c: c.model_copy(update={"tasks": [*c.tasks, task]}),
    )


def remove_task(snapshot: Snapshot, character_id: str, task_id: str) -> Snapshot:
    def apply(character: Character) -> Character:
        if character.find_task(task_id) is None:
            return character
        return character.model_copy(
            update={"tasks": [t for t in character.tasks if t.id != task_id]}
        )

    return update_character(snapshot, character_id, apply)


def rename_task(snapshot: Snapshot, character_id: str, task_id: str, title: str) -> Snapshot:
    return update_task(
        snapshot,
        character_id,
        task_id,
        lambda t: t if t.title == title else t.model_copy(update={"title": title}),
    )


def toggle_task(snapshot: Snapshot, character_id: str, task_id: str, now: datetime) -> Snapshot:
    return update_task(snapshot, character_id, task_id, lambda t: completion.toggle(t, now))


def archive_task(snapshot: Snapshot, character_id: str, task_id: str, now: datetime) -> Snapshot:
    return update_task(snapshot, character_id, task_id, lambda t: completion.archive(t, now))


def restore_task(snapshot: Snapshot, character_id: str, task_id: str) -> Snapshot:
    return update_task(snapshot, character_id, task_id, completion.restore)


def set_doing_on(snapshot: Snapshot, character_id: str, task_id: str, now: datetime) -> Snapshot:
    return update_task(snapshot, character_id, task_id, lambda t: completion.mark_doing(t, now))


def set_doing_off(snapshot: Snapshot, character_id: str, task_id: str) -> Snapshot:
    return update_task(snapshot, character_id, task_id, completion.clear_doing)


def reorder_tasks(
    snapshot: Snapshot,
    character_id: str,
    period: Period,
    ordered_ids: list[str],
    which: CompletionFilter,
    now: datetime,
) -> Snapshot:
    def apply(character: Character) -> Character:
        next_tasks = reorder_subgroup(character.tasks, period, ordered_ids, which, now)
        if next_tasks is character.tasks or next_tasks == character.tasks:
            return character
        return character.model_copy(update={"tasks": next_tasks})

    return update_character(snapshot, character_id, apply)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


def touch_profile(snapshot: Snapshot, display_name: str, now: datetime) -> Snapshot:
    """再次进入已有 profile：刷新显示名与最近进入时间"""
    return snapshot.model_copy(
        update={
            "profile": snapshot.profile.model_copy(
                update={"display_name": display_name, "last_open_at": now}
            )
        }
    )
