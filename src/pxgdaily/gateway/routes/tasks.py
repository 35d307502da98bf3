"""任务路由

POST   /api/characters/{character_id}/tasks: 新增用户任务。
PATCH  /api/characters/{character_id}/tasks/{task_id}: 重命名（仅用户任务）。
DELETE /api/characters/{character_id}/tasks/{task_id}: 删除（仅用户任务）。
POST   .../tasks/{task_id}/toggle | archive | restore: 完成切换 / 归档 / 恢复。
POST   /api/characters/{character_id}/reorder: 拖拽重排单个子组。
"""

from fastapi import APIRouter, Depends
from pxgdaily.core.models import CompletionFilter, Period, Task
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from starlette.responses import JSONResponse

from ..deps import get_session
from ..errors import character_not_found, task_not_found
from ..services.dailies_service import DailiesService

router = APIRouter()


class TaskCreateRequest(BaseModel):
    """新增任务请求体"""

    period: Period = Field(description="周期")
    title: str = Field(description="标题")


class TaskRenameRequest(BaseModel):
    """重命名请求体"""

    title: str = Field(description="新标题")


class ReorderRequest(BaseModel):
    """子组重排请求体"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    period: Period = Field(description="周期")
    which: CompletionFilter = Field(description="open / done 子组")
    ordered_ids: list[str] = Field(description="子组内新的任务顺序")


def _task_payload(session: DailiesService, task: Task) -> dict:
    return {"task": task.to_json_dict(), "done": session.is_task_done(task)}


@router.post("/api/characters/{character_id}/tasks")
async def create_task(
    character_id: str,
    body: TaskCreateRequest,
    session: DailiesService = Depends(get_session),
):
    """新增用户任务

    - 成功返回 201
    - 标题为空时无操作，返回 200 + task: null
    - 角色不存在返回 404
    """
    if session.find_character(character_id) is None:
        return character_not_found(character_id)

    task = await session.add_task(character_id, body.period, body.title)
    if task is None:
        return {"task": None}

    return JSONResponse(status_code=201, content=_task_payload(session, task))


@router.patch("/api/characters/{character_id}/tasks/{task_id}")
async def rename_task(
    character_id: str,
    task_id: str,
    body: TaskRenameRequest,
    session: DailiesService = Depends(get_session),
):
    """重命名用户任务；系统任务返回 409"""
    task = await session.rename_task(character_id, task_id, body.title)
    if task is None:
        return task_not_found(task_id)
    return _task_payload(session, task)


@router.delete("/api/characters/{character_id}/tasks/{task_id}")
async def delete_task(
    character_id: str,
    task_id: str,
    session: DailiesService = Depends(get_session),
):
    """删除用户任务；系统任务返回 409（只能归档）"""
    if not await session.delete_task(character_id, task_id):
        return task_not_found(task_id)
    return {"deleted": True, "taskId": task_id}


@router.post("/api/characters/{character_id}/tasks/{task_id}/toggle")
async def toggle_task(
    character_id: str,
    task_id: str,
    session: DailiesService = Depends(get_session),
):
    """Open <-> Done 切换；同时取消该任务的专注计时"""
    task = await session.toggle_done(character_id, task_id)
    if task is None:
        return task_not_found(task_id)
    return _task_payload(session, task)


@router.post("/api/characters/{character_id}/tasks/{task_id}/archive")
async def archive_task(
    character_id: str,
    task_id: str,
    session: DailiesService = Depends(get_session),
):
    task = await session.archive_task(character_id, task_id)
    if task is None:
        return task_not_found(task_id)
    return _task_payload(session, task)


@router.post("/api/characters/{character_id}/tasks/{task_id}/restore")
async def restore_task(
    character_id: str,
    task_id: str,
    session: DailiesService = Depends(get_session),
):
    task = await session.restore_task(character_id, task_id)
    if task is None:
        return task_not_found(task_id)
    return _task_payload(session, task)


@router.post("/api/characters/{character_id}/reorder")
async def reorder_tasks(
    character_id: str,
    body: ReorderRequest,
    session: DailiesService = Depends(get_session),
):
    """重排 (period, which) 子组；其余任务位置不变"""
    character = await session.reorder(
        character_id, body.period, body.ordered_ids, body.which
    )
    if character is None:
        return character_not_found(character_id)
    return {"tasks": [t.to_json_dict() for t in character.tasks]}
