"""专注/冷却路由

POST /api/characters/{character_id}/tasks/{task_id}/focus: 开始 1 小时专注计时。
POST /api/characters/{character_id}/tasks/{task_id}/focus/resolve: 回答计时结束后的确认。
GET  /api/focus/prompts: 当前等待确认的提示（断线重连后补齐）。
"""

from fastapi import APIRouter, Depends
from pxgdaily.core.models import FocusState
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..deps import get_session
from ..errors import error_response, task_not_found
from ..services.dailies_service import DailiesService

router = APIRouter()


class ResolveRequest(BaseModel):
    """确认请求体"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    did_finish: bool = Field(description="True 标记完成；False 仅清除进行中标记")


def _focus_payload(state: FocusState) -> dict:
    return {
        "characterId": state.character_id,
        "taskId": state.task_id,
        "title": state.title,
        "phase": state.phase.value,
        "startedAt": state.started_at.isoformat(),
        "expiresAt": state.expires_at.isoformat(),
    }


@router.post("/api/characters/{character_id}/tasks/{task_id}/focus")
async def start_focus(
    character_id: str,
    task_id: str,
    session: DailiesService = Depends(get_session),
):
    """开始专注计时

    - 任务不存在返回 404
    - 任务已归档、已完成或已在计时中返回 409
    """
    if session.find_task(character_id, task_id) is None:
        return task_not_found(task_id)

    state = await session.start_focus(character_id, task_id)
    if state is None:
        return error_response(
            409, "FOCUS_REJECTED", f"Task {task_id} is archived, done or already in focus"
        )
    return _focus_payload(state)


@router.post("/api/characters/{character_id}/tasks/{task_id}/focus/resolve")
async def resolve_focus(
    character_id: str,
    task_id: str,
    body: ResolveRequest,
    session: DailiesService = Depends(get_session),
):
    """回答"完成了吗？"：是 -> 标记完成；否 -> 清除进行中标记"""
    task = await session.resolve_focus(task_id, body.did_finish)
    if task is None:
        return error_response(
            404, "NO_PENDING_PROMPT", f"Task {task_id} has no pending focus prompt"
        )
    return {"task": task.to_json_dict(), "done": session.is_task_done(task)}


@router.get("/api/focus/prompts")
async def list_prompts(session: DailiesService = Depends(get_session)):
    return {"prompts": [_focus_payload(s) for s in session.focus.pending_prompts()]}
