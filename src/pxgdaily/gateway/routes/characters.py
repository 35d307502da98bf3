"""角色路由

POST /api/characters: 新增角色（带默认任务）。
DELETE /api/characters/{character_id}: 删除角色。
GET /api/characters/{character_id}/board: 角色看板。
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_session
from ..errors import character_not_found
from ..services.dailies_service import DailiesService

router = APIRouter()


class CharacterCreateRequest(BaseModel):
    """新增角色请求体"""

    name: str = Field(description="角色名称")


@router.post("/api/characters")
async def create_character(
    body: CharacterCreateRequest,
    session: DailiesService = Depends(get_session),
):
    """新增角色

    - 成功返回 201
    - 名称为空时无操作，返回 200 + character: null
    """
    character = await session.add_character(body.name)
    if character is None:
        return {"character": None}

    return JSONResponse(
        status_code=201,
        content={"character": character.to_json_dict()},
    )


@router.delete("/api/characters/{character_id}")
async def delete_character(
    character_id: str,
    session: DailiesService = Depends(get_session),
):
    if not await session.delete_character(character_id):
        return character_not_found(character_id)
    return {"deleted": True, "characterId": character_id}


@router.get("/api/characters/{character_id}/board")
async def get_board(
    character_id: str,
    session: DailiesService = Depends(get_session),
):
    """按周期拆分的 open / done 列表，归档任务单独列出"""
    board = session.board(character_id)
    if board is None:
        return character_not_found(character_id)
    return board.to_json_dict()
