"""Profile 入口路由

POST /api/sync-code: 生成新的 Sync Code。
POST /api/profile/enter: 名称 + Sync Code 进入（不存在则新建）。
POST /api/profile/logout: 退出当前 profile。
GET /api/profile: 当前激活的快照。
"""

from fastapi import APIRouter, Depends
from pxgdaily.core.sync_code import generate_sync_code
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..deps import get_profile_service, get_session
from ..services.dailies_service import DailiesService
from ..services.profile_service import ProfileService

router = APIRouter()


class EnterRequest(BaseModel):
    """入口请求体"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    display_name: str = Field(description="显示名称")
    sync_code: str = Field(description="4 位 Sync Code")


def _session_payload(session: DailiesService) -> dict:
    snapshot = session.snapshot
    return {
        "syncCode": session.sync_code,
        "db": snapshot.to_json_dict() if snapshot else None,
    }


@router.post("/api/sync-code")
async def new_sync_code():
    """生成新的 Sync Code（不做唯一性检查）"""
    return {"syncCode": generate_sync_code()}


@router.post("/api/profile/enter")
async def enter_profile(
    body: EnterRequest,
    profile_service: ProfileService = Depends(get_profile_service),
):
    """进入 profile

    - 已有快照：更新 displayName / lastOpenAt
    - 新 profile：创建 revision 0 的空快照
    - 参数无效返回 422
    """
    session = await profile_service.enter(body.display_name, body.sync_code)
    return _session_payload(session)


@router.post("/api/profile/logout")
async def logout_profile(
    profile_service: ProfileService = Depends(get_profile_service),
):
    await profile_service.logout()
    return {"status": "logged_out"}


@router.get("/api/profile")
async def get_profile(session: DailiesService = Depends(get_session)):
    """当前快照；没有激活的 profile 返回 409"""
    return _session_payload(session)
