"""导入/导出路由

GET  /api/export: 导出当前快照 {exportVersion, syncCode, db}。
POST /api/import: 导入导出文档或裸快照，替换当前快照内容。
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from pxgdaily.core.transfer import parse_import

from ..deps import get_session
from ..services.dailies_service import DailiesService

router = APIRouter()


@router.get("/api/export")
async def export_snapshot(session: DailiesService = Depends(get_session)):
    return session.export()


@router.post("/api/import")
async def import_snapshot(
    payload: Any = Body(...),
    session: DailiesService = Depends(get_session),
):
    """导入快照

    文档不合法时返回 422 且不做任何变更；
    成功后 revision 在当前基础上继续递增。
    """
    imported, _ = parse_import(payload)
    snapshot = await session.import_snapshot(imported)
    return {
        "revision": snapshot.meta.revision if snapshot else None,
        "characters": len(imported.characters),
    }
