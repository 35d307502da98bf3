"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 与服务实例

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from pxgdaily.core.store import StoreGroup

from .services.dailies_service import DailiesService
from .services.profile_service import ProfileService
from .services.sse_hub import SSEHub


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_sse_hub(request: Request) -> SSEHub:
    """从 app.state 获取 SSEHub 实例"""
    return request.app.state.sse_hub


def get_profile_service(request: Request) -> ProfileService:
    """从 app.state 获取 ProfileService 实例"""
    return request.app.state.profile_service


def get_session(request: Request) -> DailiesService:
    """获取当前激活的会话

    Raises:
        NoActiveProfileError: 没有激活的 profile（路由映射为 409）
    """
    return get_profile_service(request).require_session()
