"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + Profile 会话恢复 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from pxgdaily.core.config import get_db_path
from pxgdaily.core.exceptions import SnapshotValidationError
from pxgdaily.core.store import create_store_group

from .errors import register_error_handlers
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import characters, focus, health, profile, stream, tasks, transfer
from .services.profile_service import ProfileService
from .services.sse_hub import SSEHub

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 并恢复上次的 profile，关闭时清理"""
    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group

    sse_hub = SSEHub()
    app.state.sse_hub = sse_hub

    profile_service = ProfileService(store_group.profile_repo, sse_hub)
    app.state.profile_service = profile_service

    # 自动登录：快照损坏时保持未登录，回到入口流程
    try:
        await profile_service.resume()
    except SnapshotValidationError as e:
        log.warning("profile_resume_failed", error=str(e))

    yield

    await profile_service.close()
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="pxgDaily Gateway",
        version="0.1.0",
        description="pxgDaily 周期任务看板 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    register_error_handlers(app)

    app.include_router(profile.router, tags=["profile"])
    app.include_router(characters.router, tags=["characters"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(focus.router, tags=["focus"])
    app.include_router(transfer.router, tags=["transfer"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
