"""错误响应 -- 统一 {"error": {"code", "message"}} 格式

服务层抛出的 PxgDailyError 子类在此映射为 HTTP 状态码与错误码；
路由中显式查询不到的角色/任务直接返回 404。
"""

import structlog
from fastapi import FastAPI, Request
from pxgdaily.core.exceptions import (
    NoActiveProfileError,
    ProfileEntryError,
    PxgDailyError,
    SnapshotValidationError,
    TaskPermissionError,
)
from starlette.responses import JSONResponse

log = structlog.get_logger()

# 异常类型 -> (HTTP 状态码, 错误码)
ERROR_MAP: dict[type[PxgDailyError], tuple[int, str]] = {
    NoActiveProfileError: (409, "NO_ACTIVE_PROFILE"),
    TaskPermissionError: (409, "TASK_IS_SYSTEM"),
    ProfileEntryError: (422, "INVALID_PROFILE_ENTRY"),
    SnapshotValidationError: (422, "INVALID_SNAPSHOT"),
}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def character_not_found(character_id: str) -> JSONResponse:
    return error_response(
        404, "CHARACTER_NOT_FOUND", f"Character with id {character_id} does not exist"
    )


def task_not_found(task_id: str) -> JSONResponse:
    return error_response(404, "TASK_NOT_FOUND", f"Task with id {task_id} does not exist")


async def handle_pxgdaily_error(request: Request, exc: PxgDailyError) -> JSONResponse:
    """PxgDailyError -> JSON 错误响应"""
    status_code, code = 400, "BAD_REQUEST"
    for exc_type, mapped in ERROR_MAP.items():
        if isinstance(exc, exc_type):
            status_code, code = mapped
            break
    log.info("request_rejected", code=code, message=str(exc))
    return error_response(status_code, code, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PxgDailyError, handle_pxgdaily_error)
