"""TraceMiddleware -- 角色/任务级追踪

从 /api/characters/{character_id}/tasks/{task_id}/... 路径中提取 ID，
绑定到 structlog contextvars，贯穿该请求内的业务日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


def extract_trace_ids(path: str) -> dict[str, str]:
    """从请求路径提取 character_id / task_id

    Returns:
        可直接绑定到日志上下文的字段；路径不含 ID 时为空 dict
    """
    ids: dict[str, str] = {}
    parts = [p for p in path.split("/") if p]
    for i, part in enumerate(parts[:-1]):
        if part == "characters":
            ids["character_id"] = parts[i + 1]
        elif part == "tasks":
            ids["task_id"] = parts[i + 1]
    return ids


class TraceMiddleware(BaseHTTPMiddleware):
    """追踪中间件 -- 为角色/任务操作绑定 ID"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        ids = extract_trace_ids(request.url.path)
        if ids:
            structlog.contextvars.bind_contextvars(**ids)

        return await call_next(request)
