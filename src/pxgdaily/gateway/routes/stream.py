"""SSE 事件流路由

GET /api/stream: 推送当前 profile 的快照变更（snapshot）与专注确认提示（focus_prompt）。
连接建立时先推送当前 revision 与所有待确认提示，之后实时推送，15 秒心跳保活。
"""

import asyncio
import json

from fastapi import APIRouter, Depends
from pxgdaily.core.config import SSE_HEARTBEAT_INTERVAL
from sse_starlette.sse import EventSourceResponse

from ..deps import get_session, get_sse_hub
from ..services.dailies_service import DailiesService, prompt_message, snapshot_message
from ..services.sse_hub import SSEHub, StreamMessage

router = APIRouter()


def _to_sse(message: StreamMessage) -> dict:
    return {
        "event": message.event,
        "data": json.dumps(message.data, ensure_ascii=False),
    }


@router.get("/api/stream")
async def stream_events(
    session: DailiesService = Depends(get_session),
    sse_hub: SSEHub = Depends(get_sse_hub),
):
    """SSE 事件流端点；没有激活的 profile 返回 409"""
    topic = session.topic
    snapshot = session.snapshot
    pending = session.focus.pending_prompts()

    async def event_generator():
        queue = await sse_hub.subscribe(topic)
        try:
            if snapshot is not None:
                yield _to_sse(snapshot_message(snapshot))
            for state in pending:
                yield _to_sse(prompt_message(state))

            while True:
                try:
                    message = await asyncio.wait_for(
                        queue.get(), timeout=SSE_HEARTBEAT_INTERVAL
                    )
                    yield _to_sse(message)
                except TimeoutError:
                    yield {"comment": "heartbeat"}
        finally:
            await sse_hub.unsubscribe(topic, queue)

    return EventSourceResponse(event_generator())
