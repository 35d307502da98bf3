"""SSEHub -- 内存中消息广播器

每个订阅者持有一个 asyncio.Queue，支持 subscribe/unsubscribe/publish。
topic 为 profile 存储键，消息为快照变更与专注确认提示。
"""

import asyncio
from collections import defaultdict
from typing import Any

from pydantic import BaseModel, Field


class StreamMessage(BaseModel):
    """推送给客户端的一条消息"""

    event: str = Field(description="事件名：snapshot / focus_prompt")
    data: dict[str, Any] = Field(default_factory=dict)


class SSEHub:
    """SSE 消息广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = 100) -> None:
        # topic -> set of asyncio.Queue
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)
        self._queue_maxsize = queue_maxsize

    async def subscribe(self, topic: str) -> asyncio.Queue:
        """订阅指定 topic

        Returns:
            asyncio.Queue 实例，新消息会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers[topic].add(queue)
        return queue

    async def unsubscribe(self, topic: str, queue: asyncio.Queue) -> None:
        """取消订阅"""
        self._subscribers[topic].discard(queue)
        if not self._subscribers[topic]:
            del self._subscribers[topic]

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def publish(self, topic: str, message: StreamMessage) -> None:
        """向指定 topic 的所有订阅者广播（非阻塞，可在定时器回调中调用）"""
        dead_queues = []
        for queue in self._subscribers.get(topic, set()):
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        # 清理已满的队列
        for q in dead_queues:
            self._subscribers[topic].discard(q)
        if topic in self._subscribers and not self._subscribers[topic]:
            del self._subscribers[topic]
