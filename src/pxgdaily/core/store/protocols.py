"""Store Protocol 接口定义

定义键值持久化协作方的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """键值存储接口 -- 值为 JSON 文本"""

    async def get(self, key: str) -> str | None:
        """读取键对应的值，不存在返回 None"""
        ...

    async def set(self, key: str, value: str) -> None:
        """写入（覆盖）键值"""
        ...

    async def delete(self, key: str) -> None:
        """删除键，不存在时无操作"""
        ...

    async def list_keys(self, prefix: str = "") -> list[str]:
        """列出以 prefix 开头的所有键（按键排序）"""
        ...
