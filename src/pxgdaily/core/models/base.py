"""快照模型基类

所有持久化模型不可变（frozen），变更一律通过 model_copy(update=...) 产生新对象。
JSON 字段名使用 camelCase，与已有导出文件保持兼容。
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """不可变 + camelCase 别名的模型基类"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """按持久化格式导出（camelCase，省略空字段）"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
