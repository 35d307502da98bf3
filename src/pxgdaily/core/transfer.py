"""导入/导出 -- 快照与 JSON 文本之间的转换

导出格式 {exportVersion: 1, syncCode, db}；导入同时兼容裸快照（旧版导出）。
导入必须满足 schemaVersion == 1、存在 profile、characters 为数组，
否则抛出 SnapshotValidationError，不做任何变更。
"""

import json
from typing import Any

from pydantic import ValidationError

from .exceptions import SnapshotValidationError
from .models.snapshot import ExportDocument, Snapshot


def dump_snapshot(snapshot: Snapshot) -> dict[str, Any]:
    """快照 -> 持久化/导出用 JSON dict"""
    return snapshot.to_json_dict()


def build_export(snapshot: Snapshot, sync_code: str) -> dict[str, Any]:
    """构建导出文档"""
    return ExportDocument(sync_code=sync_code, db=snapshot).to_json_dict()


def _check_shape(data: Any, source: str) -> None:
    if not isinstance(data, dict):
        raise SnapshotValidationError("文档根节点必须是对象", source=source)
    if data.get("schemaVersion") != 1:
        raise SnapshotValidationError(
            f"不支持的 schemaVersion: {data.get('schemaVersion')!r}", source=source
        )
    if not isinstance(data.get("profile"), dict):
        raise SnapshotValidationError("缺少 profile", source=source)
    if not isinstance(data.get("characters"), list):
        raise SnapshotValidationError("characters 必须是数组", source=source)


def validate_snapshot(data: Any, source: str = "import") -> Snapshot:
    """校验 JSON dict 并构建快照模型

    Raises:
        SnapshotValidationError: 结构或字段不合法
    """
    _check_shape(data, source)
    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotValidationError(
            f"{e.error_count()} 个字段不合法: {e.errors()[0]['loc']}", source=source
        ) from e


def parse_snapshot_json(text: str, source: str = "storage") -> Snapshot:
    """解析持久化的快照 JSON 文本"""
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise SnapshotValidationError(f"JSON 解析失败: {e}", source=source) from e
    return validate_snapshot(data, source=source)


def parse_import(payload: str | dict[str, Any]) -> tuple[Snapshot, str | None]:
    """解析导入文档

    Args:
        payload: JSON 文本或已解析的 dict；可以是导出文档或裸快照

    Returns:
        (快照, 导出文档中的 syncCode；裸快照时为 None)

    Raises:
        SnapshotValidationError: 文档不合法
    """
    if isinstance(payload, str):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise SnapshotValidationError(f"JSON 解析失败: {e}") from e
    else:
        data = payload

    if isinstance(data, dict) and "db" in data and "exportVersion" in data:
        if data.get("exportVersion") != 1:
            raise SnapshotValidationError(
                f"不支持的 exportVersion: {data.get('exportVersion')!r}"
            )
        sync_code = data.get("syncCode")
        return validate_snapshot(data["db"]), sync_code if isinstance(sync_code, str) else None

    return validate_snapshot(data), None
