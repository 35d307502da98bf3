"""CLI 入口模块 -- python -m pxgdaily.core <command>

支持的命令：
  new-code               生成新的 Sync Code
  list-profiles          列出所有已存储的 profile
  export NAME CODE       以导出格式打印 profile 快照
  sweep NAME CODE        立即执行一次完成状态过期扫描
"""

import asyncio
import json
import sys

from .config import get_db_path
from .sync_code import generate_sync_code

_USAGE = """用法: python -m pxgdaily.core <command>
命令:
  new-code               生成新的 Sync Code
  list-profiles          列出所有已存储的 profile
  export NAME CODE       以导出格式打印 profile 快照
  sweep NAME CODE        立即执行一次完成状态过期扫描"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    if command == "new-code":
        print(generate_sync_code())
    elif command == "list-profiles":
        asyncio.run(list_profiles())
    elif command in ("export", "sweep") and len(args) == 2:
        runner = export_profile if command == "export" else sweep_profile
        sys.exit(asyncio.run(runner(args[0], args[1])))
    else:
        print(f"未知命令或参数不足: {' '.join(sys.argv[1:])}")
        print(_USAGE)
        sys.exit(1)


async def list_profiles() -> None:
    """列出所有 profile"""
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        for key in await store_group.profile_repo.list_profiles():
            print(key)
    finally:
        await store_group.conn.close()


async def export_profile(name: str, code: str) -> int:
    """打印导出文档"""
    from .store import create_store_group
    from .transfer import build_export

    store_group = await create_store_group(get_db_path())
    try:
        snapshot = await store_group.profile_repo.load_snapshot(name, code)
        if snapshot is None:
            print(f"profile 不存在: {name} / {code}")
            return 1
        print(json.dumps(build_export(snapshot, code), ensure_ascii=False, indent=2))
        return 0
    finally:
        await store_group.conn.close()


async def sweep_profile(name: str, code: str) -> int:
    """对指定 profile 执行一次过期扫描"""
    from .clock import now_local
    from .completion import apply_resets
    from .store import SnapshotStore, create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        store = SnapshotStore(store_group.profile_repo)
        before = await store.load(name, code)
        if before is None:
            print(f"profile 不存在: {name} / {code}")
            return 1
        after = await store.update(lambda db: apply_resets(db, now_local()))
        if after is before:
            print("没有需要过期的任务")
        else:
            print(f"扫描完成，revision {before.meta.revision} -> {after.meta.revision}")
        return 0
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
