"""pxgdaily 异常体系

引擎纯函数对数据问题从不抛出异常（降级为 Open / Idle），
以下异常仅由服务层在调用方输入无效时抛出，由 Gateway 映射为 JSON 错误响应。
"""


class PxgDailyError(Exception):
    """pxgdaily 基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方是否可通过修正输入恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class SnapshotValidationError(PxgDailyError):
    """持久化或导入的 JSON 不是合法的快照文档

    不会触发任何状态变更。
    """

    def __init__(self, message: str, source: str = "import") -> None:
        """
        Args:
            message: 校验失败描述
            source: 数据来源（import / storage）
        """
        super().__init__(f"快照校验失败 ({source}): {message}")
        self.source = source


class NoActiveProfileError(PxgDailyError):
    """当前没有激活的 profile，调用方应回到入口流程"""

    def __init__(self, message: str = "没有激活的 profile") -> None:
        super().__init__(message)


class ProfileEntryError(PxgDailyError):
    """入口参数无效（名称为空或 Sync Code 长度不对）"""


class TaskPermissionError(PxgDailyError):
    """系统默认任务不允许重命名或删除，只能归档"""

    def __init__(self, task_id: str, action: str) -> None:
        """
        Args:
            task_id: 被拒绝操作的任务 ID
            action: 被拒绝的操作（rename / delete）
        """
        super().__init__(f"系统默认任务不允许 {action}: {task_id}")
        self.task_id = task_id
        self.action = action
