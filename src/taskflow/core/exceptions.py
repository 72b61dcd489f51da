"""TaskFlow 异常体系

Service 边界统一抛出以下异常，消息均为可直接展示给用户的描述。
"""


class TaskFlowError(Exception):
    """TaskFlow 基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 面向用户的错误描述
            recoverable: 是否可通过重试用户操作恢复
        """
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class TaskValidationError(TaskFlowError):
    """客户端校验失败（如标题为空），不会发起后端调用"""


class TaskNotFoundError(TaskFlowError):
    """任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class TaskServiceError(TaskFlowError):
    """后端调用失败（网络、校验、记录不存在等），已归一化为单条描述"""
