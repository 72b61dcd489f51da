"""依赖注入模块 -- 通过 FastAPI Depends 注入服务实例

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request

from .services.task_list import TaskListController
from .services.task_service import TaskService


def get_task_service(request: Request) -> TaskService:
    """从 app.state 获取 TaskService 实例"""
    return request.app.state.task_service


def get_task_list(request: Request) -> TaskListController:
    """从 app.state 获取 TaskListController 实例"""
    return request.app.state.task_list
