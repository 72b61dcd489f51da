"""TaskFlow Backend -- 远端表格服务客户端

taskflow.backend 的公开接口导出。
"""

# 核心组件
from .client import TableClient

# 配置
from .config import BackendConfig, load_backend_config

# 异常
from .exceptions import BackendError, BackendUnreachableError

__all__ = [
    "TableClient",
    "BackendConfig",
    "load_backend_config",
    "BackendError",
    "BackendUnreachableError",
]
