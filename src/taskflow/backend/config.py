"""BackendConfig -- 远端表格服务配置加载

从环境变量加载配置，客户端句柄在构造时显式传入，不读取全局状态。
"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class BackendConfig(BaseModel):
    """远端表格服务配置 -- 从环境变量加载

    环境变量:
        TASKFLOW_BACKEND_URL: 服务地址（默认 http://localhost:8787）
        TASKFLOW_PROJECT_ID: 项目 ID
        TASKFLOW_PUBLIC_KEY: 项目公钥
        TASKFLOW_TABLE_NAME: 任务表名（默认 tasks）
        TASKFLOW_BACKEND_TIMEOUT_S: 请求超时（秒，默认 30）
    """

    endpoint: str = Field(
        default="http://localhost:8787",
        description="表格服务基础 URL",
    )
    project_id: str = Field(default="", description="项目 ID")
    public_key: SecretStr = Field(
        default=SecretStr(""),
        description="项目公钥",
    )
    table_name: str = Field(default="tasks", min_length=1, description="任务表名")
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="请求超时（秒）",
    )

    @property
    def has_credentials(self) -> bool:
        """是否配置了访问凭据"""
        return bool(self.project_id and self.public_key.get_secret_value())


def load_backend_config() -> BackendConfig:
    """从环境变量加载远端表格服务配置

    Returns:
        BackendConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKFLOW_BACKEND_URL"):
        kwargs["endpoint"] = val

    if val := os.environ.get("TASKFLOW_PROJECT_ID"):
        kwargs["project_id"] = val

    if val := os.environ.get("TASKFLOW_PUBLIC_KEY"):
        kwargs["public_key"] = SecretStr(val)

    if val := os.environ.get("TASKFLOW_TABLE_NAME"):
        kwargs["table_name"] = val

    if val := os.environ.get("TASKFLOW_BACKEND_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="TASKFLOW_BACKEND_TIMEOUT_S",
                value=val,
                fallback=30,
            )
            # 使用默认值，不阻塞启动

    return BackendConfig(**kwargs)
