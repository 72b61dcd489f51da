"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、存储模式、分页大小、通知队列上限等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKFLOW_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKFLOW_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskflow.db"),
    )


def get_store_mode() -> str:
    """获取存储模式：local（本地 KV 槽位）或 remote（远端表格服务）"""
    mode = os.environ.get("TASKFLOW_STORE_MODE", "local").lower()
    if mode not in ("local", "remote"):
        raise ValueError(f"Unsupported TASKFLOW_STORE_MODE: {mode}")
    return mode


def get_table_name() -> str:
    """获取任务表名"""
    return os.environ.get("TASKFLOW_TABLE_NAME", "tasks")


# 本地存储 KV 槽位前缀（槽位键为 taskflow-<table>）
SLOT_KEY_PREFIX = "taskflow-"

# fetch_tasks 默认分页大小
DEFAULT_PAGE_SIZE: int = int(os.environ.get("TASKFLOW_PAGE_SIZE", "100"))

# Controller 通知队列上限（超出后丢弃最旧的通知）
NOTIFICATION_LIMIT: int = int(os.environ.get("TASKFLOW_NOTIFICATION_LIMIT", "20"))

# 品牌信息
APP_NAME = "TaskFlow"
APP_TAGLINE = "Organize Your Work"
