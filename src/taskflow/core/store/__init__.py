"""TaskFlow Core Store -- 本地持久化实现

提供工厂函数创建共享数据库连接的本地 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .protocols import RecordStore, SlotStore
from .query import apply_query, match_condition, match_group
from .record_store import LocalRecordStore
from .slot_store import SqliteSlotStore
from .sqlite_init import init_db, verify_wal_mode


class StoreGroup:
    """本地 Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.slot_store = SqliteSlotStore(conn)
        self.record_store = LocalRecordStore(self.slot_store)

    async def close(self) -> None:
        """关闭数据库连接"""
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建本地 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "RecordStore",
    "SlotStore",
    "LocalRecordStore",
    "SqliteSlotStore",
    "apply_query",
    "match_condition",
    "match_group",
    "init_db",
    "verify_wal_mode",
]
