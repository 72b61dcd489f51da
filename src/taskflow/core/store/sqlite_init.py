"""SQLite 数据库初始化

PRAGMA 配置 + kv_slots 表 DDL。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# kv_slots 表 DDL：每个槽位保存一整份 JSON 序列化的记录列表
_KV_SLOTS_DDL = """
CREATE TABLE IF NOT EXISTS kv_slots (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL DEFAULT '[]',
    updated_at  TEXT NOT NULL
);
"""


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_KV_SLOTS_DDL)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
