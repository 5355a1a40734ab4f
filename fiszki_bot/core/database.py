"""Database initialization and connection management."""
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

from fiszki_bot.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

# Bump whenever SCHEMA_SQL changes: existing files are wiped and recreated.
SCHEMA_VERSION = 1

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS flashcards (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        lesson_id   INTEGER,
        question    TEXT NOT NULL,
        answer      TEXT NOT NULL,
        decoy1      TEXT,
        decoy2      TEXT,
        decoy3      TEXT
    );

    CREATE INDEX IF NOT EXISTS idx_flashcards_lesson ON flashcards(lesson_id);
"""


class Database:
    """Database connection manager."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None
        # Shared by readers and writers: reads never see an uncommitted bulk write
        self.lock = asyncio.Lock()

    async def connect(self) -> aiosqlite.Connection:
        """Establish database connection."""
        if self._conn is None:
            try:
                if self.db_path != ":memory:":
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._conn = await aiosqlite.connect(self.db_path)
            except (aiosqlite.Error, OSError) as e:
                raise StorageUnavailable(f"Cannot open database {self.db_path}: {e}") from e
            self._conn.row_factory = aiosqlite.Row

        return self._conn

    async def close(self):
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def execute(self, query: str, params: tuple = ()) -> int:
        """Execute a write query in its own transaction. Returns affected row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(query, params)
            return cursor.rowcount

    async def fetchone(self, query: str, params: tuple = ()):
        """Fetch one result."""
        async with self.lock:
            conn = await self.connect()
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchone()

    async def fetchall(self, query: str, params: tuple = ()):
        """Fetch all results."""
        async with self.lock:
            conn = await self.connect()
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchall()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run writes under the lock; commit on success, roll back on error."""
        async with self.lock:
            conn = await self.connect()
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()


async def _reset_on_schema_change(conn: aiosqlite.Connection):
    """Drop every table when the stored schema version differs from SCHEMA_VERSION."""
    async with conn.execute("PRAGMA user_version") as cursor:
        row = await cursor.fetchone()
    stored_version = row[0] if row else 0

    if stored_version == SCHEMA_VERSION:
        return

    async with conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    ) as cursor:
        tables = [r[0] for r in await cursor.fetchall()]

    if tables:
        logger.warning(
            "Schema version changed (%d -> %d), dropping existing tables: %s",
            stored_version, SCHEMA_VERSION, ", ".join(tables),
        )
        for table in tables:
            await conn.execute(f'DROP TABLE IF EXISTS "{table}"')


async def init_database(db_path: str = "data/fiszki.db") -> Database:
    """Open the database and make sure the flashcards schema is in place."""
    db = Database(db_path)
    conn = await db.connect()

    try:
        await _reset_on_schema_change(conn)
        await conn.executescript(SCHEMA_SQL)
        await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        await conn.commit()
    except aiosqlite.Error as e:
        await db.close()
        raise StorageUnavailable(f"Cannot initialize database {db_path}: {e}") from e

    logger.info("Database initialized at %s (schema v%d)", db_path, SCHEMA_VERSION)

    return db
