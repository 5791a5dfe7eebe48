from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
import threading
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from eventhub.config import settings
from eventhub.errors import ConfigurationError, ConnectivityError, DomainError

logger = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable["Database"]]
TargetResolver = Callable[[], Optional[str]]


# ---------- Schema ----------

def _init_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()

    cur.execute("""
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        slug TEXT NOT NULL,
        created_at TEXT NOT NULL,
        data TEXT NOT NULL        -- JSON document
    )
    """)
    cur.execute("CREATE UNIQUE INDEX IF NOT EXISTS ux_events_slug ON events (slug)")
    cur.execute("CREATE INDEX IF NOT EXISTS ix_events_created_at ON events (created_at)")

    cur.execute("""
    CREATE TABLE IF NOT EXISTS bookings (
        id TEXT PRIMARY KEY,
        event_id TEXT NOT NULL,
        created_at TEXT NOT NULL,
        data TEXT NOT NULL        -- JSON document
    )
    """)
    cur.execute("CREATE INDEX IF NOT EXISTS ix_bookings_event_id ON bookings (event_id)")

    conn.commit()


def _db_path(url: str) -> str:
    if url.startswith("sqlite:///"):
        return url[len("sqlite:///"):]
    if url.startswith("sqlite://"):
        return url[len("sqlite://"):] or ":memory:"
    return url


# ---------- Connection handle ----------

class Database:
    """
    One sqlite connection shared by every request task.
    Statements are serialised with a lock and run on worker threads.
    """

    def __init__(self, conn: sqlite3.Connection, path: str) -> None:
        self._conn: sqlite3.Connection | None = conn
        self._lock = threading.Lock()
        self.path = path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _run(self, sql: str, params: Sequence[Any]) -> List[sqlite3.Row]:
        with self._lock:
            if self._conn is None:
                raise ConnectivityError("Database connection is closed")
            try:
                rows = self._conn.execute(sql, params).fetchall()
                self._conn.commit()
                return rows
            except sqlite3.OperationalError as exc:
                self._conn.rollback()
                raise ConnectivityError(f"Database error: {exc}") from exc
            except sqlite3.Error:
                self._conn.rollback()
                raise

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        return await asyncio.to_thread(self._run, sql, params)

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Row | None:
        rows = await self.fetch_all(sql, params)
        return rows[0] if rows else None

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        await self.fetch_all(sql, params)


def _open(path: str) -> Database:
    if path != ":memory:":
        Path(path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    _init_schema(conn)
    return Database(conn, path)


async def open_database(url: str) -> Database:
    return await asyncio.to_thread(_open, _db_path(url))


def _target_from_settings() -> Optional[str]:
    """DATABASE_URL as of this call: the process environment, then settings (.env)."""
    return os.environ.get("DATABASE_URL") or settings.database_url


# ---------- Connection cache ----------

class ConnectionCache:
    """
    Lazily opens exactly one Database per process.

    Concurrent callers that arrive while the first attempt is in flight
    await the same future and see the same handle or the same failure.
    A failed attempt clears the in-flight marker so the next call retries.
    """

    def __init__(
        self,
        connector: Connector | None = None,
        target: TargetResolver | None = None,
    ) -> None:
        self._connector = connector or open_database
        self._target = target or _target_from_settings
        self._conn: Database | None = None
        self._pending: asyncio.Future[Database] | None = None

    @property
    def connection(self) -> Database | None:
        return self._conn

    async def get_connection(self) -> Database:
        url = self._target()
        if not url:
            raise ConfigurationError("DATABASE_URL")

        conn = self._conn
        if conn is not None and conn.is_open:
            return conn
        self._conn = None

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect(url))
        # shield: one caller being cancelled must not cancel the shared attempt
        return await asyncio.shield(self._pending)

    async def _connect(self, url: str) -> Database:
        try:
            conn = await self._connector(url)
        except DomainError:
            self._pending = None
            raise
        except Exception as exc:
            self._pending = None
            raise ConnectivityError(f"Database connection failed: {exc}") from exc

        self._conn = conn
        self._pending = None
        logger.info("Database connected: %s", getattr(conn, "path", url))
        return conn

    def reset(self) -> None:
        """Forget the cached handle (tests only; does not close it)."""
        self._conn = None
        self._pending = None


connection_cache = ConnectionCache()


async def get_connection() -> Database:
    return await connection_cache.get_connection()
