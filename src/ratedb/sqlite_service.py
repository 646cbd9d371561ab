"""SQLite implementation of DatabaseService."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Iterator

from ratedb.errors import StorageError
from ratedb.service import DatabaseService
from ratedb.types import Params, Row

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class SQLiteDatabaseService(DatabaseService):
    """SQLite backend using stdlib sqlite3.

    Thread-safe via a connection pool (Queue). Each transaction() call
    acquires a dedicated connection and returns it on exit. An in-memory
    database is private to its connection, so ``:memory:`` always gets a
    pool of one.
    """

    def __init__(self, db_path: str, pool_size: int = 4):
        self._db_path = db_path
        self._pool_size = 1 if db_path == MEMORY_PATH else pool_size
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=self._pool_size)
        self._local = threading.local()
        self._closed = False

    @property
    def db_path(self) -> str:
        return self._db_path

    def connect(self) -> None:
        self._closed = False
        try:
            for _ in range(self._pool_size):
                conn = sqlite3.connect(self._db_path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                if self._db_path != MEMORY_PATH:
                    conn.execute("PRAGMA journal_mode=WAL")
                self._pool.put(conn)
        except sqlite3.Error as e:
            raise StorageError(f"Error opening database {self._db_path}: {e}") from e
        logger.info("Connected to the SQLite database at %s", self._db_path)

    def close(self) -> None:
        self._closed = True
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise StorageError("Database service is closed")
        try:
            return self._pool.get(timeout=30)
        except Empty as e:
            raise StorageError("Timed out waiting for a database connection") from e

    def _release(self, conn: sqlite3.Connection) -> None:
        # connections checked out across close() are closed on return
        if self._closed:
            conn.close()
        else:
            self._pool.put(conn)

    def _get_conn(self) -> sqlite3.Connection:
        """Get the connection bound to the current transaction."""
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            return conn
        raise RuntimeError(
            "No active transaction. Wrap calls in a `with service.transaction():` block."
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        conn = self._acquire()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            self._release(conn)

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        cursor = conn.execute(sql, params or ())
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_insert(self, sql: str, params: Params | None = None) -> int:
        conn = self._get_conn()
        cursor = conn.execute(sql, params or ())
        return cursor.lastrowid

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            conn.executescript(sql)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Error creating table: {e}") from e
        finally:
            self._release(conn)
