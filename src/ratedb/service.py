"""Abstract DatabaseService interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from ratedb.types import Params, Row


class DatabaseService(ABC):
    """Database-agnostic interface for the rate store.

    - Each transaction() acquires its own connection, so calls from worker
      threads do not share cursors.
    - Backend errors surface as ratedb.errors.StorageError.
    """

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: acquires a connection, commits on success, rolls back on error."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    def execute_insert(self, sql: str, params: Params | None = None) -> int:
        """Execute an INSERT and return the id of the new row."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""
