"""Exchange rate persistence and schema."""

import logging

from fx.models import RateObservation
from ratedb.service import DatabaseService

logger = logging.getLogger(__name__)

EXCHANGE_RATES_DDL = """
CREATE TABLE IF NOT EXISTS exchange_rates (
    id    INTEGER PRIMARY KEY AUTOINCREMENT,
    date  TEXT,
    rate  REAL
);
"""

RATES_TABLE = "exchange_rates"


class RateStore:
    """Append-only log of USD to INR observations.

    Every method runs in its own transaction and raises
    ratedb.errors.StorageError on failure. There is no update or delete.
    """

    def __init__(self, service: DatabaseService):
        self._service = service

    def ensure_schema(self) -> None:
        """Create the exchange_rates table if it doesn't exist."""
        self._service.execute_ddl(EXCHANGE_RATES_DDL)

    def insert(self, date: str, rate: float) -> int:
        with self._service.transaction():
            row_id = self._service.execute_insert(
                f"INSERT INTO {RATES_TABLE} (date, rate) VALUES (?, ?)", (date, rate)
            )
        logger.info("Inserted rate %s for %s as id %d", rate, date, row_id)
        return row_id

    def get_latest(self) -> RateObservation | None:
        """Return the most recently inserted row (highest id), not the latest date."""
        with self._service.transaction():
            rows = self._service.execute(
                f"SELECT id, date, rate FROM {RATES_TABLE} ORDER BY id DESC LIMIT 1"
            )
        return RateObservation.from_row(rows[0]) if rows else None

    def get_all(self) -> list[RateObservation]:
        """Return every row, newest date first."""
        with self._service.transaction():
            rows = self._service.execute(
                f"SELECT id, date, rate FROM {RATES_TABLE} ORDER BY date DESC"
            )
        return [RateObservation.from_row(row) for row in rows]

    def count(self) -> int:
        with self._service.transaction():
            rows = self._service.execute(f"SELECT COUNT(*) AS cnt FROM {RATES_TABLE}")
        return rows[0]["cnt"]
