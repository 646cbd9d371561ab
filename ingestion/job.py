"""Fetch-then-insert ingestion of the daily USD to INR rate."""

import asyncio
import logging
from datetime import datetime, timezone

from fx.client import FetchError, RateClient
from fx.store import RateStore
from ingestion.event_log import EventLog
from ratedb.errors import StorageError

logger = logging.getLogger(__name__)


def utc_today() -> str:
    """Current calendar date in UTC as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


class IngestionJob:
    """Produces one new observation per successful run.

    Failures are recorded in the event log and swallowed, so neither the
    scheduler nor the server ever sees them. The blocking fetch and insert run
    in worker threads to keep the event loop free for HTTP requests.
    """

    def __init__(self, client: RateClient, store: RateStore, event_log: EventLog):
        self._client = client
        self._store = store
        self._event_log = event_log

    async def run(self) -> int | None:
        """Fetch a rate and store it. Returns the new row id, or None on failure."""
        try:
            rate = await asyncio.to_thread(self._client.fetch_usd_to_inr)
        except FetchError as e:
            self._event_log.record(f"Error fetching exchange rate: {e}")
            return None

        date = utc_today()
        try:
            row_id = await asyncio.to_thread(self._store.insert, date, rate)
        except StorageError as e:
            self._event_log.record(f"Error inserting data: {e}")
            return None

        self._event_log.record(f"Stored in DB: 1 USD = {rate} INR on {date}")
        return row_id

    async def bootstrap(self) -> bool:
        """Seed the store with one observation if it is empty.

        Returns True when a bootstrap run was attempted.
        """
        try:
            await asyncio.to_thread(self._store.ensure_schema)
            empty = await asyncio.to_thread(self._store.count) == 0
        except StorageError as e:
            self._event_log.record(f"Error checking/populating database: {e}")
            return False

        if not empty:
            logger.info("Store already holds rates, skipping bootstrap")
            return False

        self._event_log.record("Database is empty. Fetching initial exchange rate...")
        await self.run()
        return True
