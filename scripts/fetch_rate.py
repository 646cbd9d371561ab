"""CLI entry point for a single USD to INR ingestion run.

Usage:
    python -m scripts.fetch_rate [--db-url sqlite:///exchange_rate.db] [--log-file exchange_rate_log.txt] [--mock]
"""

import argparse
import asyncio
import logging
import sys

from fx.client import ExchangeRateApiClient, MockRateClient
from fx.store import RateStore
from ingestion.event_log import DEFAULT_LOG_FILE, EventLog
from ingestion.job import IngestionJob
from ratedb import DEFAULT_DB_URL, create_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch and store the USD to INR rate once")
    parser.add_argument("--db-url", default=DEFAULT_DB_URL, help="Database URL (sqlite:///)")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Event log file")
    parser.add_argument("--mock", action="store_true", help="Use mock rate client (for testing)")
    args = parser.parse_args()

    client = MockRateClient() if args.mock else ExchangeRateApiClient()

    service = create_service(args.db_url)
    service.connect()
    try:
        store = RateStore(service)
        store.ensure_schema()
        job = IngestionJob(client, store, EventLog(args.log_file))
        row_id = asyncio.run(job.run())
    finally:
        service.close()

    if row_id is None:
        logger.error("No rate stored. See %s for details.", args.log_file)
        sys.exit(1)
    logger.info("Done. Stored row %d.", row_id)


if __name__ == "__main__":
    main()
