"""Run the exchange rate service: HTTP API, startup bootstrap and daily check.

Usage:
    python -m scripts.serve [--db-url sqlite:///exchange_rate.db] [--log-file exchange_rate_log.txt]
                            [--host 0.0.0.0] [--port 3000] [--mock]
"""

import argparse
import logging

import uvicorn

from api.app import create_app
from fx.client import ExchangeRateApiClient, MockRateClient
from fx.store import RateStore
from ingestion.event_log import DEFAULT_LOG_FILE, EventLog
from ingestion.job import IngestionJob
from ingestion.scheduler import DailyScheduler
from ratedb import DEFAULT_DB_URL, create_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the USD to INR exchange rate API")
    parser.add_argument("--db-url", default=DEFAULT_DB_URL, help="Database URL (sqlite:///)")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Event log file")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Bind address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="HTTP port")
    parser.add_argument("--mock", action="store_true", help="Use mock rate client (no network)")
    args = parser.parse_args()

    client = MockRateClient() if args.mock else ExchangeRateApiClient()
    event_log = EventLog(args.log_file)

    service = create_service(args.db_url)
    service.connect()
    try:
        store = RateStore(service)
        store.ensure_schema()
        job = IngestionJob(client, store, event_log)
        scheduler = DailyScheduler(job, event_log)
        app = create_app(store, event_log, job=job, scheduler=scheduler)

        logger.info("Server is running on http://localhost:%d", args.port)
        uvicorn.run(app, host=args.host, port=args.port)
    finally:
        service.close()


if __name__ == "__main__":
    main()
