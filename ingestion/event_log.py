"""Append-only event log read back by the cron-status endpoint."""

import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "exchange_rate_log.txt"


class LogIOError(Exception):
    """The event log file could not be read."""


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-15T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EventLog:
    """Plain-text log, one ``<timestamp>: <message>`` line per event."""

    def __init__(self, path: str | Path = DEFAULT_LOG_FILE):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, message: str) -> None:
        """Append a line and echo it through logging. Write failures are not raised."""
        logger.info("%s", message)
        try:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(f"{utc_timestamp()}: {message}\n")
        except OSError as e:
            logger.error("Error writing to log file %s: %s", self._path, e)

    def tail(self, n: int = 10) -> list[str]:
        """Return the last ``n`` lines, oldest first."""
        try:
            data = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise LogIOError(f"Error reading log file {self._path}") from e
        lines = [line for line in data.splitlines() if line.strip()]
        return lines[-n:] if n > 0 else []
