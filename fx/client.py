"""Exchange rate API client with mock support."""

import logging
from abc import ABC, abstractmethod

import requests

logger = logging.getLogger(__name__)

EXCHANGE_RATE_API_URL = "https://api.exchangerate-api.com/v4/latest/USD"
TARGET_CURRENCY = "INR"


class FetchError(Exception):
    """The rate service could not be reached or returned an unusable payload."""


class RateClient(ABC):
    """Abstract interface for fetching the USD to INR rate."""

    @abstractmethod
    def fetch_usd_to_inr(self) -> float:
        """Fetch the current USD to INR rate.

        Returns:
            INR per 1 USD, e.g. 83.12.

        Raises:
            FetchError: the request failed or the response lacked ``rates.INR``.
        """


class ExchangeRateApiClient(RateClient):
    """Real exchangerate-api.com client. Makes one request per call, no retry."""

    def __init__(self, url: str = EXCHANGE_RATE_API_URL, timeout: float = 10.0):
        self._url = url
        self._timeout = timeout

    def fetch_usd_to_inr(self) -> float:
        try:
            resp = requests.get(self._url, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            # JSON decode errors from requests are RequestException subclasses too
            raise FetchError(str(e)) from e

        try:
            rate = data["rates"][TARGET_CURRENCY]
        except (KeyError, TypeError) as e:
            raise FetchError(f"Response has no rates.{TARGET_CURRENCY} field") from e

        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise FetchError(f"Non-numeric rates.{TARGET_CURRENCY} value: {rate!r}")

        logger.debug("Fetched USD%s = %s from %s", TARGET_CURRENCY, rate, self._url)
        return float(rate)


class MockRateClient(RateClient):
    """Mock client returning a fixed rate for testing and offline runs."""

    MOCK_RATE = 83.12

    def __init__(self, rate: float = MOCK_RATE):
        self._rate = rate

    def fetch_usd_to_inr(self) -> float:
        return self._rate
