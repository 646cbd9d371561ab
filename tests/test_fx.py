"""Tests for the rate client and rate store."""

import pytest
import requests

from fx import client as client_module
from fx.client import ExchangeRateApiClient, FetchError, MockRateClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload


def patch_get(monkeypatch, response=None, error=None):
    calls = []

    def fake_get(url, timeout=None):
        calls.append((url, timeout))
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(client_module.requests, "get", fake_get)
    return calls


class TestMockClient:
    def test_fixed_rate(self):
        assert MockRateClient().fetch_usd_to_inr() == pytest.approx(83.12)

    def test_custom_rate(self):
        assert MockRateClient(rate=84.5).fetch_usd_to_inr() == 84.5


class TestExchangeRateApiClient:
    def test_extracts_inr(self, monkeypatch):
        calls = patch_get(
            monkeypatch, FakeResponse({"base": "USD", "rates": {"EUR": 0.92, "INR": 83.45}})
        )
        rate = ExchangeRateApiClient().fetch_usd_to_inr()
        assert rate == pytest.approx(83.45)
        assert calls == [("https://api.exchangerate-api.com/v4/latest/USD", 10.0)]

    def test_integer_rate_is_float(self, monkeypatch):
        patch_get(monkeypatch, FakeResponse({"rates": {"INR": 83}}))
        rate = ExchangeRateApiClient().fetch_usd_to_inr()
        assert isinstance(rate, float)

    def test_network_error(self, monkeypatch):
        patch_get(monkeypatch, error=requests.ConnectionError("connection refused"))
        with pytest.raises(FetchError, match="connection refused"):
            ExchangeRateApiClient().fetch_usd_to_inr()

    def test_timeout(self, monkeypatch):
        patch_get(monkeypatch, error=requests.Timeout("read timed out"))
        with pytest.raises(FetchError):
            ExchangeRateApiClient().fetch_usd_to_inr()

    def test_http_error_status(self, monkeypatch):
        patch_get(monkeypatch, FakeResponse({}, status_code=503))
        with pytest.raises(FetchError, match="503"):
            ExchangeRateApiClient().fetch_usd_to_inr()

    def test_invalid_json(self, monkeypatch):
        patch_get(
            monkeypatch,
            FakeResponse(json_error=requests.exceptions.JSONDecodeError("Expecting value", "", 0)),
        )
        with pytest.raises(FetchError):
            ExchangeRateApiClient().fetch_usd_to_inr()

    @pytest.mark.parametrize(
        "payload",
        [{}, {"rates": {}}, {"rates": {"EUR": 0.92}}, {"rates": None}, ["not", "an", "object"]],
    )
    def test_missing_inr_field(self, monkeypatch, payload):
        patch_get(monkeypatch, FakeResponse(payload))
        with pytest.raises(FetchError, match="rates.INR"):
            ExchangeRateApiClient().fetch_usd_to_inr()

    def test_non_numeric_rate(self, monkeypatch):
        patch_get(monkeypatch, FakeResponse({"rates": {"INR": "83.1"}}))
        with pytest.raises(FetchError, match="Non-numeric"):
            ExchangeRateApiClient().fetch_usd_to_inr()


class TestRateStore:
    def test_empty_store(self, store):
        assert store.count() == 0
        assert store.get_latest() is None
        assert store.get_all() == []

    def test_insert_round_trip(self, store):
        row_id = store.insert("2024-01-15", 83.12)
        rows = store.get_all()
        assert len(rows) == 1
        assert rows[0].id == row_id
        assert rows[0].date == "2024-01-15"
        assert rows[0].rate == 83.12

    def test_ids_increase(self, store):
        ids = [store.insert("2024-01-15", 83.0 + i) for i in range(3)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 3

    def test_latest_is_highest_id_not_latest_date(self, store):
        store.insert("2024-03-01", 83.5)
        backfilled = store.insert("2023-12-31", 82.9)
        latest = store.get_latest()
        assert latest.id == backfilled
        assert latest.date == "2023-12-31"

    def test_get_all_sorted_by_date_desc(self, store):
        store.insert("2024-01-02", 83.2)
        store.insert("2024-01-05", 83.5)
        store.insert("2024-01-01", 83.1)
        store.insert("2024-01-05", 83.6)
        dates = [row.date for row in store.get_all()]
        assert dates == ["2024-01-05", "2024-01-05", "2024-01-02", "2024-01-01"]

    def test_same_day_duplicates_allowed(self, store):
        store.insert("2024-01-15", 83.12)
        store.insert("2024-01-15", 83.20)
        assert store.count() == 2

    def test_ensure_schema_is_idempotent(self, store):
        store.insert("2024-01-15", 83.12)
        store.ensure_schema()
        assert store.count() == 1

    def test_observation_to_dict(self, store):
        store.insert("2024-01-15", 83.12)
        assert store.get_latest().to_dict() == {"id": 1, "date": "2024-01-15", "rate": 83.12}
