#!/usr/bin/env python3
"""
Tests for the expense HTTP endpoints and their response envelope
"""

import pytest
import sys
import os
from unittest.mock import AsyncMock, patch

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from core.config import settings
from core.dependencies import set_services
from core.scheduler import DAILY_SUMMARY_JOB_ID
from main import app
from services.ledger_service import LedgerService


@pytest.fixture
def ledger():
    service = LedgerService()
    set_services(service)
    return service


@pytest.fixture
def client(ledger):
    return TestClient(app)


def _add(client, category, amount, date=None):
    body = {"category": category, "amount": amount}
    if date is not None:
        body["date"] = date
    return client.post("/expenses", json=body)


class TestCreateExpense:
    def test_success_envelope(self, client):
        response = _add(client, "Food", 10, "2024-01-05")

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "data": {"id": 1, "category": "Food", "amount": 10, "date": "2024-01-05"},
            "error": None,
        }

    def test_invalid_category_is_still_200(self, client, ledger):
        response = _add(client, "Rent", 10)

        assert response.status_code == 200
        assert response.json() == {"status": "error", "data": None, "error": "Invalid category"}
        assert ledger.count == 0

    def test_invalid_amount_is_still_200(self, client, ledger):
        response = _add(client, "Food", -3)

        assert response.status_code == 200
        assert response.json() == {"status": "error", "data": None, "error": "Amount must be positive"}
        assert ledger.count == 0

    @pytest.mark.parametrize("body", [
        {"category": "Food"},
        {"amount": 5},
        {"category": "Food", "amount": "lots"},
        {"category": "Food", "amount": True},
        {"category": "Food", "amount": "10"},
        {"category": "Food", "amount": "1e400"},
    ])
    def test_malformed_body_is_reported_in_envelope(self, client, ledger, body):
        response = client.post("/expenses", json=body)

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "error"
        assert payload["data"] is None
        assert payload["error"]
        assert ledger.count == 0

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", "1e400"])
    def test_non_finite_amount_is_rejected(self, client, ledger, literal):
        response = client.post(
            "/expenses",
            content='{"category": "Food", "amount": %s}' % literal,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "error"
        assert ledger.count == 0

        _add(client, "Food", 5, "2024-01-01")
        data = client.get("/expenses/analysis").json()["data"]
        assert data["totalSpent"] == 5
        assert data["categoryTotals"] == {"Food": 5}

    def test_non_json_body_is_reported_in_envelope(self, client):
        response = client.post(
            "/expenses",
            content="category=Food",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "error"

    def test_unexpected_failure_is_reported_in_envelope(self, client, ledger):
        with patch.object(ledger, "add_expense", AsyncMock(side_effect=RuntimeError("boom"))):
            response = _add(client, "Food", 1)

        assert response.status_code == 200
        assert response.json() == {"status": "error", "data": None, "error": "boom"}

    def test_ids_are_sequential(self, client):
        ids = [_add(client, "Travel", n).json()["data"]["id"] for n in (1, 2, 3)]
        assert ids == [1, 2, 3]


class TestListExpenses:
    @pytest.fixture(autouse=True)
    def seed(self, client):
        _add(client, "Food", 10, "2024-01-05")
        _add(client, "Travel", 20, "2024-01-06")
        _add(client, "Food", 5, "2024-02-01")

    def test_unfiltered(self, client):
        response = client.get("/expenses")

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "success"
        assert payload["error"] is None
        assert [e["id"] for e in payload["data"]] == [1, 2, 3]

    def test_category_filter(self, client):
        payload = client.get("/expenses", params={"category": "Food"}).json()
        assert [e["id"] for e in payload["data"]] == [1, 3]

    def test_date_range_filter(self, client):
        payload = client.get(
            "/expenses",
            params={"start_date": "2024-01-01", "end_date": "2024-01-31"},
        ).json()
        assert [e["date"] for e in payload["data"]] == ["2024-01-05", "2024-01-06"]

    def test_empty_filters_are_ignored(self, client):
        payload = client.get("/expenses", params={"category": "", "start_date": ""}).json()
        assert len(payload["data"]) == 3


class TestAnalysis:
    def test_empty_ledger(self, client):
        response = client.get("/expenses/analysis")

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "data": {
                "totalSpent": 0,
                "highestSpendingCategory": None,
                "categoryTotals": {},
                "monthlyTotals": {},
            },
            "error": None,
        }

    def test_scenario(self, client):
        _add(client, "Food", 10, "2024-01-05")
        _add(client, "Travel", 20, "2024-01-06")
        _add(client, "Food", 5, "2024-02-01")

        data = client.get("/expenses/analysis").json()["data"]

        assert data["totalSpent"] == 35
        assert data["categoryTotals"] == {"Food": 15, "Travel": 20}
        assert data["highestSpendingCategory"] == "Travel"
        assert data["monthlyTotals"] == {"2024-01": 30, "2024-02": 5}

    def test_analysis_does_not_change_ledger(self, client, ledger):
        _add(client, "Shopping", 12)

        first = client.get("/expenses/analysis").json()
        second = client.get("/expenses/analysis").json()

        assert first == second
        assert ledger.count == 1


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health_reports_expense_count(self, client):
        _add(client, "Food", 1)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["expenses"] == 1

    def test_lifespan_installs_fresh_ledger(self, monkeypatch):
        monkeypatch.setattr(settings, "SCHEDULER_ENABLED", False)

        with TestClient(app) as client:
            _add(client, "Utilities", 60, "2024-03-01")
            assert client.get("/health").json()["expenses"] == 1

    def test_scheduler_restarts_across_lifespans(self, monkeypatch):
        monkeypatch.setattr(settings, "SCHEDULER_ENABLED", True)

        for _ in range(2):
            with TestClient(app) as client:
                scheduler = client.app.state.scheduler
                assert scheduler is not None
                assert scheduler.running
                assert scheduler.get_job(DAILY_SUMMARY_JOB_ID) is not None

        assert app.state.scheduler is None
