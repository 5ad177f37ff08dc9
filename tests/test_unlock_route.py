"""Integration tests for /unlock-evaluator."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.parametrize(
    "payload, unlocked",
    [
        ({"lockType": "honor", "honorConfirmed": True}, True),
        ({"lockType": "honor"}, False),
        ({"lockType": "honor", "honorConfirmed": "true"}, False),
        (
            {"lockType": "time", "now": "2026-01-01T00:00:00Z", "unlockAt": "2026-06-01T00:00:00Z"},
            False,
        ),
        (
            {"lockType": "time", "now": "2026-06-01T00:00:00Z", "unlockAt": "2026-06-01T00:00:00Z"},
            True,
        ),
        ({"lockType": "time", "unlockAt": "2000-01-01T00:00:00Z"}, True),
        ({"lockType": "honor", "honorConfirmed": True, "now": "soon"}, True),
        ({"lockType": "honor", "now": "soon"}, False),
    ],
)
def test_evaluates(client: TestClient, payload: dict, unlocked: bool) -> None:
    resp = client.post("/unlock-evaluator", json=payload)

    assert resp.status_code == 200
    assert resp.json() == {"unlocked": unlocked}


@pytest.mark.parametrize(
    "payload, message",
    [
        ({}, "lockType is required"),
        ({"lockType": ""}, "lockType is required"),
        ({"lockType": "forever"}, "lockType must be honor or time"),
        ({"lockType": "time", "now": "soon", "unlockAt": "2026-01-01T00:00:00Z"}, "now must be a valid ISO datetime"),
        ({"lockType": "time"}, "valid unlockAt is required for time lock"),
        ({"lockType": "time", "unlockAt": "someday"}, "valid unlockAt is required for time lock"),
    ],
)
def test_rejections(client: TestClient, payload: dict, message: str) -> None:
    resp = client.post("/unlock-evaluator", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"error": message}


def test_get_is_405(client: TestClient) -> None:
    resp = client.get("/unlock-evaluator")

    assert resp.status_code == 405
    assert resp.json() == {"error": "Method not allowed"}
