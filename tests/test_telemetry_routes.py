"""Integration tests for /letter-open and /read-receipt."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def _open_event(**overrides) -> dict:
    event = {
        "letterId": "sad-day",
        "openedAt": "2026-01-01T10:00:00.000Z",
        "lockType": "honor",
        "unlocked": True,
    }
    event.update(overrides)
    return {k: v for k, v in event.items() if v is not ...}


def _receipt(**overrides) -> dict:
    receipt = {"letterId": "sad-day", "openedAt": "2026-01-01T10:00:00Z"}
    receipt.update(overrides)
    return {k: v for k, v in receipt.items() if v is not ...}


class TestLetterOpen:
    def test_accepts_event(self, client: TestClient) -> None:
        resp = client.post("/letter-open", json=_open_event())

        assert resp.status_code == 202
        assert resp.json() == {
            "accepted": True,
            "event": {
                "type": "letter-open",
                "letterId": "sad-day",
                "openedAt": "2026-01-01T10:00:00.000Z",
                "lockType": "honor",
                "unlocked": True,
                "userId": "anonymous",
            },
        }

    def test_keeps_user_id(self, client: TestClient) -> None:
        resp = client.post("/letter-open", json=_open_event(userId="reader-7", unlocked=False))

        event = resp.json()["event"]
        assert event["userId"] == "reader-7"
        assert event["unlocked"] is False

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"letterId": ...}, "letterId is required"),
            ({"letterId": ""}, "letterId is required"),
            ({"openedAt": ...}, "openedAt must be a valid ISO datetime"),
            ({"openedAt": "2026-01-01"}, "openedAt must be a valid ISO datetime"),
            ({"openedAt": "yesterday"}, "openedAt must be a valid ISO datetime"),
            ({"lockType": "magic"}, "lockType must be honor or time"),
            ({"unlocked": ...}, "unlocked must be provided"),
            ({"unlocked": "yes"}, "unlocked must be provided"),
        ],
    )
    def test_rejections(self, client: TestClient, overrides: dict, message: str) -> None:
        resp = client.post("/letter-open", json=_open_event(**overrides))

        assert resp.status_code == 400
        assert resp.json() == {"error": message}


class TestReadReceipt:
    def test_accepts_receipt_with_defaults(self, client: TestClient) -> None:
        resp = client.post("/read-receipt", json=_receipt())

        assert resp.status_code == 202
        assert resp.json() == {
            "accepted": True,
            "event": {
                "type": "read-receipt",
                "letterId": "sad-day",
                "openedAt": "2026-01-01T10:00:00Z",
                "recipientId": "anonymous",
                "deviceType": "unknown",
            },
        }

    def test_keeps_recipient_and_device(self, client: TestClient) -> None:
        resp = client.post("/read-receipt", json=_receipt(recipientId="r-1", deviceType="tablet"))

        event = resp.json()["event"]
        assert event["recipientId"] == "r-1"
        assert event["deviceType"] == "tablet"

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"letterId": ...}, "letterId is required"),
            ({"openedAt": ...}, "openedAt is required"),
            ({"openedAt": "  "}, "openedAt is required"),
            ({"openedAt": "not-a-date"}, "openedAt must be a valid ISO datetime"),
            (
                {"deviceType": "watch"},
                "deviceType must be mobile, desktop, tablet or unknown",
            ),
        ],
    )
    def test_rejections(self, client: TestClient, overrides: dict, message: str) -> None:
        resp = client.post("/read-receipt", json=_receipt(**overrides))

        assert resp.status_code == 400
        assert resp.json() == {"error": message}

    def test_get_is_405(self, client: TestClient) -> None:
        assert client.get("/read-receipt").status_code == 405
