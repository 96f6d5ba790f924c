from __future__ import annotations

from datetime import datetime, timezone

import pytest
import requests

from netthud.config import AppConfig


@pytest.fixture
def config(tmp_path):
    """App configuration writing into a temporary data directory."""

    return AppConfig(data_dir=tmp_path / "data")


@pytest.fixture
def fixed_now():
    return datetime(2026, 1, 20, 15, 30, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")


@pytest.fixture
def fake_response():
    return FakeResponse
