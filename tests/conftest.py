from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.utils.series import TimePoint


def _monthly_date(index: int) -> date:
    return date(2024 + index // 12, index % 12 + 1, 15)


@pytest.fixture
def make_series():
    def _make(values, client_ids=None):
        client_ids = client_ids or [None] * len(values)
        return [
            TimePoint(amount=value, date=_monthly_date(i), client_id=client_id)
            for i, (value, client_id) in enumerate(zip(values, client_ids))
        ]

    return _make


@pytest.fixture
def client():
    return TestClient(create_app())
