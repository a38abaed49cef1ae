"""
Tests for the helpers in `health_tracker/utils/`.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from health_tracker.utils.dates import calculate_age, format_chart_label, utcnow


@pytest.mark.parametrize(
    ("born", "today", "age"),
    [
        (date(1990, 6, 15), date(2024, 6, 14), 33),
        (date(1990, 6, 15), date(2024, 6, 15), 34),
        (date(2000, 2, 29), date(2023, 2, 28), 22),
        (date(2000, 2, 29), date(2023, 3, 1), 23),
        (date(2024, 1, 1), date(2024, 1, 1), 0),
    ],
)
def test_calculate_age(born: date, today: date, age: int) -> None:
    assert calculate_age(born, today) == age


def test_format_chart_label() -> None:
    assert format_chart_label(datetime(2024, 3, 5, 14, 0)) == "Mar 05"


def test_utcnow_is_naive() -> None:
    assert utcnow().tzinfo is None


def test_root_endpoint(client) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert "Patient Health Tracker" in response.json()["message"]
