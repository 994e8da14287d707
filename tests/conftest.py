"""Pytest fixtures for diettrend tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest


@pytest.fixture
def start_day() -> date:
    return date(2025, 1, 1)


@pytest.fixture
def daily_weights(start_day):
    """Twenty consecutive days of weight falling 0.1 kg/day from 80 kg."""
    return {start_day + timedelta(days=i): 80.0 - 0.1 * i for i in range(20)}


@pytest.fixture
def sparse_weights(start_day):
    """Weights with an interior gap and irregular spacing."""
    return {
        start_day: 80.0,
        start_day + timedelta(days=1): 79.8,
        start_day + timedelta(days=5): 79.0,
        start_day + timedelta(days=6): 79.2,
        start_day + timedelta(days=10): 78.4,
    }


@pytest.fixture
def weight_csv(tmp_path, start_day):
    """CSV export with a duplicate day and a gap."""
    path = tmp_path / "weight.csv"
    rows = ["date,value"]
    for i in range(14):
        if i == 4:
            continue
        rows.append(f"{(start_day + timedelta(days=i)).isoformat()},{80.0 - 0.1 * i:.2f}")
    rows.append(f"{start_day.isoformat()}T21:00:00,80.4")
    path.write_text("\n".join(rows) + "\n")
    return path
