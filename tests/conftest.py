"""Shared test fixtures for DayBoard tests."""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

import pytest

from core.board import PlannerBoard
from core.storage import JsonStateStore, SqliteStateStore

TODAY = date(2026, 10, 19)  # a Monday


class Clock:
    """Stand-in for date.today that tests can move forward or back."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> date:
        self.today += timedelta(days=days)
        return self.today


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock() -> Clock:
    return Clock(TODAY)


@pytest.fixture
def json_store(tmp_path: Path, clock: Clock) -> JsonStateStore:
    return JsonStateStore(tmp_path / "board.json", today=clock)


@pytest.fixture(params=["json", "sqlite"])
def store(request, tmp_path: Path, clock: Clock):
    """Each test using this runs once per backend."""
    if request.param == "json":
        s = JsonStateStore(tmp_path / "board.json", today=clock)
    else:
        s = SqliteStateStore(tmp_path / "board.sqlite", today=clock)
    yield s
    s.close()


@pytest.fixture
def board(json_store: JsonStateStore, clock: Clock) -> PlannerBoard:
    """A 1200x900 board with pixel metrics.

    Day area is 1200x630, tray is at y=630 with height 270.
    Slots are 240x567 at x = i * 250, y = 10; day2 is today.
    Tray tiles are 180x81 in six columns.
    """
    b = PlannerBoard(json_store, today=clock)
    b.resize(1200, 900)
    return b
