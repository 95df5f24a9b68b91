# tests/test_moonphase.py

import pytest

from ephemsearch import (
    MoonQuarterEvent,
    SearchFailure,
    TimeInstant,
    moon_phase,
    moon_quarters,
    next_moon_quarter,
    search_moon_phase,
    search_moon_quarter,
)
from ephemsearch.events import moonphase


def minutes_between(a: TimeInstant, b: TimeInstant) -> float:
    return abs(a.ut - b.ut) * 1440.0


# (quarter, UTC) for January 2024, from published almanac tables
JANUARY_2024_QUARTERS = [
    (0, (2024, 1, 11, 11, 57)),
    (1, (2024, 1, 18, 3, 53)),
    (2, (2024, 1, 25, 17, 54)),
    (3, (2024, 2, 2, 23, 18)),
]


def test_full_moon_phase():
    """Full moon of 2000-01-21 04:40 UTC."""
    phase = moon_phase(TimeInstant.from_calendar(2000, 1, 21, 4, 40))
    assert phase == pytest.approx(180.0, abs=1.0)


def test_phase_is_in_range():
    for day in range(0, 30, 3):
        assert 0.0 <= moon_phase(TimeInstant.from_calendar(2024, 3, 1).add_days(day)) < 360.0


def test_quarters_january_2024():
    events = list(moon_quarters(TimeInstant.from_calendar(2024, 1, 5), 4))
    assert [e.quarter for e in events] == [q for q, _ in JANUARY_2024_QUARTERS]
    for event, (_, fields) in zip(events, JANUARY_2024_QUARTERS):
        assert minutes_between(event.time, TimeInstant.from_calendar(*fields)) < 5.0


def test_quarter_names():
    event = search_moon_quarter(TimeInstant.from_calendar(2024, 1, 5))
    assert event.name == "New Moon"
    assert MoonQuarterEvent(3, event.time).name == "Third Quarter"


def test_search_moon_phase_hits_target():
    start = TimeInstant.from_calendar(2024, 1, 1)
    t = search_moon_phase(90.0, start, 40.0)
    assert t is not None
    assert t > start
    assert moon_phase(t) == pytest.approx(90.0, abs=1e-4)


def test_backward_search():
    t = search_moon_phase(0.0, TimeInstant.from_calendar(2024, 1, 20), -20.0)
    assert t is not None
    assert minutes_between(t, TimeInstant.from_calendar(2024, 1, 11, 11, 57)) < 5.0


def test_target_outside_window_returns_none():
    """Full moon was 2023-12-27; the next is 2024-01-25."""
    assert search_moon_phase(180.0, TimeInstant.from_calendar(2024, 1, 1), 2.0) is None
    assert search_moon_phase(180.0, TimeInstant.from_calendar(2024, 1, 1), -2.0) is None


def test_non_finite_target_rejected():
    with pytest.raises(ValueError):
        search_moon_phase(float("nan"), TimeInstant(0.0), 30.0)


def test_fifty_quarters_cycle_in_order():
    events = list(moon_quarters(TimeInstant.from_calendar(2023, 12, 1), 50))
    assert len(events) == 50
    for prev, cur in zip(events, events[1:]):
        assert cur.quarter == (prev.quarter + 1) % 4
        gap = prev.time.days_until(cur.time)
        assert 6.0 < gap < 8.6


def test_zero_quarters():
    assert list(moon_quarters(TimeInstant(0.0), 0)) == []


def test_next_quarter_failure_is_raised(monkeypatch):
    prev = search_moon_quarter(TimeInstant.from_calendar(2024, 1, 5))
    monkeypatch.setattr(moonphase, "search_moon_phase", lambda *args, **kwargs: None)
    with pytest.raises(SearchFailure):
        next_moon_quarter(prev)


@pytest.mark.parametrize("quarter", [-1, 4, True])
def test_quarter_index_is_validated(quarter):
    with pytest.raises(ValueError):
        MoonQuarterEvent(quarter, TimeInstant(0.0))


def test_every_quarter_has_a_name():
    names = [MoonQuarterEvent(q, TimeInstant(0.0)).name for q in range(4)]
    assert names == ["New Moon", "First Quarter", "Full Moon", "Third Quarter"]
