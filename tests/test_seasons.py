# tests/test_seasons.py

import importlib

import pytest

from ephemsearch import SearchFailure, TimeInstant, search_sun_longitude, seasons, sun_position

# the package re-exports the seasons() function under the module name
seasons_mod = importlib.import_module("ephemsearch.events.seasons")


def minutes_between(a: TimeInstant, b: TimeInstant) -> float:
    return abs(a.ut - b.ut) * 1440.0


def test_seasons_2024():
    s = seasons(2024)
    assert minutes_between(s.mar_equinox, TimeInstant.from_calendar(2024, 3, 20, 3, 6)) < 30.0
    assert minutes_between(s.jun_solstice, TimeInstant.from_calendar(2024, 6, 20, 20, 51)) < 30.0
    assert minutes_between(s.sep_equinox, TimeInstant.from_calendar(2024, 9, 22, 12, 44)) < 30.0
    assert minutes_between(s.dec_solstice, TimeInstant.from_calendar(2024, 12, 21, 9, 20)) < 30.0


def test_seasons_are_ordered():
    s = seasons(1999)
    assert s.mar_equinox < s.jun_solstice < s.sep_equinox < s.dec_solstice
    assert s.mar_equinox.to_calendar().month == 3
    assert s.dec_solstice.to_calendar().month == 12


def test_sun_longitude_at_found_solstice():
    s = seasons(2030)
    assert sun_position(s.jun_solstice).elon == pytest.approx(90.0, abs=1e-5)
    assert sun_position(s.dec_solstice).elon == pytest.approx(270.0, abs=1e-5)


def test_search_outside_window_returns_none():
    start = TimeInstant.from_calendar(2024, 1, 1)
    assert search_sun_longitude(0.0, start, 20.0) is None


def test_missing_season_is_raised(monkeypatch):
    monkeypatch.setattr(seasons_mod, "search_sun_longitude", lambda *args, **kwargs: None)
    with pytest.raises(SearchFailure):
        seasons(2024)
