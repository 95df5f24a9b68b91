# tests/test_riseset.py

import pytest

from ephemsearch import (
    Body,
    Direction,
    ObserverLocation,
    TimeInstant,
    search_altitude,
    search_rise_set,
    sunrise,
    sunset,
)
from ephemsearch.events.riseset import geometric_altitude

LONDON = ObserverLocation(51.5074, -0.1278, 35.0)
TROMSO = ObserverLocation(69.65, 18.96)


def minutes_between(a: TimeInstant, b: TimeInstant) -> float:
    return abs(a.ut - b.ut) * 1440.0


def test_london_summer_solstice():
    """2024-06-21 in London: sunrise 04:43 BST (03:43 UTC), sunset 21:21 BST (20:21 UTC)."""
    day = TimeInstant.from_calendar(2024, 6, 21)

    rise = sunrise(LONDON, day)
    assert rise is not None
    assert minutes_between(rise, TimeInstant.from_calendar(2024, 6, 21, 3, 43)) < 3.0

    set_ = sunset(LONDON, day)
    assert set_ is not None
    assert minutes_between(set_, TimeInstant.from_calendar(2024, 6, 21, 20, 21)) < 3.0


def test_result_lies_inside_window():
    start = TimeInstant.from_calendar(2024, 6, 21, 5)
    rise = sunrise(LONDON, start, limit_days=1.0)
    assert rise is not None
    assert start < rise <= start.add_days(1.0)
    # the 2024-06-21 sunrise has passed, so this is the next morning's
    assert rise.to_calendar().day == 22


def test_backward_sunset():
    start = TimeInstant.from_calendar(2024, 6, 21, 12)
    set_ = sunset(LONDON, start, limit_days=-1.0)
    assert set_ is not None
    assert set_ < start
    assert minutes_between(set_, TimeInstant.from_calendar(2024, 6, 20, 20, 21)) < 3.0


def test_midnight_sun_has_no_sunrise():
    day = TimeInstant.from_calendar(2024, 6, 21)
    assert sunrise(TROMSO, day) is None
    assert sunset(TROMSO, day) is None


def test_short_window_without_event():
    start = TimeInstant.from_calendar(2024, 6, 21, 10)
    assert sunset(LONDON, start, limit_days=0.25) is None


def test_moonrise_meets_the_horizon_condition():
    start = TimeInstant.from_calendar(2024, 1, 1)
    rise = search_rise_set(Body.MOON, LONDON, Direction.RISE, start, 2.0)
    assert rise is not None
    # just before the rise the Moon is below the horizon, just after above
    before = geometric_altitude(Body.MOON, rise.add_days(-0.01), LONDON)
    after = geometric_altitude(Body.MOON, rise.add_days(0.01), LONDON)
    assert before < after
    # upper limb on the refracted horizon: centre ~ -(34' + 15.5')
    assert geometric_altitude(Body.MOON, rise, LONDON) == pytest.approx(-0.83, abs=0.1)


def test_search_altitude_civil_dusk():
    start = TimeInstant.from_calendar(2024, 6, 21, 12)
    dusk = search_altitude(Body.SUN, LONDON, Direction.SET, start, 1.0, -6.0)
    set_ = sunset(LONDON, start)
    assert dusk is not None and set_ is not None
    assert dusk > set_
    assert geometric_altitude(Body.SUN, dusk, LONDON) == pytest.approx(-6.0, abs=0.01)


def test_planet_rise_is_found():
    t = search_rise_set(Body.JUPITER, LONDON, Direction.RISE, TimeInstant.from_calendar(2024, 12, 1), 1.0)
    assert t is not None
    assert geometric_altitude(Body.JUPITER, t, LONDON) == pytest.approx(-34.0 / 60.0, abs=0.05)


def test_earth_does_not_rise():
    with pytest.raises(ValueError):
        search_rise_set(Body.EARTH, LONDON, Direction.RISE, TimeInstant(0.0), 1.0)


def test_altitude_out_of_range():
    with pytest.raises(ValueError):
        search_altitude(Body.SUN, LONDON, Direction.RISE, TimeInstant(0.0), 1.0, 95.0)
