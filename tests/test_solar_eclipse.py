# tests/test_solar_eclipse.py

import pytest

from ephemsearch import (
    EclipseKind,
    ObserverLocation,
    TimeInstant,
    next_global_solar_eclipse,
    next_local_solar_eclipse,
    search_global_solar_eclipse,
    search_local_solar_eclipse,
)
from ephemsearch.events.solar_eclipse import local_moon_shadow, moon_shadow

DALLAS = ObserverLocation(32.7767, -96.7970, 140.0)
ALBUQUERQUE = ObserverLocation(35.0844, -106.6504, 1510.0)
LONDON = ObserverLocation(51.5074, -0.1278, 35.0)


def minutes_between(a: TimeInstant, b: TimeInstant) -> float:
    return abs(a.ut - b.ut) * 1440.0


@pytest.fixture(scope="module")
def total_2024_april():
    return search_global_solar_eclipse(TimeInstant.from_calendar(2024, 1, 1))


def test_total_eclipse_2024_april_8(total_2024_april):
    """Greatest eclipse 2024-04-08 18:17 UT at 25.3N 104.1W."""
    e = total_2024_april
    assert e.kind is EclipseKind.TOTAL
    assert e.obscuration == 1.0
    assert minutes_between(e.peak, TimeInstant.from_calendar(2024, 4, 8, 18, 17)) < 5.0
    assert e.latitude == pytest.approx(25.3, abs=1.5)
    assert e.longitude == pytest.approx(-104.1, abs=1.5)
    assert e.distance < 6378.0


def test_following_eclipses_are_annular_then_partial(total_2024_april):
    """2024-10-02 annular (greatest at 22.0S 114.5W), then the partial of 2025-03-29."""
    annular = next_global_solar_eclipse(total_2024_april.peak)
    assert annular.kind is EclipseKind.ANNULAR
    assert minutes_between(annular.peak, TimeInstant.from_calendar(2024, 10, 2, 18, 45)) < 10.0
    assert annular.latitude == pytest.approx(-22.0, abs=2.0)
    assert annular.longitude == pytest.approx(-114.5, abs=2.0)
    assert 0.8 < annular.obscuration < 1.0

    partial = next_global_solar_eclipse(annular.peak)
    assert partial.kind is EclipseKind.PARTIAL
    assert minutes_between(partial.peak, TimeInstant.from_calendar(2025, 3, 29, 10, 47)) < 10.0
    assert partial.latitude is None and partial.longitude is None
    assert partial.obscuration is None


def test_moon_shadow_is_closest_at_peak(total_2024_april):
    r = moon_shadow(total_2024_april.peak).r
    assert moon_shadow(total_2024_april.peak.add_days(-0.01)).r > r
    assert moon_shadow(total_2024_april.peak.add_days(+0.01)).r > r


@pytest.fixture(scope="module")
def dallas_2024():
    return search_local_solar_eclipse(TimeInstant.from_calendar(2024, 3, 1), DALLAS)


def test_dallas_totality(dallas_2024):
    """Dallas, 2024-04-08: partial 17:23-20:02 UT, totality 18:40:43-18:44:35 UT."""
    e = dallas_2024
    assert e.kind is EclipseKind.TOTAL
    assert e.obscuration == 1.0
    assert e.total_begin is not None and e.total_end is not None
    assert minutes_between(e.partial_begin.time, TimeInstant.from_calendar(2024, 4, 8, 17, 23)) < 3.0
    assert minutes_between(e.total_begin.time, TimeInstant.from_calendar(2024, 4, 8, 18, 40, 43)) < 3.0
    assert minutes_between(e.total_end.time, TimeInstant.from_calendar(2024, 4, 8, 18, 44, 35)) < 3.0
    assert minutes_between(e.partial_end.time, TimeInstant.from_calendar(2024, 4, 8, 20, 2)) < 3.0


def test_local_contacts_are_ordered(dallas_2024):
    e = dallas_2024
    times = [e.partial_begin.time, e.total_begin.time, e.peak.time, e.total_end.time, e.partial_end.time]
    assert all(a < b for a, b in zip(times, times[1:]))
    assert e.peak.altitude > 60.0
    assert e.partial_begin.altitude > 0.0 and e.partial_end.altitude > 0.0


def test_local_shadow_at_contacts(dallas_2024):
    begin = local_moon_shadow(dallas_2024.partial_begin.time, DALLAS)
    assert begin.r == pytest.approx(begin.p, abs=5.0)
    peak = local_moon_shadow(dallas_2024.peak.time, DALLAS)
    assert peak.r < peak.k


def test_albuquerque_annular_2023():
    """Albuquerque saw about 4.8 minutes of annularity around 16:35 UT on 2023-10-14."""
    e = search_local_solar_eclipse(TimeInstant.from_calendar(2023, 10, 1), ALBUQUERQUE)
    assert e.kind is EclipseKind.ANNULAR
    assert e.total_begin is not None and e.total_end is not None
    assert minutes_between(e.peak.time, TimeInstant.from_calendar(2023, 10, 14, 16, 35)) < 10.0
    assert 3.5 < e.total_begin.time.days_until(e.total_end.time) * 1440.0 < 6.0
    assert 0.8 < e.obscuration < 1.0


def test_london_partial_2025():
    """London, 2025-03-29: partial eclipse, greatest at 11:03 UT."""
    e = search_local_solar_eclipse(TimeInstant.from_calendar(2025, 3, 1), LONDON)
    assert e.kind is EclipseKind.PARTIAL
    assert e.total_begin is None and e.total_end is None
    assert minutes_between(e.peak.time, TimeInstant.from_calendar(2025, 3, 29, 11, 3)) < 5.0
    assert 0.15 < e.obscuration < 0.5
    assert e.partial_begin.time < e.peak.time < e.partial_end.time


def test_london_next_eclipse_is_august_2026():
    """After 2025-03-29 London next sees the Sun eclipsed on the evening of 2026-08-12."""
    first = search_local_solar_eclipse(TimeInstant.from_calendar(2025, 3, 1), LONDON)
    e = next_local_solar_eclipse(first.peak.time, LONDON)
    cal = e.peak.time.to_calendar()
    assert (cal.year, cal.month, cal.day) == (2026, 8, 12)
    assert e.kind is EclipseKind.PARTIAL
    assert e.peak.altitude > 0.0
