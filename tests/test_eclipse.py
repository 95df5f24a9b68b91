# tests/test_eclipse.py

import math

import pytest

from ephemsearch import EclipseKind, TimeInstant, next_lunar_eclipse, search_lunar_eclipse
from ephemsearch.events.eclipse import LunarEclipseInfo, earth_shadow, obscuration


def minutes_between(a: TimeInstant, b: TimeInstant) -> float:
    return abs(a.ut - b.ut) * 1440.0


@pytest.fixture(scope="module")
def eclipse_2025_march():
    return search_lunar_eclipse(TimeInstant.from_calendar(2025, 3, 1))


def test_total_eclipse_2025_march_14(eclipse_2025_march):
    """Total lunar eclipse, greatest 2025-03-14 06:58 UTC, totality 65 min."""
    e = eclipse_2025_march
    assert e.kind is EclipseKind.TOTAL
    assert e.obscuration == 1.0
    assert minutes_between(e.peak, TimeInstant.from_calendar(2025, 3, 14, 6, 58)) < 10.0
    assert e.sd_total == pytest.approx(32.5, abs=3.0)
    assert e.sd_penum > e.sd_partial > e.sd_total > 0.0


def test_contacts_are_ordered(eclipse_2025_march):
    contacts = eclipse_2025_march.contacts()
    assert list(contacts) == ["P1", "U1", "U2", "U3", "U4", "P4"]
    times = list(contacts.values())
    assert all(a < b for a, b in zip(times, times[1:]))
    assert contacts["U2"] < eclipse_2025_march.peak < contacts["U3"]


def test_penumbral_eclipse_2024_march_25():
    e = search_lunar_eclipse(TimeInstant.from_calendar(2024, 1, 1))
    assert e.kind is EclipseKind.PENUMBRAL
    assert e.obscuration == 0.0
    assert e.sd_partial == 0.0 and e.sd_total == 0.0
    assert minutes_between(e.peak, TimeInstant.from_calendar(2024, 3, 25, 7, 13)) < 10.0
    assert list(e.contacts()) == ["P1", "P4"]


def test_next_eclipse_is_the_partial_of_september_2024():
    first = search_lunar_eclipse(TimeInstant.from_calendar(2024, 1, 1))
    second = next_lunar_eclipse(first.peak)
    assert second.kind is EclipseKind.PARTIAL
    assert 0.0 < second.obscuration < 0.2
    assert minutes_between(second.peak, TimeInstant.from_calendar(2024, 9, 18, 2, 44)) < 10.0
    assert list(second.contacts()) == ["P1", "U1", "U4", "P4"]


def test_shadow_at_peak_is_closest():
    e = search_lunar_eclipse(TimeInstant.from_calendar(2024, 1, 1))
    r_peak = earth_shadow(e.peak).r
    assert earth_shadow(e.peak.add_days(-0.02)).r > r_peak
    assert earth_shadow(e.peak.add_days(+0.02)).r > r_peak


def test_umbra_and_penumbra_radii_at_moon():
    """At the Moon the umbra is ~4700 km across the radius and the penumbra ~8000 km."""
    s = earth_shadow(TimeInstant.from_calendar(2025, 3, 14, 6, 58))
    assert 4300.0 < s.k < 4900.0
    assert 7900.0 < s.p < 8500.0
    assert s.k < s.p


def test_obscuration_geometry():
    # two unit discs one radius apart
    assert obscuration(1.0, 1.0, 1.0) == pytest.approx((2.0 * math.pi / 3.0 - math.sqrt(3.0) / 2.0) / math.pi)
    assert obscuration(1.0, 1.0, 2.5) == 0.0
    assert obscuration(1.0, 2.0, 0.5) == 1.0
    assert obscuration(2.0, 1.0, 0.0) == pytest.approx(0.25)


@pytest.mark.parametrize("args", [(0.0, 1.0, 1.0), (1.0, -1.0, 1.0), (1.0, 1.0, -0.1)])
def test_obscuration_rejects_bad_input(args):
    with pytest.raises(ValueError):
        obscuration(*args)


def test_contacts_skip_missing_phases():
    peak = TimeInstant.from_calendar(2024, 3, 25, 7, 13)
    info = LunarEclipseInfo(EclipseKind.PENUMBRAL, 0.0, peak, 120.0, 0.0, 0.0)
    contacts = info.contacts()
    assert set(contacts) == {"P1", "P4"}
    assert peak.days_until(contacts["P4"]) * 1440.0 == pytest.approx(120.0)
