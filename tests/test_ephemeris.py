# tests/test_ephemeris.py

import sys

import numpy as np
import pytest

from ephemsearch import (
    Body,
    InvalidBody,
    ObserverLocation,
    OrbitalModel,
    ProviderUnavailable,
    TimeInstant,
    UnknownBody,
    default_ephemeris,
    geo_vector,
    horizon,
    to_equatorial,
)
from ephemsearch.constants import KM_PER_AU
from ephemsearch.ephemeris import require_ephemeris
from ephemsearch.ephemeris.analytic import AnalyticEphemeris
from ephemsearch.ephemeris.jpl import JplEphemeris
from ephemsearch.ephemeris.stars import StarCatalog


class FakeSegment:
    def __init__(self, pos, vel):
        self.pos = np.array(pos, dtype=float)
        self.vel = np.array(vel, dtype=float)
        self.calls = []

    def compute_and_differentiate(self, jd):
        self.calls.append(jd)
        return self.pos, self.vel


class FakeKernel(dict):
    closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def kernel():
    return FakeKernel({
        (0, 10): FakeSegment((1000.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
        (0, 3): FakeSegment((KM_PER_AU, 0.0, 0.0), (0.0, 2.0e6, 0.0)),
        (3, 399): FakeSegment((-4000.0, 0.0, 0.0), (0.0, -100.0, 0.0)),
        (3, 301): FakeSegment((380000.0, 0.0, 0.0), (0.0, 8.0e4, 0.0)),
        (0, 4): FakeSegment((0.0, 1.5 * KM_PER_AU, 0.0), (0.0, 0.0, 0.0)),
    })


def test_body_parse():
    assert Body.parse("mars") is Body.MARS
    assert Body.parse(" Star3 ") is Body.STAR3
    assert Body.parse("STAR3") is Body.STAR3
    with pytest.raises(ValueError):
        Body.parse("Vulcan")


def test_body_flags():
    assert Body.STAR8.is_star
    assert not Body.MOON.is_star
    assert Body.EARTH.is_planet
    assert not Body.SUN.is_planet


def test_default_ephemeris_is_shared_and_analytic():
    eph = default_ephemeris()
    assert eph is default_ephemeris()
    assert isinstance(eph, AnalyticEphemeris)
    assert isinstance(eph, OrbitalModel)


def test_analytic_earth_orbit():
    state = AnalyticEphemeris().helio_state(Body.EARTH, TimeInstant.from_calendar(2024, 7, 5))
    # aphelion: 1.0167 AU, about 29.3 km/s
    assert state.length() == pytest.approx(1.0167, abs=0.001)
    speed = float(np.linalg.norm(state.velocity_array())) * KM_PER_AU / 86400.0
    assert speed == pytest.approx(29.3, abs=0.2)


@pytest.mark.parametrize(
    "body, lo, hi",
    [
        (Body.MERCURY, 0.30, 0.47),
        (Body.VENUS, 0.71, 0.73),
        (Body.MARS, 1.38, 1.67),
        (Body.JUPITER, 4.95, 5.46),
        (Body.SATURN, 9.0, 10.1),
        (Body.URANUS, 18.2, 20.1),
        (Body.NEPTUNE, 29.7, 30.4),
        (Body.PLUTO, 29.6, 49.4),
    ],
)
def test_analytic_planet_distances(body, lo, hi):
    r = AnalyticEphemeris().helio_state(body, TimeInstant.from_calendar(2024, 1, 1)).length()
    assert lo < r < hi


def test_analytic_sun_is_origin():
    assert AnalyticEphemeris().helio_state(Body.SUN, TimeInstant(0.0)).length() == 0.0


def test_star_catalog_define_and_lookup():
    cat = StarCatalog()
    cat.define(Body.STAR1, 6.0, 10.0, 1000.0)
    assert Body.STAR1 in cat
    assert cat.list() == ["Star1"]
    assert cat.get(Body.STAR1).dec == 10.0

    cat.undefine(Body.STAR1)
    assert Body.STAR1 not in cat
    with pytest.raises(UnknownBody):
        cat.get(Body.STAR1)


@pytest.mark.parametrize(
    "body, ra, dec, dist, exc",
    [
        (Body.MARS, 1.0, 0.0, 10.0, InvalidBody),
        (Body.STAR2, 24.0, 0.0, 10.0, ValueError),
        (Body.STAR2, 1.0, 91.0, 10.0, ValueError),
        (Body.STAR2, 1.0, 0.0, 0.5, ValueError),
    ],
)
def test_star_catalog_rejects_bad_definitions(body, ra, dec, dist, exc):
    with pytest.raises(exc):
        StarCatalog().define(body, ra, dec, dist)


def test_undefined_star_is_an_error():
    with pytest.raises(UnknownBody):
        AnalyticEphemeris().helio_state(Body.STAR4, TimeInstant(0.0))


def test_star_direction_from_earth():
    """A distant star keeps its catalog coordinates (within aberration)."""
    eph = AnalyticEphemeris()
    eph.stars.define(Body.STAR1, 6.0, 10.0, 1000.0)
    t = TimeInstant.from_calendar(2024, 1, 1)
    equ = to_equatorial(geo_vector(Body.STAR1, t, ephemeris=eph), of_date=False)
    assert equ.ra == pytest.approx(6.0, abs=0.001)
    assert equ.dec == pytest.approx(10.0, abs=0.01)

    hor = horizon(Body.STAR1, t, ObserverLocation(10.0, 0.0), ephemeris=eph)
    assert -90.0 <= hor.altitude <= 90.0


def test_jpl_helio_state(kernel):
    eph = JplEphemeris(kernel)
    t = TimeInstant.from_calendar(2024, 1, 1)

    mars = eph.helio_state(Body.MARS, t)
    assert mars.x == pytest.approx(-1000.0 / KM_PER_AU)
    assert mars.y == pytest.approx(1.5)
    assert mars.velocity[0] == pytest.approx(-1.0 / KM_PER_AU)

    earth = eph.helio_state(Body.EARTH, t)
    assert earth.x == pytest.approx((KM_PER_AU - 4000.0 - 1000.0) / KM_PER_AU)
    assert earth.velocity[1] == pytest.approx((2.0e6 - 100.0) / KM_PER_AU)

    # segments are evaluated on the TT Julian date
    assert kernel[0, 4].calls[-1] == pytest.approx(t.jd_tt)


def test_jpl_moon_relative_to_earth(kernel):
    eph = JplEphemeris(kernel)
    t = TimeInstant.from_calendar(2024, 1, 1)
    moon = eph.helio_state(Body.MOON, t)
    earth = eph.helio_state(Body.EARTH, t)
    assert (moon.x - earth.x) * KM_PER_AU == pytest.approx(384000.0, abs=1e-3)


def test_jpl_missing_segment(kernel):
    eph = JplEphemeris(kernel)
    with pytest.raises(InvalidBody):
        eph.helio_state(Body.JUPITER, TimeInstant(0.0))


def test_jpl_stars_and_context_manager(kernel):
    with JplEphemeris(kernel) as eph:
        eph.stars.define(Body.STAR5, 1.0, 2.0, 10.0)
        assert eph.helio_state(Body.STAR5, TimeInstant(0.0)).length() > 0.0
    assert kernel.closed


def test_jpl_open_without_jplephem(monkeypatch):
    monkeypatch.setitem(sys.modules, "jplephem", None)
    monkeypatch.setitem(sys.modules, "jplephem.spk", None)
    with pytest.raises(ProviderUnavailable):
        JplEphemeris.open("de440s.bsp")
    with pytest.raises(ProviderUnavailable):
        require_ephemeris()
