# tests/test_search.py

import math

import pytest

from ephemsearch import SearchBracket, SearchStatus, TimeInstant, search
from ephemsearch.search.engine import quad_interp, search_time

ONE_SECOND = 1.0 / 86400.0


def test_linear_root_found():
    f = lambda t: t.ut - 100.3
    res = search(f, TimeInstant(100.0), TimeInstant(101.0))

    assert res.found
    assert res.status is SearchStatus.FOUND
    assert res.time.ut == pytest.approx(100.3, abs=ONE_SECOND)


def test_descending_crossing():
    f = lambda t: 100.3 - t.ut
    res = search(f, TimeInstant(100.0), TimeInstant(101.0))
    assert res.found
    assert res.time.ut == pytest.approx(100.3, abs=ONE_SECOND)


def test_backward_bracket():
    """t1 later than t2 is a valid bracket."""
    f = lambda t: math.sin(2.0 * math.pi * (t.ut - 100.0) / 3.0)
    res = search(f, TimeInstant(102.0), TimeInstant(100.75), tolerance_seconds=0.1)
    assert res.found
    assert res.time.ut == pytest.approx(101.5, abs=0.1 * ONE_SECOND)


def test_nonlinear_root_to_tolerance():
    """cos crosses zero at a quarter period; the default tolerance is one second."""
    f = lambda t: math.cos(2.0 * math.pi * t.ut / 29.53)
    res = search(f, TimeInstant(0.0), TimeInstant(14.0))
    assert res.found
    assert res.time.ut == pytest.approx(29.53 / 4.0, abs=ONE_SECOND)
    assert res.iterations < 20


def test_same_sign_has_no_bracket():
    f = lambda t: 1.0 + t.ut * t.ut
    res = search(f, TimeInstant(-1.0), TimeInstant(1.0))
    assert res.status is SearchStatus.NO_BRACKET
    assert res.time is None
    assert not res.found


def test_endpoint_zero_is_a_root():
    f = lambda t: t.ut - 5.0
    res = search(f, TimeInstant(5.0), TimeInstant(6.0))
    assert res.found
    assert res.time.ut == 5.0
    assert res.iterations == 0


def test_iteration_ceiling_returns_best_estimate(caplog):
    """A step function defeats interpolation; five halvings of a 10-day bracket are not enough."""
    f = lambda t: -1.0 if t.ut < 3.21 else 1.0
    with caplog.at_level("WARNING", logger="ephemsearch.search.engine"):
        res = search(f, TimeInstant(0.0), TimeInstant(10.0), max_iterations=5)

    assert res.status is SearchStatus.NOT_CONVERGED
    assert not res.found
    assert res.iterations == 5
    assert 0.0 <= res.time.ut <= 10.0
    assert "did not converge" in caplog.text


def test_step_function_converges_with_enough_iterations():
    f = lambda t: -1.0 if t.ut < 3.21 else 1.0
    res = search(f, TimeInstant(0.0), TimeInstant(10.0))
    assert res.found
    assert res.time.ut == pytest.approx(3.21, abs=5.0 * ONE_SECOND)


def test_never_evaluates_outside_bracket():
    seen = []

    def f(t):
        seen.append(t.ut)
        return (t.ut - 2.2) ** 3 + 0.1 * (t.ut - 2.2)

    res = search(f, TimeInstant(0.0), TimeInstant(7.0), tolerance_seconds=0.01)
    assert res.found
    assert seen
    assert all(0.0 <= x <= 7.0 for x in seen)


def test_known_endpoint_values_are_not_recomputed():
    seen = []

    def f(t):
        seen.append(t.ut)
        return t.ut - 1.0

    search(f, TimeInstant(0.0), TimeInstant(4.0), f1=-1.0, f2=3.0)
    assert 0.0 not in seen
    assert 4.0 not in seen


def test_search_time_drops_failures():
    assert search_time(lambda t: 1.0, TimeInstant(0.0), TimeInstant(1.0)) is None
    t = search_time(lambda t: t.ut - 0.5, TimeInstant(0.0), TimeInstant(1.0))
    assert t.ut == pytest.approx(0.5, abs=ONE_SECOND)


def test_quad_interp_single_root():
    # f(x) = x^2 - 0.25 sampled at x = -1, 0, +1 has roots at +/-0.5: ambiguous
    assert quad_interp(10.0, 1.0, 0.75, -0.25, 0.75) is None

    # f(x) = x + 0.5 (Q = 0): root at x = -0.5
    q = quad_interp(10.0, 2.0, -0.5, 0.5, 1.5)
    assert q.x == pytest.approx(-0.5)
    assert q.t == pytest.approx(9.0)
    assert q.df_dt == pytest.approx(0.5)


def test_quad_interp_no_real_root():
    assert quad_interp(0.0, 1.0, 2.0, 1.0, 2.0) is None


def test_search_bracket_orders_either_way():
    forward = SearchBracket(TimeInstant(10.0), TimeInstant(12.5), -1)
    backward = SearchBracket(TimeInstant(12.5), TimeInstant(10.0), 1)

    for bracket in (forward, backward):
        assert bracket.lower.ut == 10.0
        assert bracket.upper.ut == 12.5
        assert bracket.width_days == pytest.approx(2.5)
        assert bracket.contains(TimeInstant(11.0))
        assert bracket.contains(TimeInstant(12.5))
        assert not bracket.contains(TimeInstant(9.99))
