# tests/test_config.py

import pytest

from ephemsearch.config import Settings, get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for name in (
        "EPHEMSEARCH_DELTA_T",
        "EPHEMSEARCH_DELTAT_TABLE",
        "EPHEMSEARCH_SEARCH_MAX_ITER",
        "EPHEMSEARCH_LIGHT_TIME_MAX_ITER",
        "EPHEMSEARCH_RISE_SET_STEP_HOURS",
    ):
        monkeypatch.delenv(name, raising=False)

    s = get_settings()
    assert s == Settings()
    assert s.search_max_iterations == 50
    assert s.light_time_max_iterations == 10
    assert s.rise_set_step_hours == 2.0


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("EPHEMSEARCH_DELTA_T", " JPLHorizons ")
    monkeypatch.setenv("EPHEMSEARCH_SEARCH_MAX_ITER", "80")
    monkeypatch.setenv("EPHEMSEARCH_LIGHT_TIME_MAX_ITER", "6")
    monkeypatch.setenv("EPHEMSEARCH_RISE_SET_STEP_HOURS", "1.5")

    s = get_settings()
    assert s.delta_t_model == "jplhorizons"
    assert s.search_max_iterations == 80
    assert s.light_time_max_iterations == 6
    assert s.rise_set_step_hours == 1.5


def test_settings_are_cached(monkeypatch):
    monkeypatch.delenv("EPHEMSEARCH_SEARCH_MAX_ITER", raising=False)
    first = get_settings()
    monkeypatch.setenv("EPHEMSEARCH_SEARCH_MAX_ITER", "99")
    assert get_settings() is first


@pytest.mark.parametrize(
    "name, value",
    [
        ("EPHEMSEARCH_DELTA_T", "bogus"),
        ("EPHEMSEARCH_SEARCH_MAX_ITER", "4"),
        ("EPHEMSEARCH_SEARCH_MAX_ITER", "many"),
        ("EPHEMSEARCH_LIGHT_TIME_MAX_ITER", "2"),
        ("EPHEMSEARCH_RISE_SET_STEP_HOURS", "0"),
        ("EPHEMSEARCH_RISE_SET_STEP_HOURS", "12"),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        get_settings()
