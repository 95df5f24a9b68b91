# tests/test_deltat.py

import pytest

from ephemsearch.config import get_settings
from ephemsearch.reference import deltat


@pytest.fixture
def settings_env(monkeypatch):
    """Yield a setter for environment settings; the settings cache is reset around each test."""
    get_settings.cache_clear()
    deltat.load_table.cache_clear()

    def _set(**env):
        for k, v in env.items():
            monkeypatch.setenv(k, v)
        get_settings.cache_clear()

    yield _set
    get_settings.cache_clear()
    deltat.load_table.cache_clear()


def test_em2006_reference_points():
    """Espenak-Meeus polynomial anchors at the start of each segment."""
    assert deltat.delta_t_em2006(2000.0) == pytest.approx(63.86, abs=1e-9)
    assert deltat.delta_t_em2006(1900.0) == pytest.approx(-2.79, abs=1e-9)
    assert deltat.delta_t_em2006(1975.0) == pytest.approx(45.45, abs=1e-9)
    assert deltat.delta_t_em2006(1950.0) == pytest.approx(29.07, abs=1e-9)


@pytest.mark.parametrize("year", [-500.0, 500.0, 1600.0, 1700.0, 1800.0, 1860.0, 1900.0, 1920.0, 1941.0, 1961.0, 1986.0, 2005.0, 2050.0, 2150.0])
def test_em2006_is_nearly_continuous_at_segment_joins(year):
    before = deltat.delta_t_em2006(year - 1e-6)
    after = deltat.delta_t_em2006(year)
    assert after == pytest.approx(before, abs=3.0)


def test_modern_values_are_plausible():
    """Observed ΔT was ~64 s in 2000 and ~69 s in 2020."""
    assert 60.0 < deltat.delta_t_em2006(2010.0) < 75.0
    assert 60.0 < deltat.delta_t_em2006(2024.0) < 80.0


def test_jpl_horizons_freezes_after_2017():
    frozen = deltat.delta_t_em2006(2017.0)
    assert deltat.delta_t_jpl_horizons(2100.0) == pytest.approx(frozen)
    assert deltat.delta_t_jpl_horizons(1990.0) == pytest.approx(deltat.delta_t_em2006(1990.0))


def test_decimal_year_reference_point():
    """y = 2000.0 falls on 2000-01-15."""
    assert deltat.decimal_year_from_ut(14.0) == pytest.approx(2000.0)
    assert deltat.decimal_year_from_ut(14.0 + 365.24219) == pytest.approx(2001.0, abs=1e-6)


def test_table_interpolates_and_blends():
    table = deltat.read_table([
        {"decimal_year": "2000.0", "delta_t_seconds": "64.0"},
        {"decimal_year": "2010.0", "delta_t_seconds": "66.0"},
        {"decimal_year": "2020.0", "delta_t_seconds": "69.0"},
    ])
    assert len(table) == 3
    assert list(table) == [(2000.0, 64.0), (2010.0, 66.0), (2020.0, 69.0)]
    assert table.eval(2005.0) == pytest.approx(65.0)
    assert deltat.delta_t_table(2015.0, table) == pytest.approx(67.5)

    # continuous at the table end, plain polynomial after the blend window
    assert deltat.delta_t_table(2020.0 + 1e-9, table) == pytest.approx(69.0, abs=1e-4)
    assert deltat.delta_t_table(2060.0, table) == pytest.approx(deltat.delta_t_em2006(2060.0))
    assert deltat.delta_t_table(1800.0, table) == pytest.approx(deltat.delta_t_em2006(1800.0))


def test_table_rejects_unsorted_rows():
    with pytest.raises(ValueError):
        deltat.read_table([
            {"decimal_year": "2010.0", "delta_t_seconds": "66.0"},
            {"decimal_year": "2000.0", "delta_t_seconds": "64.0"},
        ])


def test_table_model_reads_csv(tmp_path, settings_env):
    path = tmp_path / "deltat.csv"
    path.write_text("decimal_year,delta_t_seconds\n2000.0,50.0\n2030.0,50.0\n", encoding="utf-8")
    settings_env(EPHEMSEARCH_DELTA_T="table", EPHEMSEARCH_DELTAT_TABLE=str(path))

    assert deltat.delta_t_seconds(2015.0) == pytest.approx(50.0)


def test_missing_table_falls_back_with_warning(tmp_path, settings_env, caplog):
    settings_env(EPHEMSEARCH_DELTA_T="table", EPHEMSEARCH_DELTAT_TABLE=str(tmp_path / "nope.csv"))

    with caplog.at_level("WARNING", logger="ephemsearch.reference.deltat"):
        value = deltat.delta_t_seconds(2015.0)
    assert value == pytest.approx(deltat.delta_t_em2006(2015.0))
    assert "not found" in caplog.text


def test_method_override_and_unknown_method(settings_env):
    settings_env()
    assert deltat.delta_t_seconds(2100.0, method="jplhorizons") == pytest.approx(deltat.delta_t_em2006(2017.0))
    with pytest.raises(ValueError):
        deltat.delta_t_seconds(2000.0, method="bogus")
