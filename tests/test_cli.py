# tests/test_cli.py

import sys

import pytest

from ephemsearch.cli import _parse_time, main


def test_time_from_date(capsys):
    assert main(["time", "2000-01-01T12:00"]) == 0
    out = capsys.readouterr().out
    assert "UTC      = 2000-01-01T12:00:00.000Z" in out
    assert "JD (UT)  = 2451545.00000000" in out
    assert "Delta T" in out


def test_time_from_julian_date(capsys):
    assert main(["time", "--jd", "2440587.5"]) == 0
    assert "1970-01-01T00:00:00.000Z" in capsys.readouterr().out


def test_parse_time_accepts_trailing_z():
    assert str(_parse_time("2024-03-20T03:06:00Z")) == "2024-03-20T03:06:00.000Z"


def test_bad_date_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["time", "2023-02-30"])
    assert exc.value.code == 2


def test_unknown_body_is_a_usage_error():
    with pytest.raises(SystemExit):
        main(["position", "vulcan", "2024-01-01"])


def test_bad_observer_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["riseset", "sun", "2024-01-01", "--lat", "95", "--lon", "0"])
    assert exc.value.code == 2
    assert "latitude" in capsys.readouterr().err


def test_year_out_of_range_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["seasons", "10000"])
    assert exc.value.code == 2


def test_missing_extras_exit_with_an_error(monkeypatch, capsys):
    monkeypatch.setitem(sys.modules, "matplotlib", None)
    monkeypatch.setitem(sys.modules, "matplotlib.pyplot", None)
    assert main(["validate", "de440s.bsp"]) == 1
    assert "error" in capsys.readouterr().err


def test_position(capsys):
    assert main(["position", "mars", "2025-01-16", "--lat", "51.5", "--lon", "-0.13"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Mars at 2025-01-16T00:00:00.000Z")
    assert "RA/Dec J2000" in out
    assert "Altitude" in out


def test_riseset(capsys):
    assert main(["riseset", "sun", "2024-06-21", "--lat", "51.5074", "--lon", "-0.1278"]) == 0
    out = capsys.readouterr().out
    assert "rise: 2024-06-21T03:4" in out
    assert "set : 2024-06-21T20:" in out


def test_riseset_none_in_window(capsys):
    assert main(["riseset", "sun", "2024-06-21", "--lat", "69.65", "--lon", "18.96"]) == 0
    assert "none in window" in capsys.readouterr().out


def test_quarters(capsys):
    assert main(["quarters", "2024-01-05", "--count", "2"]) == 0
    out = capsys.readouterr().out
    assert "2024-01-11T" in out and "New Moon" in out
    assert "First Quarter" in out


def test_seasons(capsys):
    assert main(["seasons", "2024"]) == 0
    out = capsys.readouterr().out
    assert "March equinox     : 2024-03-20T" in out
    assert "December solstice : 2024-12-21T" in out


def test_illum(capsys):
    assert main(["illum", "saturn", "2017-10-16"]) == 0
    out = capsys.readouterr().out
    assert "magnitude" in out
    assert "ring tilt" in out


def test_eclipse(capsys):
    assert main(["-v", "eclipse", "2025-03-01"]) == 0
    out = capsys.readouterr().out
    assert "total" in out
    assert "U2:" in out


def test_lunar_apsides(capsys):
    assert main(["apsis", "moon", "2023-01-01", "--count", "2"]) == 0
    out = capsys.readouterr().out
    assert "2023-01-08" in out and "apogee" in out
    assert "2023-01-21" in out and "perigee" in out


def test_greatest_elongation(capsys):
    assert main(["elongation", "venus", "2024-12-01"]) == 0
    assert "evening" in capsys.readouterr().out


def test_elongation_of_an_outer_planet_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["elongation", "mars", "2024-12-01"])
    assert exc.value.code == 2


def test_local_solar_eclipse(capsys):
    assert main(["solar-eclipse", "2024-03-01", "--lat", "32.78", "--lon", "-96.80"]) == 0
    out = capsys.readouterr().out
    assert "2024-04-08" in out and "total" in out
    assert "total begin" in out


def test_solar_eclipse_needs_both_coordinates():
    with pytest.raises(SystemExit) as exc:
        main(["solar-eclipse", "2024-03-01", "--lat", "32.78"])
    assert exc.value.code == 2


def test_transit(capsys):
    assert main(["transit", "mercury", "2019-01-01"]) == 0
    assert "2019-11-11" in capsys.readouterr().out
