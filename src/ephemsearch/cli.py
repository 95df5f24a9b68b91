from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import os
import sys
from datetime import datetime, timezone

_LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = os.environ.get("EPHEMSEARCH_LOG", "WARNING").strip().upper() or "WARNING"
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)


def _parse_time(s: str):
    """YYYY-MM-DD or YYYY-MM-DDTHH:MM[:SS], UTC."""
    from ephemsearch import TimeInstant

    text = s.strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid UTC date/time {s!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return TimeInstant.from_datetime(dt)


def _parse_body(s: str):
    from ephemsearch import Body

    try:
        return Body.parse(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _add_observer_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, required=True, help="Observer latitude in degrees")
    p.add_argument("--lon", type=float, required=True, help="Observer longitude in degrees (positive East)")
    p.add_argument("--height", type=float, default=0.0, help="Observer height in meters")


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def cmd_time(argv: list[str]) -> int:
    from ephemsearch import TimeInstant

    p = argparse.ArgumentParser(prog="ephemsearch time", description="Show an instant in UT, TT and Julian dates.")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("date", nargs="?", type=_parse_time, help="UTC date/time, YYYY-MM-DD[THH:MM[:SS]]")
    g.add_argument("--jd", type=float, help="Julian Date (UT)")
    args = p.parse_args(argv)

    t = args.date if args.jd is None else TimeInstant.from_julian_date(args.jd)
    print(f"UTC      = {t}")
    print(f"JD (UT)  = {t.jd:.8f}")
    print(f"UT days  = {t.ut:.8f}  (since J2000)")
    print(f"Delta T  = {t.delta_t_seconds:.3f} s")
    print(f"TT days  = {t.tt:.8f}")
    print(f"JD (TT)  = {t.jd_tt:.8f}")
    return 0


def cmd_position(argv: list[str]) -> int:
    from ephemsearch import Refraction, ObserverLocation, geo_vector, horizon, to_ecliptic, to_equatorial

    p = argparse.ArgumentParser(prog="ephemsearch position", description="Apparent geocentric (and topocentric) position of a body.")
    p.add_argument("body", type=_parse_body)
    p.add_argument("date", type=_parse_time)
    p.add_argument("--lat", type=float, help="Observer latitude in degrees")
    p.add_argument("--lon", type=float, help="Observer longitude in degrees (positive East)")
    p.add_argument("--height", type=float, default=0.0)
    p.add_argument("--no-refraction", action="store_true")
    args = p.parse_args(argv)

    vec = geo_vector(args.body, args.date)
    j2000 = to_equatorial(vec, of_date=False)
    ofdate = to_equatorial(vec, of_date=True)
    ecl = to_ecliptic(vec)

    print(f"{args.body.value} at {args.date}")
    print(f"  RA/Dec J2000    = {j2000.ra:.6f} h  {j2000.dec:+.6f} deg")
    print(f"  RA/Dec of date  = {ofdate.ra:.6f} h  {ofdate.dec:+.6f} deg")
    print(f"  Ecliptic (date) = {ecl.elon:.6f} deg  {ecl.elat:+.6f} deg")
    print(f"  Distance        = {vec.length():.9f} AU")

    if args.lat is not None and args.lon is not None:
        obs = ObserverLocation(args.lat, args.lon, args.height)
        refr = Refraction.NONE if args.no_refraction else Refraction.NORMAL
        hor = horizon(args.body, args.date, obs, refr)
        print(f"  Altitude        = {hor.altitude:+.4f} deg (refraction {hor.refraction:.4f})")
        print(f"  Azimuth         = {hor.azimuth:.4f} deg")
    return 0


def cmd_riseset(argv: list[str]) -> int:
    from ephemsearch import Direction, ObserverLocation, search_rise_set

    p = argparse.ArgumentParser(prog="ephemsearch riseset", description="Next rise and set of a body.")
    p.add_argument("body", type=_parse_body)
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    _add_observer_args(p)
    p.add_argument("--days", type=float, default=1.0, help="Search window in days (negative searches backward)")
    args = p.parse_args(argv)

    obs = ObserverLocation(args.lat, args.lon, args.height)
    for direction in (Direction.RISE, Direction.SET):
        t = search_rise_set(args.body, obs, direction, args.date, args.days)
        label = "rise" if direction is Direction.RISE else "set "
        print(f"  {label}: {t if t is not None else 'none in window'}")
    return 0


def cmd_quarters(argv: list[str]) -> int:
    from ephemsearch import moon_quarters

    p = argparse.ArgumentParser(prog="ephemsearch quarters", description="List lunar quarters.")
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    p.add_argument("--count", type=int, default=8)
    args = p.parse_args(argv)

    for q in moon_quarters(args.date, args.count):
        print(f"  {q.time}  {q.name}")
    return 0


def cmd_seasons(argv: list[str]) -> int:
    from ephemsearch import seasons

    p = argparse.ArgumentParser(prog="ephemsearch seasons", description="Equinoxes and solstices of a year.")
    p.add_argument("year", type=int)
    args = p.parse_args(argv)

    s = seasons(args.year)
    print(f"  March equinox     : {s.mar_equinox}")
    print(f"  June solstice     : {s.jun_solstice}")
    print(f"  September equinox : {s.sep_equinox}")
    print(f"  December solstice : {s.dec_solstice}")
    return 0


def cmd_illum(argv: list[str]) -> int:
    from ephemsearch import illumination

    p = argparse.ArgumentParser(prog="ephemsearch illum", description="Phase and visual magnitude of a body.")
    p.add_argument("body", type=_parse_body)
    p.add_argument("date", type=_parse_time)
    args = p.parse_args(argv)

    info = illumination(args.body, args.date)
    print(f"{args.body.value} at {args.date}")
    print(f"  magnitude      = {info.mag:+.2f}")
    print(f"  phase angle    = {info.phase_angle:.3f} deg")
    print(f"  lit fraction   = {info.phase_fraction:.4f}")
    print(f"  helio distance = {info.helio_dist:.6f} AU")
    print(f"  geo distance   = {info.geo_dist:.6f} AU")
    if info.ring_tilt:
        print(f"  ring tilt      = {info.ring_tilt:+.3f} deg")
    return 0


def cmd_eclipse(argv: list[str]) -> int:
    from ephemsearch import next_lunar_eclipse, search_lunar_eclipse

    p = argparse.ArgumentParser(prog="ephemsearch eclipse", description="List lunar eclipses.")
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    p.add_argument("--count", type=int, default=1)
    args = p.parse_args(argv)

    e = search_lunar_eclipse(args.date)
    for i in range(args.count):
        if i > 0:
            e = next_lunar_eclipse(e.peak)
        print(f"  {e.peak}  {e.kind.value:9s}  obscuration {e.obscuration:.3f}")
        for name, t in e.contacts().items():
            print(f"      {name}: {t}")
    return 0


def cmd_solar_eclipse(argv: list[str]) -> int:
    from ephemsearch import (
        ObserverLocation,
        next_global_solar_eclipse,
        next_local_solar_eclipse,
        search_global_solar_eclipse,
        search_local_solar_eclipse,
    )

    p = argparse.ArgumentParser(prog="ephemsearch solar-eclipse", description="List solar eclipses, globally or for an observer.")
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    p.add_argument("--count", type=int, default=1)
    p.add_argument("--lat", type=float, help="Observer latitude in degrees")
    p.add_argument("--lon", type=float, help="Observer longitude in degrees (positive East)")
    p.add_argument("--height", type=float, default=0.0)
    args = p.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        p.error("--lat and --lon go together")

    if args.lat is None:
        e = search_global_solar_eclipse(args.date)
        for i in range(args.count):
            if i > 0:
                e = next_global_solar_eclipse(e.peak)
            line = f"  {e.peak}  {e.kind.value:9s}"
            if e.latitude is not None:
                line += f"  at {e.latitude:+.2f} {e.longitude:+.2f}  obscuration {e.obscuration:.3f}"
            print(line)
        return 0

    obs = ObserverLocation(args.lat, args.lon, args.height)
    e = search_local_solar_eclipse(args.date, obs)
    for i in range(args.count):
        if i > 0:
            e = next_local_solar_eclipse(e.peak.time, obs)
        print(f"  {e.peak.time}  {e.kind.value:9s}  obscuration {e.obscuration:.3f}")
        for name, ev in (("begin", e.partial_begin), ("total begin", e.total_begin), ("peak", e.peak),
                         ("total end", e.total_end), ("end", e.partial_end)):
            if ev is not None:
                print(f"      {name:11s}: {ev.time}  sun altitude {ev.altitude:+.2f}")
    return 0


def cmd_apsis(argv: list[str]) -> int:
    from ephemsearch import Body, next_lunar_apsis, next_planet_apsis, search_lunar_apsis, search_planet_apsis

    p = argparse.ArgumentParser(prog="ephemsearch apsis", description="Perigees/apogees of the Moon or perihelia/aphelia of a planet.")
    p.add_argument("body", type=_parse_body)
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    p.add_argument("--count", type=int, default=2)
    args = p.parse_args(argv)

    if args.body is Body.MOON:
        a = search_lunar_apsis(args.date)
        names = ("perigee", "apogee")
    else:
        a = search_planet_apsis(args.body, args.date)
        names = ("perihelion", "aphelion")
    for i in range(args.count):
        if i > 0:
            a = next_lunar_apsis(a) if args.body is Body.MOON else next_planet_apsis(args.body, a)
        print(f"  {a.time}  {names[a.kind]:10s}  {a.dist_au:.6f} AU  {a.dist_km:,.0f} km")
    return 0


def cmd_elongation(argv: list[str]) -> int:
    from ephemsearch import search_max_elongation

    p = argparse.ArgumentParser(prog="ephemsearch elongation", description="Greatest elongations of Mercury or Venus.")
    p.add_argument("body", type=_parse_body)
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    p.add_argument("--count", type=int, default=1)
    args = p.parse_args(argv)

    t = args.date
    for _ in range(args.count):
        info = search_max_elongation(args.body, t)
        print(f"  {info.time}  {info.visibility:7s}  {info.elongation:.2f} deg")
        t = info.time.add_days(1.0)
    return 0


def cmd_transit(argv: list[str]) -> int:
    from ephemsearch import next_transit, search_transit

    p = argparse.ArgumentParser(prog="ephemsearch transit", description="Transits of Mercury or Venus across the Sun.")
    p.add_argument("body", type=_parse_body)
    p.add_argument("date", type=_parse_time, help="Search start (UTC)")
    p.add_argument("--count", type=int, default=1)
    args = p.parse_args(argv)

    tr = search_transit(args.body, args.date)
    for i in range(args.count):
        if i > 0:
            tr = next_transit(args.body, tr.peak)
        print(f"  {tr.peak}  start {tr.start}  finish {tr.finish}  separation {tr.separation:.2f} arcmin")
    return 0


def main(argv: list[str] | None = None) -> int:
    from ephemsearch.core.errors import (
        EphemSearchError,
        InvalidBody,
        InvalidCalendarValue,
        InvalidObserver,
        UnknownBody,
    )

    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="ephemsearch", description="Astronomical positions and event searches.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("time", help="Show an instant in UT, TT and Julian dates.")
    sub.add_parser("position", help="Apparent position of a body.")
    sub.add_parser("riseset", help="Next rise and set of a body for an observer.")
    sub.add_parser("quarters", help="List lunar quarters.")
    sub.add_parser("seasons", help="Equinoxes and solstices of a year.")
    sub.add_parser("illum", help="Phase and visual magnitude of a body.")
    sub.add_parser("eclipse", help="List lunar eclipses.")
    sub.add_parser("solar-eclipse", help="List solar eclipses, globally or for an observer.")
    sub.add_parser("apsis", help="Perigees/apogees of the Moon or perihelia/aphelia of a planet.")
    sub.add_parser("elongation", help="Greatest elongations of Mercury or Venus.")
    sub.add_parser("transit", help="Transits of Mercury or Venus.")
    sub.add_parser("validate", help="Compare the analytic model with a JPL kernel (needs diagnostics extras).")

    args, rest = p.parse_known_args(argv)
    _configure_logging(args.verbose)

    commands = {
        "time": cmd_time,
        "position": cmd_position,
        "riseset": cmd_riseset,
        "quarters": cmd_quarters,
        "seasons": cmd_seasons,
        "illum": cmd_illum,
        "eclipse": cmd_eclipse,
        "solar-eclipse": cmd_solar_eclipse,
        "apsis": cmd_apsis,
        "elongation": cmd_elongation,
        "transit": cmd_transit,
    }
    try:
        if args.cmd == "validate":
            return _run_module_main("ephemsearch.diagnostics.validate_provider", rest)
        return commands[args.cmd](rest)
    except (InvalidCalendarValue, InvalidObserver, InvalidBody, UnknownBody) as e:
        p.error(f"{args.cmd}: {e}")
    except EphemSearchError as e:
        print(f"ephemsearch {args.cmd}: error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
