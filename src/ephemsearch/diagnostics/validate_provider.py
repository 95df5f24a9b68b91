#!/usr/bin/env python3
"""
Compare the analytic orbital model against a JPL kernel and plot the
geocentric direction error of each body over a span of years.
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ephemsearch.constants import DAYS_PER_TROPICAL_YEAR
from ephemsearch.core.errors import ProviderUnavailable
from ephemsearch.core.time import TimeInstant
from ephemsearch.core.types import Body
from ephemsearch.ephemeris import OrbitalModel
from ephemsearch.ephemeris.analytic import AnalyticEphemeris
from ephemsearch.ephemeris.jpl import JplEphemeris
from ephemsearch.pipeline.vectors import angle_between, geo_vector

logger = logging.getLogger(__name__)

DEFAULT_BODIES = (Body.SUN, Body.MOON, Body.MERCURY, Body.VENUS, Body.MARS, Body.JUPITER, Body.SATURN)


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise ProviderUnavailable('Need matplotlib. Install: pip install "ephemsearch[diagnostics]"') from e


def time_grid(year_start: int, year_end: int, step_days: float) -> List[TimeInstant]:
    t0 = TimeInstant.from_calendar(year_start, 1, 1)
    t1 = TimeInstant.from_calendar(year_end, 1, 1)
    return [TimeInstant(ut) for ut in np.arange(t0.ut, t1.ut, step_days)]


def direction_residuals(
    model: OrbitalModel,
    reference: OrbitalModel,
    bodies: Sequence[Body],
    times: Sequence[TimeInstant],
) -> Dict[Body, np.ndarray]:
    """Angle (arcsec) between the geocentric directions given by the two models."""
    out: Dict[Body, np.ndarray] = {}
    for body in bodies:
        errs = np.empty(len(times))
        for i, t in enumerate(times):
            a = geo_vector(body, t, False, model)
            b = geo_vector(body, t, False, reference)
            errs[i] = angle_between(a, b) * 3600.0
        out[body] = errs
        logger.info("%s: max %.1f arcsec, rms %.1f arcsec", body.value, errs.max(), np.sqrt(np.mean(errs ** 2)))
    return out


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Validate the analytic orbital model against a JPL SPK kernel.")
    p.add_argument("kernel", help="path to a DE-series .bsp file (e.g. de440s.bsp)")
    p.add_argument("--year-start", type=int, default=1900)
    p.add_argument("--year-end", type=int, default=2100)
    p.add_argument("--step-days", type=float, default=30.0)
    p.add_argument("--out-png", default="provider_validation.png")
    args = p.parse_args(argv)

    plt = _need_matplotlib()

    print(f"Loading kernel {args.kernel}...")
    times = time_grid(args.year_start, args.year_end, args.step_days)
    print(f"Validating {len(times)} points from {args.year_start} to {args.year_end}...")

    with JplEphemeris.open(args.kernel) as reference:
        residuals = direction_residuals(AnalyticEphemeris(), reference, DEFAULT_BODIES, times)

    years = np.array([2000.0 + t.ut / DAYS_PER_TROPICAL_YEAR for t in times])
    fig, axs = plt.subplots(len(residuals), 1, figsize=(12, 2.2 * len(residuals)), sharex=True)
    for ax, (body, errs) in zip(np.atleast_1d(axs), residuals.items()):
        ax.scatter(years, errs, s=1, alpha=0.5)
        ax.set_title(f"{body.value}: geocentric direction error (analytic - kernel)")
        ax.set_ylabel("arcsec")
        ax.grid(True, alpha=0.3)
    np.atleast_1d(axs)[-1].set_xlabel("Year")

    plt.tight_layout()
    plt.savefig(args.out_png, dpi=150)
    print(f"Validation complete. Plot saved to {args.out_png}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
