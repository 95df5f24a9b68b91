from __future__ import annotations

"""
ephemsearch.reference.deltat

ΔT (= TT − UT) models used by TimeInstant.

Three models are available, chosen once through configuration:

- "em2006": the Espenak–Meeus (NASA Five Millennium Canon) piecewise
  polynomials, valid across roughly −1999..+3000 and extrapolated
  parabolically beyond.
- "jplhorizons": the same polynomials, but frozen at their 2017 value for
  later dates (this is what JPL Horizons does for future epochs).
- "table": a piecewise-linear table of (decimal_year, delta_t_seconds) read
  from a CSV file (e.g. derived from IERS UT1−UTC and leap seconds), with a
  linear blend into the polynomial just past the table end and the plain
  polynomial elsewhere.

The table is only read when the "table" model is selected.
"""

import csv
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from ..config import get_settings
from ..constants import DAYS_PER_TROPICAL_YEAR

logger = logging.getLogger(__name__)


def decimal_year_from_ut(ut: float) -> float:
    """
    Decimal year for UT days since J2000.

    y = 2000 corresponds to 2000-01-15, the reference point of the
    Espenak–Meeus polynomials.
    """
    return 2000.0 + (ut - 14.0) / DAYS_PER_TROPICAL_YEAR


# ---------------------------------------------------------------------------
# Table model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeltaTTable:
    """
    Piecewise-linear ΔT table over decimal-year coordinate.
    """
    x: Tuple[float, ...]   # decimal years (strictly increasing)
    y: Tuple[float, ...]   # ΔT in seconds

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return iter(zip(self.x, self.y))

    def eval(self, xq: float) -> float:
        if not (self.x[0] <= xq <= self.x[-1]):
            raise ValueError(f"x out of range [{self.x[0]}, {self.x[-1]}]: {xq}")
        lo, hi = 0, len(self.x) - 1
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if self.x[mid] <= xq:
                lo = mid
            else:
                hi = mid
        x0, x1 = self.x[lo], self.x[hi]
        y0, y1 = self.y[lo], self.y[hi]
        if x1 == x0:
            return y0
        t = (xq - x0) / (x1 - x0)
        return y0 + t * (y1 - y0)

    @property
    def range(self) -> Tuple[float, float]:
        return (self.x[0], self.x[-1])


def read_table(rows: Iterable[dict], *, xcol: str = "decimal_year", ycol: str = "delta_t_seconds") -> DeltaTTable:
    xs: list[float] = []
    ys: list[float] = []
    for r in rows:
        xs.append(float(r[xcol]))
        ys.append(float(r[ycol]))
    if len(xs) < 2:
        raise ValueError("ΔT table needs at least two rows")
    for i in range(1, len(xs)):
        if not (xs[i] > xs[i - 1]):
            raise ValueError("ΔT table x is not strictly increasing")
    return DeltaTTable(tuple(xs), tuple(ys))


@lru_cache(maxsize=4)
def load_table(path: str) -> Optional[DeltaTTable]:
    """
    Load a ΔT CSV table with columns decimal_year, delta_t_seconds.

    Returns None (and logs a warning) when the file is missing or malformed,
    in which case callers fall back to the polynomial model.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        logger.warning("ΔT table %s not found; using Espenak-Meeus polynomials", p)
        return None
    try:
        with p.open("r", encoding="utf-8", newline="") as f:
            return read_table(csv.DictReader(f))
    except (OSError, KeyError, ValueError) as e:
        logger.warning("Cannot read ΔT table %s (%s); using Espenak-Meeus polynomials", p, e)
        return None


# ---------------------------------------------------------------------------
# Espenak–Meeus (NASA) piecewise polynomial
# ---------------------------------------------------------------------------

def _poly(u: float, coeffs: Tuple[float, ...]) -> float:
    """Horner evaluation for Σ coeffs[k] u^k."""
    acc = 0.0
    for c in reversed(coeffs):
        acc = acc * u + c
    return acc


def delta_t_em2006(y: float) -> float:
    """
    Espenak–Meeus piecewise polynomial ΔT(y) in seconds, y a decimal year.
    """
    if y < -500.0:
        u = (y - 1820.0) / 100.0
        return -20.0 + 32.0 * u * u
    if y < 500.0:
        u = y / 100.0
        return _poly(u, (10583.6, -1014.41, 33.78311, -5.952053, -0.1798452, 0.022174192, 0.0090316521))
    if y < 1600.0:
        u = (y - 1000.0) / 100.0
        return _poly(u, (1574.2, -556.01, 71.23472, 0.319781, -0.8503463, -0.005050998, 0.0083572073))
    if y < 1700.0:
        t = y - 1600.0
        return 120.0 - 0.9808 * t - 0.01532 * t * t + (t ** 3) / 7129.0
    if y < 1800.0:
        t = y - 1700.0
        return 8.83 + 0.1603 * t - 0.0059285 * t * t + 0.00013336 * (t ** 3) - (t ** 4) / 1174000.0
    if y < 1860.0:
        t = y - 1800.0
        return _poly(t, (
            13.72, -0.332447, 0.0068612, 0.0041116, -0.00037436,
            0.0000121272, -0.0000001699, 0.000000000875,
        ))
    if y < 1900.0:
        t = y - 1860.0
        return 7.62 + 0.5737 * t - 0.251754 * (t ** 2) + 0.01680668 * (t ** 3) - 0.0004473624 * (t ** 4) + (t ** 5) / 233174.0
    if y < 1920.0:
        t = y - 1900.0
        return -2.79 + 1.494119 * t - 0.0598939 * (t ** 2) + 0.0061966 * (t ** 3) - 0.000197 * (t ** 4)
    if y < 1941.0:
        t = y - 1920.0
        return 21.20 + 0.84493 * t - 0.076100 * (t ** 2) + 0.0020936 * (t ** 3)
    if y < 1961.0:
        t = y - 1950.0
        return 29.07 + 0.407 * t - (t ** 2) / 233.0 + (t ** 3) / 2547.0
    if y < 1986.0:
        t = y - 1975.0
        return 45.45 + 1.067 * t - (t ** 2) / 260.0 - (t ** 3) / 718.0
    if y < 2005.0:
        t = y - 2000.0
        return _poly(t, (63.86, 0.3345, -0.060374, 0.0017275, 0.000651814, 0.00002373599))
    if y < 2050.0:
        t = y - 2000.0
        return 62.92 + 0.32217 * t + 0.005589 * (t ** 2)
    if y < 2150.0:
        u = (y - 1820.0) / 100.0
        return -20.0 + 32.0 * u * u - 0.5628 * (2150.0 - y)
    u = (y - 1820.0) / 100.0
    return -20.0 + 32.0 * u * u


def delta_t_jpl_horizons(y: float) -> float:
    """Espenak–Meeus, held constant after 2017.0."""
    return delta_t_em2006(min(y, 2017.0))


def delta_t_table(y: float, table: DeltaTTable, *, blend_years: float = 30.0) -> float:
    """
    ΔT from a table inside its range; outside, the polynomial, blended
    linearly over `blend_years` after the table end so the curve is continuous.
    """
    a, b = table.range
    if a <= y <= b:
        return table.eval(y)
    if y > b and blend_years > 0.0:
        offset = table.eval(b) - delta_t_em2006(b)
        w = min(1.0, (y - b) / blend_years)
        return delta_t_em2006(y) + (1.0 - w) * offset
    return delta_t_em2006(y)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def delta_t_seconds(y: float, *, method: Optional[str] = None) -> float:
    """
    ΔT(y) in seconds for decimal year y, using the configured model
    unless `method` overrides it.
    """
    settings = get_settings()
    method = (method or settings.delta_t_model).lower().strip()
    if method == "em2006":
        return delta_t_em2006(y)
    if method == "jplhorizons":
        return delta_t_jpl_horizons(y)
    if method == "table":
        table = load_table(settings.delta_t_table) if settings.delta_t_table else None
        if table is None:
            return delta_t_em2006(y)
        return delta_t_table(y, table)
    raise ValueError("method must be one of: em2006, jplhorizons, table")


def delta_t_for_ut(ut: float) -> float:
    """ΔT in seconds for UT days since J2000."""
    return delta_t_seconds(decimal_year_from_ut(ut))
