"""
ephemsearch.search.engine

Root finding for scalar functions of time.

search() looks for the instant where f(t) crosses zero inside a bracket
[t1, t2] with f(t1) and f(t2) of opposite sign. Each step bisects the
bracket, fits a parabola through the two ends and the midpoint, and tries to
jump close to the root predicted by the parabola. When the jump does not
pay off it falls back to plain bisection, so convergence is never slower
than bisection.

Every other "when does X happen" query builds its own f and bracket and
calls this.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..config import get_settings
from ..constants import SECONDS_PER_DAY
from ..core.time import TimeInstant

logger = logging.getLogger(__name__)

SearchFunction = Callable[[TimeInstant], float]


class SearchStatus(Enum):
    FOUND = "found"
    NO_BRACKET = "no_bracket"
    NOT_CONVERGED = "not_converged"


@dataclass(frozen=True)
class SearchResult:
    status: SearchStatus
    time: Optional[TimeInstant]
    iterations: int = 0

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


@dataclass(frozen=True)
class QuadraticRoot:
    """Root of the parabola through three evenly spaced samples."""
    x: float        # position in units of dt, -1..+1
    t: float        # ut
    df_dt: float


def quad_interp(tm: float, dt: float, fa: float, fm: float, fb: float) -> Optional[QuadraticRoot]:
    """
    Fit f(x) = Q x^2 + R x + S through (-1, fa), (0, fm), (+1, fb), where
    x = (t - tm) / dt, and return its single root in [-1, +1] if there is one.
    """
    Q = (fb + fa) / 2.0 - fm
    R = (fb - fa) / 2.0
    S = fm

    if Q == 0.0:
        if R == 0.0:
            return None
        x = -S / R
        if x < -1.0 or x > 1.0:
            return None
    else:
        u = R * R - 4.0 * Q * S
        if u <= 0.0:
            return None
        ru = math.sqrt(u)
        x1 = (-R + ru) / (2.0 * Q)
        x2 = (-R - ru) / (2.0 * Q)
        in1 = -1.0 <= x1 <= 1.0
        in2 = -1.0 <= x2 <= 1.0
        if in1 == in2:
            # both or neither: ambiguous, let the caller bisect
            return None
        x = x1 if in1 else x2

    return QuadraticRoot(x=x, t=tm + x * dt, df_dt=(2.0 * Q * x + R) / dt)


def search(
    f: SearchFunction,
    t1: TimeInstant,
    t2: TimeInstant,
    tolerance_seconds: float = 1.0,
    *,
    f1: Optional[float] = None,
    f2: Optional[float] = None,
    max_iterations: Optional[int] = None,
) -> SearchResult:
    """
    Find the instant in [t1, t2] where f crosses zero.

    t1 may be later than t2. If f(t1) and f(t2) have the same sign the
    bracket holds no crossing and the result status is NO_BRACKET. If the
    iteration ceiling is hit first, the status is NOT_CONVERGED and `time`
    carries the best estimate. `f1`/`f2` may pass values already known.
    """
    if max_iterations is None:
        max_iterations = get_settings().search_max_iterations
    dt_days = abs(tolerance_seconds / SECONDS_PER_DAY)

    if f1 is None:
        f1 = f(t1)
    if f2 is None:
        f2 = f(t2)

    if f1 == 0.0:
        return SearchResult(SearchStatus.FOUND, t1, 0)
    if f2 == 0.0:
        return SearchResult(SearchStatus.FOUND, t2, 0)
    if (f1 > 0.0) == (f2 > 0.0):
        logger.debug("search: no sign change between %s (%g) and %s (%g)", t1, f1, t2, f2)
        return SearchResult(SearchStatus.NO_BRACKET, None, 0)

    # descending crossings are searched as ascending ones
    if f1 > 0.0:
        g = f
        f = lambda t: -g(t)  # noqa: E731
        f1, f2 = -f1, -f2

    lower = min(t1.ut, t2.ut)
    upper = max(t1.ut, t2.ut)

    calc_fmid = True
    fmid = 0.0
    tmid = TimeInstant.interpolate(t1, t2, 0.5)
    for iteration in range(1, max_iterations + 1):
        dt = (t2.ut - t1.ut) / 2.0
        tmid = t1.add_days(dt)
        if abs(dt) < dt_days:
            logger.debug("search: converged by bisection after %d iterations", iteration)
            return SearchResult(SearchStatus.FOUND, tmid, iteration)

        if calc_fmid:
            fmid = f(tmid)
        else:
            calc_fmid = True

        if fmid == 0.0:
            return SearchResult(SearchStatus.FOUND, tmid, iteration)

        q = quad_interp(tmid.ut, t2.ut - tmid.ut, f1, fmid, f2)
        if q is not None and lower <= q.t <= upper:
            tq = TimeInstant(q.t)
            fq = f(tq)
            if q.df_dt != 0.0:
                err = abs(fq / q.df_dt)
                if err < dt_days:
                    logger.debug("search: converged by interpolation after %d iterations", iteration)
                    return SearchResult(SearchStatus.FOUND, tq, iteration)
                if -1.0 < q.x < 1.0:
                    err *= 1.2
                    if err < abs(dt) / 10.0:
                        # try a tight bracket around the predicted root
                        tleft = tq.add_days(-err)
                        tright = tq.add_days(+err)
                        if (tright.ut - t1.ut) * (tright.ut - t2.ut) < 0.0 and (tleft.ut - t1.ut) * (tleft.ut - t2.ut) < 0.0:
                            fleft = f(tleft)
                            fright = f(tright)
                            if fleft < 0.0 <= fright:
                                f1, f2 = fleft, fright
                                t1, t2 = tleft, tright
                                fmid = fq
                                calc_fmid = False
                                continue

        if f1 < 0.0 <= fmid:
            t2, f2 = tmid, fmid
        elif fmid < 0.0 <= f2:
            t1, f1 = tmid, fmid
        else:
            # f is not continuous inside the bracket
            logger.debug("search: lost the bracket at %s", tmid)
            return SearchResult(SearchStatus.NO_BRACKET, None, iteration)

    logger.warning(
        "search did not converge within %d iterations; best estimate %s", max_iterations, tmid,
    )
    return SearchResult(SearchStatus.NOT_CONVERGED, tmid, max_iterations)


def search_time(
    f: SearchFunction,
    t1: TimeInstant,
    t2: TimeInstant,
    tolerance_seconds: float = 1.0,
    **kwargs,
) -> Optional[TimeInstant]:
    """
    search() for callers that only need the instant: None unless found.
    A non-converged result is dropped (it was already logged).
    """
    result = search(f, t1, t2, tolerance_seconds, **kwargs)
    return result.time if result.found else None
