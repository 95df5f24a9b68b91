from __future__ import annotations

import math
from enum import Enum

from ..constants import OBLIQUITY_J2000_DEG, RAD2HOUR
from ..core.time import TimeInstant
from ..core.types import EclipticCoordinates, EquatorialCoordinates, Frame, PositionVector
from ..reference import astro_args as aa


class PrecessDirection(Enum):
    FROM_2000 = "from2000"
    INTO_2000 = "into2000"


def precession_matrix(time: TimeInstant, direction: PrecessDirection = PrecessDirection.FROM_2000) -> aa.Matrix:
    m = aa.precession_matrix(time.tt)
    return m if direction is PrecessDirection.FROM_2000 else aa.transpose(m)


def nutation_matrix(time: TimeInstant, direction: PrecessDirection = PrecessDirection.FROM_2000) -> aa.Matrix:
    m = aa.nutation_matrix(time.tt)
    return m if direction is PrecessDirection.FROM_2000 else aa.transpose(m)


def j2000_to_of_date_matrix(time: TimeInstant) -> aa.Matrix:
    """EQJ -> true equator and equinox of date (precession, then nutation)."""
    return aa.matmul(nutation_matrix(time), precession_matrix(time))


def of_date_to_j2000_matrix(time: TimeInstant) -> aa.Matrix:
    return aa.transpose(j2000_to_of_date_matrix(time))


def rotate(vector: PositionVector, matrix: aa.Matrix, frame: Frame) -> PositionVector:
    """Apply `matrix` to the position (and velocity, if any); tag the result with `frame`."""
    pos = aa.apply_matrix(matrix, (vector.x, vector.y, vector.z))
    vel = None if vector.velocity is None else aa.apply_matrix(matrix, vector.velocity)
    return PositionVector(pos[0], pos[1], pos[2], vector.time, frame, vel)


def equator_of_date(vector: PositionVector) -> PositionVector:
    if vector.frame is Frame.EQD:
        return vector
    if vector.frame is not Frame.EQJ:
        raise ValueError(f"expected an equatorial J2000 vector, got {vector.frame.value}")
    return rotate(vector, j2000_to_of_date_matrix(vector.time), Frame.EQD)


def equator_j2000(vector: PositionVector) -> PositionVector:
    if vector.frame is Frame.EQJ:
        return vector
    if vector.frame is not Frame.EQD:
        raise ValueError(f"expected an equatorial of-date vector, got {vector.frame.value}")
    return rotate(vector, of_date_to_j2000_matrix(vector.time), Frame.EQJ)


def equatorial_from_vector(vector: PositionVector) -> EquatorialCoordinates:
    dist = vector.length()
    if dist == 0.0:
        return EquatorialCoordinates(0.0, 0.0, 0.0, vector)
    ra = math.atan2(vector.y, vector.x) * RAD2HOUR
    if ra < 0.0:
        ra += 24.0
    if ra >= 24.0:
        ra -= 24.0
    dec = math.degrees(math.atan2(vector.z, math.hypot(vector.x, vector.y)))
    return EquatorialCoordinates(ra, dec, dist, vector)


def to_equatorial(vector: PositionVector, of_date: bool = True) -> EquatorialCoordinates:
    """
    RA/Dec/distance of a J2000 vector, referred to the true equator of
    date when `of_date`, otherwise to the J2000 mean equator.
    """
    v = equator_of_date(vector) if of_date else vector
    return equatorial_from_vector(v)


def _rotate_to_ecliptic(vector: PositionVector, obliquity_deg: float, frame: Frame) -> PositionVector:
    return rotate(vector, aa.R_x(math.radians(obliquity_deg)), frame)


def to_ecliptic(vector: PositionVector, of_date: bool = True) -> EclipticCoordinates:
    """
    Ecliptic longitude/latitude of a J2000 vector: the true ecliptic and
    equinox of date when `of_date`, otherwise the J2000 mean ecliptic.
    """
    if of_date:
        eqd = equator_of_date(vector)
        ecl = _rotate_to_ecliptic(eqd, aa.e_tilt(vector.time.tt).tobl, Frame.ECT)
    else:
        ecl = _rotate_to_ecliptic(vector, OBLIQUITY_J2000_DEG, Frame.ECL)

    xy = math.hypot(ecl.x, ecl.y)
    if xy > 0.0:
        elon = aa.wrap_deg(math.degrees(math.atan2(ecl.y, ecl.x)))
    else:
        elon = 0.0
    if xy == 0.0 and ecl.z == 0.0:
        elat = 0.0
    else:
        elat = math.degrees(math.atan2(ecl.z, xy))
    return EclipticCoordinates(elon, elat, ecl)


def sidereal_time(time: TimeInstant) -> float:
    """Greenwich apparent sidereal time, hours in [0, 24)."""
    return aa.sidereal_time_hours(time.ut, time.tt)
