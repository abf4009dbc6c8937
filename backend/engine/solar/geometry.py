"""
Simplified solar geometry for a fixed panel.

Declination follows Cooper (1969), the hour angle is taken from the clock
hour (15 degrees per hour from noon), and the angle of incidence uses the
tilted-surface identity with azimuth measured clockwise from north, so a
due-south panel has azimuth 180.

Accuracy is a few degrees, which is adequate for the derate model in
:mod:`engine.solar.power_model`. For ephemeris-grade positions a Spencer
series or SPA should be used instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass
class SolarGeometry:
    zenith: float               # degrees from vertical
    angle_of_incidence: float   # degrees between sun vector and panel normal

    def to_dict(self) -> dict[str, float]:
        return {
            "zenith": self.zenith,
            "angle_of_incidence": self.angle_of_incidence,
        }


def day_of_year(when: datetime) -> int:
    """Ordinal day of the year, 1 January = 1."""
    return when.timetuple().tm_yday


def declination(day: int | float) -> float:
    """Solar declination in degrees (Cooper's equation)."""
    return float(23.45 * np.sin(np.radians(360.0 * (284.0 + day) / 365.0)))


def hour_angle(hour: int | float) -> float:
    """Hour angle in degrees; solar noon is 0, mornings negative."""
    return 15.0 * (hour - 12.0)


def zenith_angle(latitude: float, decl: float, omega: float) -> float:
    """Solar zenith angle in degrees [0, 180]."""
    lat_r = np.radians(latitude)
    dec_r = np.radians(decl)
    cos_z = (
        np.sin(lat_r) * np.sin(dec_r)
        + np.cos(lat_r) * np.cos(dec_r) * np.cos(np.radians(omega))
    )
    return float(np.degrees(np.arccos(np.clip(cos_z, -1.0, 1.0))))


def angle_of_incidence(
    zenith: float,
    tilt: ArrayLike,
    azimuth: ArrayLike,
) -> NDArray[np.float64]:
    """Angle of incidence on a tilted surface, in degrees.

    Parameters
    ----------
    zenith : float
        Solar zenith angle (degrees).
    tilt : array_like
        Panel tilt from horizontal (degrees).
    azimuth : array_like
        Panel azimuth clockwise from north (degrees). The sun is assumed
        to be due south, so only the deviation from 180 matters.

    Returns
    -------
    ndarray
        Incidence angle in degrees [0, 180], broadcast over ``tilt`` and
        ``azimuth``.
    """
    z_r = np.radians(zenith)
    tilt_r = np.radians(np.asarray(tilt, dtype=np.float64))
    az_r = np.radians(np.asarray(azimuth, dtype=np.float64) - 180.0)

    cos_inc = np.cos(z_r) * np.cos(tilt_r) + np.sin(z_r) * np.sin(tilt_r) * np.cos(az_r)
    return np.degrees(np.arccos(np.clip(cos_inc, -1.0, 1.0)))


def calculate_solar_geometry(
    latitude: float,
    longitude: float,
    tilt: float,
    azimuth: float,
    when: datetime,
) -> SolarGeometry:
    """Zenith and incidence angle for a panel at ``when``.

    ``longitude`` is accepted for API symmetry; the hour angle is derived
    from the clock hour of ``when`` without an equation-of-time correction.
    """
    decl = declination(day_of_year(when))
    omega = hour_angle(when.hour)
    zenith = zenith_angle(latitude, decl, omega)
    incidence = float(angle_of_incidence(zenith, tilt, azimuth))
    return SolarGeometry(zenith=zenith, angle_of_incidence=incidence)
