"""
Brute-force tilt/azimuth search.

Evaluates the advanced power model over a discrete grid of panel
orientations under a single weather snapshot and reports the best pair
against the user's current orientation. Fully vectorised: the zenith is
orientation independent, so only the incidence angle varies across the
grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from engine.weather.open_meteo import CurrentWeather

from .geometry import (
    angle_of_incidence,
    calculate_solar_geometry,
    day_of_year,
    declination,
    hour_angle,
    zenith_angle,
)
from .power_model import STC_TEMPERATURE, advanced_power_array


@dataclass
class AngleGrid:
    """Inclusive search ranges, in degrees."""

    tilt_min: float = 0.0
    tilt_max: float = 60.0
    tilt_step: float = 5.0
    azimuth_min: float = 120.0
    azimuth_max: float = 240.0
    azimuth_step: float = 10.0

    def __post_init__(self) -> None:
        if self.tilt_step <= 0 or self.azimuth_step <= 0:
            raise ValueError("Grid steps must be positive")
        if self.tilt_max < self.tilt_min or self.azimuth_max < self.azimuth_min:
            raise ValueError("Grid maximum must not be below its minimum")

    @staticmethod
    def _axis(lo: float, hi: float, step: float) -> NDArray[np.float64]:
        count = int(np.floor((hi - lo) / step + 1e-9)) + 1
        return lo + step * np.arange(count, dtype=np.float64)

    def tilts(self) -> NDArray[np.float64]:
        return self._axis(self.tilt_min, self.tilt_max, self.tilt_step)

    def azimuths(self) -> NDArray[np.float64]:
        return self._axis(self.azimuth_min, self.azimuth_max, self.azimuth_step)

    @property
    def size(self) -> int:
        return len(self.tilts()) * len(self.azimuths())


@dataclass
class OptimizationResult:
    optimal_tilt: float
    optimal_azimuth: float
    max_power_kw: float
    current_tilt: float
    current_azimuth: float
    current_power_kw: float
    improvement_percentage: float
    evaluated: int
    power_grid: NDArray[np.float64] = field(repr=False)

    def to_dict(self) -> dict[str, float | int]:
        return {
            "optimal_tilt": self.optimal_tilt,
            "optimal_azimuth": self.optimal_azimuth,
            "max_power_kw": self.max_power_kw,
            "current_tilt": self.current_tilt,
            "current_azimuth": self.current_azimuth,
            "current_power_kw": self.current_power_kw,
            "improvement_percentage": self.improvement_percentage,
            "evaluated": self.evaluated,
        }


def _power_for(
    weather: CurrentWeather,
    capacity_kw: float,
    zenith: float,
    incidence: NDArray[np.float64] | float,
) -> NDArray[np.float64]:
    return advanced_power_array(
        irradiance=weather.solar_irradiance,
        capacity_kw=capacity_kw,
        temperature=weather.temperature if weather.temperature is not None else STC_TEMPERATURE,
        cloud_cover=weather.cloud_cover,
        zenith=zenith,
        incidence=incidence,
        humidity=weather.humidity if weather.humidity is not None else 0.0,
    )


def improvement_percentage(max_power: float, current_power: float) -> float:
    """Relative gain of the best orientation; 0 when current output is 0."""
    if current_power > 0:
        return (max_power - current_power) / current_power * 100.0
    return 0.0


def optimize_orientation(
    weather: CurrentWeather,
    latitude: float,
    longitude: float,
    current_tilt: float,
    current_azimuth: float,
    system_capacity_kw: float,
    when: datetime,
    grid: AngleGrid | None = None,
) -> OptimizationResult:
    """Grid-search the orientation with the highest advanced-mode output.

    The grid is scanned tilt-major, azimuth-minor in ascending order. A
    candidate only replaces the incumbent when strictly better, so ties go
    to the first pair visited. The incumbent starts at 0 kW with the
    current orientation, which is returned unchanged if no pair produces
    any power.
    """
    grid = grid or AngleGrid()
    tilts = grid.tilts()
    azimuths = grid.azimuths()

    zenith = zenith_angle(latitude, declination(day_of_year(when)), hour_angle(when.hour))
    tilt_mesh, az_mesh = np.meshgrid(tilts, azimuths, indexing="ij")
    power_grid = _power_for(
        weather, system_capacity_kw, zenith,
        angle_of_incidence(zenith, tilt_mesh, az_mesh),
    )

    optimal_tilt = float(current_tilt)
    optimal_azimuth = float(current_azimuth)
    max_power = 0.0

    # argmax returns the first occurrence in C order, i.e. tilt-major
    flat_idx = int(np.argmax(power_grid))
    best = float(power_grid.flat[flat_idx])
    if best > max_power:
        i, j = np.unravel_index(flat_idx, power_grid.shape)
        max_power = best
        optimal_tilt = float(tilts[i])
        optimal_azimuth = float(azimuths[j])

    current = calculate_solar_geometry(
        latitude, longitude, current_tilt, current_azimuth, when
    )
    current_power = float(
        _power_for(weather, system_capacity_kw, current.zenith, current.angle_of_incidence)
    )

    return OptimizationResult(
        optimal_tilt=optimal_tilt,
        optimal_azimuth=optimal_azimuth,
        max_power_kw=max_power,
        current_tilt=float(current_tilt),
        current_azimuth=float(current_azimuth),
        current_power_kw=current_power,
        improvement_percentage=improvement_percentage(max_power, current_power),
        evaluated=int(power_grid.size),
        power_grid=power_grid,
    )
