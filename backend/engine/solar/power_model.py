"""
Closed-form PV output estimate from instantaneous weather.

Two modes are supported:

- ``simple``: nameplate scaling by irradiance, no derates.
- ``advanced``: a chain of linear derating multipliers for cell
  temperature, cloud cover, incidence angle, low sun and humidity.

All results are in kW and never negative.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

CalculationMode = Literal["simple", "advanced"]

STC_IRRADIANCE = 1000.0         # W/m^2
STC_TEMPERATURE = 25.0          # degC
TEMP_COEFFICIENT = 0.004        # fractional loss per degC above STC
MIN_TEMP_FACTOR = 0.5
CLOUD_ATTENUATION = 0.8         # fraction lost at 100 % cloud cover
HUMIDITY_ATTENUATION = 0.1      # fraction lost at 100 % humidity
DEFAULT_CAPACITY_KW = 5.0

# Low-sun derates: (zenith threshold, multiplier), checked in order
LOW_SUN_DERATES: tuple[tuple[float, float], ...] = ((85.0, 0.1), (70.0, 0.5))


@dataclass
class PredictionFeatures:
    temperature: float | None = None
    humidity: float | None = None
    solar_irradiance: float | None = None
    cloud_cover: float | None = None
    zenith: float | None = None
    angle_of_incidence: float | None = None
    system_capacity_kw: float | None = None
    pressure: float | None = None
    wind_speed: float | None = None


def _or_default(value: float | None, default: float) -> float:
    return default if value is None else float(value)


def low_sun_factor(zenith: float) -> float:
    for threshold, factor in LOW_SUN_DERATES:
        if zenith > threshold:
            return factor
    return 1.0


def advanced_power_array(
    irradiance: float,
    capacity_kw: float,
    temperature: float,
    cloud_cover: float,
    zenith: float,
    incidence: ArrayLike,
    humidity: float,
) -> NDArray[np.float64]:
    """Advanced-mode output (kW) for one or many incidence angles.

    Every input except ``incidence`` is a scalar; the result has the
    shape of ``incidence``.
    """
    inc = np.asarray(incidence, dtype=np.float64)

    power = irradiance / STC_IRRADIANCE * capacity_kw
    power *= max(MIN_TEMP_FACTOR, 1.0 - (temperature - STC_TEMPERATURE) * TEMP_COEFFICIENT)
    power *= 1.0 - (cloud_cover / 100.0) * CLOUD_ATTENUATION
    power *= low_sun_factor(zenith)
    power *= 1.0 - (humidity / 100.0) * HUMIDITY_ATTENUATION

    angle_efficiency = np.maximum(0.0, np.cos(np.radians(inc)))
    return np.maximum(0.0, power * angle_efficiency)


def predict_power_output(
    features: PredictionFeatures,
    mode: CalculationMode = "advanced",
) -> float:
    """Estimated AC-equivalent output in kW.

    Missing inputs fall back to neutral defaults: irradiance 0, capacity
    5 kW, temperature 25 degC, cloud cover 0 %, zenith and incidence 90
    degrees, humidity 0 %.
    """
    irradiance = _or_default(features.solar_irradiance, 0.0)
    capacity = _or_default(features.system_capacity_kw, DEFAULT_CAPACITY_KW)

    if mode == "simple":
        return max(0.0, irradiance / STC_IRRADIANCE * capacity)

    power = advanced_power_array(
        irradiance=irradiance,
        capacity_kw=capacity,
        temperature=_or_default(features.temperature, STC_TEMPERATURE),
        cloud_cover=_or_default(features.cloud_cover, 0.0),
        zenith=_or_default(features.zenith, 90.0),
        incidence=_or_default(features.angle_of_incidence, 90.0),
        humidity=_or_default(features.humidity, 0.0),
    )
    return float(power)


def effective_calibration_factor(factor: float | None) -> float:
    """Missing or non-finite factors mean 1.0; negative factors clamp to 0."""
    if factor is None or not math.isfinite(factor):
        return 1.0
    return max(0.0, factor)


def apply_calibration(raw_power: float, factor: float | None) -> float:
    """Scale a raw estimate by a user calibration factor."""
    return raw_power * effective_calibration_factor(factor)
