"""
Solar PV engine module.

Provides simplified solar geometry, a derate-chain power estimate from
instantaneous weather, and a brute-force orientation optimizer.
"""

from .geometry import (
    SolarGeometry,
    angle_of_incidence,
    calculate_solar_geometry,
    day_of_year,
    declination,
    hour_angle,
    zenith_angle,
)
from .power_model import (
    CalculationMode,
    PredictionFeatures,
    advanced_power_array,
    apply_calibration,
    effective_calibration_factor,
    predict_power_output,
)
from .optimizer import AngleGrid, OptimizationResult, optimize_orientation

__all__ = [
    # geometry
    "SolarGeometry",
    "angle_of_incidence",
    "calculate_solar_geometry",
    "day_of_year",
    "declination",
    "hour_angle",
    "zenith_angle",
    # power_model
    "CalculationMode",
    "PredictionFeatures",
    "advanced_power_array",
    "apply_calibration",
    "effective_calibration_factor",
    "predict_power_output",
    # optimizer
    "AngleGrid",
    "OptimizationResult",
    "optimize_orientation",
]
