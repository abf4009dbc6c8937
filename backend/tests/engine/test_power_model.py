"""Tests for engine.solar.power_model — derate chain and calibration."""

from __future__ import annotations

import math

import numpy as np
import pytest

from engine.solar.power_model import (
    PredictionFeatures,
    advanced_power_array,
    apply_calibration,
    effective_calibration_factor,
    low_sun_factor,
    predict_power_output,
)


def _stc(**overrides) -> PredictionFeatures:
    """5 kW system at STC, sun straight onto the panel, 30 deg zenith."""
    base = dict(
        temperature=25.0,
        humidity=0.0,
        solar_irradiance=1000.0,
        cloud_cover=0.0,
        zenith=30.0,
        angle_of_incidence=0.0,
        system_capacity_kw=5.0,
    )
    base.update(overrides)
    return PredictionFeatures(**base)


class TestSimpleMode:
    def test_nameplate_scaling(self):
        assert predict_power_output(_stc(solar_irradiance=800.0), "simple") == pytest.approx(4.0)

    def test_ignores_derates(self):
        f = _stc(temperature=60.0, cloud_cover=100.0, angle_of_incidence=80.0, zenith=89.0)
        assert predict_power_output(f, "simple") == pytest.approx(5.0)

    def test_negative_irradiance_clamped(self):
        assert predict_power_output(_stc(solar_irradiance=-50.0), "simple") == 0.0

    def test_default_capacity(self):
        f = PredictionFeatures(solar_irradiance=1000.0)
        assert predict_power_output(f, "simple") == pytest.approx(5.0)


class TestAdvancedMode:
    def test_stc_equals_capacity(self):
        assert predict_power_output(_stc()) == pytest.approx(5.0)

    def test_default_mode_is_advanced(self):
        f = _stc(cloud_cover=50.0)
        assert predict_power_output(f) == predict_power_output(f, "advanced")

    def test_temperature_derate(self):
        assert predict_power_output(_stc(temperature=50.0)) == pytest.approx(4.5)

    def test_temperature_derate_floor(self):
        assert predict_power_output(_stc(temperature=200.0)) == pytest.approx(2.5)

    def test_cold_panel_gains(self):
        assert predict_power_output(_stc(temperature=0.0)) == pytest.approx(5.5)

    def test_cloud_derate(self):
        assert predict_power_output(_stc(cloud_cover=50.0)) == pytest.approx(3.0)
        assert predict_power_output(_stc(cloud_cover=100.0)) == pytest.approx(1.0)

    def test_incidence_derate(self):
        assert predict_power_output(_stc(angle_of_incidence=60.0)) == pytest.approx(2.5)

    def test_sun_behind_panel_gives_zero(self):
        assert predict_power_output(_stc(angle_of_incidence=120.0)) == 0.0

    @pytest.mark.parametrize(
        "zenith,expected",
        [(70.0, 5.0), (75.0, 2.5), (85.0, 2.5), (86.0, 0.5), (95.0, 0.5)],
    )
    def test_low_sun_derate(self, zenith, expected):
        assert predict_power_output(_stc(zenith=zenith)) == pytest.approx(expected)

    def test_humidity_derate(self):
        assert predict_power_output(_stc(humidity=100.0)) == pytest.approx(4.5)

    def test_full_chain(self):
        f = _stc(temperature=35.0, cloud_cover=25.0, angle_of_incidence=30.0, zenith=72.0, humidity=50.0)
        expected = 5.0 * 0.96 * 0.8 * math.cos(math.radians(30.0)) * 0.5 * 0.95
        assert predict_power_output(f) == pytest.approx(expected)

    def test_missing_weather_uses_defaults(self):
        # Zenith and incidence default to 90 deg: cos(90) kills output
        f = PredictionFeatures(solar_irradiance=1000.0, system_capacity_kw=5.0)
        assert predict_power_output(f) == pytest.approx(0.0, abs=1e-12)

    def test_no_irradiance(self):
        assert predict_power_output(PredictionFeatures()) == 0.0


class TestAdvancedPowerArray:
    def test_shape_follows_incidence(self):
        inc = np.array([[0.0, 60.0], [90.0, 180.0]])
        p = advanced_power_array(1000.0, 5.0, 25.0, 0.0, 30.0, inc, 0.0)
        assert p.shape == (2, 2)
        np.testing.assert_allclose(p, [[5.0, 2.5], [0.0, 0.0]], atol=1e-12)

    def test_never_negative(self):
        p = advanced_power_array(-100.0, 5.0, 25.0, 0.0, 30.0, np.zeros(3), 0.0)
        assert np.all(p >= 0.0)


class TestLowSunFactor:
    def test_thresholds_are_exclusive(self):
        assert low_sun_factor(70.0) == 1.0
        assert low_sun_factor(85.0) == 0.5
        assert low_sun_factor(85.01) == 0.1


class TestCalibration:
    def test_scales(self):
        assert apply_calibration(2.0, 1.5) == pytest.approx(3.0)

    @pytest.mark.parametrize("factor", [None, math.nan, math.inf, -math.inf])
    def test_missing_or_non_finite_is_identity(self, factor):
        assert apply_calibration(2.0, factor) == 2.0

    def test_negative_clamps_to_zero(self):
        assert apply_calibration(2.0, -0.5) == 0.0

    @pytest.mark.parametrize(
        "factor,expected",
        [(None, 1.0), (math.inf, 1.0), (math.nan, 1.0), (-3.0, 0.0), (0.8, 0.8)],
    )
    def test_effective_factor(self, factor, expected):
        assert effective_calibration_factor(factor) == expected
