import pytest

from scalpquant.portfolio import (
    PositionExposure,
    can_add_position,
    gross_exposure,
    historical_cvar,
    historical_var,
    kelly_fraction,
    net_exposure,
    pearson_correlation,
    portfolio_kelly_adjustment,
    volatility_target_multiplier,
)
from scalpquant.signals import Side


def test_computes_correlation():
    assert pearson_correlation([1.0, 2.0, 3.0, 4.0], [2.0, 4.0, 6.0, 8.0]) > 0.99


def test_correlation_negative_and_bounds():
    rho = pearson_correlation([1.0, 2.0, 3.0, 4.0], [8.0, 6.0, 4.0, 2.0])
    assert -1.0 <= rho < -0.99


def test_correlation_too_short_or_flat():
    assert pearson_correlation([1.0, 2.0], [1.0, 2.0]) is None
    assert pearson_correlation([1.0, 1.0, 1.0], [1.0, 2.0, 3.0]) is None


def _positions():
    return [
        PositionExposure("BTCUSDT", Side.LONG, 1000.0),
        PositionExposure("ETHUSDT", Side.SHORT, 500.0),
    ]


def test_calculates_exposure_caps():
    positions = _positions()
    assert gross_exposure(positions) == pytest.approx(1500.0)
    assert net_exposure(positions) == pytest.approx(500.0)
    proposed = PositionExposure("SOLUSDT", Side.LONG, 400.0)
    assert can_add_position(positions, proposed, 5000.0, 50.0)


def test_rejects_position_over_cap_or_bad_equity():
    proposed = PositionExposure("SOLUSDT", Side.LONG, 1001.0)
    assert not can_add_position(_positions(), proposed, 5000.0, 50.0)
    small = PositionExposure("SOLUSDT", Side.LONG, 1.0)
    assert not can_add_position(_positions(), small, 0.0, 50.0)
    assert not can_add_position(_positions(), small, 5000.0, 0.0)


def test_computes_capped_kelly():
    assert kelly_fraction(0.55, 2.0, 1.0, 0.2) == pytest.approx(0.2)
    assert kelly_fraction(0.4, 1.0, 1.0, 0.2) == pytest.approx(0.0)
    assert portfolio_kelly_adjustment(0.2, 1.0) == pytest.approx(0.1)


def test_kelly_invalid_inputs():
    assert kelly_fraction(1.5, 2.0, 1.0, 0.2) == 0.0
    assert kelly_fraction(0.6, 0.0, 1.0, 0.2) == 0.0
    assert portfolio_kelly_adjustment(-0.1, 0.5) == 0.0
    assert portfolio_kelly_adjustment(0.2, -3.0) == pytest.approx(0.2)


def test_computes_var_and_cvar():
    returns = [-0.05, -0.02, 0.01, 0.03, 0.04]
    var = historical_var(returns, 0.8)
    assert var >= 0.02
    assert historical_cvar(returns, 0.8) >= var


def test_var_invalid_inputs():
    assert historical_var([], 0.95) is None
    assert historical_var([0.1], 1.0) is None
    assert historical_cvar([], 0.95) is None
    assert historical_cvar([0.1], -0.1) is None


def test_var_all_positive_is_zero():
    assert historical_var([0.01, 0.02, 0.03], 0.9) == 0.0
    assert historical_cvar([0.01, 0.02, 0.03], 0.9) == 0.0


def test_scales_down_high_volatility():
    assert volatility_target_multiplier(0.10, 0.20, 2.0) == pytest.approx(0.5)
    assert volatility_target_multiplier(0.10, 0.02, 2.0) == pytest.approx(2.0)


def test_vol_target_invalid():
    assert volatility_target_multiplier(0.10, 0.0, 2.0) == 0.0