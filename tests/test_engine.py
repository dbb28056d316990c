"""Tests for projection.engine — monthly projection and summary figures."""

import numpy as np
import pytest

from projection.config import SimulationParameters, VarianceTier
from projection.engine import (
    FRAME_COLUMNS,
    ProjectionEngine,
    SimulationResult,
    compare_tiers,
    project,
    round2,
)


def _params(years=10, deposit=100.0, rate=7.0, tier=VarianceTier.MEDIUM):
    return SimulationParameters(
        investment_period_years=years,
        monthly_deposit=deposit,
        annual_interest_rate_percent=rate,
        variance_tier=tier,
    )


class TestRecordSeries:
    @pytest.mark.parametrize("years", [1, 3, 10, 25])
    def test_one_record_per_month(self, years):
        result = project(_params(years=years))
        assert result.ok
        assert len(result.records) == years * 12
        assert [r.month for r in result.records] == list(range(1, years * 12 + 1))

    @pytest.mark.parametrize("deposit", [0.0, 100.0, 250.5])
    def test_deposits_unaffected_by_shocks(self, deposit):
        result = project(_params(years=6, deposit=deposit, tier=VarianceTier.HIGH))
        deposits = [r.accumulated_deposits for r in result.records]
        assert deposits == sorted(deposits)
        for r in result.records:
            assert r.accumulated_deposits == round2(deposit * r.month)

    @pytest.mark.parametrize("deposit", [0.01, 0.027, 0.055, 19.99, 123.45])
    def test_deposits_match_deposit_times_month_exactly(self, deposit):
        result = project(_params(years=2, deposit=deposit, rate=0.0))
        assert [r.accumulated_deposits for r in result.records] == [
            round2(deposit * m) for m in range(1, 25)
        ]

    def test_interest_gained_is_fund_minus_deposits(self):
        result = project(_params(years=5, rate=5.0))
        for r in result.records:
            assert r.interest_gained_this_month == pytest.approx(
                r.fund_value - r.accumulated_deposits, abs=0.011
            )

    def test_deterministic(self):
        params = _params(years=8, deposit=123.45, rate=6.3, tier=VarianceTier.HIGH)
        assert project(params) == project(params)


class TestScenarios:
    def test_no_interest_no_events(self):
        result = project(_params(years=1, deposit=100.0, rate=0.0, tier=VarianceTier.LOW))
        assert len(result.records) == 12
        final = result.final_record
        assert final.accumulated_deposits == 1200.0
        assert final.fund_value == 1200.0
        assert result.total_interest_earned == 0.0
        assert result.average_annual_growth_rate == 0.0

    def test_high_variance_crash_at_month_48(self):
        result = project(_params(years=10, deposit=100.0, rate=7.0, tier=VarianceTier.HIGH))
        by_month = {r.month: r for r in result.records}
        assert by_month[47].monthly_growth_percent > 0
        assert by_month[48].fund_value < by_month[47].fund_value * 0.85
        assert by_month[48].monthly_growth_percent < -15

    def test_tariff_dip_at_month_24(self):
        result = project(_params(years=3, deposit=100.0, rate=0.0, tier=VarianceTier.LOW))
        by_month = {r.month: r for r in result.records}
        assert by_month[23].fund_value == 2300.0
        assert by_month[24].fund_value == pytest.approx(2388.0)

    def test_unknown_tier_runs_without_shocks(self):
        result = project(_params(years=5, deposit=100.0, rate=0.0, tier="Extreme"))
        assert result.ok
        assert result.final_record.fund_value == 6000.0


class TestMonthlyGrowth:
    def test_first_month_zero_deposit(self):
        result = project(_params(years=1, deposit=0.0, rate=7.0))
        assert result.records[0].monthly_growth_percent == 0.0
        assert all(r.monthly_growth_percent == 0.0 for r in result.records)

    def test_first_month_uses_deposit_baseline(self):
        result = project(_params(years=1, deposit=100.0, rate=12.0))
        assert result.records[0].fund_value == 101.0
        assert result.records[0].monthly_growth_percent == pytest.approx(1.0)

    def test_second_month_against_previous_fund(self):
        result = project(_params(years=1, deposit=100.0, rate=0.0, tier=VarianceTier.LOW))
        assert result.records[1].monthly_growth_percent == 100.0
        assert result.records[3].monthly_growth_percent == pytest.approx(33.33)


class TestSummary:
    def test_total_interest_from_final_record(self):
        result = project(_params(years=10))
        final = result.final_record
        assert result.total_interest_earned == round2(
            final.fund_value - final.accumulated_deposits
        )

    def test_average_annual_growth_rate(self):
        result = project(_params(years=2, deposit=100.0, rate=12.0))
        final = result.final_record
        total_return = (final.fund_value - final.accumulated_deposits) / final.accumulated_deposits
        expected = ((1 + total_return) ** (1 / 2) - 1) * 100
        assert result.average_annual_growth_rate == pytest.approx(expected, abs=0.01)
        assert result.average_annual_growth_rate > 0

    def test_zero_deposits_give_zero_growth_rate(self):
        result = project(_params(years=3, deposit=0.0))
        assert result.total_interest_earned == 0.0
        assert result.average_annual_growth_rate == 0.0


class TestValidation:
    @pytest.mark.parametrize("years", [0, -1, -10])
    @pytest.mark.parametrize("deposit, rate", [(100.0, 7.0), (-5.0, 3.0), (0.0, -1.0)])
    def test_non_positive_period_always_rejected(self, years, deposit, rate):
        result = project(_params(years=years, deposit=deposit, rate=rate))
        assert not result.ok
        assert result.records == ()
        assert result.total_interest_earned == 0.0
        assert result.average_annual_growth_rate == 0.0
        assert "investment period" in result.error_message

    def test_negative_deposit(self):
        result = project(_params(deposit=-1.0))
        assert result.records == ()
        assert "monthly deposit" in result.error_message

    def test_negative_rate(self):
        result = project(_params(rate=-0.5))
        assert result.records == ()
        assert "interest rate" in result.error_message

    @pytest.mark.parametrize(
        "field, value, text",
        [
            ("years", float("nan"), "investment period"),
            ("years", float("inf"), "investment period"),
            ("deposit", float("nan"), "monthly deposit"),
            ("deposit", float("inf"), "monthly deposit"),
            ("rate", float("nan"), "interest rate"),
            ("rate", float("inf"), "interest rate"),
            ("rate", float("-inf"), "interest rate"),
        ],
    )
    def test_non_finite_values_rejected(self, field, value, text):
        result = project(_params(**{field: value}))
        assert not result.ok
        assert result.records == ()
        assert result.total_interest_earned == 0.0
        assert result.average_annual_growth_rate == 0.0
        assert text in result.error_message

    def test_fractional_period(self):
        result = project(_params(years=1.5))
        assert not result.ok
        assert "whole number" in result.error_message

    def test_empty_result_has_no_final_record(self):
        result = SimulationResult.empty("bad")
        with pytest.raises(IndexError):
            result.final_record


class TestResultViews:
    def test_numpy_columns(self):
        result = project(_params(years=2))
        assert isinstance(result.fund_values, np.ndarray)
        assert result.months.tolist() == list(range(1, 25))
        np.testing.assert_allclose(
            result.accumulated_deposits, np.arange(1, 25) * 100.0
        )

    def test_to_frame(self):
        result = project(_params(years=2))
        df = result.to_frame()
        assert list(df.columns) == list(FRAME_COLUMNS.values())
        assert df.index.name == "Month"
        assert len(df) == 24
        assert df.loc[24, "Fund with Interest & Events"] == result.final_record.fund_value

    def test_engine_defaults(self):
        result = ProjectionEngine().run()
        assert len(result.records) == 120


class TestCompareTiers:
    def test_one_result_per_tier(self):
        by_tier = compare_tiers(_params(years=10))
        assert list(by_tier) == [VarianceTier.LOW, VarianceTier.MEDIUM, VarianceTier.HIGH]
        finals = [res.final_record.fund_value for res in by_tier.values()]
        assert finals[0] > finals[1] > finals[2]

    def test_before_first_event_tiers_agree(self):
        by_tier = compare_tiers(_params(years=1))
        finals = {res.final_record.fund_value for res in by_tier.values()}
        assert len(finals) == 1


class TestRounding:
    @pytest.mark.parametrize(
        "value, expected",
        [(1.005, 1.0), (0.125, 0.13), (2.675, 2.67), (-0.125, -0.13), (1199.999, 1200.0)],
    )
    def test_half_up_on_exact_value(self, value, expected):
        assert round2(value) == expected
