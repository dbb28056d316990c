"""
Fund projection engine.

Steps a monthly savings plan forward one month at a time:

1. Deposit
   The monthly deposit is added to the fund and to the running deposits.

2. Compound interest
   The fund grows by the nominal annual rate divided by twelve.

3. Market shocks
   The tariff event, then the COVID-style event, each scale the fund by
   ``1 + impact`` from the shock schedule.

Each month is stored as a ``MonthlyRecord`` rounded to two decimals. The
running fund value is carried at full precision and deposits are taken as
deposit x month; rounding only happens when a record is built. The summary
figures (total interest earned and average annual growth rate) are derived
from the final record.
"""

from collections import OrderedDict
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .config import (
    EVENT_ORDER,
    InvalidParameters,
    SimulationParameters,
    VarianceTier,
)
from .shocks import apply_shock

_CENT = Decimal("0.01")

# Column names used for tables and chart hover text
FRAME_COLUMNS = {
    "accumulated_deposits": "Accumulated Deposits",
    "fund_value": "Fund with Interest & Events",
    "interest_gained_this_month": "Interest Gained (Month)",
    "monthly_growth_percent": "Monthly Fund Growth (%)",
}


def round2(value: float) -> float:
    """Round half-up to 2 decimals on the exact binary value of ``value``."""
    return float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class MonthlyRecord:
    month: int
    accumulated_deposits: float
    fund_value: float
    # Fund value minus deposits so far: a cumulative gain, not a monthly delta
    interest_gained_this_month: float
    monthly_growth_percent: float


@dataclass(frozen=True)
class SimulationResult:
    """Monthly series plus summary figures for one savings plan."""

    records: Tuple[MonthlyRecord, ...]
    total_interest_earned: float
    average_annual_growth_rate: float
    error_message: str = ""

    @classmethod
    def empty(cls, message: str) -> "SimulationResult":
        return cls(
            records=(),
            total_interest_earned=0.0,
            average_annual_growth_rate=0.0,
            error_message=message,
        )

    @property
    def ok(self) -> bool:
        return not self.error_message

    @property
    def final_record(self) -> MonthlyRecord:
        if not self.records:
            raise IndexError("simulation produced no months")
        return self.records[-1]

    def _column(self, name: str) -> np.ndarray:
        return np.array([getattr(r, name) for r in self.records], dtype=float)

    @property
    def months(self) -> np.ndarray:
        return np.array([r.month for r in self.records], dtype=int)

    @property
    def accumulated_deposits(self) -> np.ndarray:
        return self._column("accumulated_deposits")

    @property
    def fund_values(self) -> np.ndarray:
        return self._column("fund_value")

    @property
    def interest_gained(self) -> np.ndarray:
        return self._column("interest_gained_this_month")

    @property
    def monthly_growth_percent(self) -> np.ndarray:
        return self._column("monthly_growth_percent")

    def to_frame(self) -> pd.DataFrame:
        """Records as a DataFrame indexed by month, with display column names."""
        return pd.DataFrame(
            {label: self._column(field) for field, label in FRAME_COLUMNS.items()},
            index=pd.Index(self.months, name="Month"),
        )


class ProjectionEngine:
    """Month-by-month projection of a savings plan under scripted shocks."""

    def __init__(self, params: SimulationParameters = None):
        self.params = params or SimulationParameters()

    def _growth_percent(self, month: int, fund: float, prev_fund: float) -> float:
        if month > 1 and prev_fund > 0:
            return (fund - prev_fund) / prev_fund * 100
        if month == 1 and self.params.monthly_deposit > 0:
            # First month: the deposit itself is the baseline
            return (fund / self.params.monthly_deposit - 1) * 100
        return 0.0

    def _summarize(self, records: Tuple[MonthlyRecord, ...]) -> SimulationResult:
        if not records:
            return SimulationResult(records, 0.0, 0.0)

        final = records[-1]
        interest_earned = final.fund_value - final.accumulated_deposits

        # Annualised total return; ignores the timing of deposits (not an IRR)
        aagr = 0.0
        years = self.params.investment_period_years
        if final.accumulated_deposits > 0 and years > 0:
            total_return = interest_earned / final.accumulated_deposits
            aagr = ((1 + total_return) ** (1 / years) - 1) * 100

        return SimulationResult(
            records=records,
            total_interest_earned=round2(interest_earned),
            average_annual_growth_rate=round2(aagr),
        )

    def run(self) -> SimulationResult:
        p = self.params
        try:
            p.validate()
        except InvalidParameters as exc:
            return SimulationResult.empty(str(exc))

        deposit = p.monthly_deposit
        rate = p.monthly_interest_rate

        fund = 0.0
        records = []

        for month in range(1, p.total_months + 1):
            prev_fund = fund

            fund += deposit
            # From the month count, so deposits never pick up summation drift
            deposits = deposit * month

            fund *= 1 + rate

            for kind in EVENT_ORDER:
                fund = apply_shock(fund, month, p.variance_tier, kind)

            records.append(
                MonthlyRecord(
                    month=month,
                    accumulated_deposits=round2(deposits),
                    fund_value=round2(fund),
                    interest_gained_this_month=round2(fund - deposits),
                    monthly_growth_percent=round2(
                        self._growth_percent(month, fund, prev_fund)
                    ),
                )
            )

        return self._summarize(tuple(records))


def project(params: SimulationParameters) -> SimulationResult:
    """Run a single projection. Invalid parameters give an empty result with a message."""
    return ProjectionEngine(params=params).run()


def compare_tiers(params: SimulationParameters) -> Dict[VarianceTier, SimulationResult]:
    """Project the same plan once per variance tier, Low to High."""
    out = OrderedDict()
    for tier in VarianceTier:
        out[tier] = project(replace(params, variance_tier=tier))
    return out
