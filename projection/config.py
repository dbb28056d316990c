"""
Configuration for the Investment Growth Simulator.

Defines the savings-plan parameters, the variance tiers, and the scripted
market shock schedule (a tariff dip and a COVID-style crash and recovery).
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union


class VarianceTier(str, Enum):
    """Qualitative severity of the scripted market shocks."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EventKind(str, Enum):
    TARIFF = "tariff"
    COVID = "covid"


# Shocks are applied in this order within a month
EVENT_ORDER: Tuple[EventKind, ...] = (EventKind.TARIFF, EventKind.COVID)

EVENT_LABELS: Dict[EventKind, str] = {
    EventKind.TARIFF: "Tariff shock",
    EventKind.COVID: "COVID-style crash",
}


@dataclass(frozen=True)
class ShockWindow:
    """An inclusive range of months with a fractional impact on fund value."""

    start_month: int
    end_month: int
    impact: float  # -0.05 = -5% of fund value that month

    def contains(self, month: int) -> bool:
        return self.start_month <= month <= self.end_month


# event -> tier -> windows. Windows of one event never overlap.
SHOCK_SCHEDULE: Dict[EventKind, Dict[VarianceTier, Tuple[ShockWindow, ...]]] = {
    # Years 2-3: flat drag for the whole window
    EventKind.TARIFF: {
        VarianceTier.LOW: (ShockWindow(24, 36, -0.005),),
        VarianceTier.MEDIUM: (ShockWindow(24, 36, -0.015),),
        VarianceTier.HIGH: (ShockWindow(24, 36, -0.03),),
    },
    # Years 4-5: initial crash followed by a recovery phase
    EventKind.COVID: {
        VarianceTier.LOW: (
            ShockWindow(48, 48, -0.05),
            ShockWindow(49, 51, 0.02),
        ),
        VarianceTier.MEDIUM: (
            ShockWindow(48, 49, -0.10),
            ShockWindow(50, 53, 0.03),
        ),
        VarianceTier.HIGH: (
            ShockWindow(48, 50, -0.20),
            ShockWindow(51, 56, 0.05),
        ),
    },
}


class InvalidParameters(ValueError):
    """Raised when a savings plan cannot be simulated."""


@dataclass(frozen=True)
class SimulationParameters:
    """A monthly savings plan. Defaults match the tool's initial form."""

    investment_period_years: int = 10
    monthly_deposit: float = 100.0  # GBP
    annual_interest_rate_percent: float = 7.0
    variance_tier: Union[VarianceTier, str] = VarianceTier.MEDIUM

    @property
    def total_months(self) -> int:
        return int(self.investment_period_years) * 12

    @property
    def monthly_interest_rate(self) -> float:
        # Nominal annual rate compounded monthly
        return self.annual_interest_rate_percent / 100 / 12

    def validate(self) -> None:
        problems = []
        years = self.investment_period_years
        if not math.isfinite(years):
            problems.append(
                f"investment period must be a finite number of years (got {years})"
            )
        elif int(years) != years:
            problems.append(
                f"investment period must be a whole number of years "
                f"(got {self.investment_period_years})"
            )
        elif not years > 0:
            problems.append(
                f"investment period must be a positive number of years "
                f"(got {self.investment_period_years})"
            )
        if not math.isfinite(self.monthly_deposit) or not self.monthly_deposit >= 0:
            problems.append(
                f"monthly deposit must be a finite, non-negative amount "
                f"(got {self.monthly_deposit})"
            )
        rate = self.annual_interest_rate_percent
        if not math.isfinite(rate) or not rate >= 0:
            problems.append(
                f"annual interest rate must be a finite, non-negative percentage "
                f"(got {self.annual_interest_rate_percent})"
            )
        if problems:
            raise InvalidParameters("Invalid parameters: " + "; ".join(problems) + ".")


CURRENCY_SYMBOL = "£"


def format_currency(value: float) -> str:
    """Format an amount like '£1,234.56' (negative as '-£12.00')."""
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"

