"""
Scripted market shocks.

Looks up the fractional impact of the tariff and COVID-style events in
``SHOCK_SCHEDULE`` and applies it multiplicatively to a fund value.
"""

from typing import List, Optional, Tuple, Union

from .config import EVENT_ORDER, SHOCK_SCHEDULE, EventKind, ShockWindow, VarianceTier


def _resolve_tier(variance_tier: Union[VarianceTier, str]) -> Optional[VarianceTier]:
    if isinstance(variance_tier, VarianceTier):
        return variance_tier
    try:
        return VarianceTier(variance_tier)
    except ValueError:
        return None


def shock_impact(
    month_index: int,
    variance_tier: Union[VarianceTier, str],
    event_kind: Union[EventKind, str],
) -> float:
    """Fractional impact for the month, 0.0 outside any window or for an unknown tier."""
    tier = _resolve_tier(variance_tier)
    if tier is None:
        return 0.0
    windows = SHOCK_SCHEDULE[EventKind(event_kind)].get(tier, ())
    for window in windows:
        if window.contains(month_index):
            return window.impact
    return 0.0


def apply_shock(
    fund_value: float,
    month_index: int,
    variance_tier: Union[VarianceTier, str],
    event_kind: Union[EventKind, str],
) -> float:
    return fund_value * (1 + shock_impact(month_index, variance_tier, event_kind))


def event_windows(
    variance_tier: Union[VarianceTier, str],
) -> List[Tuple[EventKind, ShockWindow]]:
    """All non-zero shock windows for a tier, in application order."""
    tier = _resolve_tier(variance_tier)
    if tier is None:
        return []
    return [
        (kind, window)
        for kind in EVENT_ORDER
        for window in SHOCK_SCHEDULE[kind].get(tier, ())
        if window.impact != 0
    ]
