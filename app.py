"""
Investment Growth Simulator - Interactive Dashboard

Projects a monthly savings plan under compound interest and two scripted
market shocks (a tariff dip and a COVID-style crash and recovery).

Run with: streamlit run app.py
"""

import logging
import os

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import numpy as np
import pandas as pd

from projection.config import (
    EVENT_LABELS,
    SimulationParameters,
    VarianceTier,
    format_currency,
)
from projection.engine import FRAME_COLUMNS, compare_tiers, project
from projection.shocks import event_windows

logging.basicConfig(
    level=os.environ.get("GROWTH_SIM_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ── Page config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="Investment Growth Simulator",
    layout="wide",
    initial_sidebar_state="expanded",
)

COLORS = px.colors.qualitative.Set2
TIER_COLORS = {
    VarianceTier.LOW: "#59a14f",
    VarianceTier.MEDIUM: "#f28e2b",
    VarianceTier.HIGH: "#e15759",
}

# Common layout for all charts
CHART_THEME = dict(
    template="simple_white",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#262730"),
)


# ── Helper: projection chart ─────────────────────────────────────────
def growth_chart(result, tier):
    fig = go.Figure()
    months = result.months
    # Per-point inspection: cumulative gain and monthly growth
    extra = np.column_stack([result.interest_gained, result.monthly_growth_percent])

    fig.add_trace(
        go.Scatter(
            x=months, y=result.accumulated_deposits, name="Accumulated Deposits",
            mode="lines", line=dict(color="#8884d8", width=2.5),
            hovertemplate="£%{y:,.2f}<extra>Accumulated Deposits</extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=months, y=result.fund_values, name="Fund with Interest & Events",
            mode="lines", line=dict(color="#82ca9d", width=2.5),
            customdata=extra,
            hovertemplate=(
                "£%{y:,.2f}<br>"
                "Interest Gained (Month): £%{customdata[0]:,.2f}<br>"
                "Monthly Fund Growth: %{customdata[1]:.2f}%"
                "<extra>Fund with Interest & Events</extra>"
            ),
        )
    )

    last_month = int(months[-1])
    for kind, window in event_windows(tier):
        if window.start_month > last_month:
            continue
        label = EVENT_LABELS[kind]
        if window.impact > 0:
            label += " recovery"
        fig.add_vrect(
            x0=window.start_month - 0.5,
            x1=min(window.end_month, last_month) + 0.5,
            fillcolor="#e15759" if window.impact < 0 else "#59a14f",
            opacity=0.12, line_width=0,
            annotation_text=f"{label} ({window.impact * 100:+.1f}%/mo)",
            annotation_position="top left",
            annotation_font_size=10,
        )

    fig.update_layout(
        **CHART_THEME,
        title=dict(text="Fund Growth Over Time", font=dict(size=14)),
        xaxis_title="Month", yaxis_title="Amount (£)", height=440,
        margin=dict(l=60, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.3),
    )
    return fig


def tier_chart(results_by_tier):
    fig = go.Figure()
    for i, (tier, res) in enumerate(results_by_tier.items()):
        fig.add_trace(
            go.Scatter(
                x=res.months, y=res.fund_values, name=tier.value, mode="lines",
                line=dict(color=TIER_COLORS.get(tier, COLORS[i % len(COLORS)]), width=2),
            )
        )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text="Fund Value by Market Variance", font=dict(size=14)),
        xaxis_title="Month", yaxis_title="Fund (£)", height=380,
        margin=dict(l=60, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.3),
    )
    return fig


# ── Sidebar ──────────────────────────────────────────────────────────
defaults = SimulationParameters()
st.sidebar.title("Savings Plan")

period = st.sidebar.number_input(
    "Investment Period (Years)",
    min_value=1, max_value=60, value=defaults.investment_period_years, step=1,
)
deposit = st.sidebar.number_input(
    "Monthly Deposit (£)",
    min_value=0.0, value=float(defaults.monthly_deposit), step=10.0,
)
rate = st.sidebar.number_input(
    "Annual Interest Rate (%)",
    min_value=0.0, max_value=50.0,
    value=float(defaults.annual_interest_rate_percent), step=0.1,
)
variance = st.sidebar.selectbox(
    "Market Variance",
    [t.value for t in VarianceTier],
    index=[t.value for t in VarianceTier].index(VarianceTier(defaults.variance_tier).value),
    help="Severity of the scripted tariff and COVID-style market events",
)

# Build params
params = SimulationParameters(
    investment_period_years=int(period),
    monthly_deposit=float(deposit),
    annual_interest_rate_percent=float(rate),
    variance_tier=VarianceTier(variance),
)

# ── Run projection ───────────────────────────────────────────────────
result = project(params)

# ── Header ───────────────────────────────────────────────────────────
st.title("Investment Growth Simulator")
st.markdown(
    "Month-by-month projection of a regular savings plan with compound "
    "interest and two scripted market events."
)

if not result.ok:
    logger.warning("Projection rejected: %s", result.error_message)
    st.error(result.error_message)
    st.stop()

logger.info(
    "Projected %d months (tier=%s): interest=%.2f aagr=%.2f%%",
    len(result.records), variance,
    result.total_interest_earned, result.average_annual_growth_rate,
)

# Key metrics row
final = result.final_record
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Interest Earned", format_currency(result.total_interest_earned))
c2.metric("Average Annual Growth Rate", f"{result.average_annual_growth_rate:.2f}%")
c3.metric("Final Fund Value", format_currency(final.fund_value))
c4.metric("Total Deposits", format_currency(final.accumulated_deposits))

# ── Tabs ─────────────────────────────────────────────────────────────
tab_growth, tab_tiers, tab_table, tab_method = st.tabs(
    ["Projection", "Variance Comparison", "Monthly Data", "Methodology"]
)

# ── TAB: Projection ──────────────────────────────────────────────────
with tab_growth:
    st.plotly_chart(growth_chart(result, params.variance_tier), use_container_width=True)

# ── TAB: Variance Comparison ────────────────────────────────────────
with tab_tiers:
    by_tier = compare_tiers(params)
    st.plotly_chart(tier_chart(by_tier), use_container_width=True)

    rows = []
    for tier, res in by_tier.items():
        rows.append({
            "Market Variance": tier.value,
            "Final Fund Value": format_currency(res.final_record.fund_value),
            "Total Interest Earned": format_currency(res.total_interest_earned),
            "Average Annual Growth Rate": f"{res.average_annual_growth_rate:.2f}%",
        })
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)

# ── TAB: Monthly Data ───────────────────────────────────────────────
with tab_table:
    money_cols = [FRAME_COLUMNS[k] for k in
                  ("accumulated_deposits", "fund_value", "interest_gained_this_month")]
    growth_col = FRAME_COLUMNS["monthly_growth_percent"]
    column_config = {c: st.column_config.NumberColumn(format="£%.2f") for c in money_cols}
    column_config[growth_col] = st.column_config.NumberColumn(format="%.2f%%")
    st.dataframe(result.to_frame(), column_config=column_config, use_container_width=True)

# ── TAB: Methodology ────────────────────────────────────────────────
with tab_method:
    st.header("How the projection works")
    st.markdown("""
Each month the simulator:

1. Adds the monthly deposit to the fund.
2. Applies one month of interest (annual rate ÷ 12).
3. Applies the tariff event, then the COVID-style event, as a percentage of the fund.

**Interest Gained (Month)** is the fund value minus all deposits so far, not the
interest earned in that single month. **Monthly Fund Growth** compares the fund
with the previous month; in month 1 it is measured against the deposit.
""")

    st.header("Scripted Market Events")
    event_rows = []
    for tier in VarianceTier:
        for kind, window in event_windows(tier):
            event_rows.append({
                "Market Variance": tier.value,
                "Event": EVENT_LABELS[kind],
                "Months": f"{window.start_month}-{window.end_month}",
                "Monthly Impact": f"{window.impact * 100:+.1f}%",
            })
    st.dataframe(pd.DataFrame(event_rows), hide_index=True, use_container_width=True)

    st.header("Known Limitations")
    st.markdown("""
- **Average Annual Growth Rate is approximate**: total return is annualised over the whole period and ignores when each deposit was made. It is not an IRR/XIRR.
- **Events are scripted, not modelled**: the same dips and recoveries occur at the same months for every plan.
- **Rounding**: values are shown to two decimal places; the running fund is carried at full precision.
""")

# ── Footer ───────────────────────────────────────────────────────────
st.divider()
st.caption(
    "This is a simplified illustration for educational exploration "
    "and should not be used for actual financial decisions."
)
