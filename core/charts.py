from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def workload_chart(series: List[Dict[str, Any]]) -> alt.Chart:
    long_df = pd.DataFrame(series, columns=["name", "hours", "capacity"]).melt(
        id_vars="name", value_vars=["hours", "capacity"], var_name="metric", value_name="value"
    )
    return (
        alt.Chart(long_df)
        .mark_bar()
        .encode(
            x=alt.X("name:N", title="Employee", sort=None, axis=alt.Axis(labelAngle=-15)),
            xOffset="metric:N",
            y=alt.Y("value:Q", title="Hours"),
            color=alt.Color("metric:N", title="Metric"),
            tooltip=["name", "metric", alt.Tooltip("value:Q", format=",.1f")],
        )
        .properties(height=280)
    )


def pattern_chart(series: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(series, columns=["key", "name", "value"])
    return (
        alt.Chart(df)
        .mark_arc(outerRadius=110)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("name:N", title="Assignment pattern", sort=None),
            tooltip=["name", "value"],
        )
        .properties(height=280)
    )


def org_unit_tasks_chart(series: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(series, columns=["name", "value"])
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("name:N", title="Org unit", sort=None),
            y=alt.Y("value:Q", title="# Tasks"),
            tooltip=["name", "value"],
        )
        .properties(height=280)
    )


def org_unit_risk_chart(series: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(series, columns=["name", "risk"])
    return (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(
            x=alt.X("name:N", title="Org unit", sort=None),
            y=alt.Y("risk:Q", title="Average risk", scale=alt.Scale(domain=[0, 100])),
            tooltip=["name", "risk"],
        )
        .properties(height=280)
    )


def deadline_trend_chart(series: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(series, columns=["name", "tasks"])
    return (
        alt.Chart(df)
        .mark_line(point={"filled": True, "size": 60})
        .encode(
            x=alt.X("name:O", title="Deadline week", sort=None),
            y=alt.Y("tasks:Q", title="Tasks", axis=alt.Axis(format="d", gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=["name", "tasks"],
        )
        .properties(height=260)
    )
