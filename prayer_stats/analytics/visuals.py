"""Plotly and Matplotlib visualisations for the prayer-time analytics."""

from __future__ import annotations

from typing import Dict, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import seaborn as sns
from matplotlib import pyplot as plt

from .formatting import minutes_to_hhmm
from .models import ChartSeries, FastingStatSummary
from .summaries import fasting_durations_frame

sns.set_theme(style="whitegrid")
_GREEN = "#059669"
_SLATE = "#94a3b8"
_RAMADAN = "#9966FF"


def _empty_figure(message: str):
    fig = px.scatter()
    fig.add_annotation(text=message, showarrow=False)
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=40, b=10))
    return fig


def _hour_ticks() -> tuple[list[int], list[str]]:
    values = list(range(0, 25, 2))
    return values, [f"{value:02d}:00" for value in values]


def build_prayer_times_chart(series: ChartSeries):
    """Line chart of every prayer across the year with month separators."""
    if not series.labels:
        return _empty_figure("No prayer-time data available.")

    x_labels = [f"{gregorian}<br>{hijri}" if hijri else gregorian for gregorian, hijri in series.labels]
    fig = go.Figure()
    for dataset in series.datasets:
        fig.add_trace(
            go.Scatter(
                x=list(range(len(dataset.data))),
                y=dataset.data,
                mode="lines",
                name=dataset.label,
                line=dict(color=dataset.color, width=2),
                customdata=[[label, raw or ""] for label, raw in zip(x_labels, dataset.formatted_times)],
                hovertemplate="%{customdata[0]}<br>" + dataset.label + ": %{customdata[1]}<extra></extra>",
                connectgaps=False,
            )
        )

    for boundary in series.month_boundaries:
        fig.add_vline(x=boundary - 0.5, line_width=1, line_dash="dash", line_color=_SLATE)

    tick_step = max(len(x_labels) // 12, 1)
    tick_positions = list(range(0, len(x_labels), tick_step))
    hour_values, hour_labels = _hour_ticks()
    fig.update_layout(
        title="Prayer times across the year",
        height=520,
        legend_title_text="",
        xaxis=dict(
            tickmode="array",
            tickvals=tick_positions,
            ticktext=[x_labels[position] for position in tick_positions],
        ),
        yaxis=dict(
            title="Time of day",
            range=[0, 24],
            tickmode="array",
            tickvals=hour_values,
            ticktext=hour_labels,
        ),
    )
    return fig


def build_fasting_duration_chart(fasting_stats: Dict[str, Optional[FastingStatSummary]]):
    """Daily Fajr to Maghrib durations in hours, Ramadan days highlighted."""
    frame = fasting_durations_frame(fasting_stats)
    if frame.empty:
        return _empty_figure("No fasting data available.")

    frame = frame.assign(
        hours=frame["duration"] / 60.0,
        period=frame["ramadan"].map({True: "Ramadan", False: "Other days"}),
        label=frame["duration"].apply(minutes_to_hhmm),
    )
    fig = px.bar(
        frame,
        x="gregorian_date",
        y="hours",
        color="period",
        color_discrete_map={"Ramadan": _RAMADAN, "Other days": _GREEN},
        hover_data={"label": True, "hijri_date": True, "hours": False},
        labels={"gregorian_date": "Date", "hours": "Fasting hours", "label": "Duration"},
        title="Daily fasting duration (Fajr → Maghrib)",
    )
    fig.update_layout(height=400, legend_title_text="", bargap=0)
    return fig


def create_fasting_distribution_plot(fasting_stats: Dict[str, Optional[FastingStatSummary]]):
    """Return a Matplotlib histogram of fasting durations."""
    fig, ax = plt.subplots(figsize=(6, 4))
    frame = fasting_durations_frame(fasting_stats)
    if frame.empty:
        ax.text(0.5, 0.5, "No fasting durations available.", ha="center", va="center")
        ax.axis("off")
        return fig

    frame = frame.assign(hours=frame["duration"] / 60.0)
    sns.histplot(data=frame, x="hours", bins=20, color=_GREEN, alpha=0.7, ax=ax, label="All year")
    ramadan = frame[frame["ramadan"]]
    if not ramadan.empty:
        sns.histplot(data=ramadan, x="hours", bins=10, color=_RAMADAN, alpha=0.7, ax=ax, label="Ramadan")
    ax.set_title("Distribution of fasting durations")
    ax.set_xlabel("Hours from Fajr to Maghrib")
    ax.set_ylabel("Days")
    ax.legend()
    fig.tight_layout()
    return fig


def create_prayer_times_plot(series: ChartSeries):
    """Static Matplotlib rendering of the prayer-time series for reports."""
    fig, ax = plt.subplots(figsize=(10, 4.5))
    if not series.labels:
        ax.text(0.5, 0.5, "No prayer-time data available.", ha="center", va="center")
        ax.axis("off")
        return fig

    for dataset in series.datasets:
        values = pd.Series(dataset.data, dtype="float")
        ax.plot(values.index, values.values, color=dataset.color, linewidth=1.5, label=dataset.label)

    for boundary in series.month_boundaries:
        ax.axvline(boundary - 0.5, color=_SLATE, linestyle="--", linewidth=1)

    hour_values, hour_labels = _hour_ticks()
    ax.set_ylim(0, 24)
    ax.set_yticks(hour_values)
    ax.set_yticklabels(hour_labels)
    ax.set_xlabel("Day of year")
    ax.set_ylabel("Time of day")
    ax.set_title("Prayer times across the year")
    ax.legend(loc="upper right", ncol=3, fontsize="small")
    fig.tight_layout()
    return fig
