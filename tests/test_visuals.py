from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

from matplotlib import pyplot as plt  # noqa: E402

from prayer_stats.analytics.fasting import compute_fasting  # noqa: E402
from prayer_stats.analytics.models import ChartSeries, DayRecord, HijriDate  # noqa: E402
from prayer_stats.analytics.timeseries import build_series  # noqa: E402
from prayer_stats.analytics.visuals import (  # noqa: E402
    build_fasting_duration_chart,
    create_fasting_distribution_plot,
    create_prayer_times_plot,
)


def _sample_records() -> list[DayRecord]:
    records = []
    for day, (fajr, maghrib, month) in enumerate(
        [("04:50", "18:20", 9), ("04:49", "18:21", 9), ("04:20", "18:30", 10), ("04:19", "18:31", 10)],
        start=10,
    ):
        records.append(
            DayRecord(
                gregorian_date=f"{day:02d}-04-2024",
                timings={"Fajr": f"{fajr} (+03)", "Maghrib": f"{maghrib} (+03)"},
                hijri=HijriDate(day=day, month_number=month, month_name="Ramadan" if month == 9 else "Shawwal"),
                meta_timezone="Asia/Riyadh",
            )
        )
    return records


def test_fasting_duration_chart_splits_ramadan():
    fig = build_fasting_duration_chart(compute_fasting(_sample_records()))
    assert {trace.name for trace in fig.data} == {"Ramadan", "Other days"}


def test_fasting_duration_chart_without_data():
    fig = build_fasting_duration_chart({"all_year": None, "ramadan": None})
    assert fig.layout.annotations[0].text == "No fasting data available."


def test_matplotlib_renderers():
    records = _sample_records()

    histogram = create_fasting_distribution_plot(compute_fasting(records))
    assert histogram.axes[0].get_title() == "Distribution of fasting durations"

    lines = create_prayer_times_plot(build_series(records))
    assert len(lines.axes[0].lines) == 6

    empty = create_prayer_times_plot(ChartSeries(labels=[], datasets=[], month_boundaries=[]))
    assert not empty.axes[0].axison
    plt.close("all")
