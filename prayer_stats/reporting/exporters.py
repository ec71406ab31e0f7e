"""Export helpers for the prayer-time statistics."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from matplotlib import pyplot as plt

from ..analytics.formatting import minutes_to_hhmm, strip_year
from ..analytics.models import (
    ChartSeries,
    FastingEntry,
    FastingStatSummary,
    PrayerStatistics,
    StatsMetadata,
)
from ..analytics.summaries import (
    fasting_durations_frame,
    fasting_stats_to_frame,
    interval_stats_to_frame,
    prayer_stats_to_frame,
)
from ..analytics.timeseries import series_to_frame
from ..analytics.visuals import create_prayer_times_plot

try:  # Optional dependency for PDF output
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    _REPORTLAB_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    _REPORTLAB_AVAILABLE = False


def _floor_average(values: List[int]) -> int:
    return sum(values) // len(values)


def _fasting_extreme(entry: FastingEntry, *, with_times: bool) -> Dict[str, str]:
    formatted = {
        "duration": minutes_to_hhmm(entry.duration),
        "hijri_date": entry.hijri_date,
    }
    if with_times:
        formatted["fajr"] = entry.fajr
        formatted["maghrib"] = entry.maghrib
    else:
        formatted["gregorian_date"] = strip_year(entry.gregorian_date)
    return formatted


def _fasting_period(summary: Optional[FastingStatSummary], *, with_times: bool) -> Dict[str, Any]:
    if summary is None:
        return {"longest": None, "shortest": None, "range": None, "average": None, "stdev": None}
    return {
        "longest": _fasting_extreme(summary.max_entry, with_times=with_times),
        "shortest": _fasting_extreme(summary.min_entry, with_times=with_times),
        "range": minutes_to_hhmm(summary.range),
        "average": minutes_to_hhmm(summary.avg),
        "stdev": minutes_to_hhmm(summary.stdev),
    }


def format_stats_for_export(stats: PrayerStatistics) -> Dict[str, Any]:
    """
    Build the self-contained export document.

    Every prayer and interval keeps its slot; those without data carry
    ``null`` values. Averages here are the floor of the mean, as in earlier
    exports of this format.
    """

    metadata = stats.metadata
    extremes: List[Dict[str, Any]] = []
    for prayer, summary in stats.prayer_stats.items():
        if summary is None:
            extremes.append({"prayer": prayer, "earliest": None, "latest": None, "average": None})
            continue
        extremes.append(
            {
                "prayer": prayer,
                "earliest": {"time": minutes_to_hhmm(summary.min), "date": summary.min_date},
                "latest": {"time": minutes_to_hhmm(summary.max), "date": summary.max_date},
                "average": minutes_to_hhmm(_floor_average(summary.times)),
            }
        )

    intervals: List[Dict[str, Any]] = []
    for name, summary in stats.interval_stats.items():
        label = name.replace("_to_", " to ")
        if summary is None:
            intervals.append({"interval": label, "shortest": None, "longest": None, "average": None})
            continue
        intervals.append(
            {
                "interval": label,
                "shortest": {
                    "duration": minutes_to_hhmm(summary.min),
                    "date": summary.min_date,
                    "from_time": summary.min_times[0],
                    "to_time": summary.min_times[1],
                },
                "longest": {
                    "duration": minutes_to_hhmm(summary.max),
                    "date": summary.max_date,
                    "from_time": summary.max_times[0],
                    "to_time": summary.max_times[1],
                },
                "average": minutes_to_hhmm(_floor_average(summary.values)),
            }
        )

    ramadan = stats.fasting_stats.get("ramadan")
    return {
        "location": {
            "latitude": metadata.latitude,
            "longitude": metadata.longitude,
            "calculation_method": metadata.calculation_method,
            "year": metadata.year,
        },
        "prayer_time_extremes": extremes,
        "intervals": intervals,
        "fasting": {
            "all_year": _fasting_period(stats.fasting_stats.get("all_year"), with_times=False),
            "ramadan": _fasting_period(ramadan, with_times=True) if ramadan is not None else None,
        },
    }


def export_filename(metadata: StatsMetadata) -> str:
    """``PS-stats-<Method>-Lat_<lat>_Long_<lon>_<YearType>_<year>.json``."""
    method = "_".join((metadata.calculation_method or "Unknown").split())
    latitude = f"{metadata.latitude:.2f}" if metadata.latitude is not None else "NA"
    longitude = f"{metadata.longitude:.2f}" if metadata.longitude is not None else "NA"
    year = metadata.year if metadata.year is not None else ""
    return f"PS-stats-{method}-Lat_{latitude}_Long_{longitude}_{metadata.year_type}_{year}.json"


def export_json_report(stats: PrayerStatistics, *, path: str | Path | None = None) -> str | Path:
    """Serialise the export document; write it to ``path`` when given."""
    document = json.dumps(format_stats_for_export(stats), indent=2, ensure_ascii=False)
    if path is None:
        return document

    target = Path(path)
    target.write_text(document, encoding="utf-8")
    return target


def export_excel_report(
    stats: PrayerStatistics,
    series: ChartSeries | None = None,
    *,
    path: str | Path | None = None,
) -> bytes | Path:
    """
    Build an Excel workbook with the statistics tables and the daily series.

    If ``path`` is provided, the workbook is written to disk and the path is returned.
    Otherwise the bytes object is returned for download workflows.
    """
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:  # type: ignore[arg-type]
        prayer_stats_to_frame(stats.prayer_stats).to_excel(writer, sheet_name="Prayer Times", index=False)
        interval_stats_to_frame(stats.interval_stats).to_excel(writer, sheet_name="Intervals", index=False)
        fasting_stats_to_frame(stats.fasting_stats).to_excel(writer, sheet_name="Fasting", index=False)

        durations = fasting_durations_frame(stats.fasting_stats)
        if not durations.empty:
            durations.to_excel(writer, sheet_name="Fasting Days", index=False)

        if series is not None:
            daily = series_to_frame(series)
            if not daily.empty:
                daily.to_excel(writer, sheet_name="Daily Series", index=False)

    buffer.seek(0)
    if path is None:
        return buffer.getvalue()

    target = Path(path)
    target.write_bytes(buffer.read())
    return target


def _location_line(metadata: StatsMetadata) -> str:
    parts = []
    if metadata.latitude is not None and metadata.longitude is not None:
        parts.append(f"Lat {metadata.latitude:.4f}, Long {metadata.longitude:.4f}")
    if metadata.calculation_method:
        parts.append(metadata.calculation_method)
    if metadata.year is not None:
        parts.append(f"{metadata.year_type} {metadata.year}")
    return " · ".join(parts) or "Unknown location"


def build_pdf_report(stats: PrayerStatistics, series: ChartSeries | None = None) -> bytes:
    """Create a lightweight PDF report with the three statistics tables and, if given, the yearly chart."""
    if not _REPORTLAB_AVAILABLE:  # pragma: no cover - optional dependency
        raise ImportError("ReportLab is required for PDF export. Install it via `pip install reportlab`.")

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=36,
        rightMargin=36,
        topMargin=42,
        bottomMargin=36,
    )
    styles = getSampleStyleSheet()
    story = [
        Paragraph("Prayer Time Statistics", styles["Title"]),
        Paragraph(_location_line(stats.metadata), styles["Normal"]),
        Spacer(1, 12),
    ]

    sections = [
        ("Prayer Times", prayer_stats_to_frame(stats.prayer_stats)),
        ("Intervals", interval_stats_to_frame(stats.interval_stats)),
        ("Fasting", fasting_stats_to_frame(stats.fasting_stats)),
    ]
    for title, frame in sections:
        story.extend([Paragraph(title, styles["Heading2"]), _table(frame), Spacer(1, 12)])

    if series is not None and series.labels:
        story.extend([Paragraph("Prayer times across the year", styles["Heading2"]), _chart_image(series)])

    doc.build(story)
    buffer.seek(0)
    return buffer.getvalue()


def _chart_image(series: ChartSeries) -> Image:
    fig = create_prayer_times_plot(series)
    image_buffer = io.BytesIO()
    fig.savefig(image_buffer, format="png", dpi=150)
    plt.close(fig)
    image_buffer.seek(0)
    width, height = fig.get_size_inches()
    return Image(image_buffer, width=width * 72, height=height * 72)


def _table(df: pd.DataFrame) -> Table:
    values = [df.columns.tolist()] + df.astype(str).values.tolist()
    tbl = Table(values, hAlign="LEFT")
    tbl.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#002b55")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
            ]
        )
    )
    return tbl
