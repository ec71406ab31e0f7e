"""Streamlit dashboard for yearly prayer-time statistics."""

from __future__ import annotations

import json
from html import escape

import pandas as pd
import streamlit as st

from prayer_stats import EmptyDatasetError, build_series, compute_statistics, extract_metadata, parse_calendar_payload
from prayer_stats.analytics import (
    build_fasting_duration_chart,
    build_prayer_times_chart,
    create_fasting_distribution_plot,
    fasting_stats_to_frame,
    interval_stats_to_frame,
    prayer_stats_to_frame,
)
from prayer_stats.providers import (
    CALCULATION_METHODS,
    AladhanClient,
    NominatimGeocoder,
    ProviderError,
    calculation_method_name,
)
from prayer_stats.reporting import build_pdf_report, export_excel_report, export_filename, export_json_report

st.set_page_config(page_title="Prayer Time Statistics", layout="wide")
st.title("🕌 Prayer Time Statistics")


def _calendar_client() -> AladhanClient:
    # One client per browser session; abort_previous only cancels this user's own search.
    if "calendar_client" not in st.session_state:
        st.session_state["calendar_client"] = AladhanClient()
    return st.session_state["calendar_client"]


def _geocoder() -> NominatimGeocoder:
    if "geocoder" not in st.session_state:
        st.session_state["geocoder"] = NominatimGeocoder()
    return st.session_state["geocoder"]


def _download_bytes(data: bytes, *, file_name: str, mime: str, label: str, key: str) -> None:
    st.download_button(
        label,
        data=data,
        file_name=file_name,
        mime=mime,
        use_container_width=True,
        key=key,
    )


def _render_table(title: str, frame: pd.DataFrame) -> None:
    table_style = """
    <style>
    .stats-table {
        width: 100%;
        border-collapse: collapse;
        font-size: 15px;
        color: #101828;
        margin-bottom: 1rem;
    }
    .stats-table thead {
        background: #f5f7fb;
        text-transform: uppercase;
        font-size: 12px;
        letter-spacing: 0.08em;
        color: #475467;
    }
    .stats-table th,
    .stats-table td {
        padding: 12px 16px;
        text-align: center;
        border-bottom: 1px solid #edf0f5;
    }
    .stats-table td:first-child {
        text-align: left;
        font-weight: 600;
    }
    .stats-table .no-data {
        color: #98a2b3;
    }
    </style>
    """
    st.markdown(f"### {title}")
    st.markdown(table_style, unsafe_allow_html=True)

    header = "".join(f"<th>{escape(str(column))}</th>" for column in frame.columns)
    rows_html: list[str] = []
    for _, row in frame.iterrows():
        values = [str(value) for value in row.tolist()]
        if values[1] == "No data available":
            cells = (
                f"<td>{escape(values[0])}</td>"
                f"<td class='no-data' colspan='{len(values) - 1}'>{escape(values[1])}</td>"
            )
        else:
            cells = "".join(f"<td>{escape(value)}</td>" for value in values)
        rows_html.append(f"<tr>{cells}</tr>")

    st.markdown(
        f"<table class='stats-table'><thead><tr>{header}</tr></thead><tbody>{''.join(rows_html)}</tbody></table>",
        unsafe_allow_html=True,
    )


def _sidebar_payload():
    with st.sidebar:
        st.header("Data source")
        uploaded = st.file_uploader("Upload saved calendar (JSON)", type=["json"])

        st.divider()
        address = st.text_input("Address (optional)")
        latitude = st.number_input("Latitude", value=0.0, format="%.4f")
        longitude = st.number_input("Longitude", value=0.0, format="%.4f")
        year_type = st.radio("Year type", ["Gregorian", "Hijri"], horizontal=True)
        year = st.text_input("Year", value=str(pd.Timestamp.now(tz="UTC").year))
        method = st.selectbox(
            "Calculation method",
            list(CALCULATION_METHODS),
            format_func=lambda key: CALCULATION_METHODS[key],
        )
        calculate = st.button("Calculate", use_container_width=True)

    if uploaded is not None:
        return json.load(uploaded), year_type, None, None

    if not calculate:
        return None, year_type, None, None

    try:
        if address.strip():
            latitude, longitude, display_name = _geocoder().geocode(address)
            st.sidebar.caption(f"Using {display_name}")
        payload = _calendar_client().fetch_calendar(
            latitude,
            longitude,
            year,
            method=method,
            hijri=year_type == "Hijri",
        )
    except ProviderError as exc:
        st.error(f"Failed to fetch prayer times: {exc}")
        return None, year_type, None, None
    return payload, year_type, year, calculation_method_name(method)


def main() -> None:
    payload, year_type, year, method_name = _sidebar_payload()
    if payload is None:
        payload = st.session_state.get("last_payload")
        if payload is None:
            st.info("Upload a saved calendar or fetch one from the sidebar to compute statistics.")
            return
        year_type, year, method_name = st.session_state.get("last_request", (year_type, year, method_name))
    else:
        st.session_state["last_payload"] = payload
        st.session_state["last_request"] = (year_type, year, method_name)

    records = parse_calendar_payload(payload)
    metadata = extract_metadata(payload, year=year, year_type=year_type, calculation_method=method_name)
    try:
        stats = compute_statistics(records, metadata)
    except EmptyDatasetError as exc:
        st.error(str(exc))
        return
    series = build_series(records)

    st.caption(f"{len(records)} days · timezone {metadata.timezone or 'unknown'}")

    _render_table("Prayer times", prayer_stats_to_frame(stats.prayer_stats))
    _render_table("Intervals", interval_stats_to_frame(stats.interval_stats))
    _render_table("Fasting", fasting_stats_to_frame(stats.fasting_stats))

    st.subheader("Prayer times across the year")
    st.plotly_chart(build_prayer_times_chart(series), use_container_width=True)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(build_fasting_duration_chart(stats.fasting_stats), use_container_width=True)
    with col2:
        st.pyplot(create_fasting_distribution_plot(stats.fasting_stats), clear_figure=True)

    st.subheader("Downloads")
    _download_bytes(
        export_json_report(stats).encode("utf-8"),
        file_name=export_filename(metadata),
        mime="application/json",
        label="⬇️ Download JSON statistics",
        key="download_json",
    )
    _download_bytes(
        export_excel_report(stats, series),
        file_name="prayer_time_statistics.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        label="📊 Download Excel workbook",
        key="download_excel",
    )

    try:
        pdf_bytes = build_pdf_report(stats, series)
    except ImportError as exc:
        st.warning(str(exc))
    else:
        _download_bytes(
            pdf_bytes,
            file_name="prayer_time_statistics.pdf",
            mime="application/pdf",
            label="📄 Download PDF summary",
            key="download_pdf",
        )


if __name__ == "__main__":
    main()
