"""Command-line entrypoint for generating prayer-time statistics."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from prayer_stats import EmptyDatasetError, build_series, compute_statistics, extract_metadata, load_calendar, parse_calendar_payload
from prayer_stats.providers import AladhanClient, ProviderError, calculation_method_name
from prayer_stats.reporting import build_pdf_report, export_excel_report, export_filename, export_json_report


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute yearly prayer-time statistics for one location.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--dataset",
        type=Path,
        help="Path to a saved calendar response (JSON) from the prayer-time provider.",
    )
    source.add_argument(
        "--latitude",
        type=float,
        help="Latitude to fetch a calendar for (requires --longitude).",
    )
    parser.add_argument("--longitude", type=float, help="Longitude to fetch a calendar for.")
    parser.add_argument("--year", type=str, default=None, help="Calendar year (Gregorian, or Hijri with --hijri).")
    parser.add_argument("--hijri", action="store_true", help="Treat --year as a Hijri year.")
    parser.add_argument("--method", type=str, default="auto", help="Provider calculation method id.")
    parser.add_argument(
        "--json",
        type=Path,
        default=None,
        help="Destination for the JSON export (defaults to the standard PS-stats file name).",
    )
    parser.add_argument("--excel", type=Path, default=None, help="Optional destination for an Excel workbook.")
    parser.add_argument("--pdf", type=Path, default=None, help="Optional destination for a PDF summary.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    if args.latitude is not None and args.longitude is None:
        parser.error("--longitude is required together with --latitude")
    if args.latitude is not None and args.year is None:
        parser.error("--year is required when fetching a calendar")
    return args


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    year_type = "Hijri" if args.hijri else "Gregorian"
    method_name = None
    if args.dataset is not None:
        payload = load_calendar(args.dataset)
    else:
        method_name = calculation_method_name(args.method)
        try:
            payload = AladhanClient().fetch_calendar(
                args.latitude,
                args.longitude,
                args.year,
                method=args.method,
                hijri=args.hijri,
            )
        except ProviderError as exc:
            raise SystemExit(f"[ERROR] Failed to fetch prayer times: {exc}") from exc

    records = parse_calendar_payload(payload)
    metadata = extract_metadata(payload, year=args.year, year_type=year_type, calculation_method=method_name)
    try:
        stats = compute_statistics(records, metadata)
    except EmptyDatasetError as exc:
        raise SystemExit(f"[ERROR] {exc}") from exc
    series = build_series(records)

    json_path = args.json or Path(export_filename(metadata))
    export_json_report(stats, path=json_path)
    outputs = [f" - JSON: {json_path}"]

    if args.excel is not None:
        export_excel_report(stats, series, path=args.excel)
        outputs.append(f" - Excel: {args.excel}")

    if args.pdf is not None:
        try:
            pdf_bytes = build_pdf_report(stats, series)
        except ImportError as exc:
            print(f"[WARN] PDF export skipped: {exc}")
        else:
            args.pdf.write_bytes(pdf_bytes)
            outputs.append(f" - PDF: {args.pdf}")

    print(f"Statistics generated for {len(records)} days:\n" + "\n".join(outputs))


if __name__ == "__main__":
    main()
