from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from dataclasses import replace
from pathlib import Path

from viewing_dashboard.aggregator import build_report, paginate_titles, resolve_metric
from viewing_dashboard.charts import days_frame, metric_label, titles_frame
from viewing_dashboard.config import Settings, load_settings
from viewing_dashboard.csv_loader import load_viewing_csv
from viewing_dashboard.exceptions import CsvParseError
from viewing_dashboard.models import ViewingReport


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings()
    except (RuntimeError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    _configure_logging(settings.log_level)
    logger = logging.getLogger("viewing_dashboard")

    if args.serve:
        return _serve(logger)

    if not args.history:
        print("Nothing to do. Use --history PATH to summarize a CSV or --serve to open the dashboard.")
        return 0

    history_path = Path(args.history)
    if not history_path.exists():
        logger.error(f"History file not found: {history_path}")
        return 1

    result = load_viewing_csv(history_path, logger=logger)
    if args.strict:
        try:
            result.raise_for_errors()
        except CsvParseError as e:
            logger.error(f"Aborting in strict mode: {e}")
            return 1
    elif result.first_error:
        logger.warning(result.first_error)

    metric = resolve_metric(args.metric or settings.metric, result.columns)
    options = replace(settings.aggregation_options(metric), top_n=None)
    if args.series is not None:
        options = replace(options, normalize_series=args.series)

    report = build_report(result.rows, options)
    _print_report(report, settings, rows=len(result.rows), top_n=args.top or settings.top_n, page=args.page)
    return 0


def _print_report(
    report: ViewingReport,
    settings: Settings,
    rows: int,
    top_n: int,
    page: int | None,
) -> None:
    label = metric_label(report.metric)

    print()
    print(f"Parsed {rows:,} rows ({label.lower()} report)")
    print()
    print(f"{label} per day:")
    if report.by_day:
        print(days_frame(report.by_day).rename(columns={"metric": label.lower()}).to_string(index=False))
    else:
        print("  (no data)")
    print()

    if page is not None:
        title_page = paginate_titles(report.by_title, page, page_size=settings.page_size)
        print(f"Titles, page {title_page.page} of {title_page.page_count} ({title_page.total} titles):")
        points = title_page.items
    else:
        print(f"Top {top_n} titles:")
        points = report.by_title[:top_n]

    if points:
        print(titles_frame(points).rename(columns={"metric": label.lower()}).to_string(index=False))
    else:
        print("  (no data)")


def _serve(logger: logging.Logger) -> int:
    script = Path(__file__).with_name("dashboard.py")
    logger.info("dashboard_starting", extra={"script": str(script)})
    try:
        return subprocess.call([sys.executable, "-m", "streamlit", "run", str(script)])
    except KeyboardInterrupt:
        return 0


def _configure_logging(level: str) -> None:
    from viewing_dashboard.logging_setup import configure_logging
    configure_logging(level)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="viewing-dashboard",
        description="Summarize a Netflix viewing-history CSV, or open the dashboard.",
    )
    parser.add_argument("--history", help="Path to a viewing-history CSV export.")
    parser.add_argument(
        "--metric",
        choices=["auto", "count", "duration"],
        help="Count views or sum watched minutes (default from config).",
    )
    parser.add_argument(
        "--series",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Collapse 'Show: Episode' titles to the show name.",
    )
    parser.add_argument("--top", type=int, help="How many top titles to print.")
    parser.add_argument("--page", type=int, help="Print one page of the full title ranking instead.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error if the CSV had any parse errors.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Launch the Streamlit dashboard.",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    sys.exit(main())
