from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from viewing_dashboard.models import (
    DayPoint,
    RawRow,
    TitlePage,
    TitlePoint,
    ViewingReport,
    has_duration_columns,
)
from viewing_dashboard.parsing import parse_day_key, parse_duration_minutes, to_series_title

METRICS = ("count", "duration")
DEFAULT_MISSING_DATE_KEY = "1/1/75"
DEFAULT_PAGE_SIZE = 8


@dataclass(frozen=True)
class AggregationOptions:
    metric: str = "count"
    normalize_series: bool = False
    missing_date_key: str = DEFAULT_MISSING_DATE_KEY
    top_n: int | None = None


def resolve_metric(requested: str, columns: Iterable[str]) -> str:
    if requested in METRICS:
        return requested
    if requested != "auto":
        raise ValueError(f"Unsupported metric: {requested}")
    return "duration" if has_duration_columns(tuple(columns)) else "count"


def build_report(rows: Iterable[RawRow], options: AggregationOptions) -> ViewingReport:
    if options.metric not in METRICS:
        raise ValueError(f"Unsupported metric: {options.metric}")

    day_totals: dict[str, int] = {}
    title_totals: dict[str, int] = {}

    for row in rows:
        title = to_series_title(row.title) if options.normalize_series else (row.title or "")

        if options.metric == "count":
            # Only an absent cell falls back; an empty one is its own day
            day = row.date if row.date is not None else options.missing_date_key
            amount = 1
        else:
            day = parse_day_key(row.start_time if row.start_time is not None else row.date)
            if day is None:
                continue
            amount = parse_duration_minutes(row.duration)

        day_totals[day] = day_totals.get(day, 0) + amount
        title_totals[title] = title_totals.get(title, 0) + amount

    by_day = sorted(
        (DayPoint(day=day, metric=metric) for day, metric in day_totals.items()),
        key=lambda point: point.day,
    )
    by_title = sorted(
        (TitlePoint(title=title, metric=metric) for title, metric in title_totals.items()),
        key=lambda point: point.metric,
        reverse=True,
    )
    if options.top_n is not None:
        by_title = by_title[: options.top_n]

    return ViewingReport(metric=options.metric, by_day=by_day, by_title=by_title)


def paginate_titles(
    by_title: list[TitlePoint],
    page: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TitlePage:
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    total = len(by_title)
    page_count = max(1, math.ceil(total / page_size))
    page = min(max(page, 1), page_count)
    start = (page - 1) * page_size

    return TitlePage(
        items=by_title[start:start + page_size],
        page=page,
        page_count=page_count,
        total=total,
    )
