from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from viewing_dashboard.exceptions import CsvParseError

TITLE_COLUMNS = ("Title",)
DATE_COLUMNS = ("Date",)
START_TIME_COLUMNS = ("Start Time", "Start Time UTC")
DURATION_COLUMNS = ("Duration",)


@dataclass(frozen=True)
class RawRow:
    title: str | None = None
    date: str | None = None
    start_time: str | None = None
    duration: str | None = None


@dataclass(frozen=True)
class DayPoint:
    day: str
    metric: int


@dataclass(frozen=True)
class TitlePoint:
    title: str
    metric: int


@dataclass(frozen=True)
class TitlePage:
    items: list[TitlePoint]
    page: int
    page_count: int
    total: int


@dataclass(frozen=True)
class ViewingReport:
    metric: str
    by_day: list[DayPoint]
    by_title: list[TitlePoint]

    @property
    def day_total(self) -> int:
        return sum(point.metric for point in self.by_day)

    @property
    def title_total(self) -> int:
        return sum(point.metric for point in self.by_title)


@dataclass(frozen=True)
class ParseIssue:
    message: str
    row: int | None = None


@dataclass(frozen=True)
class ParseResult:
    rows: list[RawRow]
    errors: list[ParseIssue] = field(default_factory=list)
    columns: tuple[str, ...] = ()

    @property
    def first_error(self) -> str | None:
        if not self.errors:
            return None
        return self.errors[0].message

    def raise_for_errors(self) -> None:
        if self.errors:
            raise CsvParseError(self.errors[0].message)


def _pick_column(columns: tuple[str, ...], possible_names: tuple[str, ...]) -> str | None:
    # Exact matches first, then case-insensitive ones
    for name in possible_names:
        if name in columns:
            return name

    lowered = {c.strip().lower(): c for c in columns}
    for name in possible_names:
        if name.lower() in lowered:
            return lowered[name.lower()]

    return None


def _clean_cell(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return str(value)


def build_row_reader(columns: tuple[str, ...]):
    """
    Resolve the export's column names once and return a function turning
    one record (column -> cell) into a RawRow.
    """
    title_col = _pick_column(columns, TITLE_COLUMNS)
    date_col = _pick_column(columns, DATE_COLUMNS)
    start_col = _pick_column(columns, START_TIME_COLUMNS)
    duration_col = _pick_column(columns, DURATION_COLUMNS)

    def read(record: Mapping[str, Any]) -> RawRow:
        return RawRow(
            title=_clean_cell(record.get(title_col)) if title_col else None,
            date=_clean_cell(record.get(date_col)) if date_col else None,
            start_time=_clean_cell(record.get(start_col)) if start_col else None,
            duration=_clean_cell(record.get(duration_col)) if duration_col else None,
        )

    return read


def parse_raw_row(record: Mapping[str, Any]) -> RawRow:
    return build_row_reader(tuple(record.keys()))(record)


def has_duration_columns(columns: tuple[str, ...]) -> bool:
    return (
        _pick_column(columns, DURATION_COLUMNS) is not None
        or _pick_column(columns, START_TIME_COLUMNS) is not None
    )
