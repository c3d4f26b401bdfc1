from __future__ import annotations

import io
import logging

from viewing_dashboard.aggregator import AggregationOptions
from viewing_dashboard.models import ParseIssue, ParseResult, RawRow
from viewing_dashboard.session import DashboardSession


def _session(metric: str = "auto", top_n: int | None = 10) -> DashboardSession:
    return DashboardSession(
        options=AggregationOptions(normalize_series=True, top_n=top_n),
        metric=metric,
        logger=logging.getLogger("test_session"),
    )


def test_new_session_has_no_report() -> None:
    session = _session()

    assert session.rows is None
    assert session.error is None
    assert session.report is None
    assert session.top_titles() == []
    assert session.title_page(1).items == []


def test_load_resolves_metric_from_columns() -> None:
    session = _session()
    csv_text = "Title,Start Time,Duration\nDark: Lies,2024-01-02 21:00:00,0:45:00\n"

    assert session.load(io.StringIO(csv_text)) is True
    assert session.metric == "duration"
    assert [(p.title, p.metric) for p in session.report.by_title] == [("Dark", 45)]


def test_report_is_memoized_on_rows_reference(caplog) -> None:
    session = _session(metric="count")
    session.complete_load(session.begin_load(), ParseResult(rows=[RawRow(title="A", date="1/1/24")]))

    with caplog.at_level(logging.INFO, logger="test_session"):
        first = session.report
        second = session.report
    assert first is second
    assert [r.getMessage() for r in caplog.records].count("report_built") == 1

    session.complete_load(session.begin_load(), ParseResult(rows=list(session.rows)))
    assert session.report is not first


def test_stale_load_is_ignored() -> None:
    session = _session(metric="count")
    stale = session.begin_load()
    latest = session.begin_load()

    assert session.complete_load(latest, ParseResult(rows=[RawRow(title="New")])) is True
    assert session.complete_load(stale, ParseResult(rows=[RawRow(title="Old")])) is False
    assert [row.title for row in session.rows] == ["New"]


def test_parse_error_is_surfaced_but_rows_kept() -> None:
    session = _session(metric="count")
    result = ParseResult(
        rows=[RawRow(title="A")],
        errors=[ParseIssue(message="first problem"), ParseIssue(message="second problem")],
    )

    session.complete_load(session.begin_load(), result)

    assert session.error == "first problem"
    assert len(session.rows) == 1

    session.begin_load()
    assert session.error is None


def test_clear_drops_rows() -> None:
    session = _session(metric="count")
    session.complete_load(session.begin_load(), ParseResult(rows=[RawRow(title="A")]))

    session.clear()

    assert session.rows is None
    assert session.report is None


def test_top_titles_and_pages_share_full_ranking() -> None:
    session = _session(metric="count", top_n=3)
    rows = [RawRow(title=f"T{i}", date="1/1/24") for i in range(12) for _ in range(12 - i)]
    session.complete_load(session.begin_load(), ParseResult(rows=rows))

    assert [p.title for p in session.top_titles()] == ["T0", "T1", "T2"]

    page = session.title_page(2)
    assert [p.title for p in page.items] == ["T8", "T9", "T10", "T11"]
    assert page.page_count == 2
