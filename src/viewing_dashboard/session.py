from __future__ import annotations

import logging
from dataclasses import replace

from viewing_dashboard.aggregator import (
    DEFAULT_PAGE_SIZE,
    AggregationOptions,
    build_report,
    paginate_titles,
    resolve_metric,
)
from viewing_dashboard.csv_loader import CsvSource, load_viewing_csv
from viewing_dashboard.models import ParseResult, RawRow, TitlePage, TitlePoint, ViewingReport


class DashboardSession:
    """
    State behind one dashboard view: the current rows, the last parse error
    and the report derived from them.

    The report is rebuilt only when the rows list is replaced. The ranked
    title list is kept whole so it can be paged; `top_titles` applies the
    top-N cut.
    """

    def __init__(
        self,
        options: AggregationOptions,
        metric: str = "auto",
        page_size: int = DEFAULT_PAGE_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        self._options = options
        self._requested_metric = metric
        self._page_size = page_size
        self._logger = logger or logging.getLogger("viewing_dashboard")

        self.rows: list[RawRow] | None = None
        self.error: str | None = None
        self.columns: tuple[str, ...] = ()

        self._load_token = 0
        self._report: ViewingReport | None = None
        self._report_rows: list[RawRow] | None = None

    def begin_load(self) -> int:
        self._load_token += 1
        self.error = None
        return self._load_token

    def complete_load(self, token: int, result: ParseResult) -> bool:
        if token != self._load_token:
            self._logger.info("stale_parse_ignored", extra={"token": token, "latest": self._load_token})
            return False

        self.error = result.first_error
        self.columns = result.columns
        self.rows = result.rows
        return True

    def load(self, source: CsvSource) -> bool:
        token = self.begin_load()
        return self.complete_load(token, load_viewing_csv(source, logger=self._logger))

    def clear(self) -> None:
        self.rows = None
        self.columns = ()
        self._logger.info("dataset_cleared")

    @property
    def metric(self) -> str:
        return resolve_metric(self._requested_metric, self.columns)

    @property
    def report(self) -> ViewingReport | None:
        if self.rows is None:
            return None
        if self._report is None or self._report_rows is not self.rows:
            options = replace(self._options, metric=self.metric, top_n=None)
            self._report = build_report(self.rows, options)
            self._report_rows = self.rows
            self._logger.info(
                "report_built",
                extra={
                    "metric": self._report.metric,
                    "days": len(self._report.by_day),
                    "titles": len(self._report.by_title),
                },
            )
        return self._report

    def top_titles(self) -> list[TitlePoint]:
        report = self.report
        if report is None:
            return []
        if self._options.top_n is None:
            return list(report.by_title)
        return report.by_title[: self._options.top_n]

    def title_page(self, page: int) -> TitlePage:
        report = self.report
        by_title = report.by_title if report is not None else []
        return paginate_titles(by_title, page, page_size=self._page_size)
