from __future__ import annotations

import csv
import io
import logging
import warnings
from pathlib import Path
from typing import IO, Union

import pandas as pd

from viewing_dashboard.models import ParseIssue, ParseResult, build_row_reader

CsvSource = Union[str, Path, IO[bytes], IO[str]]


def load_viewing_csv(source: CsvSource, logger: logging.Logger | None = None) -> ParseResult:
    """
    Parse a viewing-history export into RawRows.

    Every data line becomes a row. Lines with too few fields are padded,
    lines with too many are cut to the header width; both are reported.
    Bytes that are not UTF-8 are replaced and reported. An unterminated
    quote is reported; pandas drops the unclosed row.
    """
    logger = logger or logging.getLogger("viewing_dashboard")
    issues: list[ParseIssue] = []

    text = _read_text(source, issues)
    width = _check_field_counts(text, issues)
    if width is None:
        _log_issues(logger, issues)
        logger.info("csv_parsed", extra={"rows": 0, "errors": len(issues), "columns": []})
        return ParseResult(rows=[], errors=issues)

    try:
        with warnings.catch_warnings():
            # Field count problems are already reported as issues
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            frame = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                engine="python",
                on_bad_lines=lambda fields: fields[:width],
            )
    except pd.errors.EmptyDataError:
        _log_issues(logger, issues)
        logger.info("csv_parsed", extra={"rows": 0, "errors": len(issues), "columns": []})
        return ParseResult(rows=[], errors=issues)
    except pd.errors.ParserError as exc:
        issues.append(ParseIssue(message=str(exc)))
        logger.warning("csv_parse_failed", extra={"reason": str(exc)})
        return ParseResult(rows=[], errors=issues)

    columns = tuple(str(c) for c in frame.columns)
    read_row = build_row_reader(columns)
    # Short lines are padded with NaN; rows carry None for missing cells
    frame = frame.astype(object).where(frame.notna(), None)
    rows = [read_row(record) for record in frame.to_dict("records")]

    _log_issues(logger, issues)
    logger.info(
        "csv_parsed",
        extra={"rows": len(rows), "errors": len(issues), "columns": list(columns)},
    )
    return ParseResult(rows=rows, errors=issues, columns=columns)


def _read_text(source: CsvSource, issues: list[ParseIssue]) -> str:
    if isinstance(source, (str, Path)):
        with open(source, "rb") as handle:
            payload = handle.read()
    else:
        payload = source.read()

    if isinstance(payload, str):
        return payload.removeprefix("\ufeff")

    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        issues.append(ParseIssue(message=f"Invalid UTF-8 byte at offset {exc.start}; replaced"))
        return payload.decode("utf-8-sig", errors="replace")


def _check_field_counts(text: str, issues: list[ParseIssue]) -> int | None:
    """
    Compare every data record's field count with the header's and return
    the header width, or None when there is no header at all.
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    width: int | None = None
    row = 0
    try:
        for fields in reader:
            if _is_blank(fields):
                continue
            if width is None:
                width = len(fields)
                continue
            if len(fields) < width:
                issues.append(ParseIssue(
                    message=f"Too few fields: expected {width} fields but parsed {len(fields)}",
                    row=row,
                ))
            elif len(fields) > width:
                issues.append(ParseIssue(
                    message=f"Too many fields: expected {width} fields but parsed {len(fields)}",
                    row=row,
                ))
            row += 1
    except csv.Error as exc:
        message = "Quoted field unterminated" if "unexpected end of data" in str(exc) else f"Malformed line: {exc}"
        issues.append(ParseIssue(message=message, row=row))
    return width


def _is_blank(fields: list[str]) -> bool:
    # Same rule pandas uses for skip_blank_lines
    return not fields or (len(fields) == 1 and not fields[0].strip())


def _log_issues(logger: logging.Logger, issues: list[ParseIssue]) -> None:
    for issue in issues:
        logger.warning("csv_bad_line", extra={"reason": issue.message, "row": issue.row})
