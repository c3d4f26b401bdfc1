import logging

from viewing_dashboard.logging_setup import ColorFormatter, NoNoneFilter


def _record(msg: str, level: int = logging.INFO, name: str = "viewing_dashboard", **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_known_events_get_friendly_lines() -> None:
    formatter = ColorFormatter()

    line = formatter.format(_record("csv_parsed", rows=12, errors=1))

    assert "Parsed" in line
    assert "12" in line
    assert "1 parse errors" in line


def test_noisy_events_are_filtered() -> None:
    assert NoNoneFilter().filter(_record("stale_parse_ignored")) is False
    assert NoNoneFilter().filter(_record("Serving", name="streamlit")) is False
    assert NoNoneFilter().filter(_record("something else", level=logging.WARNING)) is True


def test_bad_line_warning_names_the_row() -> None:
    line = ColorFormatter().format(
        _record("csv_bad_line", level=logging.WARNING, reason="Too few fields: expected 2 fields but parsed 1", row=3)
    )

    assert "Too few fields" in line
    assert "row 3" in line
