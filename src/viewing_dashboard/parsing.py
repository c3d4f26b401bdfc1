from __future__ import annotations

import re
from datetime import timezone

import pandas as pd

_HMS_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})$")
_MS_RE = re.compile(r"^(\d+):(\d{1,2})$")
_HOURS_MINUTES_RE = re.compile(r"^(\d+)\s*h(?:\s*(\d+)\s*m)?$", re.IGNORECASE)
_MINUTES_RE = re.compile(r"^(\d+)\s*m(?:in)?$", re.IGNORECASE)
_BARE_INT_RE = re.compile(r"^\d+$")
_TIME_ONLY_RE = re.compile(r"^T?\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?\s*(?:[ap]\.?m\.?)?$", re.IGNORECASE)
_RELATIVE_DAY_WORDS = {"now", "today", "tomorrow", "yesterday"}


def parse_duration_minutes(raw: str | None) -> int:
    """
    Whole minutes from a free-text duration. Netflix exports "0:42:10";
    hand-made exports tend to use "45:30", "1h 20m", "25 min" or "90".
    Anything unrecognised counts as 0.
    """
    if raw is None:
        return 0
    value = raw.strip()
    if not value:
        return 0

    match = _HMS_RE.match(value)
    if match:
        hours, minutes, seconds = (int(part) for part in match.groups())
        return hours * 60 + minutes + seconds // 60

    match = _MS_RE.match(value)
    if match:
        minutes, seconds = (int(part) for part in match.groups())
        return minutes + seconds // 60

    match = _HOURS_MINUTES_RE.match(value)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2)) if match.group(2) else 0
        return hours * 60 + minutes

    match = _MINUTES_RE.match(value)
    if match:
        return int(match.group(1))

    if _BARE_INT_RE.match(value):
        return int(value)

    return 0


def parse_day_key(raw: str | None) -> str | None:
    """ISO calendar day ("2024-03-09") for a timestamp string, or None."""
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    # pandas resolves these against the current clock
    if value.lower() in _RELATIVE_DAY_WORDS or _TIME_ONLY_RE.match(value):
        return None

    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def to_series_title(raw_title: str | None) -> str:
    """
    Netflix exports episodes as "Stranger Things: Chapter One";
    we want the series name "Stranger Things".
    """
    t = raw_title or ""
    return t.split(":", 1)[0].strip()
