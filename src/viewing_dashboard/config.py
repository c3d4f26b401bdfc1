from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar

import tomllib
from dotenv import load_dotenv

from viewing_dashboard.aggregator import DEFAULT_MISSING_DATE_KEY, AggregationOptions

VALID_METRICS = {"auto", "count", "duration"}

T = TypeVar("T")


@dataclass(frozen=True)
class Settings:
    metric: str
    normalize_series: bool
    top_n: int
    page_size: int
    missing_date_key: str
    log_level: str
    config_path: str

    def aggregation_options(self, metric: str | None = None) -> AggregationOptions:
        resolved = metric or self.metric
        return AggregationOptions(
            # "auto" is resolved per file by the session
            metric="count" if resolved == "auto" else resolved,
            normalize_series=self.normalize_series,
            missing_date_key=self.missing_date_key,
            top_n=self.top_n,
        )


def load_settings() -> Settings:
    load_dotenv(override=False)

    config_path = os.getenv("CONFIG_PATH") or str(Path.cwd() / "config.toml")
    cfg = _load_config(Path(config_path))

    metric = _pick("DASHBOARD_METRIC", "report.metric", cfg, "auto", str).lower()
    if metric not in VALID_METRICS:
        raise RuntimeError(f"Unsupported metric in configuration: {metric}")

    top_n = _pick("DASHBOARD_TOP_N", "report.top_n", cfg, 10, int)
    page_size = _pick("DASHBOARD_PAGE_SIZE", "report.page_size", cfg, 8, int)
    for name, value in (("DASHBOARD_TOP_N", top_n), ("DASHBOARD_PAGE_SIZE", page_size)):
        if value <= 0:
            raise RuntimeError(f"Configuration value must be positive: {name}={value}")

    return Settings(
        metric=metric,
        normalize_series=_pick("DASHBOARD_NORMALIZE_SERIES", "report.normalize_series", cfg, True, _to_bool),
        top_n=top_n,
        page_size=page_size,
        missing_date_key=_pick(
            "DASHBOARD_MISSING_DATE_KEY",
            "report.missing_date_key",
            cfg,
            DEFAULT_MISSING_DATE_KEY,
            str,
        ),
        log_level=_pick("LOG_LEVEL", "runtime.log_level", cfg, "INFO", str),
        config_path=config_path,
    )


def _load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        parsed = tomllib.load(handle)
    return _flatten(parsed)


def _flatten(payload: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in payload.items():
        dotted = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            out.update(_flatten(value, dotted))
        else:
            out[dotted] = value
    return out


def _pick(env_key: str, cfg_key: str, cfg: dict[str, Any], default: T, cast: Callable[[Any], T]) -> T:
    """Environment first, then config.toml, then the default; blanks count as unset."""
    env_val = os.getenv(env_key)
    if env_val:
        return cast(env_val)
    cfg_val = cfg.get(cfg_key)
    if cfg_val is None or cfg_val == "":
        return default
    return cast(cfg_val)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
