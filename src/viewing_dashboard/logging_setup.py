import logging
import sys

GREEN, YELLOW, RED, CYAN, GREY, RESET = "\033[92m", "\033[93m", "\033[91m", "\033[96m", "\033[90m", "\033[0m"

# Event name -> console line; None drops the record
EVENTS = {
    "csv_parsed": lambda r: (
        f"{GREEN}✓{RESET} Parsed \033[1m{getattr(r, 'rows', 0)}{RESET} rows "
        f"({getattr(r, 'errors', 0)} parse errors)"
    ),
    "csv_bad_line": lambda r: f"{YELLOW}⚠{RESET} {getattr(r, 'reason', 'malformed line')}" + (
        f" {GREY}(row {r.row}){RESET}" if getattr(r, "row", None) is not None else ""
    ),
    "csv_parse_failed": lambda r: f"{RED}X{RESET} Could not parse CSV: {getattr(r, 'reason', 'Unknown error')}",
    "report_built": lambda r: (
        f"{CYAN}📊{RESET} Built {getattr(r, 'metric', 'count')} report: "
        f"{getattr(r, 'days', 0)} days, {getattr(r, 'titles', 0)} titles"
    ),
    "stale_parse_ignored": lambda r: None,
    "dataset_cleared": lambda r: f"{GREY}   Data cleared.{RESET}",
    "dashboard_starting": lambda r: f"{CYAN}🔄{RESET} Starting dashboard ({getattr(r, 'script', 'dashboard')})...",
}

LEVEL_MARKS = {
    "WARNING": f" {YELLOW}!{RESET} ",
    "ERROR": f" {RED}X{RESET} ",
    "CRITICAL": f" {RED}!!{RESET} ",
}


class ColorFormatter(logging.Formatter):
    """Renders known event names as friendly lines, anything else with a level mark."""

    QUIET_LOGGERS = {"streamlit", "watchdog.observers.inotify_buffer"}

    def format(self, record):
        if record.name in self.QUIET_LOGGERS and record.levelno <= logging.INFO:
            return None

        msg = record.getMessage()
        render = EVENTS.get(msg)
        if render is not None:
            return render(record)
        return f"{LEVEL_MARKS.get(record.levelname, '   ')}{msg}"


class NoNoneFilter(logging.Filter):
    def filter(self, record):
        return ColorFormatter().format(record) is not None


def configure_logging(level: str) -> None:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter())
    console_handler.addFilter(NoNoneFilter())

    logging.root.handlers = []
    logging.root.addHandler(console_handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("streamlit").setLevel(logging.WARNING)
    logging.getLogger("watchdog").setLevel(logging.WARNING)
