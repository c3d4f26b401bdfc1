class CsvParseError(RuntimeError):
    """Raised when a viewing-history CSV could not be parsed cleanly."""
    pass
