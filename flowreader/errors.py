"""
flowreader/errors.py
Error taxonomy. Every failure that leaves the core is one of these;
raw sqlite3 / json / OS errors are wrapped before crossing the boundary.
"""


class FlowReaderError(Exception):
    """Base class for all flowreader errors."""


class StoreNotFound(FlowReaderError, FileNotFoundError):
    """History database missing at the expected location. Fatal, no retry."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Wispr Flow database not found at: {self.path}")


class StoreReadError(FlowReaderError):
    """Database exists but could not be opened or queried."""


class TimestampParseError(FlowReaderError, ValueError):
    """No known timestamp format matched. Recovered locally by callers."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Unrecognized timestamp: {raw!r}")


class SerializationError(FlowReaderError):
    """Export could not be encoded. No partial output is returned."""


class ExportWriteError(FlowReaderError, OSError):
    """Persisting an export failed. Message is the underlying OS error, verbatim."""
