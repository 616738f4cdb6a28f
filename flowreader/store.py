"""
flowreader/store.py
Read-only accessor over the Wispr Flow History table.

    with RecordStore(db_path) as store:
        recent  = store.list_transcriptions(limit=10, application="Slack")
        matches = store.search_transcriptions("deploy", limit=20)
        june    = store.export_range("2025-06-01", "2025-06-30")

The database is opened with mode=ro. Nothing in this module writes.
One connection per RecordStore; it is closed on __exit__ whatever happened
inside the block. All queries use parameterized SQL. Column and table
names come from HistorySchema, never from user input.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from flowreader.errors import StoreNotFound, StoreReadError
from flowreader.models.record import Transcription
from flowreader.timestamps import day_bound_text, parse_date_bound, try_parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = (
    Path.home() / "Library" / "Application Support" / "Wispr Flow" / "flow.sqlite"
)

# Transcription field → History column
DEFAULT_COLUMNS: Dict[str, str] = {
    "id":               "transcriptEntityId",
    "raw_text":         "asrText",
    "formatted_text":   "formattedText",
    "edited_text":      "editedText",
    "timestamp":        "timestamp",
    "application":      "app",
    "url":              "url",
    "share_type":       "shareType",
    "status":           "status",
    "language":         "language",
    "duration_seconds": "duration",
    "word_count":       "numWords",
}

SEARCHABLE_FIELDS = ("raw_text", "formatted_text", "edited_text")

DateBound = Optional[Union[str, date]]

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class HistorySchema:
    """Table and column names the store reads from."""
    table:   str             = "History"
    columns: Dict[str, str]  = field(default_factory=lambda: dict(DEFAULT_COLUMNS))

    def column(self, name: str) -> str:
        return _quote(self.columns[name])

    def select_list(self) -> str:
        return ", ".join(self.column(name) for name in DEFAULT_COLUMNS)


class RecordStore:
    """
    Scoped, read-only handle on flow.sqlite.

    Use as a context manager. Methods called outside a `with` block
    open the connection on first use; call close() when done.
    """

    def __init__(
        self,
        db_path: Union[str, Path] = DEFAULT_DB_PATH,
        schema: Optional[HistorySchema] = None,
    ):
        self.db_path = Path(db_path).expanduser()
        self.schema  = schema or HistorySchema()
        self._conn: Optional[sqlite3.Connection] = None

    # ── LIFECYCLE ─────────────────────────────────────────────────────────

    def __enter__(self) -> "RecordStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        if not self.db_path.is_file():
            raise StoreNotFound(self.db_path)

        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise StoreReadError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        # Bad bytes in a text column become U+FFFD instead of failing the query
        conn.text_factory = lambda b: b.decode("utf-8", "replace")
        self._conn = conn
        logger.debug(f"Opened {self.db_path} read-only")
        return conn

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug(f"Closed {self.db_path}")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # ── QUERIES ───────────────────────────────────────────────────────────

    def list_transcriptions(
        self,
        limit: Optional[int] = 10,
        application: Optional[str] = None,
        shared_only: bool = False,
    ) -> List[Transcription]:
        """
        Newest-first records, at most `limit` (None = no limit).
        Ordering is by parsed instant, so it runs in Python after the
        filtered rows are fetched; the limit is applied after sorting.

        Args:
            limit:       positive int, or None for every matching row
            application: exact app name match
            shared_only: only rows with shareType == "yes"
        """
        if limit is not None:
            _check_limit(limit)

        s   = self.schema
        sql = f"SELECT {s.select_list()} FROM {_quote(s.table)} WHERE 1=1"
        params: list = []

        if application is not None:
            sql += f" AND {s.column('application')} = ?"
            params.append(application)
        if shared_only:
            sql += f" AND {s.column('share_type')} = ?"
            params.append("yes")

        return _newest_first(self._fetch(sql, params))[:limit]

    def search_transcriptions(self, query: str, limit: int = 10) -> List[Transcription]:
        """
        Records whose raw, formatted or edited text contains `query`.
        SQLite LIKE: case-insensitive for ASCII only. The query is
        matched literally (LIKE wildcards are escaped).
        """
        _check_limit(limit)

        s       = self.schema
        pattern = f"%{_escape_like(query)}%"
        clauses = " OR ".join(
            f"{s.column(name)} LIKE ? ESCAPE '\\'" for name in SEARCHABLE_FIELDS
        )
        sql = (
            f"SELECT {s.select_list()} FROM {_quote(s.table)} "
            f"WHERE ({clauses})"
        )
        params = [pattern] * len(SEARCHABLE_FIELDS)
        return _newest_first(self._fetch(sql, params))[:limit]

    def export_range(
        self,
        start_date: DateBound = None,
        end_date: DateBound = None,
    ) -> List[Transcription]:
        """
        All records between start_date 00:00:00 and end_date 23:59:59
        (local time, both inclusive), newest first. Either bound may be None.

        Rows whose timestamp cannot be parsed are compared as raw strings
        against "YYYY-MM-DD" / "YYYY-MM-DDT23:59:59".
        """
        start = parse_date_bound(start_date) if start_date is not None else None
        end   = parse_date_bound(end_date, end_of_day=True) if end_date is not None else None
        start_text = day_bound_text(start_date) if start_date is not None else None
        end_text   = day_bound_text(end_date, end_of_day=True) if end_date is not None else None

        records = self.all_transcriptions()
        if start is None and end is None:
            return records

        selected = []
        for record in records:
            parsed = try_parse_timestamp(record.timestamp)
            if parsed is not None:
                if start is not None and parsed < start:
                    continue
                if end is not None and parsed > end:
                    continue
            else:
                if start_text is not None and record.timestamp < start_text:
                    continue
                if end_text is not None and record.timestamp > end_text:
                    continue
            selected.append(record)

        logger.debug(
            f"export_range {start_date}..{end_date}: {len(selected)}/{len(records)} records"
        )
        return selected

    def all_transcriptions(self) -> List[Transcription]:
        """Every record, newest first."""
        return self.list_transcriptions(limit=None)

    def count(self) -> int:
        sql = f"SELECT COUNT(*) FROM {_quote(self.schema.table)}"
        try:
            return self.open().execute(sql).fetchone()[0]
        except sqlite3.Error as e:
            raise StoreReadError(f"Query failed on {self.db_path}: {e}") from e

    # ── INTERNAL ──────────────────────────────────────────────────────────

    def _fetch(self, sql: str, params: Sequence) -> List[Transcription]:
        conn = self.open()
        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Query failed on {self.db_path}: {e}") from e
        records = []
        for row in rows:
            record = self._row_to_record(row)
            if record is not None:
                records.append(record)
        return records

    def _row_to_record(self, row: sqlite3.Row) -> Optional[Transcription]:
        """Map a row to a Transcription. Rows without id or timestamp are skipped."""
        values = {name: row[self.schema.columns[name]] for name in DEFAULT_COLUMNS}
        if values["id"] is None or values["timestamp"] is None:
            logger.warning(f"Skipping row with NULL id or timestamp in {self.schema.table}")
            return None
        duration = values["duration_seconds"]
        words    = values["word_count"]
        return Transcription(
            id               = str(values["id"]),
            timestamp        = str(values["timestamp"]),
            raw_text         = values["raw_text"],
            formatted_text   = values["formatted_text"],
            edited_text      = values["edited_text"],
            application      = values["application"],
            url              = values["url"],
            share_type       = values["share_type"],
            status           = values["status"],
            language         = values["language"],
            duration_seconds = float(duration) if duration is not None else None,
            word_count       = int(words) if words is not None else None,
        )


# ── HELPERS ──────────────────────────────────────────────────

def _check_limit(limit) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")


def _sort_key(record: Transcription) -> Tuple[bool, datetime, str]:
    # Unparseable timestamps sort after every parseable one, by raw string
    parsed = try_parse_timestamp(record.timestamp)
    if parsed is None:
        return (False, _OLDEST, record.timestamp)
    return (True, parsed, record.timestamp)


def _newest_first(records: List[Transcription]) -> List[Transcription]:
    return sorted(records, key=_sort_key, reverse=True)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'
