"""
flowreader/exporters/formats.py
Serializes fetched records to JSON, CSV or plain text.

Output: str (or UTF-8 bytes via encode_export). The exporters never touch
the store and never write files themselves; write_export() is the one
helper that persists output, for callers that want it.

FORMAT NOTES:
- JSON keys are the History column names, sorted; null fields are omitted.
  Input order is preserved. Files round-trip through record_from_export().
- CSV has a fixed header and quotes every data field; embedded quotes
  are doubled. Text column is the display text.
- Text export is one human-readable block per record, "---" separated.
"""

import csv
import io
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Sequence, Union

from flowreader.errors import ExportWriteError, SerializationError
from flowreader.models.record import Transcription
from flowreader.store import DEFAULT_COLUMNS
from flowreader.timestamps import format_timestamp

logger = logging.getLogger(__name__)

CSV_HEADER = ('Timestamp', 'App', 'URL', 'Words', 'Duration', 'Text')
TEXT_SEPARATOR = '---'

_NUMERIC_FIELDS = {'duration_seconds': float, 'word_count': int}


# ── RECORD MAPPING ───────────────────────────────────────────

def record_to_export_dict(record: Transcription) -> Dict[str, Any]:
    """Column-name keyed dict, None values dropped."""
    out = {}
    for name, column in DEFAULT_COLUMNS.items():
        value = getattr(record, name)
        if value is not None:
            out[column] = value
    return out


def record_from_export(data: Dict[str, Any]) -> Transcription:
    """Inverse of record_to_export_dict. Raises KeyError without id/timestamp."""
    kwargs = {}
    for name, column in DEFAULT_COLUMNS.items():
        value = data.get(column)
        if value is not None and name in _NUMERIC_FIELDS:
            value = _NUMERIC_FIELDS[name](value)
        kwargs[name] = value
    if kwargs['id'] is None or kwargs['timestamp'] is None:
        raise KeyError(f"{DEFAULT_COLUMNS['id']} and {DEFAULT_COLUMNS['timestamp']} are required")
    return Transcription(**kwargs)


# ── FORMATS ──────────────────────────────────────────────────

def export_json(records: Sequence[Transcription], indent: int = 2) -> str:
    payload = [record_to_export_dict(r) for r in records]
    try:
        return json.dumps(payload, indent=indent, sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"JSON export failed: {e}") from e


def export_csv(records: Sequence[Transcription]) -> str:
    buf = io.StringIO()
    buf.write(','.join(CSV_HEADER) + '\n')
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for r in records:
        writer.writerow([
            r.timestamp,
            r.application or '',
            r.url or '',
            r.word_count or 0,
            float(r.duration_seconds or 0.0),
            r.display_text(),
        ])
    return buf.getvalue()


def export_text(records: Sequence[Transcription]) -> str:
    blocks = []
    for r in records:
        lines = [
            f"Date: {format_timestamp(r.timestamp)}",
            f"App: {r.application if r.application is not None else 'Unknown'}",
        ]
        if r.url:
            lines.append(f"URL: {r.url}")
        lines += [
            f"Words: {r.word_count or 0}",
            '',
            r.display_text(),
            '',
            TEXT_SEPARATOR,
        ]
        blocks.append('\n'.join(lines))
    return '\n'.join(blocks)


EXPORT_FORMATS: Dict[str, Callable[[Sequence[Transcription]], str]] = {
    'json': export_json,
    'csv':  export_csv,
    'txt':  export_text,
}


def export_records(records: Sequence[Transcription], fmt: str = 'json') -> str:
    """Serialize records in one of EXPORT_FORMATS (case-insensitive)."""
    exporter = EXPORT_FORMATS.get((fmt or '').lower())
    if exporter is None:
        raise ValueError(
            f"Unknown export format {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})"
        )
    content = exporter(records)
    logger.debug(f"Serialized {len(records)} records as {fmt.lower()}")
    return content


def encode_export(content: str) -> bytes:
    try:
        return content.encode('utf-8')
    except UnicodeEncodeError as e:
        raise SerializationError(f"Export is not valid UTF-8: {e}") from e


# ── PERSISTENCE ──────────────────────────────────────────────

def write_export(content: str, path: Union[str, Path]) -> Path:
    """
    Write content to path atomically (temp file in the same directory,
    then replace). On failure the target is left untouched and the OS
    error message is surfaced unchanged in ExportWriteError.
    """
    data = encode_export(content)
    path = Path(path).expanduser()
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=str(path.parent), prefix=f".{path.name}.", delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ExportWriteError(str(e)) from e

    logger.info(f"Export written → {path} ({len(data)} bytes)")
    return path
