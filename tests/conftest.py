"""
tests/conftest.py
Shared fixtures: synthetic History databases and a pinned local timezone.
No real dictation data needed.
"""

import sqlite3
import time
from pathlib import Path

import pytest

HISTORY_SCHEMA = """
    CREATE TABLE History (
        transcriptEntityId TEXT PRIMARY KEY,
        asrText            TEXT,
        formattedText      TEXT,
        editedText         TEXT,
        timestamp          TEXT NOT NULL,
        app                TEXT,
        url                TEXT,
        shareType          TEXT,
        status             TEXT,
        language           TEXT,
        duration           REAL,
        numWords           INTEGER
    );
"""

COLUMNS = (
    'transcriptEntityId', 'asrText', 'formattedText', 'editedText', 'timestamp',
    'app', 'url', 'shareType', 'status', 'language', 'duration', 'numWords',
)

# Newest first. Timestamps cover every on-disk format.
SAMPLE_ROWS = [
    {
        'transcriptEntityId': 'a1',
        'asrText':       'deploying the release to staging now',
        'formattedText': 'Deploying the release to staging now.',
        'timestamp':     '2025-06-03T19:03:31.586Z',
        'app':           'Terminal',
        'url':           '',
        'shareType':     'yes',
        'status':        'formatted',
        'language':      'en',
        'duration':      30.0,
        'numWords':      10,
    },
    {
        'transcriptEntityId': 'a2',
        'asrText':       'Reply to Sarah about the standup meeting',
        'timestamp':     '2025-06-02T08:15:00Z',
        'app':           'Slack',
        'url':           'https://app.slack.com/client/T1/C2',
        'numWords':      20,
    },
    {
        'transcriptEntityId': 'a3',
        'editedText':    'note about the deploy window',
        'timestamp':     '2025-06-01 12:00:00.123 +00:00',
        'app':           'Mail',
        'shareType':     'no',
        'duration':      10.0,
    },
    {
        'transcriptEntityId': 'a4',
        'formattedText': 'Review PR #42 for CA-1234',
        'timestamp':     '2025-05-31 23:59:59 +00:00',
        'app':           'Terminal',
        'shareType':     'yes',
        'duration':      20.0,
        'numWords':      6,
    },
    {
        'transcriptEntityId': 'a5',
        'formattedText': 'Old row without an offset',
        'timestamp':     '2025-05-15 09:30:00',
        'app':           'Xcode',
        'duration':      8.0,
        'numWords':      4,
    },
]


def make_history_db(path: Path, rows=SAMPLE_ROWS, schema: str = HISTORY_SCHEMA) -> Path:
    """Create a flow.sqlite with the History table populated."""
    conn = sqlite3.connect(str(path))
    conn.executescript(schema)
    conn.executemany(
        f"INSERT INTO History ({', '.join(COLUMNS)}) "
        f"VALUES ({', '.join('?' for _ in COLUMNS)})",
        [tuple(row.get(c) for c in COLUMNS) for row in rows],
    )
    conn.commit()
    conn.close()
    return path


def set_local_timezone(monkeypatch, tz: str) -> None:
    monkeypatch.setenv('TZ', tz)
    time.tzset()


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch):
    """Pin local time to UTC so display and period labels are deterministic."""
    if not hasattr(time, 'tzset'):
        pytest.skip('time.tzset() not available on this platform')
    set_local_timezone(monkeypatch, 'UTC')
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def history_db(tmp_path) -> Path:
    return make_history_db(tmp_path / 'flow.sqlite')
