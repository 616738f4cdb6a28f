"""
flowreader/aggregators/work_patterns.py
Work-pattern analysis over dictation records. Pure Python, fully offline.

Scans display text against keyword dictionaries to show how much dictation
is about work (tasks, status updates, meetings, code review), which ticket
references come up, and which apps the work dictation happens in.

Input is any record sequence: live from the store, or loaded back from a
JSON export with load_export_file().
"""

from __future__ import annotations

import json
import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from flowreader.errors import SerializationError, StoreNotFound
from flowreader.exporters.formats import record_from_export
from flowreader.models.record import AppWorkUsage, Transcription, WorkPatterns

logger = logging.getLogger(__name__)

# ── KEYWORD DICTIONARIES ─────────────────────────────────────
# Keys become count prefixes in output; '' means no prefix.
# All matching is case-insensitive substring, except WHOLE_WORD entries.

KEYWORD_MAP: Dict[str, List[str]] = {
    '': [
        'task', 'ticket', 'working on', 'implementing', 'fixing',
        'debugging', 'testing', 'building', 'deploying',
    ],
    'status': [
        'finished', 'completed', 'done', 'started', 'in progress', 'blocked',
    ],
    'meeting': [
        'meeting', 'standup', 'discussion', 'call', 'sync',
    ],
    'review': [
        'review', 'pr', 'mr', 'merge request', 'pull request', 'code review',
    ],
}

# Too short for substring matching ("pr" is in "approach")
WHOLE_WORD = {'pr', 'mr'}

TICKET_PATTERN = re.compile(r'\b[A-Z]+-\d+\b|#\d+\b')

_WORD_PATTERNS = {kw: re.compile(rf'\b{re.escape(kw)}\b') for kw in WHOLE_WORD}


def analyze_work_patterns(records: Iterable[Transcription]) -> WorkPatterns:
    """
    Count keyword hits, ticket mentions and per-app work usage.

    Records without display text or without an app are skipped.
    All result lists are sorted by count DESC, then key ASC.
    """
    keyword_counts: Dict[str, int]          = defaultdict(int)
    ticket_counts:  Dict[str, int]          = defaultdict(int)
    app_usage:      Dict[str, AppWorkUsage] = {}
    analyzed = 0

    for record in records:
        text = record.display_text(placeholder='')
        if not text or record.application is None:
            continue
        analyzed += 1
        text_lower = text.lower()

        has_work_keywords = False
        for category, keywords in KEYWORD_MAP.items():
            for kw in keywords:
                if _contains(text_lower, kw):
                    keyword_counts[f"{category}:{kw}" if category else kw] += 1
                    has_work_keywords = True

        # Ticket refs are case-sensitive: "CA-1234", "#123"
        for ticket in TICKET_PATTERN.findall(text):
            ticket_counts[ticket] += 1

        usage = app_usage.get(record.application)
        if usage is None:
            usage = app_usage[record.application] = AppWorkUsage(application=record.application)
        usage.count       += 1
        usage.total_words += record.word_count or 0
        if has_work_keywords:
            usage.with_work_keywords += 1

    logger.info(
        f"Work patterns: {analyzed} records analyzed, "
        f"{len(keyword_counts)} keywords, {len(ticket_counts)} tickets"
    )
    return WorkPatterns(
        keyword_counts   = _ranked(keyword_counts),
        ticket_mentions  = _ranked(ticket_counts),
        app_usage        = sorted(
            app_usage.values(),
            key=lambda u: (-u.with_work_keywords, u.application),
        ),
        records_analyzed = analyzed,
    )


def load_export_file(path: Union[str, Path]) -> List[Transcription]:
    """Read records back from a JSON export produced by export_json()."""
    path = Path(path)
    if not path.is_file():
        raise StoreNotFound(path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SerializationError(f"Cannot read export file {path}: {e}") from e
    if not isinstance(data, list):
        raise SerializationError(f"Export file {path} does not contain a JSON array")
    try:
        return [record_from_export(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise SerializationError(f"Malformed record in {path}: {e}") from e


# ── HELPERS ──────────────────────────────────────────────────

def _contains(text_lower: str, keyword: str) -> bool:
    pattern = _WORD_PATTERNS.get(keyword)
    if pattern is not None:
        return pattern.search(text_lower) is not None
    return keyword in text_lower


def _ranked(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    return sorted(counts.items(), key=lambda x: (-x[1], x[0]))
