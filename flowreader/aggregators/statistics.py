"""
flowreader/aggregators/statistics.py
Usage statistics over the full History table.

Single pass over every record:
  totals       → transcriptions, words, spoken seconds
  average_wpm  → total_words / total_duration * 60, 0.0 when no duration
  top_apps     → count per non-null app, count DESC then name ASC
  activity     → count per day / ISO week / month of the parsed timestamp

NOTE ON UNPARSEABLE TIMESTAMPS:
  A record whose timestamp matches no known format still counts toward
  every total but is left out of activity_by_period. The number left out
  is reported as unparsed_timestamps so the two can be reconciled.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from flowreader.models.record import AppCount, Statistics, Transcription
from flowreader.timestamps import PERIOD_GRANULARITIES, period_label, try_parse_timestamp

logger = logging.getLogger(__name__)


def compute_statistics(
    records:  Iterable[Transcription],
    group_by: str = 'day',
) -> Statistics:
    """
    Aggregate records into a Statistics value.

    Args:
        records:  every record in the store (no filters applied)
        group_by: 'day', 'week' or 'month'

    Returns:
        Statistics, recomputed from scratch on every call.
    """
    if group_by not in PERIOD_GRANULARITIES:
        raise ValueError(
            f"group_by must be one of {', '.join(PERIOD_GRANULARITIES)}, got {group_by!r}"
        )

    total          = 0
    total_words    = 0
    total_duration = 0.0
    unparsed       = 0
    app_counts:    Dict[str, int] = defaultdict(int)
    period_counts: Dict[str, int] = defaultdict(int)

    for record in records:
        total          += 1
        total_words    += record.word_count or 0
        total_duration += record.duration_seconds or 0.0

        if record.application is not None:
            app_counts[record.application] += 1

        parsed = try_parse_timestamp(record.timestamp)
        if parsed is None:
            unparsed += 1
            continue
        period_counts[period_label(parsed, group_by)] += 1

    average_wpm = (total_words / total_duration) * 60 if total_duration > 0 else 0.0

    if unparsed:
        logger.info(f"{unparsed} of {total} records have unparseable timestamps")

    return Statistics(
        total_transcriptions = total,
        total_words          = total_words,
        total_duration       = total_duration,
        average_wpm          = average_wpm,
        top_apps             = rank_apps(app_counts),
        activity_by_period   = dict(period_counts),
        group_by             = group_by,
        unparsed_timestamps  = unparsed,
    )


def rank_apps(app_counts: Dict[str, int]) -> List[AppCount]:
    """Count descending; equal counts fall back to name ascending."""
    ranked = sorted(app_counts.items(), key=lambda x: (-x[1], x[0]))
    return [AppCount(application=app, count=n) for app, n in ranked]


def recent_periods(stats: Statistics, top: int = 10) -> List[Tuple[str, int]]:
    """Period labels sorted descending (newest first), first `top`."""
    return sorted(stats.activity_by_period.items(), key=lambda x: x[0], reverse=True)[:top]
