"""
flowreader/report.py
Plain-text rendering of listings, search results, statistics and
work patterns for terminal output. Returns strings; printing is the
caller's job.
"""

from typing import List, Sequence

from flowreader.aggregators.statistics import recent_periods
from flowreader.models.record import Statistics, Transcription, WorkPatterns
from flowreader.search import snippet_for
from flowreader.timestamps import format_timestamp

TOP_APPS    = 10
TOP_PERIODS = 10
TOP_KEYWORDS = 15


def format_duration(seconds: float) -> str:
    """3725 → "1h 2m 5s", 125 → "2m 5s", 42 → "42s"."""
    total   = int(seconds)
    hours   = total // 3600
    minutes = (total % 3600) // 60
    secs    = total % 60
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def _header_lines(record: Transcription) -> List[str]:
    return [
        "",
        "---",
        f"Date: {format_timestamp(record.timestamp)}",
        f"App: {record.application if record.application is not None else 'Unknown'}",
    ]


def render_listing(records: Sequence[Transcription]) -> str:
    lines: List[str] = []
    for r in records:
        lines += _header_lines(r)
        if r.url:
            lines.append(f"URL: {r.url}")
        lines.append(f"Words: {r.word_count or 0}")
        if r.is_shared:
            lines.append("Shared: ✓")
        lines += ["", "Text:", r.display_text()]
    return "\n".join(lines)


def render_search_results(records: Sequence[Transcription], query: str) -> str:
    lines = [f"Found {len(records)} matches for '{query}':", ""]
    for r in records:
        lines += _header_lines(r)
        snippet = snippet_for(r, query)
        if snippet is not None:
            lines.append(snippet)
    return "\n".join(lines)


def render_statistics(stats: Statistics) -> str:
    lines = [
        "Wispr Flow Statistics",
        "====================",
        "",
        "Overall:",
        f"  Total Transcriptions: {stats.total_transcriptions}",
        f"  Total Words: {stats.total_words}",
        f"  Total Duration: {format_duration(stats.total_duration)}",
        f"  Average WPM: {stats.average_wpm:.1f}",
    ]
    if stats.unparsed_timestamps:
        lines.append(
            f"  Unrecognized Timestamps: {stats.unparsed_timestamps} (not in activity below)"
        )

    lines += ["", "Top Applications:"]
    for entry in stats.top_apps[:TOP_APPS]:
        lines.append(f"  {entry.application}: {entry.count} transcriptions")

    lines += ["", f"Activity by {stats.group_by.capitalize()}:"]
    for period, count in recent_periods(stats, TOP_PERIODS):
        lines.append(f"  {period}: {count} transcriptions")
    return "\n".join(lines)


def render_work_patterns(patterns: WorkPatterns) -> str:
    lines = [
        "=== Wispr Flow Work Pattern Analysis ===",
        "",
        f"Records analyzed: {patterns.records_analyzed}",
        "",
        "1. Task-Related Keyword Frequency:",
    ]
    for keyword, count in patterns.keyword_counts[:TOP_KEYWORDS]:
        lines.append(f"   {keyword}: {count}")

    lines += ["", "2. Project/Ticket References:"]
    if not patterns.ticket_mentions:
        lines.append("   No ticket references found (e.g., CA-1234, #123)")
    for ticket, count in patterns.ticket_mentions:
        lines.append(f"   {ticket}: {count} mentions")

    lines += ["", "3. Application Usage for Work:"]
    for usage in patterns.app_usage[:TOP_APPS]:
        lines += [
            f"   {usage.application}:",
            f"      Total transcriptions: {usage.count}",
            f"      With work keywords: {usage.with_work_keywords} ({usage.work_ratio * 100:.1f}%)",
        ]
    return "\n".join(lines)
