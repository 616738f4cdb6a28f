"""
flowreader/search.py
Case-insensitive match testing and context snippets for search results.

The store matches on raw, formatted and edited text. Snippets are cut from
the display text only, so a record matched through editedText alone gets
no snippet. That is expected, not an error.
"""

import re
from typing import Optional

from flowreader.models.record import Transcription

SNIPPET_CONTEXT = 50
ELLIPSIS = '...'


def extract_snippet(text: str, query: str, context: int = SNIPPET_CONTEXT) -> Optional[str]:
    """
    Up to `context` characters either side of the first case-insensitive
    occurrence of `query`, clipped to the text, wrapped in "...".
    Returns None when there is no match.
    """
    if not text or not query:
        return None

    match = re.search(re.escape(query), text, re.IGNORECASE)
    if match is None:
        return None

    start = max(0, match.start() - context)
    end   = min(len(text), match.end() + context)
    return f"{ELLIPSIS}{text[start:end]}{ELLIPSIS}"


def snippet_for(record: Transcription, query: str, context: int = SNIPPET_CONTEXT) -> Optional[str]:
    return extract_snippet(record.display_text(placeholder=''), query, context)


def matches(record: Transcription, query: str) -> bool:
    """True if any searchable text field contains query, ignoring case."""
    needle = query.lower()
    for text in (record.raw_text, record.formatted_text, record.edited_text):
        if text is not None and needle in text.lower():
            return True
    return False
