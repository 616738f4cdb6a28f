"""
flowreader/models/record.py
Shared dataclass schema. Store, aggregators, exporters and the CLI
all use these types. Do not add logic here beyond text resolution.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

NO_TEXT = 'No text'


@dataclass(frozen=True)
class Transcription:
    """One row of the Wispr Flow History table."""
    id:               str
    timestamp:        str               # raw on-disk value, format varies
    raw_text:         Optional[str]   = None
    formatted_text:   Optional[str]   = None
    edited_text:      Optional[str]   = None
    application:      Optional[str]   = None
    url:              Optional[str]   = None
    share_type:       Optional[str]   = None   # "yes" = shared
    status:           Optional[str]   = None
    language:         Optional[str]   = None
    duration_seconds: Optional[float] = None
    word_count:       Optional[int]   = None

    @property
    def is_shared(self) -> bool:
        return self.share_type == 'yes'

    def display_text(self, placeholder: str = NO_TEXT) -> str:
        """formatted_text, then raw_text, then the placeholder."""
        if self.formatted_text is not None:
            return self.formatted_text
        if self.raw_text is not None:
            return self.raw_text
        return placeholder


@dataclass(frozen=True)
class AppCount:
    """Ranked entry in Statistics.top_apps."""
    application: str
    count:       int


@dataclass
class Statistics:
    """Aggregate over the full, unfiltered History table."""
    total_transcriptions: int                 = 0
    total_words:          int                 = 0
    total_duration:       float               = 0.0
    average_wpm:          float               = 0.0
    top_apps:             List[AppCount]      = field(default_factory=list)
    activity_by_period:   Dict[str, int]      = field(default_factory=dict)
    group_by:             str                 = 'day'
    unparsed_timestamps:  int                 = 0   # excluded from activity_by_period


@dataclass
class AppWorkUsage:
    """Per-application work-keyword usage."""
    application:        str
    count:              int = 0
    total_words:        int = 0
    with_work_keywords: int = 0

    @property
    def work_ratio(self) -> float:
        return self.with_work_keywords / self.count if self.count > 0 else 0.0


@dataclass
class WorkPatterns:
    """Output of work-pattern analysis over a record set."""
    keyword_counts:    List[Tuple[str, int]] = field(default_factory=list)  # (key, count)
    ticket_mentions:   List[Tuple[str, int]] = field(default_factory=list)  # (ticket, count)
    app_usage:         List[AppWorkUsage]  = field(default_factory=list)
    records_analyzed:  int                 = 0
