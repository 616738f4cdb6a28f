"""
tests/test_statistics.py
Statistics aggregation: totals, WPM, app ranking, period grouping.
"""

import pytest

from conftest import SAMPLE_ROWS, make_history_db
from flowreader.aggregators.statistics import compute_statistics, rank_apps, recent_periods
from flowreader.models.record import AppCount, Statistics, Transcription
from flowreader.store import RecordStore


def _record(i: int, timestamp: str = '2025-06-03T12:00:00Z', **kwargs) -> Transcription:
    return Transcription(id=f't{i}', timestamp=timestamp, **kwargs)


class TestTotals:

    def test_worked_example(self):
        records = [
            _record(1, word_count=10, duration_seconds=30.0),
            _record(2, word_count=20),
            _record(3, duration_seconds=10.0),
        ]
        stats = compute_statistics(records)
        assert stats.total_transcriptions == 3
        assert stats.total_words == 30
        assert stats.total_duration == 40.0
        assert stats.average_wpm == pytest.approx(45.0)

    def test_zero_duration_gives_zero_wpm(self):
        stats = compute_statistics([_record(1, word_count=100)])
        assert stats.average_wpm == 0.0

    def test_empty_input(self):
        stats = compute_statistics([])
        assert stats == Statistics(group_by='day')

    def test_words_match_unfiltered_list(self, history_db):
        with RecordStore(history_db) as store:
            records = store.list_transcriptions(limit=None)
            stats   = compute_statistics(store.all_transcriptions())
        assert stats.total_words == sum(r.word_count or 0 for r in records)
        assert stats.total_transcriptions == len(SAMPLE_ROWS)
        assert stats.total_duration == 68.0
        assert stats.average_wpm == pytest.approx(40 / 68 * 60)


class TestTopApps:

    def test_tied_counts_ordered_by_name(self):
        counts = {'Xcode': 3, 'Mail': 1, 'Terminal': 3}
        ranked = rank_apps(counts)
        assert {a.application for a in ranked[:2]} == {'Xcode', 'Terminal'}
        assert ranked == [
            AppCount('Terminal', 3),
            AppCount('Xcode', 3),
            AppCount('Mail', 1),
        ]

    def test_null_app_not_counted(self):
        stats = compute_statistics([
            _record(1, application='Slack'),
            _record(2),
            _record(3, application='Slack'),
        ])
        assert stats.top_apps == [AppCount('Slack', 2)]

    def test_from_store(self, history_db):
        with RecordStore(history_db) as store:
            stats = compute_statistics(store.all_transcriptions())
        assert [a.application for a in stats.top_apps] == ['Terminal', 'Mail', 'Slack', 'Xcode']
        assert stats.top_apps[0].count == 2


class TestActivityByPeriod:

    def test_by_day(self, history_db):
        with RecordStore(history_db) as store:
            stats = compute_statistics(store.all_transcriptions(), group_by='day')
        assert stats.activity_by_period == {
            '2025-06-03': 1, '2025-06-02': 1, '2025-06-01': 1,
            '2025-05-31': 1, '2025-05-15': 1,
        }

    def test_by_month(self, history_db):
        with RecordStore(history_db) as store:
            stats = compute_statistics(store.all_transcriptions(), group_by='month')
        assert stats.activity_by_period == {'2025-06': 3, '2025-05': 2}

    def test_by_week(self, history_db):
        with RecordStore(history_db) as store:
            stats = compute_statistics(store.all_transcriptions(), group_by='week')
        # Mon 2025-06-02 starts W23; Sat 05-31 and Sun 06-01 are W22
        assert stats.activity_by_period == {'2025-W23': 2, '2025-W22': 2, '2025-W20': 1}

    def test_unparseable_excluded_from_periods_but_counted_in_totals(self, tmp_path):
        rows = SAMPLE_ROWS + [{
            'transcriptEntityId': 'bad',
            'formattedText':      'Timestamp nobody can read',
            'timestamp':          'not-a-date',
            'numWords':           7,
        }]
        db = make_history_db(tmp_path / 'flow.sqlite', rows)
        with RecordStore(db) as store:
            stats = compute_statistics(store.all_transcriptions())
        assert stats.total_transcriptions == 6
        assert stats.total_words == 47
        assert sum(stats.activity_by_period.values()) == 5
        assert stats.unparsed_timestamps == 1

    def test_invalid_group_by(self):
        with pytest.raises(ValueError):
            compute_statistics([], group_by='year')

    def test_recent_periods_sorted_by_label_descending(self):
        stats = Statistics(activity_by_period={f'2025-01-{d:02d}': d for d in range(1, 16)})
        top = recent_periods(stats, 10)
        assert len(top) == 10
        assert top[0] == ('2025-01-15', 15)
        assert top[-1] == ('2025-01-06', 6)
