import math
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from docguard.analysis.exceptions import AggregationWarning
from docguard.analysis.models import Verdict
from docguard.trends.aggregator import TrendAggregator, summarize_insights, trend_direction
from docguard.trends.models import TrendDirection
from tests.factories import make_document


def _day(day: int, hour: int = 12) -> datetime:
    return datetime(2024, 5, day, hour, 0, tzinfo=timezone.utc)


class TestTrendDirection:
    def test_no_days_is_stable(self) -> None:
        assert trend_direction([]) is TrendDirection.STABLE

    def test_single_day_is_stable(self) -> None:
        assert trend_direction([0.2]) is TrendDirection.STABLE

    def test_two_days_compare_against_zero(self) -> None:
        assert trend_direction([0.9, 0.9]) is TrendDirection.UP

    def test_recent_drop_is_down(self) -> None:
        assert trend_direction([0.9, 0.5, 0.5, 0.5]) is TrendDirection.DOWN

    def test_recent_rise_is_up(self) -> None:
        assert trend_direction([0.5, 0.75, 0.75, 0.75]) is TrendDirection.UP

    def test_small_change_is_stable(self) -> None:
        assert trend_direction([0.8, 0.8, 0.8, 0.84]) is TrendDirection.STABLE

    def test_flat_history_is_stable(self) -> None:
        assert trend_direction([0.75] * 6) is TrendDirection.STABLE

    def test_earlier_mean_uses_all_older_days(self) -> None:
        # earlier = (0.2 + 0.4) / 2 = 0.3, recent = 0.34
        assert trend_direction([0.2, 0.4, 0.34, 0.34, 0.34]) is TrendDirection.STABLE


class TestAggregate:
    def test_single_day_rollup(self) -> None:
        documents = [
            make_document(confidence=0.9, uploaded=_day(1, 9)),
            make_document(confidence=0.7, uploaded=_day(1, 17), status=Verdict.SUSPICIOUS),
        ]

        report = TrendAggregator().aggregate(documents)

        assert len(report.rollups) == 1
        rollup = report.rollups[0]
        assert rollup.date == date(2024, 5, 1)
        assert rollup.document_count == 2
        assert math.isclose(rollup.average_confidence, 0.8)
        assert (rollup.authentic, rollup.suspicious, rollup.fraudulent) == (1, 1, 0)
        assert report.direction is TrendDirection.STABLE

    def test_rollups_sorted_by_date(self) -> None:
        documents = [
            make_document(uploaded=_day(3)),
            make_document(uploaded=_day(1)),
            make_document(uploaded=_day(2)),
        ]

        report = TrendAggregator().aggregate(documents)

        assert [r.date.day for r in report.rollups] == [1, 2, 3]

    def test_declining_history_is_down(self) -> None:
        documents = [
            make_document(confidence=0.9, uploaded=_day(1)),
            make_document(confidence=0.9, uploaded=_day(2)),
            make_document(confidence=0.9, uploaded=_day(3)),
            make_document(confidence=0.5, uploaded=_day(4)),
        ]
        shuffled = [documents[2], documents[0], documents[3], documents[1]]

        report = TrendAggregator().aggregate(shuffled)

        # recent = (0.9 + 0.9 + 0.5) / 3 = 0.767 vs earlier = 0.9
        assert report.direction is TrendDirection.DOWN

    def test_counts_sum_to_input_size(self) -> None:
        documents = [make_document(uploaded=_day(d % 4 + 1)) for d in range(11)]

        report = TrendAggregator().aggregate(documents)

        assert sum(r.document_count for r in report.rollups) == 11

    def test_skips_documents_without_timestamp(self) -> None:
        dated = make_document(uploaded=_day(1))
        undated = replace(make_document(), upload_timestamp=None)

        report = TrendAggregator().aggregate([dated, undated])

        assert report.rollups[0].document_count == 1

    def test_empty_history_warns(self) -> None:
        with pytest.warns(AggregationWarning):
            report = TrendAggregator().aggregate([])
        assert report.is_empty
        assert report.direction is TrendDirection.STABLE


class TestTimezone:
    def test_utc_splits_late_evening_uploads(self) -> None:
        documents = [
            make_document(uploaded=datetime(2024, 5, 1, 23, 30, tzinfo=timezone.utc)),
            make_document(uploaded=datetime(2024, 5, 2, 2, 0, tzinfo=timezone.utc)),
        ]
        assert len(TrendAggregator("UTC").aggregate(documents).rollups) == 2

    def test_local_zone_groups_same_evening(self) -> None:
        documents = [
            make_document(uploaded=datetime(2024, 5, 1, 23, 30, tzinfo=timezone.utc)),
            make_document(uploaded=datetime(2024, 5, 2, 2, 0, tzinfo=timezone.utc)),
        ]

        report = TrendAggregator("America/New_York").aggregate(documents)

        assert len(report.rollups) == 1
        assert report.rollups[0].date == date(2024, 5, 1)

    def test_naive_timestamp_read_as_utc(self) -> None:
        aggregator = TrendAggregator("Asia/Tokyo")
        assert aggregator.local_date(datetime(2024, 5, 1, 20, 0)) == date(2024, 5, 2)

    def test_aware_timestamp_converted(self) -> None:
        plus_five = timezone(timedelta(hours=5))
        stamp = datetime(2024, 5, 2, 3, 0, tzinfo=plus_five)
        assert TrendAggregator().local_date(stamp) == date(2024, 5, 1)


class TestInsights:
    def test_summarizes_history(self) -> None:
        documents = [
            make_document(confidence=0.96, verified=True),
            make_document(confidence=0.94),
            make_document(confidence=0.6, status=Verdict.SUSPICIOUS),
            make_document(confidence=0.3, status=Verdict.FRAUDULENT),
        ]

        insights = summarize_insights(documents)

        assert insights.document_count == 4
        assert math.isclose(insights.overall_average_confidence, 0.7)
        assert insights.authentic_share == 0.5
        assert (insights.authentic, insights.suspicious, insights.fraudulent) == (2, 1, 1)
        assert insights.blockchain_verified == 1

    def test_empty_history(self) -> None:
        insights = summarize_insights([])
        assert insights.document_count == 0
        assert insights.overall_average_confidence == 0.0
        assert insights.authentic_share == 0.0
