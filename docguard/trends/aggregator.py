import warnings
from collections.abc import Sequence
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from docguard.analysis.exceptions import AggregationWarning
from docguard.analysis.models import Document, Verdict
from docguard.logging.logger import Log
from docguard.trends.models import DayRollup, TrendDirection, TrendInsights, TrendReport

RECENT_DAYS = 3
DIRECTION_THRESHOLD = 0.05


def trend_direction(daily_averages: Sequence[float]) -> TrendDirection:
    """Compare the last three daily averages with the days before them.

    With no earlier days the earlier mean counts as 0. This is a smoothing
    heuristic, not a statistical test.
    """
    days = len(daily_averages)
    if days < 2:
        return TrendDirection.STABLE
    recent = sum(daily_averages[-RECENT_DAYS:]) / min(RECENT_DAYS, days)
    earlier = sum(daily_averages[:-RECENT_DAYS]) / max(1, days - RECENT_DAYS)
    difference = recent - earlier
    if difference > DIRECTION_THRESHOLD:
        return TrendDirection.UP
    if difference < -DIRECTION_THRESHOLD:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


class TrendAggregator:
    """Reduces a document history to per-day rollups and a direction signal.

    Days are calendar dates in ``timezone``; naive timestamps are read as UTC.
    """

    def __init__(self, timezone_name: str = "UTC") -> None:
        self._zone: tzinfo = (
            timezone.utc if timezone_name.upper() == "UTC" else ZoneInfo(timezone_name)
        )

    def aggregate(self, documents: Sequence[Document]) -> TrendReport:
        if not documents:
            Log.warning("Trend aggregation requested for an empty history")
            warnings.warn(
                "No documents to aggregate; returning empty trend report",
                AggregationWarning,
                stacklevel=2,
            )
            return TrendReport.empty()

        buckets: dict[date, list[Document]] = {}
        for document in documents:
            if document.upload_timestamp is None:
                Log.warning("Skipping document without upload timestamp", document_id=document.id)
                continue
            buckets.setdefault(self.local_date(document.upload_timestamp), []).append(document)

        rollups = tuple(self._rollup(day, buckets[day]) for day in sorted(buckets))
        direction = trend_direction([r.average_confidence for r in rollups])
        Log.debug("Aggregated trend", days=len(rollups), direction=direction.value)
        return TrendReport(rollups=rollups, direction=direction)

    def local_date(self, timestamp: datetime) -> date:
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(self._zone).date()

    @staticmethod
    def _rollup(day: date, documents: list[Document]) -> DayRollup:
        counts = {verdict: 0 for verdict in Verdict}
        for document in documents:
            counts[document.status] += 1
        return DayRollup(
            date=day,
            document_count=len(documents),
            average_confidence=sum(d.confidence_score for d in documents) / len(documents),
            authentic=counts[Verdict.AUTHENTIC],
            suspicious=counts[Verdict.SUSPICIOUS],
            fraudulent=counts[Verdict.FRAUDULENT],
        )


def summarize_insights(documents: Sequence[Document]) -> TrendInsights:
    counts = {verdict: 0 for verdict in Verdict}
    for document in documents:
        counts[document.status] += 1
    total = len(documents)
    return TrendInsights(
        document_count=total,
        overall_average_confidence=(
            sum(d.confidence_score for d in documents) / total if total else 0.0
        ),
        authentic_share=counts[Verdict.AUTHENTIC] / total if total else 0.0,
        authentic=counts[Verdict.AUTHENTIC],
        suspicious=counts[Verdict.SUSPICIOUS],
        fraudulent=counts[Verdict.FRAUDULENT],
        blockchain_verified=sum(1 for d in documents if d.blockchain_verified),
    )
