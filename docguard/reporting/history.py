from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from docguard.analysis.models import Document, Verdict

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class SortKey(str, Enum):
    DATE = "date"
    CONFIDENCE = "confidence"
    FILENAME = "filename"


@dataclass(frozen=True)
class DashboardStats:
    total: int
    authentic: int
    suspicious: int
    fraudulent: int
    unique_owners: int
    recent: tuple[Document, ...]


def filter_documents(
    documents: Iterable[Document],
    search: str = "",
    status: Verdict | None = None,
) -> list[Document]:
    """Case-insensitive filename search combined with an optional status filter."""
    needle = search.lower()
    return [
        d
        for d in documents
        if needle in d.filename.lower() and (status is None or d.status is status)
    ]


def sort_documents(documents: Iterable[Document], key: SortKey = SortKey.DATE) -> list[Document]:
    """Newest first for dates, highest first for confidence, A-Z for filenames."""
    if key is SortKey.DATE:
        return sorted(documents, key=_timestamp, reverse=True)
    if key is SortKey.CONFIDENCE:
        return sorted(documents, key=lambda d: d.confidence_score, reverse=True)
    return sorted(documents, key=lambda d: d.filename.casefold())


def dashboard_stats(documents: list[Document], recent_limit: int = 5) -> DashboardStats:
    return DashboardStats(
        total=len(documents),
        authentic=sum(1 for d in documents if d.status is Verdict.AUTHENTIC),
        suspicious=sum(1 for d in documents if d.status is Verdict.SUSPICIOUS),
        fraudulent=sum(1 for d in documents if d.status is Verdict.FRAUDULENT),
        unique_owners=len({d.owner_id for d in documents}),
        recent=tuple(sort_documents(documents, SortKey.DATE)[:recent_limit]),
    )


def _timestamp(document: Document) -> datetime:
    ts = document.upload_timestamp
    if ts is None:
        return _EPOCH
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)
