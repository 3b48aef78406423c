import csv
from collections.abc import Iterable
from datetime import date
from enum import Enum
from typing import TextIO

from docguard.analysis.models import Document


class ReportLayout(str, Enum):
    BATCH = "batch"
    HISTORY = "history"


BATCH_HEADER = [
    "Filename",
    "Status",
    "Confidence Score",
    "Blockchain Verified",
    "Anomalies Count",
    "AI Suggestions",
]
HISTORY_HEADER = [
    "Filename",
    "Upload Date",
    "Status",
    "Confidence Score",
    "User ID",
    "Anomalies",
]


class ReportExporter:
    """Writes document lists as CSV. Filtering and sorting are the caller's job."""

    def export(self, documents: Iterable[Document], stream: TextIO, layout: ReportLayout) -> int:
        """Write a header plus one row per document; return the row count."""
        writer = csv.writer(stream, lineterminator="\n")
        if layout is ReportLayout.BATCH:
            writer.writerow(BATCH_HEADER)
            rows = [self._batch_row(d) for d in documents]
        else:
            writer.writerow(HISTORY_HEADER)
            rows = [self._history_row(d) for d in documents]
        writer.writerows(rows)
        return len(rows)

    @staticmethod
    def default_filename(layout: ReportLayout, today: date) -> str:
        prefix = "bulk-analysis" if layout is ReportLayout.BATCH else "trustseal-report"
        return f"{prefix}-{today.isoformat()}.csv"

    @staticmethod
    def _batch_row(document: Document) -> list[str]:
        return [
            document.filename,
            document.status.value,
            _percent(document.confidence_score),
            "Yes" if document.blockchain_verified else "No",
            str(len(document.analysis.anomalies)),
            str(len(document.analysis.ai_suggestions)),
        ]

    @staticmethod
    def _history_row(document: Document) -> list[str]:
        uploaded = document.upload_timestamp
        return [
            document.filename,
            uploaded.date().isoformat() if uploaded else "",
            document.status.value,
            _percent(document.confidence_score),
            document.owner_id,
            "; ".join(document.analysis.anomalies),
        ]


def _percent(score: float) -> str:
    return f"{score * 100:.1f}%"
