from dataclasses import dataclass
from enum import Enum

from docguard.analysis.models import Document, FileDescriptor


class QueueStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class QueueItem:
    """One file's progress record within a batch."""

    item_id: int
    descriptor: FileDescriptor
    status: QueueStatus = QueueStatus.PENDING
    result: Document | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class Started:
    """Analysis of the item has begun."""


@dataclass(frozen=True)
class Succeeded:
    result: Document


@dataclass(frozen=True)
class Failed:
    message: str


QueueEvent = Started | Succeeded | Failed


@dataclass(frozen=True)
class StatusChange:
    """Published to listeners after every item transition."""

    item: QueueItem
    previous: QueueStatus
    position: int


@dataclass(frozen=True)
class QueueSummary:
    total: int
    pending: int
    analyzing: int
    complete: int
    error: int


@dataclass(frozen=True)
class Rejection:
    """A file refused by validation before it could enter the queue."""

    descriptor: FileDescriptor
    reason: str


@dataclass(frozen=True)
class BatchReport:
    items: tuple[QueueItem, ...]
    rejected: tuple[Rejection, ...] = ()

    @property
    def documents(self) -> list[Document]:
        return [
            item.result
            for item in self.items
            if item.status is QueueStatus.COMPLETE and item.result is not None
        ]
