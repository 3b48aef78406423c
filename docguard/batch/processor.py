from collections.abc import Callable, Iterable

from docguard.analysis.models import Document, FileDescriptor
from docguard.batch.exceptions import QueueItemNotFoundError, QueueItemNotRemovableError
from docguard.batch.latency import SimulatedLatency
from docguard.batch.models import (
    Failed,
    QueueEvent,
    QueueItem,
    QueueStatus,
    QueueSummary,
    Started,
    StatusChange,
    Succeeded,
)
from docguard.batch.state import advance
from docguard.logging.logger import Log

Listener = Callable[[StatusChange], None]


class BulkQueueProcessor:
    """Sequential batch analysis with per-item status tracking.

    Items keep submission order for the lifetime of the queue. Each run
    handles only the items pending when it starts, one at a time, and a
    failing item never stops the rest.
    """

    def __init__(
        self,
        analyze: Callable[[FileDescriptor], Document],
        latency: SimulatedLatency | None = None,
    ) -> None:
        self._analyze = analyze
        self._latency = latency or SimulatedLatency()
        self._items: list[QueueItem] = []
        self._listeners: list[Listener] = []
        self._next_id = 1

    @property
    def items(self) -> list[QueueItem]:
        return list(self._items)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def submit(self, descriptors: Iterable[FileDescriptor]) -> list[QueueItem]:
        """Append one pending item per descriptor, in the given order."""
        added = []
        for descriptor in descriptors:
            item = QueueItem(item_id=self._next_id, descriptor=descriptor)
            self._next_id += 1
            self._items.append(item)
            added.append(item)
        Log.info(f"Queued {len(added)} files", queue_size=len(self._items))
        return added

    def remove(self, item_id: int) -> QueueItem:
        """Drop a pending item from the queue.

        Raises:
            QueueItemNotFoundError: if no item has this id.
            QueueItemNotRemovableError: if the item is no longer pending.
        """
        position = self._position(item_id)
        item = self._items[position]
        if item.status is not QueueStatus.PENDING:
            raise QueueItemNotRemovableError(
                f"Item {item_id} is {item.status.value} and cannot be removed"
            )
        del self._items[position]
        Log.info(f"Removed {item.descriptor.name} from queue", item_id=item_id)
        return item

    def run_pending(self) -> list[QueueItem]:
        """Process every item that is pending right now; return them in final state."""
        pending_ids = [i.item_id for i in self._items if i.status is QueueStatus.PENDING]
        Log.info(f"Processing {len(pending_ids)} pending files")

        processed = []
        for item_id in pending_ids:
            item = self._find(item_id)
            if item is None or item.status is not QueueStatus.PENDING:
                Log.info("Skipping item no longer pending", item_id=item_id)
                continue
            processed.append(self._process(item_id))

        summary = self.summary()
        Log.info(
            "Batch run finished",
            complete=summary.complete,
            error=summary.error,
            pending=summary.pending,
        )
        return processed

    def summary(self) -> QueueSummary:
        counts = {status: 0 for status in QueueStatus}
        for item in self._items:
            counts[item.status] += 1
        return QueueSummary(
            total=len(self._items),
            pending=counts[QueueStatus.PENDING],
            analyzing=counts[QueueStatus.ANALYZING],
            complete=counts[QueueStatus.COMPLETE],
            error=counts[QueueStatus.ERROR],
        )

    def completed_documents(self) -> list[Document]:
        return [
            item.result
            for item in self._items
            if item.status is QueueStatus.COMPLETE and item.result is not None
        ]

    def _process(self, item_id: int) -> QueueItem:
        item = self._apply(item_id, Started())
        self._latency.wait()
        try:
            document = self._analyze(item.descriptor)
        except Exception as exc:
            return self._handle_failure(item, exc)
        return self._apply(item_id, Succeeded(document))

    def _handle_failure(self, item: QueueItem, exc: Exception) -> QueueItem:
        Log.error(f"Analysis of {item.descriptor.name} failed: {exc}", item_id=item.item_id)
        return self._apply(item.item_id, Failed(f"Analysis failed: {exc}"))

    def _apply(self, item_id: int, event: QueueEvent) -> QueueItem:
        position = self._position(item_id)
        previous = self._items[position]
        updated = advance(previous, event)
        self._items[position] = updated
        self._publish(StatusChange(item=updated, previous=previous.status, position=position))
        return updated

    def _publish(self, change: StatusChange) -> None:
        for listener in self._listeners:
            try:
                listener(change)
            except Exception:
                Log.exception(
                    "Queue listener failed",
                    item_id=change.item.item_id,
                    status=change.item.status.value,
                )

    def _find(self, item_id: int) -> QueueItem | None:
        for item in self._items:
            if item.item_id == item_id:
                return item
        return None

    def _position(self, item_id: int) -> int:
        for position, item in enumerate(self._items):
            if item.item_id == item_id:
                return position
        raise QueueItemNotFoundError(f"Queue item {item_id} not found")
