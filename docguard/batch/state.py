"""Pure queue-item state machine: item + event -> new item.

pending -> analyzing -> complete | error. No transition leaves a terminal
status and nothing returns to pending.
"""

from dataclasses import replace

from docguard.batch.exceptions import InvalidTransitionError
from docguard.batch.models import Failed, QueueEvent, QueueItem, QueueStatus, Started, Succeeded


def advance(item: QueueItem, event: QueueEvent) -> QueueItem:
    """Apply ``event`` to ``item`` and return the updated copy.

    Raises:
        InvalidTransitionError: if the event is not legal in the item's status.
    """
    if isinstance(event, Started):
        _require(item, QueueStatus.PENDING, event)
        return replace(item, status=QueueStatus.ANALYZING)
    if isinstance(event, Succeeded):
        _require(item, QueueStatus.ANALYZING, event)
        return replace(item, status=QueueStatus.COMPLETE, result=event.result)
    if isinstance(event, Failed):
        _require(item, QueueStatus.ANALYZING, event)
        return replace(item, status=QueueStatus.ERROR, error_message=event.message)
    raise InvalidTransitionError(f"Unknown queue event: {event!r}")


def _require(item: QueueItem, expected: QueueStatus, event: QueueEvent) -> None:
    if item.status is not expected:
        raise InvalidTransitionError(
            f"Item {item.item_id} cannot handle {type(event).__name__} "
            f"while {item.status.value}"
        )
