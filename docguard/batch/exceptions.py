class QueueError(Exception):
    """Base exception for batch queue errors."""


class InvalidTransitionError(QueueError):
    """Raised when an event does not apply to the item's current status."""


class QueueItemNotFoundError(QueueError):
    """Raised when no queue item has the requested id."""


class QueueItemNotRemovableError(QueueError):
    """Raised when removing an item that has left the pending state."""
