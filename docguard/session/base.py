from abc import ABC, abstractmethod

from docguard.session.models import SessionState


class BaseSessionStore(ABC):
    """Contract for session persistence: one slot holding the whole state."""

    @abstractmethod
    def load(self) -> SessionState:
        """Return the stored state, or an empty SessionState if none exists.

        Raises:
            SessionStoreError: if stored data exists but cannot be decoded.
        """

    @abstractmethod
    def save(self, state: SessionState) -> None:
        """Replace the stored state.

        Raises:
            SessionStoreError: if the state cannot be written.
        """
