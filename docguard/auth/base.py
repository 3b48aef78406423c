from abc import ABC, abstractmethod

from docguard.auth.models import Identity


class BaseAuthProvider(ABC):
    """Contract for resolving credentials to an Identity."""

    @abstractmethod
    def login(self, email: str, password: str) -> Identity:
        """Raises AuthenticationError if the credentials are rejected."""

    @abstractmethod
    def register(self, name: str, email: str, password: str) -> Identity:
        """Raises AuthenticationError if the account cannot be created."""
