from collections.abc import Callable
from datetime import datetime, timezone
from typing import ClassVar

from docguard.auth.base import BaseAuthProvider
from docguard.auth.exceptions import AuthenticationError
from docguard.auth.models import Identity
from docguard.logging.logger import Log


class DemoAuthProvider(BaseAuthProvider):
    """Demo accounts plus open sign-in: any other non-empty credentials work.

    Unknown users get the local part of their email as name, and the admin
    role when the email contains "admin".
    """

    DEMO_ACCOUNTS: ClassVar[dict[tuple[str, str], tuple[str, str, str]]] = {
        ("admin@trustseal.com", "admin"): ("admin-1", "Admin User", "admin"),
        ("user@example.com", "password"): ("user-1", "John Doe", "user"),
    }

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def login(self, email: str, password: str) -> Identity:
        self._require_credentials(email, password)
        now = self._clock()
        known = self.DEMO_ACCOUNTS.get((email, password))
        if known is not None:
            user_id, name, role = known
            identity = Identity(id=user_id, name=name, email=email, role=role, created_at=now)
        else:
            identity = Identity(
                id=self._new_id(now),
                name=email.split("@")[0],
                email=email,
                role=self._role_for(email),
                created_at=now,
            )
        Log.info("Signed in", user_id=identity.id, role=identity.role)
        return identity

    def register(self, name: str, email: str, password: str) -> Identity:
        self._require_credentials(email, password)
        if not name.strip():
            raise AuthenticationError("Name must not be empty")
        now = self._clock()
        identity = Identity(
            id=self._new_id(now),
            name=name,
            email=email,
            role=self._role_for(email),
            created_at=now,
        )
        Log.info("Registered", user_id=identity.id, role=identity.role)
        return identity

    @staticmethod
    def _require_credentials(email: str, password: str) -> None:
        if not email.strip() or not password:
            raise AuthenticationError("Invalid credentials")

    @staticmethod
    def _role_for(email: str) -> str:
        return "admin" if "admin" in email else "user"

    @staticmethod
    def _new_id(now: datetime) -> str:
        return str(int(now.timestamp() * 1000))
