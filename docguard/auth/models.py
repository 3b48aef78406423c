from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Identity:
    """Authenticated user; the analysis core only uses ``id`` as an owner tag."""

    id: str
    name: str
    email: str
    role: str
    created_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
