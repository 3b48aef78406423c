import psycopg
from psycopg.types.json import Jsonb

from docguard.database.connection import get_connection
from docguard.logging.logger import Log
from docguard.session.base import BaseSessionStore
from docguard.session.exceptions import SessionStoreError
from docguard.session.models import SessionState
from docguard.session.serialization import state_from_dict, state_to_dict

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS session_slots (
    slot TEXT PRIMARY KEY,
    payload JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class PostgresSessionStore(BaseSessionStore):
    """Keeps the session as one JSONB row in the session_slots table."""

    def __init__(self, slot: str) -> None:
        self._slot = slot

    def ensure_schema(self) -> None:
        with get_connection() as conn:
            conn.execute(CREATE_TABLE_SQL)
            conn.commit()

    def load(self) -> SessionState:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT payload FROM session_slots WHERE slot = %s",
                        (self._slot,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise SessionStoreError(f"Failed to load session slot '{self._slot}': {exc}") from exc

        if row is None:
            return SessionState()
        state = state_from_dict(row[0])
        Log.debug("Loaded session", slot=self._slot, documents=len(state.documents))
        return state

    def save(self, state: SessionState) -> None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO session_slots (slot, payload, updated_at)
                        VALUES (%s, %s, NOW())
                        ON CONFLICT (slot)
                        DO UPDATE SET payload = EXCLUDED.payload, updated_at = NOW()
                        """,
                        (self._slot, Jsonb(state_to_dict(state))),
                    )
                conn.commit()
        except psycopg.Error as exc:
            raise SessionStoreError(f"Failed to save session slot '{self._slot}': {exc}") from exc
