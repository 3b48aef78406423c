from unittest.mock import MagicMock, patch

import psycopg
import pytest
from psycopg.types.json import Jsonb

from docguard.session.exceptions import SessionStoreError
from docguard.session.models import SessionState
from docguard.session.postgres_store import CREATE_TABLE_SQL, PostgresSessionStore
from docguard.session.serialization import state_to_dict
from tests.factories import make_document


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestEnsureSchema:
    @patch("docguard.session.postgres_store.get_connection")
    def test_creates_table_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)

        PostgresSessionStore("trustseal").ensure_schema()

        mock_conn.execute.assert_called_once_with(CREATE_TABLE_SQL)
        mock_conn.commit.assert_called_once()


class TestLoad:
    @patch("docguard.session.postgres_store.get_connection")
    def test_returns_empty_state_when_slot_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert PostgresSessionStore("trustseal").load() == SessionState()

    @patch("docguard.session.postgres_store.get_connection")
    def test_decodes_stored_payload(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        state = SessionState(documents=(make_document(),))
        mock_cursor.fetchone.return_value = (state_to_dict(state),)

        assert PostgresSessionStore("trustseal").load() == state

    @patch("docguard.session.postgres_store.get_connection")
    def test_queries_by_slot(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        PostgresSessionStore("demo").load()

        assert mock_cursor.execute.call_args.args[1] == ("demo",)

    @patch("docguard.session.postgres_store.get_connection")
    def test_database_error_raises(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(SessionStoreError, match="connection lost"):
            PostgresSessionStore("trustseal").load()


class TestSave:
    @patch("docguard.session.postgres_store.get_connection")
    def test_upserts_payload_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        state = SessionState(documents=(make_document(),))

        PostgresSessionStore("trustseal").save(state)

        sql, params = mock_cursor.execute.call_args.args
        assert "ON CONFLICT (slot)" in sql
        assert params[0] == "trustseal"
        assert isinstance(params[1], Jsonb)
        assert params[1].obj == state_to_dict(state)
        mock_conn.commit.assert_called_once()

    @patch("docguard.session.postgres_store.get_connection")
    def test_database_error_raises(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.commit.side_effect = psycopg.OperationalError("read-only")

        with pytest.raises(SessionStoreError, match="read-only"):
            PostgresSessionStore("trustseal").save(SessionState())
