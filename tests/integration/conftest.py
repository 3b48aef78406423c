from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from docguard.config.settings import Settings
from docguard.database.connection import build_conninfo, close_pool, get_connection, init_pool

INTEGRATION_SLOT = "integration-test"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return Settings(session_backend="postgres", session_slot=INTEGRATION_SLOT)


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        psycopg.connect(build_conninfo(test_settings), connect_timeout=3).close()
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def clean_slot(db_conn: psycopg.Connection[Any]) -> Generator[str, None, None]:
    yield INTEGRATION_SLOT
    with db_conn.cursor() as cur:
        cur.execute("DELETE FROM session_slots WHERE slot = %s", (INTEGRATION_SLOT,))
    db_conn.commit()
