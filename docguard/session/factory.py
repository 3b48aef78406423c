from docguard.config.settings import Settings
from docguard.database.connection import init_pool
from docguard.session.base import BaseSessionStore
from docguard.session.json_store import JsonFileSessionStore
from docguard.session.postgres_store import PostgresSessionStore


class SessionStoreFactory:
    """Creates the session store selected by settings.session_backend."""

    BACKENDS = ("json", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BaseSessionStore:
        backend = settings.session_backend.lower()
        if backend == "json":
            return JsonFileSessionStore(settings.session_file_path)
        if backend == "postgres":
            init_pool(settings)
            store = PostgresSessionStore(settings.session_slot)
            store.ensure_schema()
            return store
        raise ValueError(
            f"Unknown session backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
