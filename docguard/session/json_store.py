import json
from pathlib import Path

from docguard.logging.logger import Log
from docguard.session.base import BaseSessionStore
from docguard.session.exceptions import SessionStoreError
from docguard.session.models import SessionState
from docguard.session.serialization import state_from_dict, state_to_dict


class JsonFileSessionStore(BaseSessionStore):
    """Keeps the session in a single JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> SessionState:
        if not self._path.exists():
            Log.debug("No session file yet", path=self._path)
            return SessionState()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SessionStoreError(f"Failed to read session file: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise SessionStoreError(f"Session file is not valid JSON: {exc}") from exc
        state = state_from_dict(raw)
        Log.debug("Loaded session", path=self._path, documents=len(state.documents))
        return state

    def save(self, state: SessionState) -> None:
        payload = json.dumps(state_to_dict(state), indent=2, ensure_ascii=False)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise SessionStoreError(f"Failed to write session file: {exc}") from exc
