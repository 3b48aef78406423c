import random
from pathlib import Path

import pytest

from docguard.analysis.profile_loader import Profiles, load_profiles


@pytest.fixture(scope="session")
def profiles() -> Profiles:
    """The bundled simulation tables."""
    return load_profiles()


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer .env files and shell variables out of tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "APP_ENV",
        "LOG_LEVEL",
        "RNG_SEED",
        "SESSION_BACKEND",
        "SESSION_FILE_PATH",
        "TREND_TIMEZONE",
        "ENFORCE_BLOCKCHAIN_INVARIANT",
    ):
        monkeypatch.delenv(name, raising=False)
