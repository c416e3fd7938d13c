import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest

from giftbox.auth import passwords
from giftbox.infra.document_store import DocumentStore
from giftbox.infra.envelope import CipherEnvelope

PASSPHRASE = "test-passphrase"


@pytest.fixture(autouse=True)
def cheap_hashing(monkeypatch):
    """Argon2 at its minimum cost; the defaults take ~50ms per hash."""
    monkeypatch.setattr(passwords, "TIME_COST", 1)
    monkeypatch.setattr(passwords, "MEMORY_COST", 8)
    monkeypatch.setattr(passwords, "PARALLELISM", 1)


@pytest.fixture(scope="session")
def envelope() -> CipherEnvelope:
    # scrypt runs once per session
    return CipherEnvelope(PASSPHRASE)


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "db.enc"


@pytest.fixture()
def store(db_path: Path, envelope: CipherEnvelope) -> DocumentStore:
    s = DocumentStore(db_path, envelope)
    s.load()
    return s


@pytest.fixture()
def client(tmp_path: Path, monkeypatch):
    """TestClient against an app reloaded onto a fresh temp data dir."""
    import importlib

    from fastapi.testclient import TestClient

    monkeypatch.setenv("GIFTBOX_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("GIFTBOX_DB_PASSPHRASE", PASSPHRASE)

    import giftbox.app as app_module
    importlib.reload(app_module)
    return TestClient(app_module.app)
