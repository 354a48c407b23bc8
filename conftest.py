# conftest.py
# -------------------------------------------------------------------------------------
# Archivo: conftest.py (raíz del proyecto)
# Propósito: Fixtures compartidas por tests/core y tests/api.
#            - BD SQLite en memoria (StaticPool) con la tabla weddings creada.
#            - Store / servicio del directorio sobre esa BD.
#            - TestClient de FastAPI con get_db sustituido y ADMIN_API_KEY fijada.
#            - Cronómetro de la suite y recuento de tests descubiertos.
# -------------------------------------------------------------------------------------

from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wedsite import models  # noqa: F401  registra la tabla en Base.metadata
from wedsite.db import Base, get_db
from wedsite.rate_limit import reset_limits
from wedsite.services.guest_directory import GuestDirectory
from wedsite.store import SqlGuestListStore

ADMIN_KEY = "test-admin-key"

_session_start_monotonic: float = 0.0


def _fmt_hhmmss(elapsed: float) -> str:
    total = int(elapsed)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"


# ===========================
# Hooks de ciclo de ejecución
# ===========================
def pytest_sessionstart(session):
    global _session_start_monotonic
    _session_start_monotonic = time.monotonic()


def pytest_collection_finish(session):
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    msg = f"📋 Descubiertos {len(session.items)} tests."
    if tr:
        tr.write_line(msg)


def pytest_sessionfinish(session, exitstatus):
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    if tr:
        tr.write_line(f"🟢 Suite finalizada. Tiempo total: {_fmt_hhmmss(time.monotonic() - _session_start_monotonic)}")


# =====================
# Fixtures de base de datos
# =====================
@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(db_session) -> SqlGuestListStore:
    return SqlGuestListStore(db_session)


@pytest.fixture()
def directory(store) -> GuestDirectory:
    return GuestDirectory(store)


@pytest.fixture()
def make_wedding(store):
    """Crea una boda con valores por defecto razonables; devuelve su id."""

    def _make(wedding_id: str = "ana-luis", guest_names=("Ana Garcia", "Luis Perez"), **kwargs) -> str:
        kwargs.setdefault("couple_names", "Ana & Luis")
        store.create_wedding(wedding_id, guest_name_list=list(guest_names), **kwargs)
        return wedding_id

    return _make


# =====================
# Fixtures de API
# =====================
@pytest.fixture()
def client(db_session, monkeypatch):
    from wedsite.main import app

    monkeypatch.setenv("ADMIN_API_KEY", ADMIN_KEY)
    reset_limits()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        reset_limits()


@pytest.fixture()
def admin_headers() -> dict:
    return {"x-admin-key": ADMIN_KEY}
