# wedsite/db.py  # Motor, sesiones y Base declarativa de SQLAlchemy.

# =================================================================================
# 🗄️ BASE DE DATOS
# ---------------------------------------------------------------------------------
# - DATABASE_URL manda. Si falta (o llega como placeholder "${{...}}" del
#   proveedor) se usa wedsite.db en la raíz del proyecto.
# - FORCE_DB=postgres prohíbe ese fallback: sin URL no se arranca.
# - Una sola tabla (weddings); el esquema lo crea Alembic o create_db.py.
# =================================================================================

import os
from typing import Iterator

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SQLITE_FALLBACK = os.path.join(PROJECT_ROOT, "wedsite.db")


def _resolve_database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    force_db = os.getenv("FORCE_DB", "sqlite").strip().lower()

    if url.startswith("${{") and url.endswith("}}"):
        logger.warning("DATABASE_URL sin resolver ({}); se ignora.", url)
        url = ""

    if url:
        return url
    if force_db == "postgres":
        raise RuntimeError("DATABASE_URL vacía con FORCE_DB=postgres: no se usa SQLite como sustituto.")

    logger.warning("DATABASE_URL vacía → SQLite local en {}", SQLITE_FALLBACK)
    return f"sqlite:///{SQLITE_FALLBACK}"


def _make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # Las peticiones de FastAPI corren en hilos distintos.
        return create_engine(url, connect_args={"check_same_thread": False}, pool_pre_ping=True)
    return create_engine(url, pool_pre_ping=True)


DATABASE_URL = _resolve_database_url()
engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Sesión por petición (dependencia de FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def log_db_path_on_startup() -> None:
    url = engine.url
    if url.drivername.startswith("sqlite"):
        logger.info("DB → {} | file={}", url.drivername, os.path.abspath(url.database) if url.database else "<memory>")
    else:
        logger.info("DB → {} | host={} | db={}", url.drivername, url.host, url.database)
