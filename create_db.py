# create_db.py

# =================================================================================
# 🏗️ SCRIPT DE CREACIÓN DE LA BASE DE DATOS (solo desarrollo local)
# ---------------------------------------------------------------------------------
# Crea las tablas definidas en wedsite/models.py directamente con SQLAlchemy.
# En despliegues el esquema lo gestiona Alembic (`alembic upgrade head`).
# =================================================================================

from loguru import logger

from wedsite.db import engine, Base, log_db_path_on_startup

# Importar los modelos los registra en Base.metadata; sin esto no se crea ninguna tabla.
from wedsite import models  # noqa: F401


def create_database_tables() -> None:
    """Crea todas las tablas asociadas a `Base` que aún no existan."""
    log_db_path_on_startup()
    Base.metadata.create_all(bind=engine)
    logger.info("✔️ Tablas creadas: {}", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    create_database_tables()
