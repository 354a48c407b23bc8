# wedsite/models.py  # Define la ruta y nombre del archivo del módulo de modelos.

# =================================================================================
# 🏛️ DEFINICIÓN DE LOS MODELOS DE LA BASE DE DATOS (ORM)
# ---------------------------------------------------------------------------------
# Este archivo define la estructura de las tablas de nuestra base de datos
# utilizando SQLAlchemy ORM.
# Implementa:
# - Enum del estado RSVP (yes / no / pending) compartido con los schemas.
# - Tabla Wedding: una fila por boda con la lista de invitados como JSON.
# - guest_list_version: contador para bloqueo optimista al guardar la lista.
# =================================================================================

# 🐍 Importaciones de Python y SQLAlchemy
# ---------------------------------------------------------------------------------
from datetime import datetime, timezone  # Importa datetime para sellos de tiempo.
import enum  # Importa enum para crear enumeraciones tipadas.

from sqlalchemy import (  # Importa utilidades de SQLAlchemy para definir tablas y columnas.
    Column,  # Clase para declarar columnas.
    Integer,  # Tipo entero para la versión de la lista.
    String,  # Tipo texto para ids y nombres.
    DateTime,  # Tipo fecha/hora para auditoría y fecha límite.
    JSON,  # Tipo JSON portable (SQLite/PostgreSQL) para las listas.
    func,  # Funciones SQL (ej. now()).
)

from wedsite.db import Base  # Importa la clase Base declarativa del proyecto (metadatos ORM).


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# 🗂️ ENUMS PARA CONSISTENCIA DE DATOS
# ---------------------------------------------------------------------------------
class RsvpStatus(str, enum.Enum):  # Enum para el estado de respuesta de cada invitado.
    yes = "yes"  # Asiste.
    no = "no"  # No asiste.
    pending = "pending"  # Aún no ha respondido.


# 💒 MODELO DE BODAS (TABLA 'weddings')
# ---------------------------------------------------------------------------------
class Wedding(Base):  # Una boda = un micrositio con su lista de invitados.
    __tablename__ = "weddings"  # Nombre de la tabla en la base de datos.

    # --- Columnas Principales ---
    id = Column(String(64), primary_key=True, index=True)  # Slug público de la boda (aparece en la URL).
    couple_names = Column(String(200), nullable=False)  # "Ana García & Luis Pérez".
    rsvp_deadline = Column(DateTime, nullable=True)  # Fecha límite para responder (None = sin límite).

    # --- Listas de Invitados ---
    guest_name_list = Column(JSON, nullable=False, default=list)  # Nombres introducidos al crear la boda.
    legacy_rsvps = Column(JSON, nullable=True)  # Formato antiguo (solo lectura tras crear la boda).
    guest_list = Column(JSON, nullable=True)  # Lista unificada; None hasta la primera migración.
    guest_list_version = Column(Integer, nullable=False, default=0)  # Versión para bloqueo optimista.

    # --- Auditoría ---
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
