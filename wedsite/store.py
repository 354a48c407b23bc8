# wedsite/store.py  # Capa de persistencia de la lista de invitados por boda.

# =================================================================================
# 💾 GuestListStore
# ---------------------------------------------------------------------------------
# - Contrato mínimo que necesita el núcleo: load() y save() por boda.
# - SqlGuestListStore lo implementa con SQLAlchemy (una fila por boda, JSON).
# - save() es condicional a la versión leída (bloqueo optimista): si otro
#   escritor guardó antes, lanza StaleGuestListError en lugar de pisarle.
# =================================================================================

from datetime import datetime, timezone  # Sello updated_at.
from typing import Iterable, List, Optional, Protocol, Sequence  # Tipado del contrato.

from loguru import logger  # Trazas de persistencia.
from sqlalchemy import update  # UPDATE condicional por versión.
from sqlalchemy.orm import Session  # Sesión de SQLAlchemy.

from wedsite.core.names import name_key  # Exclusión de nombres repetidos al importar.
from wedsite.errors import StaleGuestListError, WeddingNotFoundError
from wedsite.models import Wedding  # ORM de bodas.
from wedsite.schemas import GuestRecord, LegacyRsvpRecord, WeddingGuestData


class GuestListStore(Protocol):
    """Capacidad de persistencia inyectada en el servicio del directorio de invitados."""

    def load(self, wedding_id: str) -> WeddingGuestData: ...

    def save(
        self, wedding_id: str, unified_list: Sequence[GuestRecord], expected_version: Optional[int] = None
    ) -> int: ...

    def append_guest_names(self, wedding_id: str, names: Iterable[str]) -> List[str]: ...

    def remove_guest_names(self, wedding_id: str, names: Iterable[str]) -> List[str]: ...


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """La columna DateTime no guarda zona: se almacena siempre en UTC sin tzinfo."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _dump_guests(guests: Sequence[GuestRecord]) -> list:
    """Serializa la lista a JSON plano (fechas en ISO, enums por su valor)."""
    return [g.model_dump(mode="json") for g in guests]


class SqlGuestListStore:
    """Implementación de GuestListStore sobre la tabla 'weddings'."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------ helpers
    def _get(self, wedding_id: str) -> Wedding:
        wedding = self.db.get(Wedding, wedding_id)
        if wedding is None:
            raise WeddingNotFoundError(wedding_id)
        return wedding

    def get_wedding(self, wedding_id: str) -> Wedding:
        """Devuelve la fila ORM de la boda (datos de portada) o lanza WeddingNotFoundError."""
        return self._get(wedding_id)

    # ------------------------------------------------------------------ alta
    def create_wedding(
        self,
        wedding_id: str,
        *,
        couple_names: str,
        guest_name_list: Sequence[str],
        legacy_rsvps: Optional[Sequence[LegacyRsvpRecord]] = None,
        rsvp_deadline: Optional[datetime] = None,
    ) -> Wedding:
        """
        Crea la boda SIN lista unificada: la primera lectura la migrará
        desde `guest_name_list` (+ `legacy_rsvps` si vienen del sitio antiguo).
        """
        wedding = Wedding(
            id=wedding_id,
            couple_names=couple_names.strip(),
            rsvp_deadline=_as_naive_utc(rsvp_deadline),
            guest_name_list=list(guest_name_list),
            legacy_rsvps=[r.model_dump(mode="json") for r in legacy_rsvps] if legacy_rsvps else None,
            guest_list=None,
            guest_list_version=0,
        )
        self.db.add(wedding)
        self.db.commit()
        self.db.refresh(wedding)
        logger.info(
            "Store → boda creada | id={} | names={} | legacy_rsvps={}",
            wedding_id, len(wedding.guest_name_list), len(legacy_rsvps or []),
        )
        return wedding

    # ------------------------------------------------------------------ contrato
    def load(self, wedding_id: str) -> WeddingGuestData:
        wedding = self._get(wedding_id)
        return WeddingGuestData(
            wedding_id=wedding.id,
            guest_name_list=list(wedding.guest_name_list or []),
            legacy_rsvps=(
                [LegacyRsvpRecord.model_validate(r) for r in wedding.legacy_rsvps]
                if wedding.legacy_rsvps is not None else None
            ),
            unified_list=(
                [GuestRecord.model_validate(g) for g in wedding.guest_list]
                if wedding.guest_list is not None else None
            ),
            version=wedding.guest_list_version or 0,
        )

    def save(
        self, wedding_id: str, unified_list: Sequence[GuestRecord], expected_version: Optional[int] = None
    ) -> int:
        """
        Guarda la lista completa y devuelve la nueva versión.
        Con `expected_version` el UPDATE solo se aplica si nadie guardó entre medias.
        """
        stmt = update(Wedding).where(Wedding.id == wedding_id)
        if expected_version is not None:
            stmt = stmt.where(Wedding.guest_list_version == expected_version)
        stmt = stmt.values(
            guest_list=_dump_guests(unified_list),
            guest_list_version=Wedding.guest_list_version + 1,
            updated_at=datetime.now(timezone.utc),
        )

        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        if result.rowcount == 0:
            self.db.rollback()
            wedding = self._get(wedding_id)                          # Lanza WeddingNotFoundError si no existe.
            raise StaleGuestListError(wedding_id, expected_version, wedding.guest_list_version)
        self.db.commit()

        new_version = self.db.query(Wedding.guest_list_version).filter(Wedding.id == wedding_id).scalar()
        logger.debug("Store → lista guardada | id={} | guests={} | v={}", wedding_id, len(unified_list), new_version)
        return new_version

    def append_guest_names(self, wedding_id: str, names: Iterable[str]) -> List[str]:
        """Añade a la lista inicial los nombres que no estén ya (sin distinguir mayúsculas). Devuelve los añadidos."""
        wedding = self._get(wedding_id)
        current = list(wedding.guest_name_list or [])
        existing = {name_key(n) for n in current}
        added: List[str] = []
        for raw in names:
            name = (raw or "").strip()
            key = name_key(name)
            if not key or key in existing:
                continue
            existing.add(key)
            added.append(name)
        if added:
            wedding.guest_name_list = current + added               # Reasignar para que SQLAlchemy detecte el cambio JSON.
            self.db.commit()
        return added

    def remove_guest_names(self, wedding_id: str, names: Iterable[str]) -> List[str]:
        """Quita de la lista inicial los nombres dados (por clave), para que la sincronización no los resucite."""
        wedding = self._get(wedding_id)
        drop = {name_key(n) for n in names} - {""}
        current = list(wedding.guest_name_list or [])
        kept = [n for n in current if name_key(n) not in drop]
        removed = [n for n in current if name_key(n) in drop]
        if removed:
            wedding.guest_name_list = kept
            self.db.commit()
        return removed
