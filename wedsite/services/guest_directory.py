# wedsite/services/guest_directory.py  # Orquestación del directorio de invitados sobre un GuestListStore.

# =================================================================================
# 📇 SERVICIO DEL DIRECTORIO DE INVITADOS
# ---------------------------------------------------------------------------------
# Es el "llamador" del núcleo: lee la lista, aplica buscador/merge/migración
# y guarda. Es el ÚNICO sitio que llama a store.save().
# - Migración perezosa: la primera lectura de una boda sin lista unificada
#   la construye y la persiste (a partir de ahí, la lista manda).
# - Todas las escrituras son condicionales a la versión leída.
# - Altas, bajas, renombrados y fusiones por email se reflejan también en la
#   lista inicial de nombres, para que la sincronización no resucite a nadie.
# =================================================================================

from dataclasses import dataclass  # Resultado de la importación.
from typing import Iterable, List, Optional, Tuple  # Tipado.

import pandas as pd  # Exportación CSV (mismo stack que la importación).
from loguru import logger  # Trazas del servicio.

from wedsite.core.matcher import find_guest_with_strategy
from wedsite.core.merger import apply_rsvp
from wedsite.core.migrator import migrate, sync_name_list
from wedsite.core.names import name_key
from wedsite.errors import DuplicateGuestError, GuestNotInListError, StaleGuestListError
from wedsite.models import RsvpStatus
from wedsite.schemas import GuestRecord, GuestStats, GuestUpdate, RsvpSubmission
from wedsite.store import GuestListStore
from wedsite.utils.pii import mask_email

# Etiquetas del CSV exportado (las mismas que ve la pareja en el panel).
STATUS_LABELS = {
    RsvpStatus.yes: "Attending",
    RsvpStatus.no: "Not Attending",
    RsvpStatus.pending: "Pending",
}
EXPORT_COLUMNS = ["Name", "Email", "RSVP Status"]


@dataclass
class ImportOutcome:
    imported: int
    skipped_existing: int


def _index_of(guests: List[GuestRecord], name: str) -> Optional[int]:
    key = name_key(name)
    return next((i for i, g in enumerate(guests) if name_key(g.name) == key), None)


class GuestDirectory:
    """Operaciones del sitio público y del panel de administración sobre la lista de una boda."""

    def __init__(self, store: GuestListStore):
        self.store = store

    # ------------------------------------------------------------------ lectura
    def get_guest_list(self, wedding_id: str) -> Tuple[List[GuestRecord], int]:
        """
        Devuelve (lista unificada, versión). Si la boda aún no tiene lista
        unificada, la migra y la guarda en este mismo momento.
        """
        data = self.store.load(wedding_id)

        if data.unified_list is None:
            guests = migrate(data.guest_name_list, data.legacy_rsvps)
        else:
            guests = sync_name_list(data.unified_list, data.guest_name_list)
            if len(guests) == len(data.unified_list):
                return guests, data.version

        try:
            version = self.store.save(wedding_id, guests, expected_version=data.version)
        except StaleGuestListError:
            # Otra petición guardó antes: se devuelve lo ya guardado.
            return self._reload_guest_list(wedding_id)

        if data.unified_list is None:
            logger.info("Directory → migración perezosa completada | wedding={} | guests={}", wedding_id, len(guests))
        return guests, version

    def _reload_guest_list(self, wedding_id: str) -> Tuple[List[GuestRecord], int]:
        data = self.store.load(wedding_id)
        logger.info("Directory → lista ya guardada por otra petición | wedding={} | v={}", wedding_id, data.version)
        if data.unified_list is None:
            return migrate(data.guest_name_list, data.legacy_rsvps), data.version
        return sync_name_list(data.unified_list, data.guest_name_list), data.version

    def search(self, wedding_id: str, query: str) -> Optional[GuestRecord]:
        guests, _ = self.get_guest_list(wedding_id)
        guest, strategy = find_guest_with_strategy(query, guests)
        logger.info(
            "Directory → búsqueda | wedding={} | found={} | strategy={}",
            wedding_id, guest is not None, strategy,
        )
        return guest

    # ------------------------------------------------------------------ RSVP público
    def submit_rsvp(self, wedding_id: str, query: str, submission: RsvpSubmission) -> Optional[GuestRecord]:
        """
        Busca al invitado con `query` y aplica la respuesta. Devuelve el registro
        actualizado, o None si el buscador no encuentra a nadie.
        """
        guests, version = self.get_guest_list(wedding_id)
        matched, strategy = find_guest_with_strategy(query, guests)
        if matched is None:
            logger.info("Directory → RSVP sin invitado | wedding={}", wedding_id)
            return None

        updated = apply_rsvp(matched, submission, guests)
        self.store.save(wedding_id, updated, expected_version=version)

        kept = {name_key(g.name) for g in updated}
        merged_away = [g.name for g in guests if name_key(g.name) not in kept]
        if merged_away:
            self.store.remove_guest_names(wedding_id, merged_away)

        record = updated[_index_of(updated, matched.name)]
        logger.info(
            "Directory → RSVP guardado | wedding={} | guest='{}' | status={} | strategy={} | email={}",
            wedding_id, record.name, record.rsvp_status.value, strategy, mask_email(record.email),
        )
        return record

    # ------------------------------------------------------------------ panel admin
    def add_guest(self, wedding_id: str, name: str, email: Optional[str] = None) -> GuestRecord:
        guests, version = self.get_guest_list(wedding_id)
        if _index_of(guests, name) is not None:
            raise DuplicateGuestError(name)
        record = GuestRecord(name=name, email=email)
        self.store.save(wedding_id, [*guests, record], expected_version=version)
        self.store.append_guest_names(wedding_id, [record.name])
        logger.info("Directory → invitado añadido | wedding={} | guest='{}'", wedding_id, record.name)
        return record

    def update_guest(self, wedding_id: str, name: str, changes: GuestUpdate) -> GuestRecord:
        """Edición manual: nombre, email y/o estado. Solo se tocan los campos enviados."""
        guests, version = self.get_guest_list(wedding_id)
        index = _index_of(guests, name)
        if index is None:
            raise GuestNotInListError(name)

        update = {}
        if changes.name is not None and changes.name != guests[index].name:
            other = _index_of(guests, changes.name)
            if other is not None and other != index:
                raise DuplicateGuestError(changes.name)
            update["name"] = changes.name
        if "email" in changes.model_fields_set:                      # Email vacío enviado = borrar email.
            update["email"] = str(changes.email) if changes.email else None
        if changes.rsvp_status is not None:
            update["rsvp_status"] = changes.rsvp_status

        record = guests[index].model_copy(update=update)
        new_list = [*guests[:index], record, *guests[index + 1:]]
        self.store.save(wedding_id, new_list, expected_version=version)
        if "name" in update:
            self.store.remove_guest_names(wedding_id, [guests[index].name])
            self.store.append_guest_names(wedding_id, [record.name])
        logger.info("Directory → invitado editado | wedding={} | guest='{}' | fields={}", wedding_id, record.name, sorted(update))
        return record

    def remove_guest(self, wedding_id: str, name: str) -> None:
        guests, version = self.get_guest_list(wedding_id)
        index = _index_of(guests, name)
        if index is None:
            raise GuestNotInListError(name)
        self.store.save(wedding_id, [*guests[:index], *guests[index + 1:]], expected_version=version)
        self.store.remove_guest_names(wedding_id, [guests[index].name])
        logger.info("Directory → invitado eliminado | wedding={} | guest='{}'", wedding_id, guests[index].name)

    def import_guests(self, wedding_id: str, entries: Iterable[Tuple[str, Optional[str]]]) -> ImportOutcome:
        """
        Añade las entradas (nombre, email) cuyo nombre no exista ya.
        La exclusión es por igualdad exacta de nombre sin mayúsculas, NUNCA con el buscador.
        """
        guests, version = self.get_guest_list(wedding_id)
        existing = {name_key(g.name) for g in guests}

        new_records: List[GuestRecord] = []
        skipped = 0
        for name, email in entries:
            key = name_key(name)
            if not key or key in existing:
                skipped += 1
                continue
            existing.add(key)
            new_records.append(GuestRecord(name=name, email=email))

        if new_records:
            self.store.save(wedding_id, [*guests, *new_records], expected_version=version)
            self.store.append_guest_names(wedding_id, [r.name for r in new_records])

        logger.info(
            "Directory → importación | wedding={} | imported={} | skipped_existing={}",
            wedding_id, len(new_records), skipped,
        )
        return ImportOutcome(imported=len(new_records), skipped_existing=skipped)


# =================================================================================
# 📊 Utilidades del panel (puras)
# =================================================================================
def compute_stats(guests: List[GuestRecord]) -> GuestStats:
    attending = sum(1 for g in guests if g.rsvp_status == RsvpStatus.yes)
    not_attending = sum(1 for g in guests if g.rsvp_status == RsvpStatus.no)
    pending = sum(1 for g in guests if g.rsvp_status == RsvpStatus.pending)
    total = len(guests)
    rate = ((attending + not_attending) / total * 100) if total else 0.0
    return GuestStats(
        total=total,
        attending=attending,
        not_attending=not_attending,
        pending=pending,
        response_rate=round(rate, 1),
    )


def export_csv(guests: List[GuestRecord]) -> str:
    """CSV con Name, Email, RSVP Status (mismas etiquetas que el panel)."""
    df = pd.DataFrame(
        [[g.name, g.email or "", STATUS_LABELS[g.rsvp_status]] for g in guests],
        columns=EXPORT_COLUMNS,
    )
    return df.to_csv(index=False)
