# wedsite/core/migrator.py  # Migración única del formato RSVP antiguo a la lista unificada.

# =================================================================================
# 🚚 MIGRADOR DE DATOS HEREDADOS
# ---------------------------------------------------------------------------------
# Antes solo se guardaban las respuestas (una fila por RSVP enviado). Ahora hay
# una lista unificada con TODOS los invitados. migrate() construye esa lista:
#   1) un registro por nombre de la lista inicial (con su RSVP si lo hay);
#   2) luego los RSVP de gente que no estaba en la lista inicial.
# sync_name_list() añade como 'pending' los nombres nuevos de la lista inicial
# que todavía no existen en la lista unificada.
# =================================================================================

from typing import Dict, Iterable, List, Optional, Sequence  # Tipado.

from loguru import logger  # Trazas de migración.

from wedsite.core.names import name_key  # Clave de igualdad de nombres.
from wedsite.models import RsvpStatus  # yes / no / pending.
from wedsite.schemas import GuestRecord, LegacyRsvpRecord  # Formas nueva y antigua.


def _from_legacy(name: str, rsvp: LegacyRsvpRecord) -> GuestRecord:
    """Convierte una respuesta antigua en registro unificado con el nombre dado."""
    return GuestRecord(
        name=name,
        email=rsvp.email,
        rsvp_status=RsvpStatus.yes if rsvp.attending else RsvpStatus.no,
        plus_one=rsvp.number_of_guests > 1,
        plus_one_name=rsvp.plus_one_name,
        dietary_restrictions=rsvp.dietary_restrictions,
        song_suggestion=rsvp.song_suggestion,
        submitted_at=rsvp.submitted_at,
    )


def migrate(
    guest_name_list: Sequence[str],
    legacy_rsvps: Optional[Iterable[LegacyRsvpRecord]],
) -> List[GuestRecord]:
    """
    Construye la lista unificada a partir de los nombres iniciales y las respuestas antiguas.
    Determinista: misma entrada → misma salida, en el orden de `guest_name_list`
    seguido de los extras en su orden original.
    """
    rsvps = list(legacy_rsvps or [])

    by_key: Dict[str, LegacyRsvpRecord] = {}
    for rsvp in rsvps:                                              # Primera respuesta por nombre (como find()).
        by_key.setdefault(name_key(rsvp.guest_name), rsvp)

    result: List[GuestRecord] = []
    seen = set()

    # --- 1) Lista inicial, en su orden ---
    for raw in guest_name_list:
        name = (raw or "").strip()
        key = name_key(name)
        if not key or key in seen:                                  # Vacíos y repetidos no generan registro.
            continue
        seen.add(key)
        rsvp = by_key.get(key)
        result.append(_from_legacy(name, rsvp) if rsvp else GuestRecord(name=name))

    # --- 2) Respuestas de gente fuera de la lista inicial ---
    extras = 0
    for rsvp in rsvps:
        key = name_key(rsvp.guest_name)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(_from_legacy(rsvp.guest_name.strip(), rsvp))
        extras += 1

    logger.info(
        "Migrator → lista unificada creada | names={} | legacy_rsvps={} | extras={} | total={}",
        len(guest_name_list), len(rsvps), extras, len(result),
    )
    return result


def sync_name_list(guest_list: Sequence[GuestRecord], guest_name_list: Sequence[str]) -> List[GuestRecord]:
    """Añade al final, como 'pending', los nombres de `guest_name_list` que aún no están en la lista."""
    existing = {name_key(g.name) for g in guest_list}
    added: List[GuestRecord] = []
    for raw in guest_name_list:
        name = (raw or "").strip()
        key = name_key(name)
        if not key or key in existing:
            continue
        existing.add(key)
        added.append(GuestRecord(name=name))

    if added:
        logger.info("Migrator → nombres nuevos añadidos a la lista unificada | added={}", len(added))
    return [*guest_list, *added]
