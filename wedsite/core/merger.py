# wedsite/core/merger.py  # Aplica una respuesta RSVP sobre la lista unificada.

# =================================================================================
# 🧩 MERGE DE RSVP
# ---------------------------------------------------------------------------------
# - Localiza al invitado encontrado por el buscador (clave de nombre).
# - Sobrescribe sus campos mutables conservando el nombre canónico.
# - Elimina TODOS los otros registros con el mismo email y distinto nombre
#   (misma persona escrita de otra forma: el registro recién respondido manda).
# - Función pura: devuelve una lista nueva; persistir es cosa del llamador.
# =================================================================================

from datetime import datetime, timezone  # Sello de tiempo de la respuesta (UTC).
from typing import List, Optional, Sequence  # Tipado.

from loguru import logger  # Trazas de deduplicación.

from wedsite.core.names import name_key  # Igualdad de nombres sin mayúsculas ni espacios extra.
from wedsite.errors import GuestNotInListError  # Error de integridad del llamador.
from wedsite.models import RsvpStatus  # yes / no / pending.
from wedsite.schemas import GuestRecord, RsvpSubmission  # Tipos de entrada/salida.
from wedsite.utils.pii import mask_email  # Emails enmascarados en logs.

DEFAULT_PLUS_ONE_NAME = "Guest"  # Nombre usado cuando declara acompañante sin decir quién.


def apply_rsvp(
    matched: GuestRecord,
    submission: RsvpSubmission,
    guest_list: Sequence[GuestRecord],
    *,
    now: Optional[datetime] = None,
) -> List[GuestRecord]:
    """
    Devuelve la lista resultante de aplicar `submission` al invitado `matched`.

    Lanza GuestNotInListError si `matched` no está en `guest_list`; en ese caso
    no hay efectos secundarios (la lista recibida nunca se modifica).
    """
    key = name_key(matched.name)
    index = next((i for i, g in enumerate(guest_list) if name_key(g.name) == key), None)
    if index is None:
        raise GuestNotInListError(matched.name)

    plus_one = submission.number_of_guests > 1
    current = guest_list[index]
    updated = current.model_copy(
        update={
            "email": str(submission.email),
            "rsvp_status": RsvpStatus.yes if submission.attending else RsvpStatus.no,
            "plus_one": plus_one,
            "plus_one_name": (submission.plus_one_name or DEFAULT_PLUS_ONE_NAME) if plus_one else None,
            "dietary_restrictions": submission.dietary_restrictions,
            "song_suggestion": submission.song_suggestion,
            "submitted_at": now or datetime.now(timezone.utc),
        }
    )

    email_norm = str(submission.email).strip().lower()
    result: List[GuestRecord] = []
    for i, guest in enumerate(guest_list):
        if i == index:
            result.append(updated)
            continue
        same_email = bool(guest.email) and guest.email.strip().lower() == email_norm
        if same_email and name_key(guest.name) != key:
            logger.info(
                "Merger → duplicado por email eliminado | kept='{}' | removed='{}' | email={}",
                current.name, guest.name, mask_email(email_norm),
            )
            continue
        result.append(guest)

    return result
