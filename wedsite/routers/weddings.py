# wedsite/routers/weddings.py  # Rutas públicas del micrositio de cada boda.

# =================================================================================
# 💒 API PÚBLICA DE LA BODA
# ---------------------------------------------------------------------------------
# - GET  /api/weddings/{id}                 → portada (pareja, fecha límite, nº invitados)
# - GET  /api/weddings/{id}/guests/search   → "¿Estás en la lista?" (buscador en cascada)
# - POST /api/weddings/{id}/rsvp            → busca + aplica respuesta + guarda
# Búsqueda y RSVP van con rate limit por IP: evitan enumerar la lista probando nombres.
# =================================================================================

from datetime import datetime, timezone  # Comparación con la fecha límite.

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status  # Núcleo de FastAPI.
from loguru import logger  # Trazas de endpoints.

from wedsite import schemas  # Schemas de entrada/salida.
from wedsite.core.names import split_couple_names  # "Ana & Luis" → ("Ana", "Luis").
from wedsite.deps import client_ip, get_directory, get_store, http_error
from wedsite.errors import WedsiteError
from wedsite.rate_limit import get_limits_from_env, is_allowed
from wedsite.services.guest_directory import GuestDirectory
from wedsite.store import SqlGuestListStore

router = APIRouter(prefix="/api/weddings", tags=["weddings"])

# --- Límites por IP desde .env (con defaults razonables) ---
SEARCH_MAX, SEARCH_WINDOW = get_limits_from_env("SEARCH_RL", default_max=20, default_window=60)
RSVP_MAX, RSVP_WINDOW = get_limits_from_env("RSVP_RL", default_max=10, default_window=300)


def _enforce_limit(key: str, max_req: int, window: int) -> None:
    if not is_allowed(key, max_req, window):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many attempts. Please try again later.",
            headers={"Retry-After": str(window)},
        )


def _deadline_passed(deadline) -> bool:
    if deadline is None:
        return False
    if deadline.tzinfo is not None:
        deadline = deadline.astimezone(timezone.utc).replace(tzinfo=None)
    return datetime.now(timezone.utc).replace(tzinfo=None) > deadline


# =================================================================================
# 🏠 GET /api/weddings/{id}: datos de portada
# =================================================================================
@router.get("/{wedding_id}", response_model=schemas.WeddingSummary)
def get_wedding_summary(
    wedding_id: str,
    store: SqlGuestListStore = Depends(get_store),
    directory: GuestDirectory = Depends(get_directory),
):
    try:
        wedding = store.get_wedding(wedding_id)
        guests, _ = directory.get_guest_list(wedding_id)  # Primera visita → migración perezosa.
    except WedsiteError as e:
        raise http_error(e) from e

    first, second = split_couple_names(wedding.couple_names)
    return schemas.WeddingSummary(
        id=wedding.id,
        couple_names=wedding.couple_names,
        first_name=first,
        second_name=second,
        rsvp_deadline=wedding.rsvp_deadline,
        guest_count=len(guests),
    )


# =================================================================================
# 🔎 GET /api/weddings/{id}/guests/search?q=
# =================================================================================
@router.get("/{wedding_id}/guests/search", response_model=schemas.GuestSearchResult)
def search_guest(
    wedding_id: str,
    request: Request,
    q: str = Query("", max_length=200),
    directory: GuestDirectory = Depends(get_directory),
):
    """No encontrado es una respuesta normal (found=false), no un 404."""
    _enforce_limit(f"search:{client_ip(request)}", SEARCH_MAX, SEARCH_WINDOW)

    try:
        guest = directory.search(wedding_id, q)
    except WedsiteError as e:
        raise http_error(e) from e

    return schemas.GuestSearchResult(found=guest is not None, guest=guest)


# =================================================================================
# 📝 POST /api/weddings/{id}/rsvp
# =================================================================================
@router.post("/{wedding_id}/rsvp", response_model=schemas.RsvpResult)
def submit_rsvp(
    wedding_id: str,
    payload: schemas.RsvpRequest,
    request: Request,
    store: SqlGuestListStore = Depends(get_store),
    directory: GuestDirectory = Depends(get_directory),
):
    """
    Vuelve a buscar al invitado con lo que escribió el visitante y aplica su
    respuesta. 404 si no está en la lista, 400 si pasó la fecha límite,
    409 si la lista cambió mientras tanto (el cliente debe reintentar).
    """
    _enforce_limit(f"rsvp:{client_ip(request)}", RSVP_MAX, RSVP_WINDOW)

    try:
        wedding = store.get_wedding(wedding_id)
        if _deadline_passed(wedding.rsvp_deadline):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The RSVP deadline for this wedding has passed.",
            )
        guest = directory.submit_rsvp(wedding_id, payload.query, payload.submission)
    except WedsiteError as e:
        raise http_error(e) from e

    if guest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="We couldn't find your name on the guest list.",
        )

    logger.info("RSVP → OK | wedding={} | guest='{}' | status={}", wedding_id, guest.name, guest.rsvp_status.value)
    return schemas.RsvpResult(guest=guest)
