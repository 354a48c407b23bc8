# wedsite/deps.py  # Dependencias compartidas de los routers.

# =================================================================================
# 🔌 DEPENDENCIAS DE FASTAPI
# ---------------------------------------------------------------------------------
# - get_store / get_directory: arman el servicio sobre la sesión de la petición.
# - http_error: traduce los errores de dominio a HTTPException.
# - client_ip: IP real del visitante (detrás de proxy/CDN) para el rate limit.
# =================================================================================

from fastapi import Depends, HTTPException, Request, status  # Núcleo de FastAPI.
from sqlalchemy.orm import Session  # Tipo de sesión.

from wedsite.db import get_db  # Sesión por petición.
from wedsite.errors import (
    DuplicateGuestError,
    GuestNotInListError,
    ImportFileError,
    ImportFileTooLargeError,
    StaleGuestListError,
    WeddingNotFoundError,
    WedsiteError,
)
from wedsite.services.guest_directory import GuestDirectory
from wedsite.store import SqlGuestListStore


def get_store(db: Session = Depends(get_db)) -> SqlGuestListStore:
    return SqlGuestListStore(db)


def get_directory(store: SqlGuestListStore = Depends(get_store)) -> GuestDirectory:
    return GuestDirectory(store)


def client_ip(request: Request) -> str:
    """IP del cliente: primera de X-Forwarded-For si viene de un proxy, si no la de la conexión."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


# Orden importa: las subclases antes que su base.
_STATUS_BY_ERROR = (
    (WeddingNotFoundError, status.HTTP_404_NOT_FOUND),
    (GuestNotInListError, status.HTTP_404_NOT_FOUND),
    (DuplicateGuestError, status.HTTP_409_CONFLICT),
    (StaleGuestListError, status.HTTP_409_CONFLICT),
    (ImportFileTooLargeError, 413),
    (ImportFileError, status.HTTP_400_BAD_REQUEST),
)


def http_error(exc: WedsiteError) -> HTTPException:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
