# wedsite/core/security.py
# Protección del panel de administración con una API key en cabecera.
import os
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security.api_key import APIKeyHeader
from loguru import logger

_api_key_header = APIKeyHeader(name="x-admin-key", auto_error=False)


def require_admin(api_key: str = Depends(_api_key_header)) -> None:
    # Leída en cada petición, no al importar el módulo.
    expected = os.getenv("ADMIN_API_KEY", "")
    if not expected or not api_key or not secrets.compare_digest(api_key, expected):
        logger.warning("Admin → acceso denegado (cabecera x-admin-key ausente o incorrecta)")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
        )
