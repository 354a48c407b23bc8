# wedsite/rate_limit.py  # Límite de peticiones por clave (IP + endpoint) en memoria.

# =================================================================================
# 🚦 RATE LIMIT EN MEMORIA
# ---------------------------------------------------------------------------------
# - Ventana deslizante por clave: cada clave guarda los instantes de sus intentos.
# - Pensado para un solo proceso uvicorn; con varias réplicas hay que llevarlo
#   al proxy (NGINX, Cloudflare) o a un almacén compartido.
# - Protege la búsqueda pública de invitados frente a enumeración de nombres.
# =================================================================================

import os  # Lectura de límites desde el entorno (.env).
import time  # Reloj para la ventana.
from collections import deque  # Cola con pops baratos por la izquierda.
from typing import Deque, Dict, Tuple  # Tipado.

from loguru import logger  # Aviso cuando una clave supera su cuota.

_BUCKETS: Dict[str, Deque[float]] = {}  # clave → instantes de los intentos dentro de la ventana.


def _now() -> float:
    return time.monotonic()


def is_allowed(key: str, max_req: int, window_s: int) -> bool:
    """True si `key` aún puede hacer una petición (máximo `max_req` cada `window_s` segundos)."""
    if max_req <= 0:  # 0 o negativo = sin límite.
        return True

    bucket = _BUCKETS.setdefault(key, deque())
    now = _now()

    cutoff = now - window_s
    while bucket and bucket[0] <= cutoff:  # Descarta intentos que ya salieron de la ventana.
        bucket.popleft()

    if len(bucket) >= max_req:
        logger.warning("RateLimit → cuota superada | key={} | {}/{} en {}s", key, len(bucket), max_req, window_s)
        return False

    bucket.append(now)
    return True


def reset_limits() -> None:
    """Vacía todos los contadores (arranque limpio y tests)."""
    _BUCKETS.clear()


def get_limits_from_env(prefix: str, default_max: int, default_window: int) -> Tuple[int, int]:
    """Lee {prefix}_MAX y {prefix}_WINDOW (segundos); valores ausentes o inválidos → defaults."""
    try:
        max_req = int(os.getenv(f"{prefix}_MAX", str(default_max)))
        window = int(os.getenv(f"{prefix}_WINDOW", str(default_window)))
    except ValueError:
        logger.warning("RateLimit → valores inválidos en {}_MAX/{}_WINDOW, usando defaults", prefix, prefix)
        max_req, window = default_max, default_window
    return max_req, window
