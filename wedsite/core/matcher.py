# wedsite/core/matcher.py  # Buscador de invitados por nombre libre (cascada de estrategias).

# =================================================================================
# 🔎 BUSCADOR DE INVITADOS
# ---------------------------------------------------------------------------------
# El visitante escribe su nombre en el micrositio y buscamos su registro.
# Se prueban las estrategias EN ORDEN y gana la primera que encuentre algo:
#   1) exact        → nombre completo igual (sin distinguir mayúsculas)
#   2) tokens       → todas las palabras de la búsqueda están en el nombre
#   3) anchored     → mismo nombre de pila + prefijo de un apellido (≥2 palabras)
#   4) loose        → nombre y apellido contenidos uno en otro (≥2 palabras)
#   5) email        → la búsqueda es el email guardado del invitado
# Cada estrategia recorre la lista completa en su orden original.
# "No encontrado" es None: el visitante se equivoca a menudo, no es un error.
# =================================================================================

from typing import Callable, List, Optional, Sequence, Tuple  # Tipado de predicados y resultados.

from loguru import logger  # Trazas de qué estrategia encontró al invitado.

from wedsite.core.names import normalize  # Tokenizador común.
from wedsite.schemas import GuestRecord  # Registro unificado.

# Un predicado recibe (búsqueda, tokens búsqueda, invitado, tokens invitado).
Predicate = Callable[[str, List[str], GuestRecord, List[str]], bool]


def _exact(query: str, q: List[str], guest: GuestRecord, g: List[str]) -> bool:
    return guest.name.lower() == query.lower()


def _tokens(query: str, q: List[str], guest: GuestRecord, g: List[str]) -> bool:
    guest_tokens = set(g)
    return all(part in guest_tokens for part in q)


def _anchored(query: str, q: List[str], guest: GuestRecord, g: List[str]) -> bool:
    if len(q) < 2 or not g or g[0] != q[0]:
        return False
    # Algún token posterior de la búsqueda es prefijo de algún token posterior del nombre.
    return any(gp.startswith(qp) for gp in g[1:] for qp in q[1:])


def _loose(query: str, q: List[str], guest: GuestRecord, g: List[str]) -> bool:
    if len(q) < 2 or len(g) < 2:
        return False
    first_ok = g[0] in q[0] or q[0] in g[0]
    last_ok = g[-1] in q[-1] or q[-1] in g[-1]
    return first_ok and last_ok


def _email(query: str, q: List[str], guest: GuestRecord, g: List[str]) -> bool:
    return bool(guest.email) and guest.email.lower() == query.lower()


# Orden de la cascada: precisión antes que cobertura. No reordenar.
MATCH_STRATEGIES: Tuple[Tuple[str, Predicate], ...] = (
    ("exact", _exact),
    ("tokens", _tokens),
    ("anchored", _anchored),
    ("loose", _loose),
    ("email", _email),
)


def find_guest_with_strategy(
    query: str, guest_list: Sequence[GuestRecord]
) -> Tuple[Optional[GuestRecord], Optional[str]]:
    """Como find_guest() pero devuelve también el nombre de la estrategia que encontró al invitado."""
    query = (query or "").strip()                                   # Sin búsqueda útil no se recorre nada.
    if not query or not guest_list:
        return None, None

    q_tokens = normalize(query)
    prepared = [(guest, normalize(guest.name)) for guest in guest_list]  # Tokeniza una sola vez por invitado.

    for strategy, predicate in MATCH_STRATEGIES:
        for guest, g_tokens in prepared:
            if predicate(query, q_tokens, guest, g_tokens):
                logger.debug("Matcher → MATCH | strategy={} | guest='{}'", strategy, guest.name)
                return guest, strategy

    logger.debug("Matcher → SIN MATCH | tokens={}", len(q_tokens))
    return None, None


def find_guest(query: str, guest_list: Sequence[GuestRecord]) -> Optional[GuestRecord]:
    """Devuelve el primer invitado que encaje según la cascada, o None si ninguno encaja."""
    guest, _ = find_guest_with_strategy(query, guest_list)
    return guest
