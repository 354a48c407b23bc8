# wedsite/core/names.py  # Normalizador de nombres y utilidades de nombres de la pareja.

# =================================================================================
# 🔤 NORMALIZADOR DE NOMBRES
# ---------------------------------------------------------------------------------
# - normalize(): minúsculas + colapso de espacios + tokens (sin más limpieza).
# - name_key(): clave canónica para comparar nombres sin importar mayúsculas.
# - split_couple_names(): separa "Ana & Luis" en nombres de pila para la portada.
# =================================================================================

import re                         # Regex para separadores de la pareja.
from typing import List, Tuple    # Tipado de tokens y tuplas.

_COUPLE_SYMBOLS_RE = re.compile(r"[&+]")                      # Separadores simbólicos: '&' y '+'.
_COUPLE_WORDS_RE = re.compile(r"\b(?:and|y|et)\b", re.IGNORECASE)  # Separadores de palabra completa (en/es/fr).


def normalize(name: str) -> List[str]:
    """
    Devuelve los tokens del nombre en minúsculas, separados por cualquier espacio.
    No quita acentos ni puntuación: "O'Brien" sigue siendo "o'brien".
    """
    return (name or "").lower().split()                       # split() sin argumento ya colapsa espacios.


def name_key(name: str) -> str:
    """Clave de igualdad de nombres: tokens normalizados unidos por un espacio."""
    return " ".join(normalize(name))


def split_couple_names(couple_names: str) -> Tuple[str, str]:
    """
    Extrae los nombres de pila de la pareja ("Ana García & Luis Pérez" -> ("Ana", "Luis")).
    Es un best-effort para la portada; nunca falla.
    """
    text = (couple_names or "").strip()
    if not text:
        return "", ""

    # 1) Separadores simbólicos.
    if _COUPLE_SYMBOLS_RE.search(text):
        names = [p.strip() for p in _COUPLE_SYMBOLS_RE.split(text) if p.strip()]
    # 2) Separadores de palabra (solo la primera aparición).
    elif _COUPLE_WORDS_RE.search(text):
        names = [p.strip() for p in _COUPLE_WORDS_RE.split(text, maxsplit=1) if p.strip()]
    # 3) Sin separador: mitad y mitad de las palabras.
    else:
        words = text.split()
        if len(words) >= 2:
            mid = len(words) // 2
            names = [" ".join(words[:mid]), " ".join(words[mid:])]
        else:
            names = [text]

    if len(names) >= 2:
        return names[0].split()[0], names[1].split()[0]

    parts = names[0].split() if names else []                  # Un solo nombre tras separar (ej. "Ana &").
    if len(parts) >= 2:
        return parts[0], parts[-1]
    return (parts[0] if parts else ""), ""
