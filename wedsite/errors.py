# wedsite/errors.py  # Taxonomía de errores del directorio de invitados.

# =================================================================================
# ⚠️ ERRORES DE DOMINIO
# ---------------------------------------------------------------------------------
# - El buscador NO lanza errores: "no encontrado" es None.
# - El resto se propaga al llamador inmediato; los routers los traducen a HTTP.
# =================================================================================


class WedsiteError(Exception):
    """Base de todos los errores del proyecto."""


class GuestNotInListError(WedsiteError):
    """El invitado pasado al merge no está en la lista recibida."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Guest '{name}' is not in the guest list")


class DuplicateGuestError(WedsiteError):
    """Alta o renombrado sobre un nombre que ya existe (sin distinguir mayúsculas)."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Guest '{name}' already exists in the guest list")


class WeddingNotFoundError(WedsiteError):
    def __init__(self, wedding_id: str):
        self.wedding_id = wedding_id
        super().__init__(f"Wedding '{wedding_id}' not found")


class StaleGuestListError(WedsiteError):
    """Otro escritor guardó la lista entre nuestro load() y nuestro save()."""

    def __init__(self, wedding_id: str, expected: int, actual: int):
        self.wedding_id = wedding_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Guest list of wedding '{wedding_id}' changed (expected v{expected}, found v{actual})"
        )


class ImportFileError(WedsiteError):
    """El archivo de importación no se puede leer (formato, tamaño, hoja)."""


class ImportFileTooLargeError(ImportFileError):
    """El archivo supera IMPORT_MAX_BYTES."""
