# wedsite/schemas.py  # Ruta y nombre del archivo de esquemas (Pydantic).

# =================================================================================
# 📦 Schemas (MODELOS DE DATOS Pydantic)
# ---------------------------------------------------------------------------------
# Este archivo define los modelos de datos usados por el núcleo y por la API.
# - GuestRecord / LegacyRsvpRecord: las dos formas de guardar invitados.
# - RsvpSubmission: lo que envía el invitado desde el formulario público.
# - Aceptan alias camelCase para leer los blobs JSON del sitio original.
# - Usan Pydantic v2: field_validator y ConfigDict.
# =================================================================================

from datetime import datetime                                                                 # Importa tipo de fecha/hora para timestamps.
from typing import Optional, List                                                             # Importa tipos para anotar opcionales y listas.

from pydantic import (                                                                        # Importa utilidades principales de Pydantic v2.
    BaseModel,                                                                                # Clase base para definir modelos.
    EmailStr,                                                                                 # Tipo de email con validación de formato.
    field_validator,                                                                          # Decorador para validación a nivel de campo.
    ConfigDict,                                                                               # Configuración del modelo (equivalente a class Config).
    Field,                                                                                    # Declaración de campos con metadata y defaults.
)

from wedsite.models import RsvpStatus                                                         # Enum compartido con la capa ORM.

# =================================================================================
# 🧰 Utilidades de normalización
# =================================================================================
def _blank_to_none(v):                                                                        # Convierte cadenas vacías en None.
    """Devuelve None para '', '   ' o None; cualquier otro valor pasa tal cual (recortado si es str)."""
    if v is None:                                                                             # Si no hay valor...
        return None                                                                           # ...retorna None directamente.
    if isinstance(v, str):                                                                    # Solo se recortan textos.
        v = v.strip()                                                                         # Elimina espacios incidentales.
        return v or None                                                                      # Vacío → None.
    return v                                                                                  # Otros tipos (datetime, etc.) sin cambios.

# =================================================================================
# 👤 Registro unificado de invitado
# =================================================================================
class GuestRecord(BaseModel):                                                                 # Un invitado de la lista unificada.
    name: str                                                                                 # Nombre canónico (clave de búsqueda).
    email: Optional[str] = None                                                               # Email (puede faltar hasta que responda).
    rsvp_status: RsvpStatus = Field(default=RsvpStatus.pending, validation_alias="rsvpStatus")           # Estado de respuesta.
    plus_one: bool = Field(default=False, validation_alias="plusOne")                                    # Si trae acompañante.
    plus_one_name: Optional[str] = Field(default=None, validation_alias="plusOneName")                   # Nombre del acompañante.
    dietary_restrictions: Optional[str] = Field(default=None, validation_alias="dietaryRestrictions")    # Alergias/dieta (texto libre).
    song_suggestion: Optional[str] = Field(default=None, validation_alias="songSuggestion")              # Canción sugerida.
    submitted_at: Optional[datetime] = Field(default=None, validation_alias="submittedAt")               # Última respuesta (UTC).

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)                   # Acepta nombre python o alias camelCase.

    @field_validator("name")                                                                  # Validador del nombre canónico.
    @classmethod
    def _strip_name(cls, v: str) -> str:                                                      # Solo recorta extremos; el nombre se conserva tal cual.
        return (v or "").strip()

    @field_validator(                                                                         # Opcionales de texto: vacío → None.
        "email", "plus_one_name", "dietary_restrictions", "song_suggestion", "submitted_at",
        mode="before",
    )
    @classmethod
    def _clean_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("plus_one", mode="before")                                               # JSON antiguo puede traer null.
    @classmethod
    def _none_is_false(cls, v):
        return bool(v) if v is not None else False

    @field_validator("rsvp_status", mode="before")                                            # Tolerancia a mayúsculas / null.
    @classmethod
    def _status_default(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return RsvpStatus.pending
        return v.strip().lower() if isinstance(v, str) else v

# =================================================================================
# 🗃️ Registro RSVP heredado (solo lectura)
# =================================================================================
class LegacyRsvpRecord(BaseModel):                                                            # Forma antigua: una fila por respuesta enviada.
    guest_name: str = Field(validation_alias="guestName")                                                # Nombre tal como lo escribió el invitado.
    email: Optional[str] = None                                                               # Email de contacto.
    attending: bool = False                                                                   # Asiste o no.
    number_of_guests: int = Field(default=1, validation_alias="numberOfGuests")                          # 1 = solo, 2 = con acompañante.
    plus_one_name: Optional[str] = Field(default=None, validation_alias="plusOneName")
    dietary_restrictions: Optional[str] = Field(default=None, validation_alias="dietaryRestrictions")
    song_suggestion: Optional[str] = Field(default=None, validation_alias="songSuggestion")
    submitted_at: Optional[datetime] = Field(default=None, validation_alias="submittedAt")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator(
        "email", "plus_one_name", "dietary_restrictions", "song_suggestion", "submitted_at",
        mode="before",
    )
    @classmethod
    def _clean_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("number_of_guests", mode="before")                                       # null o '' en datos viejos → 1.
    @classmethod
    def _default_guests(cls, v):
        return 1 if v in (None, "") else v

# =================================================================================
# 📋 Respuesta RSVP enviada desde el formulario público
# =================================================================================
class RsvpSubmission(BaseModel):                                                              # Campos que rellena el invitado encontrado.
    email: EmailStr                                                                           # Obligatorio: clave de deduplicación.
    attending: bool                                                                           # True → 'yes', False → 'no'.
    number_of_guests: int = Field(default=1, ge=1, le=2)                                      # 2 = trae acompañante.
    plus_one_name: Optional[str] = Field(default=None, max_length=120)                        # Nombre del acompañante (opcional).
    dietary_restrictions: Optional[str] = Field(default=None, max_length=500)                 # Restricciones alimentarias.
    song_suggestion: Optional[str] = Field(default=None, max_length=200)                      # Canción sugerida.

    @field_validator("plus_one_name", "dietary_restrictions", "song_suggestion", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return _blank_to_none(v)

# =================================================================================
# 💾 Resultado de GuestListStore.load()
# =================================================================================
class WeddingGuestData(BaseModel):                                                            # Todo lo que el núcleo necesita de una boda.
    wedding_id: str
    guest_name_list: List[str] = Field(default_factory=list)                                  # Nombres iniciales.
    legacy_rsvps: Optional[List[LegacyRsvpRecord]] = None                                     # Formato antiguo (si existe).
    unified_list: Optional[List[GuestRecord]] = None                                          # Lista unificada (si ya se migró).
    version: int = 0                                                                          # Versión para save() condicional.

# =================================================================================
# 🌐 Schemas de la API pública
# =================================================================================
class WeddingSummary(BaseModel):
    id: str
    couple_names: str
    first_name: str
    second_name: str
    rsvp_deadline: Optional[datetime] = None
    guest_count: int

class GuestSearchResult(BaseModel):
    found: bool
    guest: Optional[GuestRecord] = None

class RsvpRequest(BaseModel):                                                                 # Búsqueda + respuesta en un solo POST.
    query: str = Field(..., min_length=1, max_length=200)                                     # Lo que escribió el visitante.
    submission: RsvpSubmission

class RsvpResult(BaseModel):
    guest: GuestRecord
    message: str = "RSVP submitted successfully"

# =================================================================================
# 👑 Schemas de administración
# =================================================================================
class WeddingCreate(BaseModel):
    id: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-z0-9][a-z0-9-]*$")       # Slug de la URL.
    couple_names: str = Field(..., min_length=1, max_length=200)
    rsvp_deadline: Optional[datetime] = None
    guest_name_list: List[str] = Field(default_factory=list)
    legacy_rsvps: Optional[List[LegacyRsvpRecord]] = None                                     # Solo al migrar datos del sitio viejo.

    @field_validator("guest_name_list")
    @classmethod
    def _drop_blank_names(cls, v: List[str]) -> List[str]:
        return [n.strip() for n in v if n and n.strip()]

class GuestCreate(BaseModel):                                                                 # Alta manual de un invitado.
    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def _clean_email(cls, v):
        return _blank_to_none(v)

    @field_validator("name")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("El nombre del invitado es obligatorio.")
        return v

class GuestUpdate(BaseModel):                                                                 # Edición manual (solo lo que venga).
    name: Optional[str] = Field(default=None, max_length=120)
    email: Optional[EmailStr] = None
    rsvp_status: Optional[RsvpStatus] = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def _clean(cls, v):
        return _blank_to_none(v)

class GuestStats(BaseModel):                                                                  # Resumen del panel de administración.
    total: int
    attending: int
    not_attending: int
    pending: int
    response_rate: float

class ImportGuestsResult(BaseModel):
    imported: int
    skipped_existing: int
    skipped_invalid: int
    errors: List[str] = Field(default_factory=list)
