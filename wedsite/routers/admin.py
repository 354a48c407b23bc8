# wedsite/routers/admin.py
# =============================================================================
# 👑 Rutas de administración: alta de bodas y gestión de la lista de invitados
# - Protegido con API Key mediante la dependencia `require_admin` (x-admin-key)
# - Añadir / editar / eliminar invitados, estadísticas del panel
# - Importación CSV/Excel (omite nombres ya existentes) y exportación CSV
# =============================================================================

from typing import List  # Tipos para anotaciones.

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status  # Núcleo de FastAPI.
from loguru import logger  # Trazas del panel.

from wedsite import schemas  # Schemas de entrada/salida.
from wedsite.core.names import split_couple_names  # Nombres de pila para el resumen.
from wedsite.core.security import require_admin  # Dep. que valida x-admin-key == ADMIN_API_KEY.
from wedsite.deps import get_directory, get_store, http_error
from wedsite.errors import WedsiteError
from wedsite.importer import build_template_xlsx, read_guest_file, read_upload
from wedsite.models import Wedding
from wedsite.services.guest_directory import GuestDirectory, compute_stats, export_csv
from wedsite.store import SqlGuestListStore

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ------------------------------- Bodas ----------------------------------------

@router.post("/weddings", response_model=schemas.WeddingSummary, status_code=status.HTTP_201_CREATED)
def create_wedding(payload: schemas.WeddingCreate, store: SqlGuestListStore = Depends(get_store)):
    """
    Crea la boda con sus nombres iniciales (y, si vienen del sitio antiguo,
    sus respuestas heredadas). La lista unificada se construye en el primer acceso.
    """
    if store.db.get(Wedding, payload.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Wedding '{payload.id}' already exists")

    wedding = store.create_wedding(
        payload.id,
        couple_names=payload.couple_names,
        guest_name_list=payload.guest_name_list,
        legacy_rsvps=payload.legacy_rsvps,
        rsvp_deadline=payload.rsvp_deadline,
    )
    first, second = split_couple_names(wedding.couple_names)
    return schemas.WeddingSummary(
        id=wedding.id,
        couple_names=wedding.couple_names,
        first_name=first,
        second_name=second,
        rsvp_deadline=wedding.rsvp_deadline,
        guest_count=len(wedding.guest_name_list),
    )


# ------------------------------ Invitados -------------------------------------

@router.get("/weddings/{wedding_id}/guests", response_model=List[schemas.GuestRecord])
def list_guests(wedding_id: str, directory: GuestDirectory = Depends(get_directory)):
    try:
        guests, _ = directory.get_guest_list(wedding_id)
    except WedsiteError as e:
        raise http_error(e) from e
    return guests


@router.get("/weddings/{wedding_id}/stats", response_model=schemas.GuestStats)
def guest_stats(wedding_id: str, directory: GuestDirectory = Depends(get_directory)):
    try:
        guests, _ = directory.get_guest_list(wedding_id)
    except WedsiteError as e:
        raise http_error(e) from e
    return compute_stats(guests)


@router.post(
    "/weddings/{wedding_id}/guests",
    response_model=schemas.GuestRecord,
    status_code=status.HTTP_201_CREATED,
)
def add_guest(wedding_id: str, payload: schemas.GuestCreate, directory: GuestDirectory = Depends(get_directory)):
    try:
        return directory.add_guest(wedding_id, payload.name, str(payload.email) if payload.email else None)
    except WedsiteError as e:
        raise http_error(e) from e


@router.patch("/weddings/{wedding_id}/guests/{name}", response_model=schemas.GuestRecord)
def update_guest(
    wedding_id: str,
    name: str,
    payload: schemas.GuestUpdate,
    directory: GuestDirectory = Depends(get_directory),
):
    """Edita nombre, email y/o estado. Un email vacío borra el email guardado."""
    try:
        return directory.update_guest(wedding_id, name, payload)
    except WedsiteError as e:
        raise http_error(e) from e


@router.delete("/weddings/{wedding_id}/guests/{name}", status_code=status.HTTP_204_NO_CONTENT)
def remove_guest(wedding_id: str, name: str, directory: GuestDirectory = Depends(get_directory)):
    try:
        directory.remove_guest(wedding_id, name)
    except WedsiteError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --------------------------- Importar / exportar ------------------------------

@router.post("/weddings/{wedding_id}/import", response_model=schemas.ImportGuestsResult)
def import_guests(
    wedding_id: str,
    file: UploadFile = File(...),
    directory: GuestDirectory = Depends(get_directory),
):
    """
    Importa un CSV/Excel. Los nombres que ya están en la lista (sin distinguir
    mayúsculas) se omiten; las filas sin nombre y los emails inválidos se
    cuentan en `skipped_invalid` con su detalle en `errors`.
    """
    try:
        parsed = read_guest_file(file.filename or "", read_upload(file.file))
        outcome = directory.import_guests(wedding_id, parsed.entries)
    except WedsiteError as e:
        raise http_error(e) from e

    logger.info(
        "Admin → importación | wedding={} | file='{}' | imported={} | skipped_existing={} | skipped_invalid={}",
        wedding_id, file.filename, outcome.imported, outcome.skipped_existing, parsed.skipped_invalid,
    )
    return schemas.ImportGuestsResult(
        imported=outcome.imported,
        skipped_existing=outcome.skipped_existing,
        skipped_invalid=parsed.skipped_invalid,
        errors=parsed.errors,
    )


@router.get("/weddings/{wedding_id}/export.csv")
def export_guests_csv(wedding_id: str, directory: GuestDirectory = Depends(get_directory)):
    try:
        guests, _ = directory.get_guest_list(wedding_id)
    except WedsiteError as e:
        raise http_error(e) from e
    return Response(
        content=export_csv(guests),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="guest-list-{wedding_id}.csv"'},
    )


@router.get("/import-template.xlsx")
def download_import_template():
    return Response(
        content=build_template_xlsx(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="guest-list-template.xlsx"'},
    )
