# wedsite/importer.py  # Lectura de listas de invitados desde CSV / Excel (pandas + openpyxl).

# =================================================================================
# 📥 IMPORTADOR DE ARCHIVOS DE INVITADOS
# ---------------------------------------------------------------------------------
# Convierte el archivo subido por la pareja en entradas (nombre, email?).
# - .csv  → columna 1 = nombre, columna 2 = email; la primera fila es cabecera
#           si su primera celda contiene "name".
# - .xlsx / .xls → hoja "Guest List" si existe; si no, la segunda; si no, la
#           primera. La fila 1 siempre es cabecera.
# - Filas sin nombre: se saltan y se cuentan. Email inválido: se descarta el
#   email, se conserva el nombre y se cuenta.
# - Aquí NO se decide si el invitado ya existe: eso es del servicio (por nombre).
# =================================================================================

import io  # Buffers en memoria para pandas.
import os  # Límite de tamaño configurable.
import re  # Validación ligera de email.
from dataclasses import dataclass, field  # Resultado de la lectura.
from typing import BinaryIO, List, Optional, Tuple  # Tipado.

import pandas as pd  # Lectura de CSV/Excel y escritura de la plantilla.
from loguru import logger  # Trazas de importación.

from wedsite.errors import ImportFileError, ImportFileTooLargeError  # Archivo ilegible o demasiado grande.

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")  # .xls se lee con xlrd.
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5 MB.
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

GUEST_SHEET = "Guest List"
TEMPLATE_COLUMNS = ["Name", "Email", "Phone", "Plus One", "Dietary Restrictions", "Notes"]

TEMPLATE_INSTRUCTIONS = [
    "GUEST LIST TEMPLATE - INSTRUCTIONS",
    "",
    "This template helps you organize your guest list for your wedding website.",
    "",
    "HOW TO USE:",
    '1. Fill in your guest information in the "Guest List" tab',
    "2. Save the file",
    "3. Upload it from the guest list section of your admin panel",
    "",
    "COLUMN DESCRIPTIONS:",
    "• Name: Full name of your guest",
    "• Email: Guest's email address (optional)",
    "• Phone: Guest's phone number (optional)",
    '• Plus One: "Yes" or "No" if guest can bring a plus one',
    '• Dietary Restrictions: Any dietary needs (e.g., "Vegetarian", "Gluten-free")',
    "• Notes: Any additional information about the guest",
    "",
    "TIPS:",
    '• The "Name" column is required - all other columns are optional',
    "• Keep the header row (first row) as is",
    "• Guests already in your list (same name) are skipped on import",
]

TEMPLATE_SAMPLE_ROWS = [
    ["John Doe", "john.doe@email.com", "+1234567890", "Yes", "None", "Best man"],
    ["Jane Smith", "jane.smith@email.com", "+1234567891", "No", "Vegetarian", "College friend"],
    ["Bob Johnson", "bob.johnson@email.com", "+1234567892", "Yes", "Gluten-free", "Work colleague"],
    ["Sarah Wilson", "sarah.wilson@email.com", "+1234567893", "No", "None", "Bride's sister"],
    ["Mike Brown", "mike.brown@email.com", "+1234567894", "Yes", "None", "Groom's brother"],
]


@dataclass
class ParsedGuestFile:
    """Entradas válidas (en orden de archivo) + filas/celdas descartadas."""

    entries: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    skipped_invalid: int = 0
    errors: List[str] = field(default_factory=list)


def max_import_bytes() -> int:
    try:
        return int(os.getenv("IMPORT_MAX_BYTES", str(DEFAULT_MAX_BYTES)))
    except ValueError:
        return DEFAULT_MAX_BYTES


def read_upload(stream: BinaryIO) -> bytes:
    """Lee como mucho IMPORT_MAX_BYTES + 1 bytes; si sobra algo, el archivo es demasiado grande."""
    limit = max_import_bytes()
    content = stream.read(limit + 1)
    if len(content) > limit:
        raise ImportFileTooLargeError(f"File too large (more than {limit} bytes).")
    return content


def _cell(value) -> str:
    """Celda → texto recortado ('' para vacías/NaN)."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def _collect(rows, parsed: ParsedGuestFile, *, first_row_number: int, header_name: Optional[str] = None) -> None:
    """Valida filas (nombre, email) y acumula el resultado en `parsed`."""
    for offset, (raw_name, raw_email) in enumerate(rows):
        row_number = first_row_number + offset
        name, email = _cell(raw_name), _cell(raw_email)

        if not name and not email:  # Fila completamente vacía: no cuenta.
            continue
        if header_name is not None and name == header_name:  # Cabecera repetida.
            continue
        if not name:
            parsed.skipped_invalid += 1
            parsed.errors.append(f"Row {row_number}: empty name, row skipped.")
            continue
        if email and not EMAIL_RE.match(email):
            parsed.skipped_invalid += 1
            parsed.errors.append(f"Row {row_number}: email '{email}' looks invalid, imported without email.")
            email = ""

        parsed.entries.append((name, email or None))


def _two_columns(df: pd.DataFrame):
    """Itera (col1, col2) aunque el archivo solo tenga una columna."""
    names = df.iloc[:, 0].tolist() if df.shape[1] >= 1 else []
    emails = df.iloc[:, 1].tolist() if df.shape[1] >= 2 else [None] * len(names)
    return zip(names, emails)


def parse_csv(content: bytes) -> ParsedGuestFile:
    parsed = ParsedGuestFile()
    try:
        # Ancho fijo de 2 columnas: las filas con más campos se recortan y las cortas se rellenan.
        df = pd.read_csv(
            io.BytesIO(content),
            header=None,
            names=[0, 1],
            usecols=[0, 1],
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        return parsed
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ImportFileError(f"Could not read CSV file: {e}") from e

    first_row = 1
    if not df.empty and "name" in _cell(df.iloc[0, 0]).lower():
        df = df.iloc[1:]
        first_row = 2

    _collect(_two_columns(df), parsed, first_row_number=first_row)
    return parsed


def _pick_sheet(sheet_names: List[str]) -> str:
    if GUEST_SHEET in sheet_names:
        return GUEST_SHEET
    return sheet_names[1] if len(sheet_names) >= 2 else sheet_names[0]


def parse_excel(content: bytes) -> ParsedGuestFile:
    parsed = ParsedGuestFile()
    try:
        with pd.ExcelFile(io.BytesIO(content)) as workbook:
            if not workbook.sheet_names:
                raise ImportFileError("No valid worksheet found in the Excel file")
            sheet = _pick_sheet(workbook.sheet_names)
            df = workbook.parse(sheet, header=None)
    except ImportFileError:
        raise
    except Exception as e:  # openpyxl / zipfile / xlrd lanzan tipos distintos según el archivo.
        raise ImportFileError(f"Failed to parse Excel file: {e}") from e

    logger.debug("Importer → hoja '{}' | filas={}", sheet, len(df))
    _collect(_two_columns(df.iloc[1:]), parsed, first_row_number=2, header_name="Name")
    return parsed


def read_guest_file(filename: str, content: bytes) -> ParsedGuestFile:
    """
    Lee un archivo de invitados subido. Lanza ImportFileError si la extensión no
    está soportada, si supera IMPORT_MAX_BYTES o si no se puede leer.
    """
    lower = (filename or "").lower()
    if not lower.endswith(SUPPORTED_EXTENSIONS):
        raise ImportFileError("Unsupported file format. Please use CSV or Excel files.")

    limit = max_import_bytes()
    if len(content) > limit:
        raise ImportFileTooLargeError(f"File too large ({len(content)} bytes, max {limit}).")

    parsed = parse_csv(content) if lower.endswith(".csv") else parse_excel(content)
    logger.info(
        "Importer → archivo leído | file='{}' | entries={} | skipped_invalid={}",
        filename, len(parsed.entries), parsed.skipped_invalid,
    )
    return parsed


def build_template_xlsx() -> bytes:
    """Plantilla descargable: hoja de instrucciones + hoja 'Guest List' con ejemplos."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(TEMPLATE_INSTRUCTIONS).to_excel(writer, sheet_name="Instructions", index=False, header=False)
        pd.DataFrame(TEMPLATE_SAMPLE_ROWS, columns=TEMPLATE_COLUMNS).to_excel(writer, sheet_name=GUEST_SHEET, index=False)
    return buffer.getvalue()
