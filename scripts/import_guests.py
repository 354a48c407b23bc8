# scripts/import_guests.py
# =============================================================================
# 🚚 Importador de listas de invitados hacia el backend (endpoint admin).
# - Lee el archivo (xlsx/csv) localmente con wedsite.importer para avisar de
#   filas inválidas antes de enviarlo.
# - Sube el archivo tal cual a:
#     POST /api/admin/weddings/{wedding_id}/import
# - Requiere ADMIN_API_KEY (cabecera: x-admin-key).
# =============================================================================

import argparse
import json
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

from wedsite.errors import ImportFileError
from wedsite.importer import read_guest_file

# --- Carga .env temprano ---
load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")


def _endpoint(wedding_id: str) -> str:
    return f"{API_BASE_URL.rstrip('/')}/api/admin/weddings/{wedding_id}/import"


def _upload(wedding_id: str, path: Path, timeout: int = 60) -> dict:
    """Sube el archivo como multipart y devuelve el JSON de respuesta (o error claro)."""
    with path.open("rb") as fh:
        resp = requests.post(
            _endpoint(wedding_id),
            headers={"x-admin-key": ADMIN_API_KEY},
            files={"file": (path.name, fh)},
            timeout=timeout,
        )
    if resp.status_code != 200:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        raise RuntimeError(f"HTTP {resp.status_code} - {detail}")
    return resp.json()


def main() -> None:
    parser = argparse.ArgumentParser(description="Importa una lista de invitados (CSV/Excel) en una boda.")
    parser.add_argument("wedding_id", help="Slug de la boda (p. ej. ana-y-luis)")
    parser.add_argument("file", help="Ruta al archivo .xlsx/.xls o .csv")
    parser.add_argument("--dry-run", action="store_true", help="Solo lee y muestra vista previa; no sube nada")
    args = parser.parse_args()

    path = Path(args.file)
    if not path.is_file():
        print(f"❌ No se encontró el archivo: {path}")
        sys.exit(1)

    print(f"📥 Leyendo archivo: {path}")
    try:
        parsed = read_guest_file(path.name, path.read_bytes())
    except ImportFileError as e:
        print(f"❌ Archivo no válido: {e}")
        sys.exit(1)

    if parsed.errors:
        print("⚠️  Filas con problemas (se omitirán o irán sin email):")
        print(" - " + "\n - ".join(parsed.errors))

    if not parsed.entries:
        print("⛔ No hay invitados para importar.")
        sys.exit(1)

    print(f"📦 Invitados leídos: {len(parsed.entries)}")

    if args.dry_run:
        print("🧪 DRY-RUN activo: no se enviará nada al backend.")
        preview = [{"name": n, "email": e} for n, e in parsed.entries[:3]]
        print(json.dumps(preview, indent=2, ensure_ascii=False))
        sys.exit(0)

    if not ADMIN_API_KEY:
        print("❌ Falta ADMIN_API_KEY en el entorno (.env).")
        sys.exit(1)

    print(f"➡️  Subiendo a {_endpoint(args.wedding_id)}")
    try:
        result = _upload(args.wedding_id, path)
    except (requests.RequestException, RuntimeError) as e:
        print(f"❌ Error al importar: {e}")
        sys.exit(1)

    print("\n✅ Resumen de importación:")
    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
