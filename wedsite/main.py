# wedsite/main.py  # Punto de entrada de la API (uvicorn wedsite.main:app).

# ================================================================
# 🧱 MODO MANTENIMIENTO (Control temporal desde variable de entorno)
# ================================================================

import os

from dotenv import load_dotenv
from fastapi import FastAPI
from loguru import logger

load_dotenv()  # .env del directorio actual (no pisa variables ya definidas).

if os.getenv("MAINTENANCE_MODE") == "1":
    from fastapi.responses import JSONResponse

    app = FastAPI(title="Wedsite API (maintenance)")

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    async def maintenance_page(path: str):
        """Responde a cualquier ruta y método con un 503 neutro."""
        return JSONResponse(
            status_code=503,
            content={
                "status": "offline",
                "message": "The site is under maintenance. Please come back later.",
            },
        )

    logger.warning("🚧 API arrancada en MODO MANTENIMIENTO. Todos los endpoints reales están desactivados.")
else:
    # =================================================================================
    # 🧠 NÚCLEO DE LA APLICACIÓN API (FastAPI)
    # ---------------------------------------------------------------------------------
    # - Crea la instancia de FastAPI
    # - Configura CORS desde CORS_ORIGINS
    # - Registra routers (público de bodas y panel admin)
    # =================================================================================

    from fastapi.middleware.cors import CORSMiddleware

    from wedsite.db import log_db_path_on_startup
    from wedsite.routers import admin, weddings

    DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
    cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()]

    logger.info(
        "[BOOT] CORS_ORIGINS={} | ADMIN_KEY_SET={}",
        cors_origins,
        "yes" if os.getenv("ADMIN_API_KEY") else "no",
    )

    app = FastAPI(
        title="Wedsite API",
        description="Micrositios de boda: lista de invitados, búsqueda por nombre y RSVP",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # El esquema lo gestiona Alembic (o create_db.py en local); aquí no hay create_all.

    @app.on_event("startup")
    def _startup_db_trace() -> None:
        log_db_path_on_startup()

    app.include_router(weddings.router)
    app.include_router(admin.router)
