"""
Main Entry Point - FastAPI Application
Progetto: Gestionale Studio Legale

Configura l'applicazione FastAPI con middleware, router e lifecycle.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gestionale_studio.core.config import settings
from gestionale_studio.core.exceptions import (
    AppException,
    BusinessValidationError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)
from gestionale_studio.core.storage import JsonStore

# ------------------------------------------------------------
# Configurazione Logging
# ------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Lifespan Handler
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestisce il ciclo di vita dell'applicazione.

    - Startup: carica il documento JSON (se non già fornito, es. nei test)
    - Shutdown: nessuna operazione, ogni modifica è già su disco
    """
    logger.info(f"Avvio {settings.app_name} v{settings.app_version}")
    if getattr(app.state, "store", None) is None:
        app.state.store = JsonStore(settings.data_file).load()
    logger.info("Applicazione avviata con successo")

    yield

    logger.info("Applicazione arrestata")


# ------------------------------------------------------------
# FastAPI Application
# ------------------------------------------------------------
app = FastAPI(
    title=settings.app_name,
    description="Gestionale per studio legale - Backend API",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# ------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------
def _error_response(exc: AppException) -> JSONResponse:
    content = {"detail": exc.detail, "errorCode": exc.error_code}
    if exc.extra:
        content["extra"] = exc.extra
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Converte l'eccezione in risposta HTTP 404."""
    return _error_response(exc)


@app.exception_handler(DuplicateError)
async def duplicate_exception_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    """Converte l'eccezione in risposta HTTP 409."""
    return _error_response(exc)


@app.exception_handler(BusinessValidationError)
async def validation_exception_handler(request: Request, exc: BusinessValidationError) -> JSONResponse:
    """Converte l'eccezione in risposta HTTP 422."""
    return _error_response(exc)


@app.exception_handler(ConflictError)
async def conflict_exception_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Converte l'eccezione in risposta HTTP 409."""
    return _error_response(exc)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Gestore generico per tutte le eccezioni non catturate.

    Converte l'eccezione in risposta HTTP 500 e logga l'errore.
    """
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Errore interno del server", "errorCode": "INTERNAL_SERVER_ERROR"},
    )


# ------------------------------------------------------------
# Middleware CORS
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------
@app.get(
    "/health",
    name="Health Check",
    summary="Controlla lo stato dell'applicazione",
    tags=["System"],
)
async def health_check() -> dict[str, str]:
    """
    Endpoint per il controllo dello stato di salute.

    Returns:
        dict: Stato dell'applicazione
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
    }


# ------------------------------------------------------------
# Router
# ------------------------------------------------------------
from gestionale_studio.api.v1 import api_v1_router

app.include_router(api_v1_router)
