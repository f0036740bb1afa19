"""Punto de entrada de la API usando FastAPI.

Este módulo crea la aplicación, configura logging, CORS y la cookie de
usuario, carga los contactos al arrancar y registra los routers (HTML y
JSON).
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from uuid import UUID, uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.v1.archive import router as archive_api_router
from app.api.v1.contacts import router as contacts_api_router
from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.middleware_logging import register_request_logging
from app.services.contact_store import contact_service
from app.web.archive import router as archive_web_router
from app.web.contacts import router as contacts_web_router
from app.web.templating import STATIC_DIR

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


def load_contacts() -> None:
    """Carga inicial de la agenda; si falla seguimos con la lista vacía."""
    path = settings.contacts_file
    try:
        count = contact_service.load_file(path)
    except (OSError, ValueError) as e:
        logger.error("Could not load contacts from %s: %s", path, e)
        return
    logger.info("Loaded %s contacts from %s", count, path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    load_contacts()
    yield


# Instancia principal de FastAPI; aquí es donde se montan rutas y middleware.
app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configurable via `settings.allowed_origins` (definido en .env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.allowed_origins],
    allow_credentials=settings.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_request_logging(app)


def normalize_user_id(value: Optional[str]) -> Optional[str]:
    """Devuelve el uuid en forma canónica, o None si no es un uuid válido."""
    if not value:
        return None
    try:
        return str(UUID(value))
    except ValueError:
        return None


@app.middleware("http")
async def assign_user_id(request: Request, call_next):
    """Identifica al usuario mediante una cookie con un uuid.

    La primera visita (o una cookie manipulada) recibe un uuid nuevo. Cada
    uuid tiene su propio job de exportación en el registro.
    """
    cookie_name = settings.user_cookie_name
    raw = request.cookies.get(cookie_name)
    user_id = normalize_user_id(raw)
    if user_id is None:
        user_id = str(uuid4())
    request.state.user_id = user_id

    response = await call_next(request)

    if raw != user_id:
        response.set_cookie(cookie_name, user_id, httponly=True, samesite="lax")
    return response


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(contacts_api_router, prefix="/api/v1")
app.include_router(archive_api_router, prefix="/api/v1")
app.include_router(archive_web_router)
app.include_router(contacts_web_router)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
