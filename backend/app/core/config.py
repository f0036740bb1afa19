"""Carga de configuración de la aplicación.

Usa `pydantic-settings` para leer valores desde `.env` o variables de
entorno. Cada campo lleva un comentario corto con su propósito para que
alguien sin contexto previo sepa qué puede ajustar.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Contenedor tipado para todas las opciones configurables."""

    app_name: str = "Contacts API"
    environment: str = "development"
    log_level: str = "INFO"

    # Directorio base para ficheros de ejecución
    data_dir: Path = Path("data")
    # Listado inicial de contactos (array JSON)
    contacts_file: Path = Path("data/contacts.json")
    # Aquí se escriben los archivos exportados, uno por usuario
    archive_dir: Path = Path("data/archives")

    # Contactos por página en el listado HTML
    page_size: int = 10

    # Simulación del export: número de incrementos y pausa entre ellos (s)
    archive_steps: int = 100
    archive_step_interval: float = 0.05

    # Cookie que identifica al usuario/sesión
    user_cookie_name: str = "user_id"

    # CORS
    allowed_origins: list[str] = ["*"]
    allow_credentials: bool = False

    # Le indicamos a Pydantic que lea automáticamente las variables de entorno
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Crea (y memoriza) la configuración de forma perezosa.

    Usamos `lru_cache` para que sólo se construya una instancia por proceso,
    evitando relecturas repetidas de `.env`. También normalizamos la lista de
    orígenes permitidos para CORS cuando llega como cadena separada por comas.
    """

    settings = Settings()
    # Accept comma separated `ALLOWED_ORIGINS` env value as a string
    ao = settings.allowed_origins
    if isinstance(ao, str):
        settings.allowed_origins = [s.strip() for s in ao.split(",") if s.strip()]
    return settings
