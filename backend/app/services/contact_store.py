"""Almacén global de contactos en memoria.

En este MVP no hay base de datos, así que exponemos una instancia única de
`ContactService` que vive mientras el proceso está en marcha. La carga
desde disco se hace al arrancar la app (ver `app.main`).
"""

from app.core.config import get_settings
from app.services.contact_service import ContactService

# Instancia global única para toda la app (MVP en memoria)
contact_service = ContactService(page_size=get_settings().page_size)
