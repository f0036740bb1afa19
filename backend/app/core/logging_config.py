"""Configuración del logging de la aplicación.

Se llama una sola vez al arrancar. El formato es deliberadamente sencillo
para que se pueda leer en la consola sin herramientas extra.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configura el logger raíz con el nivel indicado (p.ej. "DEBUG")."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
