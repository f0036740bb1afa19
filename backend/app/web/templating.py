"""Motor de plantillas compartido por los routers HTML."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Ficheros estáticos (JS del menú de acciones por fila)
STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
