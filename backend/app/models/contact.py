"""Modelos de datos de un contacto.

`Contact` es lo que guardamos en memoria y lo que se serializa en la API
JSON. `ContactForm` agrupa los campos que llegan desde un formulario HTML
o desde la API, antes de validarlos.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContactForm(BaseModel):
    """Campos editables de un contacto tal y como llegan del cliente."""

    first: str = ""
    last: str = ""
    email: str = ""
    phone: str = ""


class Contact(BaseModel):
    """Un contacto de la agenda."""

    id: int
    first: str = ""
    last: str = ""
    email: str = ""
    phone: str = ""
    # Errores de validación por campo; vacío cuando el contacto es válido
    errors: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_form(cls, contact_id: int, form: ContactForm) -> "Contact":
        return cls(id=contact_id, **form.model_dump())

    def apply_form(self, form: ContactForm) -> None:
        """Sobrescribe los campos editables con los del formulario."""
        self.first = form.first
        self.last = form.last
        self.email = form.email
        self.phone = form.phone
        self.errors = {}
