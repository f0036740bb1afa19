"""Servicio simple en memoria para gestionar contactos.

Esta clase actúa como una pequeña capa de persistencia. La lista vive en
memoria y se carga una vez desde un fichero JSON al arrancar; los cambios
no se escriben de vuelta a disco.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from app.models.contact import Contact, ContactForm

logger = logging.getLogger(__name__)


class ContactNotFoundError(LookupError):
    """No existe ningún contacto con ese id."""

    def __init__(self, contact_id: int) -> None:
        super().__init__(f"Contact not found: {contact_id}")
        self.contact_id = contact_id


class ContactService:
    """
    Gestión de contactos. MVP: almacenamiento en memoria.
    Más adelante se puede sustituir por BD persistente.
    """

    def __init__(self, page_size: int = 10) -> None:
        self.page_size = page_size
        self._contacts: List[Contact] = []
        self._lock = threading.RLock()

    # ---------- CARGA INICIAL ----------

    def load_file(self, path: Path) -> int:
        """Sustituye la lista por la del fichero JSON y devuelve cuántos hay."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        # `null` equivale a una agenda vacía
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise ValueError("contacts file must hold a JSON array")
        contacts = [Contact.model_validate(item) for item in raw]
        with self._lock:
            self._contacts = contacts
        return len(contacts)

    def replace_all(self, contacts: Iterable[Contact]) -> None:
        with self._lock:
            self._contacts = [c.model_copy(deep=True) for c in contacts]

    # ---------- CONSULTAS ----------

    def list_page(self, page: int) -> List[Contact]:
        """Devuelve la página pedida (empezando en 1)."""
        if page <= 0:
            page = 1
        start = (page - 1) * self.page_size
        with self._lock:
            return [
                c.model_copy(deep=True)
                for c in self._contacts[start : start + self.page_size]
            ]

    def list_all(self) -> List[Contact]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._contacts]

    def count(self) -> int:
        with self._lock:
            return len(self._contacts)

    def find(self, contact_id: int) -> Contact:
        """Devuelve una copia del contacto o lanza ContactNotFoundError."""
        with self._lock:
            return self._find(contact_id).model_copy(deep=True)

    def _find(self, contact_id: int) -> Contact:
        for contact in self._contacts:
            if contact.id == contact_id:
                return contact
        raise ContactNotFoundError(contact_id)

    # ---------- VALIDACIÓN ----------

    def validate_email(self, contact_id: Optional[int], email: str) -> str:
        """Mensaje de error para el email, o cadena vacía si es válido.

        `contact_id` es el contacto que se está editando (su propio email no
        cuenta como duplicado); None para un contacto nuevo.
        """
        if not email:
            return "Email is empty"
        with self._lock:
            for contact in self._contacts:
                if contact.id != contact_id and contact.email == email:
                    return "Email must be unique"
        return ""

    def validate(self, form: ContactForm, contact_id: Optional[int] = None) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        email_error = self.validate_email(contact_id, form.email)
        if email_error:
            errors["email"] = email_error
        if not form.first:
            errors["first"] = "First name is required"
        if not form.last:
            errors["last"] = "Last name is required"
        if not form.phone:
            errors["phone"] = "Phone is required"
        return errors

    # ---------- ESCRITURA ----------

    def add(self, form: ContactForm) -> Contact:
        """Crea un contacto nuevo.

        Si el formulario no es válido se devuelve el contacto con `errors`
        relleno y no se guarda nada.
        """
        with self._lock:
            next_id = self._contacts[-1].id + 1 if self._contacts else 1
            contact = Contact.from_form(next_id, form)
            contact.errors = self.validate(form)
            if contact.errors:
                return contact
            self._contacts.append(contact)
            logger.info("Contact %s added", contact.id)
            return contact.model_copy(deep=True)

    def update(self, contact_id: int, form: ContactForm) -> Contact:
        """Actualiza un contacto existente (mismas reglas que `add`)."""
        with self._lock:
            candidate = Contact.from_form(contact_id, form)
            candidate.errors = self.validate(form, contact_id=contact_id)
            if candidate.errors:
                return candidate
            contact = self._find(contact_id)
            contact.apply_form(form)
            logger.info("Contact %s edited", contact_id)
            return contact.model_copy(deep=True)

    def delete(self, contact_id: int) -> Contact:
        with self._lock:
            contact = self._find(contact_id)
            self._contacts.remove(contact)
        logger.info("Contact %s deleted", contact_id)
        return contact

    def delete_many(self, contact_ids: Iterable[int]) -> int:
        """Borra varios contactos; los ids desconocidos se ignoran."""
        ids = set(contact_ids)
        with self._lock:
            before = len(self._contacts)
            self._contacts = [c for c in self._contacts if c.id not in ids]
            removed = before - len(self._contacts)
        logger.info("Deleted %s contacts", removed)
        return removed
