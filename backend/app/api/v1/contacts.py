from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import JSONResponse

from app.models.contact import Contact, ContactForm
from app.services.contact_service import ContactNotFoundError
from app.services.contact_store import contact_service

router = APIRouter(prefix="/contacts", tags=["contacts"])

logger = logging.getLogger(__name__)


def contact_form(
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
) -> ContactForm:
    """Traduce los nombres de campo del formulario al modelo interno."""
    return ContactForm(first=first_name, last=last_name, email=email, phone=phone)


def contact_payload(contact: Contact) -> dict:
    return contact.model_dump(exclude={"errors"})


def validation_error(message: str, contact: Contact) -> JSONResponse:
    logger.warning("Invalid contact data: %s", contact.errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": contact.errors},
    )


def not_found(contact_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Contact {contact_id} not found.",
    )


@router.get("", summary="List all contacts")
async def list_contacts() -> list[dict]:
    return [contact_payload(c) for c in contact_service.list_all()]


@router.post("", summary="Create a contact", status_code=status.HTTP_201_CREATED)
async def create_contact(form: ContactForm = Depends(contact_form)):
    contact = contact_service.add(form)
    if contact.errors:
        return validation_error("Could not add contact due to incorrect format", contact)

    return {"message": "Contact added successfully", "id": contact.id}


@router.get("/{contact_id}", summary="Get a single contact")
async def get_contact(contact_id: int) -> dict:
    try:
        contact = contact_service.find(contact_id)
    except ContactNotFoundError:
        raise not_found(contact_id)

    return contact_payload(contact)


@router.put("/{contact_id}", summary="Update a contact")
async def update_contact(
    contact_id: int,
    form: ContactForm = Depends(contact_form),
):
    try:
        contact = contact_service.update(contact_id, form)
    except ContactNotFoundError:
        raise not_found(contact_id)

    if contact.errors:
        return validation_error("Could not edit contact due to incorrect format", contact)

    return {"message": "Contact edited successfully"}


@router.delete("/{contact_id}", summary="Delete a contact")
async def delete_contact(contact_id: int) -> dict:
    try:
        contact_service.delete(contact_id)
    except ContactNotFoundError:
        raise not_found(contact_id)

    return {"message": "Contact deleted successfully"}
