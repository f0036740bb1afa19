"""Interfaz HTML (htmx) de la agenda de contactos.

Cada endpoint devuelve una página completa o, cuando htmx lo pide mediante
la cabecera `HX-Trigger`, sólo el fragmento que cambia.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from app.api.deps import get_archive_job
from app.api.v1.contacts import contact_form
from app.models.contact import Contact, ContactForm
from app.services.archive_job import ArchiveJob
from app.services.contact_service import ContactNotFoundError
from app.services.contact_store import contact_service
from app.web.templating import templates

router = APIRouter(tags=["hypermedia"])


def parse_page(raw: str | None) -> int:
    """Número de página a partir del query string; cualquier valor raro es 1."""
    try:
        page = int(raw or 1)
    except ValueError:
        return 1
    return page if page > 0 else 1


def parse_contact_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Contact id must be an integer.",
        )


def find_or_404(contact_id: int) -> Contact:
    try:
        return contact_service.find(contact_id)
    except ContactNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found.",
        )


@router.get("/", include_in_schema=False)
async def root():
    return RedirectResponse("/contacts", status_code=status.HTTP_302_FOUND)


@router.get("/contacts", response_class=HTMLResponse)
async def contacts_index(
    request: Request,
    q: str = "",
    page: str | None = None,
    job: ArchiveJob = Depends(get_archive_job),
):
    # `q` busca por id exacto; sin `q` mostramos la página pedida
    if q:
        contacts = [find_or_404(parse_contact_id(q))]
        page_number = 0
    else:
        page_number = parse_page(page)
        contacts = contact_service.list_page(page_number)

    context = {
        "contacts": contacts,
        "query": q,
        "page": page_number,
        "has_next": page_number > 0
        and page_number * contact_service.page_size < contact_service.count(),
        "archive": job.snapshot(),
    }
    template = "rows.html" if request.headers.get("HX-Trigger") == "search" else "index.html"
    return templates.TemplateResponse(request, template, context)


@router.get("/contacts/count", response_class=PlainTextResponse)
async def count_contacts() -> str:
    return f"{contact_service.count()} total Contacts"


@router.get("/contacts/new", response_class=HTMLResponse)
async def new_contact_form(request: Request):
    return templates.TemplateResponse(request, "new.html", {"contact": Contact(id=0)})


@router.post("/contacts/new", response_class=HTMLResponse)
async def create_contact(request: Request, form: ContactForm = Depends(contact_form)):
    contact = contact_service.add(form)
    if contact.errors:
        return templates.TemplateResponse(request, "new.html", {"contact": contact})

    return templates.TemplateResponse(
        request, "flash.html", {"message": "Contact added", "contact": contact}
    )


@router.get("/contacts/{contact_id:int}", response_class=HTMLResponse)
async def show_contact(request: Request, contact_id: int):
    contact = find_or_404(contact_id)
    return templates.TemplateResponse(request, "show.html", {"contact": contact})


@router.get("/contacts/{contact_id:int}/edit", response_class=HTMLResponse)
async def edit_contact_form(request: Request, contact_id: int):
    contact = find_or_404(contact_id)
    return templates.TemplateResponse(request, "edit.html", {"contact": contact})


@router.post("/contacts/{contact_id:int}/edit", response_class=HTMLResponse)
async def edit_contact(
    request: Request,
    contact_id: int,
    form: ContactForm = Depends(contact_form),
):
    try:
        contact = contact_service.update(contact_id, form)
    except ContactNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found.",
        )

    if contact.errors:
        return templates.TemplateResponse(request, "edit.html", {"contact": contact})

    return templates.TemplateResponse(
        request, "flash.html", {"message": "Contact edited", "contact": contact}
    )


@router.delete("/contacts/{contact_id:int}", response_class=HTMLResponse)
async def delete_contact(request: Request, contact_id: int):
    try:
        contact = contact_service.delete(contact_id)
    except ContactNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found.",
        )

    # Desde la vista de detalle mostramos un aviso; desde la tabla la fila
    # simplemente desaparece
    if request.headers.get("HX-Trigger") == "delete-btn":
        return templates.TemplateResponse(
            request, "flash.html", {"message": "Contact deleted", "contact": contact}
        )
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/contacts", response_class=HTMLResponse)
async def delete_selected_contacts(
    request: Request,
    job: ArchiveJob = Depends(get_archive_job),
):
    # htmx manda los parámetros de un DELETE en la URL; aceptamos también
    # cuerpo de formulario por si el cliente lo envía así
    raw_ids: List[str] = request.query_params.getlist("selected_contact_ids")
    if not raw_ids:
        form = await request.form()
        raw_ids = [str(v) for v in form.getlist("selected_contact_ids")]

    contact_service.delete_many(parse_contact_id(raw) for raw in raw_ids)

    context = {
        "contacts": contact_service.list_page(1),
        "query": "",
        "page": 1,
        "has_next": contact_service.count() > contact_service.page_size,
        "archive": job.snapshot(),
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/contacts/{contact_id:int}/email", response_class=HTMLResponse)
async def validate_email(request: Request, contact_id: int, email: str = ""):
    find_or_404(contact_id)
    error = contact_service.validate_email(contact_id, email)
    return templates.TemplateResponse(request, "email_error.html", {"error": error})
