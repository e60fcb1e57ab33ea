"""API routes for editing the working document"""

from fastapi import APIRouter, UploadFile, File, HTTPException, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Any, Optional
import datetime as dt
import logging

from invoice_creator.models.document import DocumentKind, summarize_totals
from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/document", tags=["document"])


class DocumentUpdateRequest(BaseModel):
    """Header fields; omitted fields are left alone"""
    kind: Optional[DocumentKind] = None
    number: Optional[str] = None
    date: Optional[dt.date] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None


class LineItemCreateRequest(BaseModel):
    description: str = ""
    part_number: Optional[str] = None


class LineItemUpdateRequest(BaseModel):
    field: str
    value: Any


def _document_payload(state: AppState) -> dict:
    document = state.editor.document
    return {
        "document": document.model_dump(mode="json"),
        "totals": {k: str(v) for k, v in summarize_totals(state.editor.totals()).items()},
    }


def _find_part(state: AppState, part_number: str):
    part = next((p for p in state.catalog.parts if p.part_number == part_number), None)
    if part is None:
        raise HTTPException(status_code=404, detail=f"Part {part_number} not found")
    return part


@router.get("")
async def get_document(state: AppState = Depends(get_app_state)):
    """Working document with derived totals"""
    return _document_payload(state)


@router.patch("")
async def update_document(
    request: DocumentUpdateRequest,
    state: AppState = Depends(get_app_state)
):
    editor = state.editor
    if request.kind is not None:
        editor.set_kind(request.kind)
    if request.number is not None:
        editor.set_number(request.number)
    if request.date is not None:
        editor.set_date(request.date)
    editor.set_customer(
        name=request.customer_name,
        phone=request.customer_phone,
        email=request.customer_email,
    )
    return _document_payload(state)


@router.post("/items", status_code=201)
async def add_line_item(
    request: LineItemCreateRequest,
    state: AppState = Depends(get_app_state)
):
    """Add an empty line, or a line filled from a catalog part"""
    if request.part_number:
        item = state.editor.add_part_line(_find_part(state, request.part_number))
    else:
        item = state.editor.add_line_item(description=request.description)
    return {"item": item.model_dump(mode="json"), **_document_payload(state)}


@router.patch("/items/{item_id}")
async def update_line_item(
    item_id: int,
    request: LineItemUpdateRequest,
    state: AppState = Depends(get_app_state)
):
    if state.editor.get_line_item(item_id) is None:
        raise HTTPException(status_code=404, detail=f"Line item {item_id} not found")
    updated = state.editor.update_line_item(item_id, request.field, request.value)
    return {"updated": updated, **_document_payload(state)}


@router.post("/items/{item_id}/part/{part_number:path}")
async def apply_part(
    item_id: int,
    part_number: str,
    state: AppState = Depends(get_app_state)
):
    """Fill an existing line from a catalog part"""
    part = _find_part(state, part_number)
    if not state.editor.apply_part(item_id, part):
        raise HTTPException(status_code=404, detail=f"Line item {item_id} not found")
    return _document_payload(state)


@router.delete("/items/{item_id}")
async def remove_line_item(item_id: int, state: AppState = Depends(get_app_state)):
    """The last remaining line is never removed"""
    removed = state.editor.remove_line_item(item_id)
    return {"removed": removed, **_document_payload(state)}


@router.post("/attachments", status_code=201)
async def add_attachment(
    file: UploadFile = File(...),
    state: AppState = Depends(get_app_state)
):
    """Attach a photo or video"""
    content = await file.read()
    attachment = state.editor.add_attachment(
        file_name=file.filename or "attachment",
        content_type=file.content_type or "",
        content=content,
    )
    return JSONResponse(
        status_code=201,
        content={
            "message": "Attachment added",
            "attachment": attachment.model_dump(mode="json"),
        }
    )


@router.delete("/attachments/{attachment_id}")
async def remove_attachment(attachment_id: str, state: AppState = Depends(get_app_state)):
    if not state.editor.remove_attachment(attachment_id):
        raise HTTPException(status_code=404, detail=f"Attachment {attachment_id} not found")
    return _document_payload(state)


@router.post("/contact/{contact_id}")
async def select_contact(contact_id: str, state: AppState = Depends(get_app_state)):
    """Copy a saved contact into the customer block"""
    contact = state.contacts.get(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail=f"Contact {contact_id} not found")
    state.editor.select_contact(contact)
    return _document_payload(state)


@router.post("/reset")
async def reset_document(state: AppState = Depends(get_app_state)):
    state.editor.reset()
    return _document_payload(state)


@router.post("/load/{saved_id}")
async def load_saved_document(saved_id: str, state: AppState = Depends(get_app_state)):
    """Start a new editable copy from a history entry"""
    saved = state.history.get_saved(saved_id)
    if saved is None:
        raise HTTPException(status_code=404, detail=f"Saved document {saved_id} not found")
    state.editor.load(saved)
    logger.info(f"Loaded saved document {saved.number} into the editor")
    return _document_payload(state)
