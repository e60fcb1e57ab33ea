"""API routes for the contact book"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
import logging

from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])


class ContactCreateRequest(BaseModel):
    name: str
    phone: str = ""
    email: str = ""


@router.get("")
async def list_contacts(
    search: str = Query("", description="Case-insensitive name filter"),
    state: AppState = Depends(get_app_state)
):
    contacts = state.contacts.search(search)
    return {
        "count": len(contacts),
        "contacts": [c.model_dump(mode="json") for c in contacts],
    }


@router.post("", status_code=201)
async def add_contact(request: ContactCreateRequest, state: AppState = Depends(get_app_state)):
    """Save a new contact; invalid phone or email is a 400"""
    contact = await state.contacts.add(request.name, request.phone, request.email)
    return {"message": "Contact saved!", "contact": contact.model_dump(mode="json")}
