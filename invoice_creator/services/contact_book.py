"""Saved customer contacts"""

from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

from pydantic import ValidationError as PydanticValidationError

from invoice_creator.models.contact import Contact
from invoice_creator.storage.store import KeyValueStore, StoreKeys
from invoice_creator.utils.errors import ValidationError
from invoice_creator.validation.input_rules import (
    sanitize_input,
    validate_email,
    validate_phone,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

SAMPLE_CONTACTS: List[Dict[str, str]] = [
    {"id": "1", "name": "John Smith", "phone": "555-1234", "email": "john@email.com"},
    {"id": "2", "name": "Sarah Johnson", "phone": "555-5678", "email": "sarah@email.com"},
]


class ContactBook:
    """
    Contact list persisted under the contacts key as an id -> record mapping.

    Additions only; there is no update or delete.
    """

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store or KeyValueStore()
        self.contacts: List[Contact] = []

    async def load(self) -> List[Contact]:
        stored = await self.store.get(StoreKeys.CONTACTS)
        contacts = self._parse_contacts(stored)
        if contacts is None:
            logger.info("No saved contacts; seeding samples")
            self.contacts = [Contact(**record) for record in SAMPLE_CONTACTS]
            await self._persist()
        else:
            self.contacts = contacts
        return self.contacts

    def search(self, term: str = "") -> List[Contact]:
        """Case-insensitive substring match on name"""
        needle = (term or "").lower()
        return [c for c in self.contacts if needle in c.name.lower()]

    def get(self, contact_id: str) -> Optional[Contact]:
        return next((c for c in self.contacts if c.id == contact_id), None)

    async def add(self, name: str, phone: str = "", email: str = "") -> Contact:
        """
        Save a new contact.

        Raises:
            ValidationError: missing name, invalid phone/email, or neither
                phone nor email given
        """
        name = sanitize_input(name or "", NAME_MAX_LENGTH)
        phone = sanitize_input(phone or "", PHONE_MAX_LENGTH)
        email = sanitize_input(email or "", EMAIL_MAX_LENGTH)

        if not name:
            raise ValidationError("Please enter a valid customer name", field="name")
        if phone and not validate_phone(phone):
            raise ValidationError("Please enter a valid phone number", field="phone")
        if email and not validate_email(email):
            raise ValidationError("Please enter a valid email address", field="email")
        if not (phone or email):
            raise ValidationError(
                "Please enter at least a name and phone number or email", field="phone"
            )

        contact = Contact(id=uuid4().hex, name=name, phone=phone, email=email)
        self.contacts.append(contact)
        await self._persist()
        logger.info(f"Saved contact {contact.id}")
        return contact

    async def _persist(self) -> None:
        await self.store.put(
            StoreKeys.CONTACTS,
            {c.id: c.model_dump(mode="json") for c in self.contacts},
        )

    @staticmethod
    def _parse_contacts(stored: Any) -> Optional[List[Contact]]:
        if not isinstance(stored, dict):
            return None
        try:
            return [Contact(**record) for record in stored.values()]
        except (PydanticValidationError, TypeError) as e:
            logger.warning(f"Stored contacts are malformed, ignoring: {e}")
            return None
