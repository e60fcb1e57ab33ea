"""Saved customer contact"""

from pydantic import BaseModel


class Contact(BaseModel):
    """Customer record in the contact book"""
    id: str
    name: str
    phone: str = ""
    email: str = ""
