"""Schemas for the public contact form."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=5000)
    urgent: bool = False


class ContactMessageRead(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    body: str
    urgent: bool
    read: bool
    created_at: datetime


__all__ = ["ContactMessageCreate", "ContactMessageRead"]
