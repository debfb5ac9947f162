# backend/hotel_api/schemas/contact.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class ContactCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(min_length=1)
    message: str = Field(min_length=1)
    number: Optional[str] = ""

    model_config = {"str_strip_whitespace": True}

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class ContactOut(BaseModel):
    id: int
    email: str
    full_name: str
    message: str
    number: str
    created_at: datetime

    model_config = {"from_attributes": True}
