# backend/hotel_api/schemas/user.py
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    id: int
    first_name: str
    last_name: str = ""
    email: EmailStr
    role: str

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: Optional[str] = ""
    email: EmailStr
    password: str = Field(min_length=6)

    model_config = {"str_strip_whitespace": True}


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)


class ForgotPassword(BaseModel):
    email: EmailStr


class PasswordReset(BaseModel):
    password: str = Field(min_length=6)


class UserOut(UserBase):
    """
    Public-facing user data (auth token payload, booking listings).
    """
    pass
