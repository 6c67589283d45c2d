"""Request bodies for shelter registration, admin creation, updates and contact."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from petly.schemas.common import CamelModel


class ShelterRegister(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=5, max_length=72)
    name: str = Field(min_length=1)
    address: Optional[str] = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=2, max_length=2, description="Two-letter state code")
    postcode: Optional[str] = Field(default=None, max_length=10)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    logo: Optional[str] = None
    description: Optional[str] = None


class ShelterCreate(ShelterRegister):
    """Admin-only creation may grant admin rights."""
    is_admin: bool = False


class ShelterUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, min_length=1)
    state: Optional[str] = Field(default=None, min_length=2, max_length=2)
    postcode: Optional[str] = Field(default=None, max_length=10)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    logo: Optional[str] = None
    description: Optional[str] = None
    is_admin: Optional[bool] = None


class ContactShelterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    message: str = Field(min_length=1, max_length=5000)
    subject: Optional[str] = Field(default=None, max_length=200)

    @field_validator("subject")
    @classmethod
    def subject_is_one_line(cls, v: Optional[str]) -> Optional[str]:
        # Becomes a mail header
        if v is not None and ("\r" in v or "\n" in v):
            raise ValueError("subject must be a single line")
        return v


class ContactShelterResponse(CamelModel):
    sent: bool = True
    shelter_email: str
