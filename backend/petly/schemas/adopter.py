"""Adopter request and response bodies, plus favorites."""

from typing import List, Optional

from pydantic import EmailStr, Field

from petly.schemas.common import CamelModel


class AdopterRegister(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=5, max_length=72)
    email: EmailStr
    picture: Optional[str] = None
    description: Optional[str] = None
    private_outdoors: Optional[bool] = None
    num_of_dogs: Optional[int] = Field(default=None, ge=0)
    preferred_gender: Optional[str] = Field(default=None, max_length=10)
    preferred_age: Optional[str] = Field(default=None, max_length=10)


class AdopterCreate(AdopterRegister):
    is_admin: bool = False


class AdopterUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    picture: Optional[str] = None
    description: Optional[str] = None
    private_outdoors: Optional[bool] = None
    num_of_dogs: Optional[int] = Field(default=None, ge=0)
    preferred_gender: Optional[str] = Field(default=None, max_length=10)
    preferred_age: Optional[str] = Field(default=None, max_length=10)
    is_admin: Optional[bool] = None


class AdopterResponse(CamelModel):
    id: int
    username: str
    email: str
    picture: Optional[str] = None
    description: Optional[str] = None
    private_outdoors: bool = False
    num_of_dogs: int = 0
    preferred_gender: Optional[str] = None
    preferred_age: Optional[str] = None
    is_admin: bool = False
    favorite_dog_ids: Optional[List[str]] = Field(
        default=None,
        description=(
            "Favorited dog references as strings, local ids included "
            "(\"7\", not 7). Single-adopter reads only."
        ),
    )


class FavoriteResponse(CamelModel):
    adopter_id: int
    dog_id: str


class UnfavoriteResponse(CamelModel):
    unfavorited: str
