"""
Adoptable dog request bodies.

Compatibility flags accept every tri-state spelling clients send
(true/false/null, "yes"/"no"/"unknown", 1/0) and are normalized to
Optional[bool] here, before anything reaches a store.
"""

from typing import Any, Optional

from pydantic import Field, field_validator

from petly.schemas.common import CamelModel
from petly.services.tristate import coerce_tristate


class _TriStateFlags(CamelModel):
    good_w_kids: Optional[bool] = None
    good_w_dogs: Optional[bool] = None
    good_w_cats: Optional[bool] = None

    @field_validator("good_w_kids", "good_w_dogs", "good_w_cats", mode="before")
    @classmethod
    def normalize_flag(cls, v: Any) -> Optional[bool]:
        return coerce_tristate(v)


class DogCreate(_TriStateFlags):
    name: str = Field(min_length=1)
    breed_id: Optional[int] = Field(default=None, ge=1)
    gender: Optional[str] = Field(default=None, max_length=10)
    age: Optional[str] = Field(default=None, max_length=10)
    picture: Optional[str] = None
    description: Optional[str] = None
    shelter_id: Optional[int] = Field(
        default=None, description="Defaults to the calling shelter; admins must set it"
    )


class DogUpdate(_TriStateFlags):
    name: Optional[str] = Field(default=None, min_length=1)
    breed_id: Optional[int] = Field(default=None, ge=1)
    gender: Optional[str] = Field(default=None, max_length=10)
    age: Optional[str] = Field(default=None, max_length=10)
    picture: Optional[str] = None
    description: Optional[str] = None
