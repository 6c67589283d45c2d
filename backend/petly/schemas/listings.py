"""
Petly Backend: Dog and Shelter Response Schemas
=================================================

What:  Response shapes for dogs and shelters, local or remote.
Why:   Both sources are normalized to one shape, so one set of models
       describes them; `source` tells the client where a record came from.

Identity:
    `id` is an int for local records and a str for Petfinder records.
    `breedId` is set only on local dogs; `breed` (a name) may be set on both.
"""

from typing import List, Optional, Union

from pydantic import Field, computed_field

from petly.schemas.common import CamelModel
from petly.services.merger import source_of


class _Sourced(CamelModel):
    id: Union[int, str]

    @computed_field
    @property
    def source(self) -> str:
        return source_of({"id": self.id})


class ShelterSummary(_Sourced):
    """A shelter without its dogs (embedded in dog responses)."""
    username: Optional[str] = Field(default=None, description="Local shelters only")
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    logo: Optional[str] = None
    description: Optional[str] = None
    is_admin: Optional[bool] = Field(default=None, description="Local shelters only")


class DogSummary(_Sourced):
    name: Optional[str] = None
    breed_id: Optional[int] = Field(default=None, description="Local breed id; null for remote dogs")
    breed: Optional[str] = Field(default=None, description="Breed name")
    gender: Optional[str] = None
    age: Optional[str] = None
    picture: Optional[str] = None
    description: Optional[str] = None
    good_w_kids: Optional[bool] = Field(default=None, description="true, false, or null (unknown)")
    good_w_dogs: Optional[bool] = None
    good_w_cats: Optional[bool] = None
    shelter_id: Optional[Union[int, str]] = None


class DogResponse(DogSummary):
    shelter: Optional[ShelterSummary] = Field(
        default=None, description="Owning shelter (single-dog reads only)"
    )


class ShelterResponse(ShelterSummary):
    adoptable_dogs: Optional[List[DogSummary]] = Field(
        default=None, description="The shelter's dogs (single-shelter reads only)"
    )
