"""
Petly Backend: Shared Schema Pieces
=====================================

What:  The camelCase base model plus response models shared by every router.
How:   Python attributes stay snake_case; JSON uses camelCase aliases
       (`phone_number` ↔ `phoneNumber`, `good_w_kids` ↔ `goodWKids`).
       Request bodies are handed to the stores with
       `model_dump(by_alias=True, exclude_unset=True)`, so stores only ever
       see external (camelCase) names.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, under external names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for every API error.

    Example:
        {
            "error": "duplicate",
            "message": "Duplicate shelter username: happytails",
            "details": {},
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    petfinder: str = Field(description="Petfinder status: available, unavailable, disabled")
    uptime_seconds: float = Field(description="Seconds since service started")


class BreedResponse(BaseModel):
    id: int
    breed: str


class DeletedResponse(BaseModel):
    deleted: str = Field(description="Identity of the removed record")


class PasswordUpdatedResponse(BaseModel):
    updated: str = Field(description="Identity whose password changed")
