"""Emergency card schema. Every field is optional and replaced as a whole on PUT."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EmergencyCardFields(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    phone: str | None = Field(None, max_length=32)
    emergency_contact_name: str | None = Field(None, max_length=128)
    emergency_contact_phone: str | None = Field(None, max_length=32)
    blood_type: str | None = Field(None, max_length=8)
    address_street: str | None = Field(None, max_length=128)
    address_house_number: str | None = Field(None, max_length=16)
    address_postal_code: str | None = Field(None, max_length=16)
    address_city: str | None = Field(None, max_length=128)
    allergies: str | None = None
    medications: str | None = None
    todays_plan: str | None = None


class EmergencyCardResponse(BaseModel):
    """data is an empty object when the user has no card yet."""

    ok: bool = True
    data: dict[str, str | None]
