"""Pydantic request/response models for location endpoints."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.domain import Location

CURRENCIES = ("VND", "USD", "EUR")


def _require_text(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class LocationFormData(BaseModel):
    """Fields a user submits when sharing a location."""

    productName: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=1000)
    price: float = Field(default=0, ge=0)
    currency: str = Field(default="VND", min_length=1, max_length=10)
    latitude: float = Field(default=0, ge=-90, le=90)
    longitude: float = Field(default=0, ge=-180, le=180)
    address: str = Field(..., min_length=1, max_length=500)
    contactInfo: str = Field(..., min_length=1, max_length=255)
    contactType: Literal["online", "offline", "both"] = "both"

    @field_validator("productName", "description", "currency", "address", "contactInfo")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)


class LocationPatch(BaseModel):
    """Partial update; creator identity and timestamps are not patchable."""

    model_config = ConfigDict(extra="forbid")

    productName: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    price: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=1, max_length=10)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    address: Optional[str] = Field(default=None, min_length=1, max_length=500)
    contactInfo: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contactType: Optional[Literal["online", "offline", "both"]] = None

    @field_validator("productName", "description", "currency", "address", "contactInfo")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class LocationModel(BaseModel):
    id: str
    productName: str
    description: str
    price: float
    currency: str
    latitude: float
    longitude: float
    address: str
    contactInfo: str
    contactType: Literal["online", "offline", "both"]
    userId: str
    userName: str
    createdAt: str
    updatedAt: Optional[str] = None

    @classmethod
    def from_location(cls, location: Location) -> "LocationModel":
        return cls(
            id=location.id,
            productName=location.product_name,
            description=location.description,
            price=location.price,
            currency=location.currency,
            latitude=location.latitude,
            longitude=location.longitude,
            address=location.address,
            contactInfo=location.contact_info,
            contactType=location.contact_type.value,
            userId=location.user_id,
            userName=location.user_name,
            createdAt=location.created_at,
            updatedAt=location.updated_at,
        )


class LocationDetailModel(BaseModel):
    location: LocationModel
    priceLabel: str
    navigationUrl: Optional[str] = None
    canDelete: bool


class LocationBoardResponse(BaseModel):
    items: List[LocationModel]
    total: int
    query: str
    summary: str
    emptyMessage: Optional[str] = None
