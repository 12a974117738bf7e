"""Domain models for shared shopping locations and session principals."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ContactType(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    BOTH = "both"


@dataclass(slots=True)
class Location:
    """A shopping location shared by a user, as stored in the locations collection."""

    id: str
    product_name: str
    description: str
    price: float
    currency: str
    latitude: float
    longitude: float
    address: str
    contact_info: str
    contact_type: ContactType
    user_id: str
    user_name: str
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Location":
        """Build a location from an Appwrite document payload."""
        return cls(
            id=str(document["$id"]),
            product_name=document["productName"],
            description=document["description"],
            price=float(document["price"]),
            currency=document["currency"],
            latitude=float(document["latitude"]),
            longitude=float(document["longitude"]),
            address=document["address"],
            contact_info=document["contactInfo"],
            contact_type=ContactType(document["contactType"]),
            user_id=document["userId"],
            user_name=document["userName"],
            created_at=document["createdAt"],
            updated_at=document.get("updatedAt"),
        )

    def to_payload(self) -> dict[str, Any]:
        """Wire representation using the collection's attribute keys."""
        payload = {
            "$id": self.id,
            "productName": self.product_name,
            "description": self.description,
            "price": self.price,
            "currency": self.currency,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "contactInfo": self.contact_info,
            "contactType": self.contact_type.value,
            "userId": self.user_id,
            "userName": self.user_name,
            "createdAt": self.created_at,
        }
        if self.updated_at is not None:
            payload["updatedAt"] = self.updated_at
        return payload


@dataclass(slots=True)
class User:
    """Read-only projection of the authenticated account."""

    id: str
    email: str
    name: str


@dataclass(slots=True)
class MapBounds:
    north: float
    south: float
    east: float
    west: float

    def contains(self, latitude: float, longitude: float) -> bool:
        if not self.south <= latitude <= self.north:
            return False
        if self.west <= self.east:
            return self.west <= longitude <= self.east
        # Bounds crossing the antimeridian
        return longitude >= self.west or longitude <= self.east
