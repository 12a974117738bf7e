"""Location board: list, search, add-form and detail flow for one viewer."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import Failure, GeolocationError, Result, ValidationError
from ..models.domain import ContactType, Location, MapBounds, User
from ..schemas.locations import LocationFormData
from .geolocation import GeolocationProvider, Unsupported
from .locations import LocationService

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={latitude},{longitude}"

NUMERIC_FIELDS = ("price", "latitude", "longitude")
REQUIRED_TEXT_FIELDS = ("productName", "description", "address", "contactInfo")

logger = logging.getLogger(__name__)


class BoardState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FILTERING = "filtering"


def _coordinate(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def matches_query(location: Location, query: str) -> bool:
    needle = query.lower()
    return (
        needle in location.product_name.lower()
        or needle in location.description.lower()
        or needle in location.address.lower()
    )


def filter_locations(locations: list[Location], query: str) -> list[Location]:
    """Case-insensitive substring match on product name, description or address."""
    if not query.strip():
        return list(locations)
    return [location for location in locations if matches_query(location, query)]


def can_navigate(location: Location) -> bool:
    return location.contact_type in (ContactType.OFFLINE, ContactType.BOTH)


def navigation_url(location: Location) -> Optional[str]:
    if not can_navigate(location):
        return None
    return MAPS_SEARCH_URL.format(
        latitude=_coordinate(location.latitude),
        longitude=_coordinate(location.longitude),
    )


def can_delete(location: Location, user: Optional[User]) -> bool:
    return user is not None and location.user_id == user.id


def format_price(location: Location) -> str:
    amount = f"{location.price:,.3f}".rstrip("0").rstrip(".")
    return f"{location.currency} {amount}"


class LocationForm:
    """Values of the add-location form before submission."""

    def __init__(self, initial: LocationFormData | None = None) -> None:
        if initial is not None:
            self.values: dict[str, Any] = initial.model_dump()
        else:
            self.values = {
                "productName": "",
                "description": "",
                "price": 0.0,
                "currency": "VND",
                "latitude": 0.0,
                "longitude": 0.0,
                "address": "",
                "contactInfo": "",
                "contactType": ContactType.BOTH.value,
            }
        self.error = ""

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.values:
            raise KeyError(name)
        if name in NUMERIC_FIELDS:
            try:
                value = float(value)
            except (TypeError, ValueError):
                value = 0.0
            # NaN and infinities parse but are not usable numbers
            if value != value or value in (float("inf"), float("-inf")):
                value = 0.0
        self.values[name] = value

    def use_current_position(self, provider: GeolocationProvider | None = None) -> bool:
        """Fill latitude/longitude from the provider; keep prior values on failure."""
        try:
            latitude, longitude = (provider or Unsupported()).current_position()
        except GeolocationError as exc:
            self.error = exc.message
            return False
        self.values["latitude"] = latitude
        self.values["longitude"] = longitude
        return True

    def validate(self) -> LocationFormData:
        missing = tuple(name for name in REQUIRED_TEXT_FIELDS if not str(self.values.get(name) or "").strip())
        if missing:
            raise ValidationError(f"Required fields missing: {', '.join(missing)}", fields=missing)
        try:
            return LocationFormData(**self.values)
        except PydanticValidationError as exc:
            fields = tuple(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            raise ValidationError(f"Invalid fields: {', '.join(fields)}", fields=fields) from exc


class LocationBoard:
    """State of one board page: loaded list, query, overlays and errors."""

    def __init__(
        self,
        service: LocationService,
        user: User | None = None,
        limit: int | None = None,
    ) -> None:
        self.service = service
        self.user = user
        self.limit = limit or settings.list_limit
        self.state = BoardState.LOADING
        self.locations: list[Location] = []
        self.visible: list[Location] = []
        self.query = ""
        self.selected: Location | None = None
        self.form_open = False
        self.form = LocationForm()
        self.error = ""

    def load(self) -> bool:
        self.state = BoardState.LOADING
        result = self.service.list(self.limit)
        if isinstance(result, Failure):
            # keep whatever was loaded before
            self.error = "Failed to load locations"
        else:
            self.locations = result.value
        self._refilter()
        return result.ok

    def _refilter(self) -> None:
        self.visible = filter_locations(self.locations, self.query)
        self.state = BoardState.FILTERING if self.query.strip() else BoardState.READY

    def set_query(self, query: str) -> list[Location]:
        self.query = query
        self._refilter()
        return self.visible

    def toggle_form(self) -> bool:
        self.form_open = not self.form_open
        if self.form_open:
            self.form = LocationForm()
        return self.form_open

    def submit(self, form: LocationForm | None = None) -> Result[Location] | None:
        if self.user is None:
            return None
        form = form or self.form
        form.error = ""
        try:
            data = form.validate()
        except ValidationError as exc:
            form.error = exc.message
            return Failure(exc)

        result = self.service.create(data, self.user.id, self.user.name)
        if isinstance(result, Failure):
            form.error = "Failed to add location"
            return result
        self.form_open = False
        self.form = LocationForm()
        self.load()
        return result

    def delete(self, location_id: str, confirm: Callable[[], bool]) -> bool:
        target = next((item for item in self.locations if item.id == location_id), None)
        if target is None:
            fetched = self.service.get(location_id)
            if isinstance(fetched, Failure):
                self.error = "Failed to delete location"
                return False
            target = fetched.value
        if not can_delete(target, self.user):
            self.error = "You can only delete locations you shared"
            return False
        if not confirm():
            return False
        result = self.service.delete(location_id)
        if isinstance(result, Failure):
            self.error = "Failed to delete location"
            return False
        if self.selected is not None and self.selected.id == location_id:
            self.selected = None
        self.load()
        return True

    def select(self, location: Location) -> None:
        self.selected = location

    def close_detail(self) -> None:
        self.selected = None

    def can_delete(self, location: Location) -> bool:
        return can_delete(location, self.user)

    def in_bounds(self, bounds: MapBounds) -> list[Location]:
        return [item for item in self.visible if bounds.contains(item.latitude, item.longitude)]

    def summary(self) -> str:
        count = len(self.visible)
        noun = "location" if count == 1 else "locations"
        text = f"{count} {noun} found"
        if self.query:
            text += f' for "{self.query}"'
        return text

    def empty_message(self) -> str | None:
        if self.visible:
            return None
        if self.query:
            return "No locations found matching your search"
        return "No locations yet. Be the first to add a location!"
