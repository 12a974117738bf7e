"""Sources for the device position used to prefill the location form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..errors import GeolocationError


class GeolocationProvider(Protocol):
    def current_position(self) -> tuple[float, float]:
        """Return ``(latitude, longitude)`` or raise ``GeolocationError``."""
        ...


@dataclass(slots=True)
class ReportedPosition:
    """Position reported by the browser alongside a request.

    ``supported`` is False when the client has no geolocation capability and
    ``denied`` is True when the user refused the permission prompt.
    """

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    supported: bool = True
    denied: bool = False
    reason: Optional[str] = None

    def current_position(self) -> tuple[float, float]:
        if not self.supported:
            raise GeolocationError("Geolocation is not supported by your browser")
        if self.denied or self.latitude is None or self.longitude is None:
            raise GeolocationError(f"Unable to get your location: {self.reason or 'User denied Geolocation'}")
        if not -90 <= self.latitude <= 90 or not -180 <= self.longitude <= 180:
            raise GeolocationError("Unable to get your location: position out of range")
        return self.latitude, self.longitude


class Unsupported:
    def current_position(self) -> tuple[float, float]:
        raise GeolocationError("Geolocation is not supported by your browser")
