"""Error taxonomy and explicit operation results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class WherebuyError(Exception):
    """Base class for every error surfaced by the application."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(WherebuyError):
    """Credential or session failure reported by the auth service."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class RemoteStoreError(WherebuyError):
    """Any document-store failure: network, validation, permission or not found."""

    def __init__(self, message: str, code: int | None = None, type: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.type = type

    @property
    def not_found(self) -> bool:
        return self.code == 404

    @property
    def permission_denied(self) -> bool:
        return self.code in (401, 403)


class ValidationError(WherebuyError):
    """Client-side required-field failure."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = fields


class GeolocationError(WherebuyError):
    """Position unavailable: permission denied or capability absent."""


class ProvisioningError(WherebuyError):
    """A provisioning step that cannot be skipped failed."""


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T

    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    error: WherebuyError

    ok = False

    def unwrap(self):
        raise self.error


Result = Union[Success[T], Failure]
