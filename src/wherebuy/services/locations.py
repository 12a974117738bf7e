"""Access layer for the shared locations collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.query import Query

from ..config import settings
from ..db.appwrite import get_databases
from ..errors import Failure, RemoteStoreError, Result, Success
from ..models.domain import Location
from ..schemas.locations import LocationFormData, LocationPatch

DEFAULT_LIST_LIMIT = 50

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _store_error(exc: AppwriteException) -> RemoteStoreError:
    return RemoteStoreError(exc.message or str(exc), code=exc.code, type=exc.type)


def _decode(document: dict[str, Any]) -> Result[Location]:
    """Map a stored document to a Location; documents written outside the API may not fit."""
    try:
        return Success(Location.from_document(document))
    except (KeyError, TypeError, ValueError) as exc:
        document_id = document.get("$id", "?")
        return Failure(RemoteStoreError(f"Malformed location document {document_id}: {exc!r}", type="document_invalid"))


class LocationService:
    def __init__(
        self,
        databases: Any | None = None,
        database_id: str | None = None,
        collection_id: str | None = None,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.databases = databases if databases is not None else get_databases()
        if self.databases is None:
            raise ValueError("Appwrite is not configured.")
        self.database_id = database_id or settings.database_id
        self.collection_id = collection_id or settings.locations_collection_id
        if not self.database_id or not self.collection_id:
            raise ValueError("Locations database/collection IDs are not configured. Run wherebuy-init first.")
        self.clock = clock

    def _list(self, queries: list[str], action: str) -> Result[list[Location]]:
        try:
            response = self.databases.list_documents(
                database_id=self.database_id,
                collection_id=self.collection_id,
                queries=queries,
            )
        except AppwriteException as exc:
            logger.error(f"{action} error: {exc}")
            return Failure(_store_error(exc))
        locations = []
        for document in response["documents"]:
            decoded = _decode(document)
            if isinstance(decoded, Failure):
                logger.warning(f"{action}: skipping {decoded.error.message}")
                continue
            locations.append(decoded.value)
        return Success(locations)

    def create(self, data: LocationFormData, user_id: str, user_name: str) -> Result[Location]:
        payload = {
            **data.model_dump(),
            "userId": user_id,
            "userName": user_name,
            "createdAt": self.clock(),
        }
        try:
            document = self.databases.create_document(
                database_id=self.database_id,
                collection_id=self.collection_id,
                document_id=ID.unique(),
                data=payload,
            )
        except AppwriteException as exc:
            logger.error(f"Create location error: {exc}")
            return Failure(_store_error(exc))
        logger.info(f"Created location {document['$id']} for user {user_id}")
        return _decode(document)

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> Result[list[Location]]:
        """Most recent locations first. Anything beyond ``limit`` is not reachable."""
        return self._list([Query.order_desc("createdAt"), Query.limit(limit)], "Get locations")

    def search_by_product(self, text: str) -> Result[list[Location]]:
        return self._list(
            [Query.search("productName", text), Query.order_desc("createdAt")],
            "Search locations",
        )

    def list_by_user(self, user_id: str) -> Result[list[Location]]:
        return self._list(
            [Query.equal("userId", user_id), Query.order_desc("createdAt")],
            "Get user locations",
        )

    def get(self, location_id: str) -> Result[Location]:
        try:
            document = self.databases.get_document(
                database_id=self.database_id,
                collection_id=self.collection_id,
                document_id=location_id,
            )
        except AppwriteException as exc:
            logger.error(f"Get location error: {exc}")
            return Failure(_store_error(exc))
        return _decode(document)

    def update(self, location_id: str, patch: LocationPatch) -> Result[Location]:
        try:
            document = self.databases.update_document(
                database_id=self.database_id,
                collection_id=self.collection_id,
                document_id=location_id,
                data={**patch.changes(), "updatedAt": self.clock()},
            )
        except AppwriteException as exc:
            logger.error(f"Update location error: {exc}")
            return Failure(_store_error(exc))
        return _decode(document)

    def delete(self, location_id: str) -> Result[None]:
        try:
            self.databases.delete_document(
                database_id=self.database_id,
                collection_id=self.collection_id,
                document_id=location_id,
            )
        except AppwriteException as exc:
            logger.error(f"Delete location error: {exc}")
            return Failure(_store_error(exc))
        logger.info(f"Deleted location {location_id}")
        return Success(None)
