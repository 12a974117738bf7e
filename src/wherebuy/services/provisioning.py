"""Create the database, collection, attributes and indexes the app relies on.

Each create step is recorded in a :class:`BatchReport`. A 409 from Appwrite
means the resource already exists and is recorded as ``skipped``. Other
failures on attributes and indexes are recorded as ``failed`` and the batch
continues; failures on the database or collection abort the run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Literal, Optional, Sequence

from appwrite.enums.index_type import IndexType
from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.permission import Permission
from appwrite.role import Role

from ..config import settings
from ..errors import ProvisioningError

DATABASE_NAME = "wherebuy-db"
COLLECTION_NAME = "locations"
CONFLICT = 409

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AttributeSpec:
    key: str
    type: Literal["string", "double"]
    required: bool
    description: str
    size: Optional[int] = None


@dataclass(frozen=True, slots=True)
class IndexSpec:
    key: str
    type: IndexType
    attributes: tuple[str, ...]
    description: str
    orders: Optional[tuple[str, ...]] = None


ATTRIBUTES: tuple[AttributeSpec, ...] = (
    AttributeSpec("productName", "string", True, "Name of the product being sold", size=255),
    AttributeSpec("description", "string", True, "Detailed description of the product", size=1000),
    AttributeSpec("price", "double", True, "Price of the product"),
    AttributeSpec("currency", "string", True, "Currency code (VND, USD, EUR)", size=10),
    AttributeSpec("latitude", "double", True, "GPS latitude coordinate"),
    AttributeSpec("longitude", "double", True, "GPS longitude coordinate"),
    AttributeSpec("address", "string", True, "Physical address of the location", size=500),
    AttributeSpec("contactInfo", "string", True, "Contact information (phone, email, website)", size=255),
    AttributeSpec("contactType", "string", True, "Type of contact: online, offline, or both", size=20),
    AttributeSpec("userId", "string", True, "ID of the user who created the location", size=50),
    AttributeSpec("userName", "string", True, "Name of the user who created the location", size=255),
    AttributeSpec("createdAt", "string", True, "ISO timestamp of creation", size=50),
    AttributeSpec("updatedAt", "string", False, "ISO timestamp of last update", size=50),
)

INDEXES: tuple[IndexSpec, ...] = (
    IndexSpec("productName_search", IndexType.FULLTEXT, ("productName",), "Full-text search on product names"),
    IndexSpec("createdAt_desc", IndexType.KEY, ("createdAt",), "Sort by creation date descending", orders=("DESC",)),
    IndexSpec("userId_index", IndexType.KEY, ("userId",), "Filter by user ID"),
)


class ItemStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class BatchItem:
    kind: str
    key: str
    status: ItemStatus
    reason: Optional[str] = None


@dataclass
class BatchReport:
    database_id: Optional[str] = None
    collection_id: Optional[str] = None
    items: list[BatchItem] = field(default_factory=list)
    aborted: Optional[str] = None

    def record(self, kind: str, key: str, status: ItemStatus, reason: str | None = None) -> BatchItem:
        item = BatchItem(kind=kind, key=key, status=status, reason=reason)
        self.items.append(item)
        return item

    def of_kind(self, kind: str) -> list[BatchItem]:
        return [item for item in self.items if item.kind == kind]

    def counts(self, kind: str) -> dict[ItemStatus, int]:
        totals = {status: 0 for status in ItemStatus}
        for item in self.of_kind(kind):
            totals[item.status] += 1
        return totals

    @property
    def failures(self) -> list[BatchItem]:
        return [item for item in self.items if item.status is ItemStatus.FAILED]

    @property
    def ok(self) -> bool:
        return self.aborted is None and not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def render(self) -> str:
        rule = "=" * 60
        lines = [rule]
        if self.aborted:
            lines.append("Wherebuy collection initialization FAILED")
        elif self.failures:
            lines.append("Wherebuy collection initialization finished with errors")
        else:
            lines.append("Wherebuy collection initialization complete")
        lines.append(rule)
        lines.append("")
        lines.append("Collection details:")
        lines.append(f"  Database ID:    {self.database_id or '-'}")
        lines.append(f"  Collection ID:  {self.collection_id or '-'}")
        for kind, label in (("attribute", "Attributes"), ("index", "Indexes")):
            totals = self.counts(kind)
            lines.append(
                f"  {label + ':':<15} {totals[ItemStatus.SUCCEEDED]} created, "
                f"{totals[ItemStatus.SKIPPED]} already existed, {totals[ItemStatus.FAILED]} failed"
            )
        for item in self.items:
            if item.status is ItemStatus.FAILED:
                lines.append(f"  ! {item.kind} {item.key}: {item.reason}")

        if self.aborted:
            lines.append("")
            lines.append(f"Error during initialization: {self.aborted}")
            lines.append("")
            lines.append("Please check:")
            lines.append("  1. Your Appwrite endpoint and project ID are correct")
            lines.append("  2. Your API key has Database permissions")
            lines.append("  3. WHEREBUY_DATABASE_ID / WHEREBUY_LOCATIONS_COLLECTION_ID point at the right resources")
        else:
            lines.append("")
            lines.append("Next steps:")
            lines.append("1. Update your .env file with:")
            lines.append(f'   WHEREBUY_DATABASE_ID="{self.database_id}"')
            lines.append(f'   WHEREBUY_LOCATIONS_COLLECTION_ID="{self.collection_id}"')
            lines.append("2. Restart the API server (python start_server.py)")
            lines.append("3. Open /api/locations and start sharing locations")
            if self.failures:
                lines.append("4. Re-run wherebuy-init to retry the failed items")
        lines.append(rule)
        return "\n".join(lines)


def _is_conflict(exc: AppwriteException) -> bool:
    return exc.code == CONFLICT


class Provisioner:
    def __init__(
        self,
        databases: Any,
        database_id: str | None = None,
        collection_id: str | None = None,
        pace_seconds: float | None = None,
        settle_seconds: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        attributes: Sequence[AttributeSpec] = ATTRIBUTES,
        indexes: Sequence[IndexSpec] = INDEXES,
    ) -> None:
        self.databases = databases
        self.database_id = database_id
        self.collection_id = collection_id
        self.pace_seconds = settings.provision_pace_seconds if pace_seconds is None else pace_seconds
        self.settle_seconds = settings.provision_settle_seconds if settle_seconds is None else settle_seconds
        self.sleep = sleep
        self.attributes = tuple(attributes)
        self.indexes = tuple(indexes)

    def run(self) -> BatchReport:
        report = BatchReport()
        try:
            report.database_id = self._resolve_database(report)
            report.collection_id = self._create_collection(report, report.database_id)
        except (ProvisioningError, AppwriteException) as exc:
            report.aborted = getattr(exc, "message", None) or str(exc)
            logger.error(f"Initialization aborted: {report.aborted}")
            return report

        logger.info("Creating attributes...")
        for spec in self.attributes:
            self._step(report, "attribute", spec.key, lambda spec=spec: self._create_attribute(report, spec))

        # Attribute creation is asynchronous on Appwrite
        logger.info("Waiting for attributes to be ready...")
        self.sleep(self.settle_seconds)

        logger.info("Creating indexes...")
        for spec in self.indexes:
            self._step(report, "index", spec.key, lambda spec=spec: self._create_index(report, spec))
        return report

    def _step(self, report: BatchReport, kind: str, key: str, create: Callable[[], None]) -> BatchItem:
        try:
            create()
        except AppwriteException as exc:
            if _is_conflict(exc):
                logger.info(f"{kind.capitalize()} already exists: {key}")
                item = report.record(kind, key, ItemStatus.SKIPPED)
            else:
                logger.error(f"Error creating {kind} {key}: {exc.message}")
                item = report.record(kind, key, ItemStatus.FAILED, exc.message or str(exc))
        else:
            logger.info(f"Created {kind}: {key}")
            item = report.record(kind, key, ItemStatus.SUCCEEDED)
        # Small delay to avoid rate limiting
        self.sleep(self.pace_seconds)
        return item

    def _resolve_database(self, report: BatchReport) -> str:
        if self.database_id:
            logger.info(f"Using existing database: {self.database_id}")
            report.record("database", self.database_id, ItemStatus.SKIPPED, "configured")
            return self.database_id

        logger.info("No database ID provided, creating new database...")
        try:
            database = self.databases.create(database_id=ID.unique(), name=DATABASE_NAME, enabled=True)
        except AppwriteException as exc:
            if _is_conflict(exc):
                raise ProvisioningError(
                    f"A database conflicting with '{DATABASE_NAME}' already exists in this project. "
                    "Set WHEREBUY_DATABASE_ID to its ID to reuse it."
                ) from exc
            raise
        logger.info(f"Database created: {database['$id']}")
        report.record("database", database["$id"], ItemStatus.SUCCEEDED)
        return database["$id"]

    def _create_collection(self, report: BatchReport, database_id: str) -> str:
        logger.info(f'Creating collection "{COLLECTION_NAME}"...')
        try:
            collection = self.databases.create_collection(
                database_id=database_id,
                collection_id=self.collection_id or ID.unique(),
                name=COLLECTION_NAME,
                permissions=[
                    Permission.read(Role.any()),
                    Permission.create(Role.users()),
                ],
                # ownership is checked by the API, not per document
                document_security=False,
                enabled=True,
            )
        except AppwriteException as exc:
            if _is_conflict(exc) and self.collection_id:
                logger.info(f"Collection already exists: {self.collection_id}")
                report.record("collection", self.collection_id, ItemStatus.SKIPPED)
                return self.collection_id
            raise
        logger.info(f"Collection created: {collection['$id']}")
        report.record("collection", collection["$id"], ItemStatus.SUCCEEDED)
        return collection["$id"]

    def _create_attribute(self, report: BatchReport, spec: AttributeSpec) -> None:
        if spec.type == "string":
            self.databases.create_string_attribute(
                database_id=report.database_id,
                collection_id=report.collection_id,
                key=spec.key,
                size=spec.size,
                required=spec.required,
            )
        else:
            self.databases.create_float_attribute(
                database_id=report.database_id,
                collection_id=report.collection_id,
                key=spec.key,
                required=spec.required,
            )

    def _create_index(self, report: BatchReport, spec: IndexSpec) -> None:
        self.databases.create_index(
            database_id=report.database_id,
            collection_id=report.collection_id,
            key=spec.key,
            type=spec.type,
            attributes=list(spec.attributes),
            orders=list(spec.orders) if spec.orders else None,
        )


def provision(databases: Any, **kwargs: Any) -> BatchReport:
    """Run the provisioning procedure with settings-derived IDs."""
    kwargs.setdefault("database_id", settings.database_id)
    kwargs.setdefault("collection_id", settings.locations_collection_id)
    return Provisioner(databases, **kwargs).run()
