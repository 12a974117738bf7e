"""Health endpoints."""

from __future__ import annotations

from appwrite.exception import AppwriteException
from fastapi import APIRouter, status

from ...config import settings
from ...db.appwrite import get_databases

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/appwrite", status_code=status.HTTP_200_OK)
def check_appwrite() -> dict:
    """Check Appwrite configuration and that the locations collection is reachable."""
    databases = get_databases()
    if databases is None:
        return {
            "configured": False,
            "message": "Appwrite not configured. Set WHEREBUY_APPWRITE_ENDPOINT, WHEREBUY_APPWRITE_PROJECT_ID and WHEREBUY_APPWRITE_API_KEY.",
        }
    if not settings.database_id or not settings.locations_collection_id:
        return {
            "configured": True,
            "collection_ready": False,
            "message": "Locations collection IDs missing. Run wherebuy-init and update .env.",
        }

    try:
        collection = databases.get_collection(
            database_id=settings.database_id,
            collection_id=settings.locations_collection_id,
        )
    except AppwriteException as exc:
        return {
            "configured": True,
            "connected": False,
            "error": exc.message,
            "message": f"Appwrite error: {exc.message}",
        }
    return {
        "configured": True,
        "connected": True,
        "collection_ready": True,
        "attributes": len(collection.get("attributes", [])),
        "indexes": len(collection.get("indexes", [])),
        "message": f"Collection {collection['$id']} reachable.",
    }
