"""Shared shopping location endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...config import settings
from ...models.domain import Location, User
from ...schemas.locations import (
    LocationBoardResponse,
    LocationDetailModel,
    LocationFormData,
    LocationModel,
    LocationPatch,
)
from ...services.board import LocationBoard, can_delete, format_price, navigation_url
from ...services.locations import LocationService
from ..deps import get_location_service, require_user

router = APIRouter(prefix="/locations", tags=["locations"])


def _models(locations: list[Location]) -> List[LocationModel]:
    return [LocationModel.from_location(location) for location in locations]


def _owned_location(service: LocationService, location_id: str, user: User) -> Location:
    location = service.get(location_id).unwrap()
    if not can_delete(location, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the user who shared this location can change it.",
        )
    return location


@router.get("", response_model=LocationBoardResponse, status_code=status.HTTP_200_OK)
def list_locations(
    q: str = Query(default="", description="Filter by product name, description or address"),
    limit: int | None = Query(default=None, ge=1, le=5000, description="Maximum number of records to load"),
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> LocationBoardResponse:
    board = LocationBoard(service, user=user, limit=limit or settings.list_limit)
    if not board.load():
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=board.error)
    board.set_query(q)
    return LocationBoardResponse(
        items=_models(board.visible),
        total=len(board.visible),
        query=q,
        summary=board.summary(),
        emptyMessage=board.empty_message(),
    )


@router.get("/search", response_model=List[LocationModel], status_code=status.HTTP_200_OK)
def search_locations(
    product: str = Query(..., min_length=1, description="Full-text search on product name"),
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> List[LocationModel]:
    return _models(service.search_by_product(product).unwrap())


@router.get("/mine", response_model=List[LocationModel], status_code=status.HTTP_200_OK)
def my_locations(
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> List[LocationModel]:
    return _models(service.list_by_user(user.id).unwrap())


@router.get("/{location_id}", response_model=LocationDetailModel, status_code=status.HTTP_200_OK)
def get_location(
    location_id: str,
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> LocationDetailModel:
    location = service.get(location_id).unwrap()
    return LocationDetailModel(
        location=LocationModel.from_location(location),
        priceLabel=format_price(location),
        navigationUrl=navigation_url(location),
        canDelete=can_delete(location, user),
    )


@router.post("", response_model=LocationModel, status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationFormData,
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> LocationModel:
    location = service.create(payload, user.id, user.name).unwrap()
    return LocationModel.from_location(location)


@router.patch("/{location_id}", response_model=LocationModel, status_code=status.HTTP_200_OK)
def update_location(
    location_id: str,
    patch: LocationPatch,
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> LocationModel:
    _owned_location(service, location_id, user)
    return LocationModel.from_location(service.update(location_id, patch).unwrap())


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(
    location_id: str,
    confirm: bool = Query(default=False, description="Must be true; deletion cannot be undone"),
    user: User = Depends(require_user),
    service: LocationService = Depends(get_location_service),
) -> Response:
    _owned_location(service, location_id, user)
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Are you sure you want to delete this location? Repeat with confirm=true.",
        )
    service.delete(location_id).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
