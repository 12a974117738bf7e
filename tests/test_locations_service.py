from datetime import datetime, timezone

import pytest
from appwrite.exception import AppwriteException
from appwrite.query import Query

from src.wherebuy.errors import Failure, RemoteStoreError, Success
from src.wherebuy.models.domain import ContactType
from src.wherebuy.schemas.locations import LocationFormData, LocationPatch
from src.wherebuy.services.locations import LocationService, utc_timestamp


def _form(product: str = "Fresh Bananas", **overrides) -> LocationFormData:
    data = {
        "productName": product,
        "description": "Organic, $2/kg",
        "price": 2,
        "currency": "USD",
        "latitude": 10.8,
        "longitude": 106.6,
        "address": "123 Market St",
        "contactInfo": "+1-555-0100",
        "contactType": "both",
    }
    data.update(overrides)
    return LocationFormData(**data)


@pytest.fixture
def service(fake_databases, clock) -> LocationService:
    return LocationService(fake_databases, database_id="db", collection_id="locations", clock=clock)


def test_create_stamps_creator_and_created_at(fake_databases):
    service = LocationService(fake_databases, database_id="db", collection_id="locations")
    before = datetime.now(timezone.utc).replace(microsecond=0)

    result = service.create(_form(), "u1", "Alice")

    assert isinstance(result, Success)
    location = result.value
    assert location.id
    assert location.user_id == "u1"
    assert location.user_name == "Alice"
    assert location.updated_at is None
    assert location.product_name == "Fresh Bananas"
    assert location.price == 2
    assert location.contact_type is ContactType.BOTH
    created = datetime.fromisoformat(location.created_at.replace("Z", "+00:00"))
    assert created >= before
    # generated by ID.unique(), never chosen by the caller
    assert fake_databases.calls[0][3]
    assert location.id in fake_databases.documents


def test_utc_timestamp_format():
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert datetime.fromisoformat(stamp.replace("Z", "+00:00")).tzinfo is not None


def test_list_orders_newest_first_and_caps(service, fake_databases):
    for product in ("Apples", "Bread", "Coffee"):
        service.create(_form(product), "u1", "Alice")

    result = service.list(limit=2)

    assert [location.product_name for location in result.unwrap()] == ["Coffee", "Bread"]
    queries = fake_databases.calls[-1][3]
    assert queries == [Query.order_desc("createdAt"), Query.limit(2)]


def test_list_defaults_to_fifty(service, fake_databases):
    service.list()
    assert Query.limit(50) in fake_databases.calls[-1][3]


def test_search_and_list_by_user(service, fake_databases):
    service.create(_form("Green Tea"), "u1", "Alice")
    service.create(_form("Black Tea"), "u2", "Bob")
    service.create(_form("Rice"), "u2", "Bob")

    teas = service.search_by_product("tea").unwrap()
    bobs = service.list_by_user("u2").unwrap()

    assert [location.product_name for location in teas] == ["Black Tea", "Green Tea"]
    assert [location.product_name for location in bobs] == ["Rice", "Black Tea"]
    assert fake_databases.calls[-1][3] == [Query.equal("userId", "u2"), Query.order_desc("createdAt")]


def test_get_missing_is_not_found(service):
    result = service.get("missing")

    assert isinstance(result, Failure)
    assert isinstance(result.error, RemoteStoreError)
    assert result.error.not_found
    with pytest.raises(RemoteStoreError):
        result.unwrap()


def test_update_merges_fields_and_stamps_updated_at(service):
    created = service.create(_form(), "u1", "Alice").unwrap()

    updated = service.update(created.id, LocationPatch(price=3.5)).unwrap()

    assert updated.price == 3.5
    assert updated.product_name == created.product_name
    assert updated.created_at == created.created_at
    assert updated.updated_at is not None
    assert updated.updated_at > created.created_at


def test_patch_rejects_creator_identity():
    with pytest.raises(ValueError):
        LocationPatch(userId="u2")


def test_delete_removes_and_double_delete_fails(service):
    created = service.create(_form(), "u1", "Alice").unwrap()

    assert service.delete(created.id).ok
    assert service.list().unwrap() == []

    second = service.delete(created.id)
    assert isinstance(second, Failure)
    assert second.error.not_found


def test_store_failures_collapse_into_remote_store_error(service, fake_databases):
    fake_databases.errors["create_document"] = AppwriteException("Missing permission", 401, "user_unauthorized")

    result = service.create(_form(), "u1", "Alice")

    assert isinstance(result, Failure)
    assert result.error.code == 401
    assert result.error.permission_denied
    assert fake_databases.documents == {}


def test_requires_collection_ids(fake_databases, monkeypatch):
    from src.wherebuy.services import locations as locations_service

    monkeypatch.setattr(locations_service.settings, "database_id", None)
    monkeypatch.setattr(locations_service.settings, "locations_collection_id", None)

    with pytest.raises(ValueError):
        LocationService(fake_databases)


def test_form_rejects_out_of_range_coordinates():
    with pytest.raises(ValueError):
        _form(latitude=91)
    with pytest.raises(ValueError):
        _form(longitude=-181)


def test_unknown_contact_type_is_skipped_in_lists_and_fails_on_get(service, fake_databases):
    good = service.create(_form("Rice"), "u1", "Alice").unwrap()
    bad = service.create(_form("Tea"), "u1", "Alice").unwrap()
    fake_databases.documents[bad.id]["contactType"] = "carrier-pigeon"

    listed = service.list().unwrap()
    result = service.get(bad.id)

    assert [location.id for location in listed] == [good.id]
    assert isinstance(result, Failure)
    assert not result.error.not_found
    assert bad.id in result.error.message
