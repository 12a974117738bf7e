from itertools import count

import pytest
from appwrite.enums.index_type import IndexType
from appwrite.exception import AppwriteException

from src.wherebuy.cli import provision as provision_cli
from src.wherebuy.services.provisioning import ATTRIBUTES, INDEXES, ItemStatus, Provisioner


class FakeSchemaDatabases:
    """Remembers created schema resources and answers 409 on duplicates."""

    def __init__(self) -> None:
        self.databases: set[str] = set()
        self.collections: set[tuple[str, str]] = set()
        self.attributes: dict[str, dict] = {}
        self.indexes: dict[str, dict] = {}
        self.collection_kwargs: dict = {}
        self.failing_keys: set[str] = set()
        self.ids = count(1)

    def _conflict(self, what: str) -> AppwriteException:
        return AppwriteException(f"{what} already exists", 409, "already_exists")

    def create(self, database_id, name, enabled=None):
        if self.databases:
            raise self._conflict("Database")
        database_id = f"db{next(self.ids)}" if database_id == "unique()" else database_id
        self.databases.add(database_id)
        return {"$id": database_id, "name": name}

    def create_collection(self, database_id, collection_id, name, permissions=None, document_security=None, enabled=None):
        collection_id = f"col{next(self.ids)}" if collection_id == "unique()" else collection_id
        if (database_id, collection_id) in self.collections:
            raise self._conflict("Collection")
        self.collections.add((database_id, collection_id))
        self.collection_kwargs = {"permissions": permissions, "document_security": document_security, "name": name}
        return {"$id": collection_id, "name": name}

    def _attribute(self, key, **details):
        if key in self.failing_keys:
            raise AppwriteException(f"Invalid attribute {key}", 400, "attribute_invalid")
        if key in self.attributes:
            raise self._conflict("Attribute")
        self.attributes[key] = details
        return {"key": key}

    def create_string_attribute(self, database_id, collection_id, key, size, required, default=None, array=None):
        return self._attribute(key, type="string", size=size, required=required)

    def create_float_attribute(self, database_id, collection_id, key, required, min=None, max=None, default=None, array=None):
        return self._attribute(key, type="double", required=required)

    def create_index(self, database_id, collection_id, key, type, attributes, orders=None):
        if key in self.failing_keys:
            raise AppwriteException(f"Invalid index {key}", 400, "index_invalid")
        if key in self.indexes:
            raise self._conflict("Index")
        self.indexes[key] = {"type": type, "attributes": attributes, "orders": orders}
        return {"key": key}


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def schema() -> FakeSchemaDatabases:
    return FakeSchemaDatabases()


def _provisioner(schema, sleep, **kwargs) -> Provisioner:
    return Provisioner(schema, pace_seconds=0.5, settle_seconds=5.0, sleep=sleep, **kwargs)


def test_first_run_creates_everything(schema):
    sleep = RecordingSleep()

    report = _provisioner(schema, sleep).run()

    assert report.ok and report.exit_code == 0
    assert report.database_id in schema.databases
    assert (report.database_id, report.collection_id) in schema.collections
    assert set(schema.attributes) == {spec.key for spec in ATTRIBUTES}
    assert len(schema.attributes) == 13
    assert [key for key, details in schema.attributes.items() if not details["required"]] == ["updatedAt"]
    assert {key for key, d in schema.attributes.items() if d["type"] == "double"} == {"price", "latitude", "longitude"}
    assert schema.indexes["productName_search"]["type"] is IndexType.FULLTEXT
    assert schema.indexes["createdAt_desc"] == {"type": IndexType.KEY, "attributes": ["createdAt"], "orders": ["DESC"]}
    assert schema.indexes["userId_index"]["attributes"] == ["userId"]
    assert schema.collection_kwargs["document_security"] is False
    assert schema.collection_kwargs["permissions"] == ['read("any")', 'create("users")']
    # one pacing delay per attribute and index, one settle period after attributes
    assert sleep.calls == [0.5] * len(ATTRIBUTES) + [5.0] + [0.5] * len(INDEXES)


def test_second_run_skips_existing_resources(schema):
    first = _provisioner(schema, RecordingSleep()).run()

    second = _provisioner(
        schema,
        RecordingSleep(),
        database_id=first.database_id,
        collection_id=first.collection_id,
    ).run()

    assert second.ok
    assert second.aborted is None
    statuses = {item.status for item in second.items}
    assert statuses == {ItemStatus.SKIPPED}
    assert second.counts("attribute")[ItemStatus.SKIPPED] == 13
    assert second.counts("index")[ItemStatus.SKIPPED] == 3
    assert "initialization complete" in second.render()


def test_item_failures_do_not_stop_the_batch(schema):
    schema.failing_keys = {"price", "userId_index"}

    report = _provisioner(schema, RecordingSleep()).run()

    assert report.aborted is None
    assert not report.ok and report.exit_code == 1
    assert report.counts("attribute") == {ItemStatus.SUCCEEDED: 12, ItemStatus.SKIPPED: 0, ItemStatus.FAILED: 1}
    assert report.counts("index")[ItemStatus.FAILED] == 1
    assert "createdAt_desc" in schema.indexes
    rendered = report.render()
    assert "attribute price: Invalid attribute price" in rendered
    assert "Re-run wherebuy-init" in rendered


def test_database_name_collision_names_the_real_cause(schema):
    schema.databases.add("existing")

    report = _provisioner(schema, RecordingSleep()).run()

    assert report.exit_code == 1
    assert "already exists" in report.aborted
    assert "not provided" not in report.aborted
    assert report.items == []
    assert schema.attributes == {}


def test_collection_failure_aborts(schema):
    def broken(*args, **kwargs):
        raise AppwriteException("Missing scope collections.write", 401, "general_unauthorized_scope")

    schema.create_collection = broken

    report = _provisioner(schema, RecordingSleep(), database_id="db1").run()

    assert report.aborted == "Missing scope collections.write"
    assert report.exit_code == 1
    assert schema.attributes == {}
    assert "Error during initialization" in report.render()


def test_cli_requires_credentials(monkeypatch, capsys):
    monkeypatch.setattr(provision_cli.settings, "appwrite_endpoint", None)
    monkeypatch.setattr(provision_cli.settings, "appwrite_project_id", "project")
    monkeypatch.setattr(provision_cli.settings, "appwrite_api_key", None)

    assert provision_cli.main() == 1
    err = capsys.readouterr().err
    assert "WHEREBUY_APPWRITE_ENDPOINT" in err
    assert "WHEREBUY_APPWRITE_API_KEY" in err


def test_cli_prints_summary_and_exit_code(monkeypatch, capsys, schema):
    monkeypatch.setattr(provision_cli.settings, "appwrite_endpoint", "http://appwrite.local/v1")
    monkeypatch.setattr(provision_cli.settings, "appwrite_project_id", "project")
    monkeypatch.setattr(provision_cli.settings, "appwrite_api_key", "key")
    monkeypatch.setattr(provision_cli.settings, "database_id", None)
    monkeypatch.setattr(provision_cli.settings, "locations_collection_id", None)
    monkeypatch.setattr(provision_cli.settings, "provision_pace_seconds", 0.0)
    monkeypatch.setattr(provision_cli.settings, "provision_settle_seconds", 0.0)
    monkeypatch.setattr(provision_cli, "get_databases", lambda: schema)

    assert provision_cli.main() == 0
    out = capsys.readouterr().out
    assert "WHEREBUY_DATABASE_ID=" in out
    assert "13 created" in out
