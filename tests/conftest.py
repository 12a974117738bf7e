import json
from itertools import count

import pytest
from appwrite.exception import AppwriteException


def _apply_queries(documents: list[dict], queries: list[str]) -> list[dict]:
    result = list(documents)
    limit = None
    for raw in queries:
        query = json.loads(raw)
        method = query["method"]
        attribute = query.get("attribute")
        values = query.get("values") or []
        if method == "equal":
            result = [doc for doc in result if doc.get(attribute) in values]
        elif method == "search":
            needle = str(values[0]).lower()
            result = [doc for doc in result if needle in str(doc.get(attribute, "")).lower()]
        elif method == "orderDesc":
            result.sort(key=lambda doc: doc[attribute], reverse=True)
        elif method == "limit":
            limit = values[0]
    if limit is not None:
        result = result[:limit]
    return result


class FakeDatabases:
    """In-memory stand-in for the Appwrite Databases service."""

    def __init__(self) -> None:
        self.documents: dict[str, dict] = {}
        self.ids = count(1)
        self.calls: list[tuple] = []
        self.errors: dict[str, AppwriteException] = {}

    def _maybe_fail(self, method: str) -> None:
        if method in self.errors:
            raise self.errors[method]

    def _not_found(self) -> AppwriteException:
        return AppwriteException("Document with the requested ID could not be found.", 404, "document_not_found")

    def create_document(self, database_id, collection_id, document_id, data, permissions=None):
        self.calls.append(("create_document", database_id, collection_id, document_id))
        self._maybe_fail("create_document")
        if document_id == "unique()":
            document_id = f"doc{next(self.ids)}"
        document = {"$id": document_id, "$databaseId": database_id, "$collectionId": collection_id, **data}
        self.documents[document_id] = document
        return dict(document)

    def list_documents(self, database_id, collection_id, queries=None):
        self.calls.append(("list_documents", database_id, collection_id, list(queries or [])))
        self._maybe_fail("list_documents")
        documents = _apply_queries(list(self.documents.values()), list(queries or []))
        return {"total": len(documents), "documents": [dict(doc) for doc in documents]}

    def get_document(self, database_id, collection_id, document_id, queries=None):
        self.calls.append(("get_document", database_id, collection_id, document_id))
        self._maybe_fail("get_document")
        if document_id not in self.documents:
            raise self._not_found()
        return dict(self.documents[document_id])

    def update_document(self, database_id, collection_id, document_id, data=None, permissions=None):
        self.calls.append(("update_document", database_id, collection_id, document_id, dict(data or {})))
        self._maybe_fail("update_document")
        if document_id not in self.documents:
            raise self._not_found()
        self.documents[document_id].update(data or {})
        return dict(self.documents[document_id])

    def delete_document(self, database_id, collection_id, document_id):
        self.calls.append(("delete_document", database_id, collection_id, document_id))
        self._maybe_fail("delete_document")
        if document_id not in self.documents:
            raise self._not_found()
        del self.documents[document_id]
        return {}


class FakeAccounts:
    """In-memory stand-in for Appwrite accounts and sessions."""

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.sessions: dict[str, str] = {}
        self.ids = count(1)

    def create(self, user_id, email, password, name=None):
        if any(user["email"] == email for user in self.users.values()):
            raise AppwriteException("A user with the same id, email, or phone already exists in this project.", 409, "user_already_exists")
        if user_id == "unique()":
            user_id = f"user{next(self.ids)}"
        self.users[user_id] = {"$id": user_id, "email": email, "name": name or "", "password": password}
        return {key: value for key, value in self.users[user_id].items() if key != "password"}

    def create_email_password_session(self, email, password):
        for user in self.users.values():
            if user["email"] == email and user["password"] == password:
                secret = f"secret-{user['$id']}-{next(self.ids)}"
                self.sessions[secret] = user["$id"]
                return {"$id": f"session-{secret}", "userId": user["$id"], "secret": secret}
        raise AppwriteException("Invalid credentials. Please check the email and password.", 401, "user_invalid_credentials")

    def for_session(self, secret: str) -> "FakeSessionAccount":
        return FakeSessionAccount(self, secret)


class FakeSessionAccount:
    def __init__(self, accounts: FakeAccounts, secret: str) -> None:
        self.accounts = accounts
        self.secret = secret

    def _user_id(self) -> str:
        if self.secret not in self.accounts.sessions:
            raise AppwriteException("User (role: guests) missing scope (account)", 401, "general_unauthorized_scope")
        return self.accounts.sessions[self.secret]

    def get(self):
        user = self.accounts.users[self._user_id()]
        return {key: value for key, value in user.items() if key != "password"}

    def get_session(self, session_id):
        user_id = self._user_id()
        return {"$id": f"session-{self.secret}", "userId": user_id}

    def delete_session(self, session_id):
        self._user_id()
        del self.accounts.sessions[self.secret]
        return {}


class StepClock:
    """Deterministic ISO timestamps, one second apart."""

    def __init__(self) -> None:
        self.ticks = count(0)

    def __call__(self) -> str:
        tick = next(self.ticks)
        return f"2025-01-01T00:{tick // 60:02d}:{tick % 60:02d}.000Z"


@pytest.fixture
def fake_databases() -> FakeDatabases:
    return FakeDatabases()


@pytest.fixture
def fake_accounts() -> FakeAccounts:
    return FakeAccounts()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
