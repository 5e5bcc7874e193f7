"""
Pytest configuration and shared fixtures.

Every test gets a fresh in-memory mongomock database wired into the app
through the ``get_db`` dependency, so no MongoDB server is needed.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

import main
from auth import create_token
from database import ASSETS, USERS, get_db

HR_EMAIL = "hr@acme.com"
EMPLOYEE_EMAIL = "worker@acme.com"


def bearer(email: str, **claims) -> dict:
    return {"Authorization": f"Bearer {create_token({'email': email, **claims})}"}


class PatchedDatabase:
    """
    Wrap a mock database so one collection method is replaced.

    Usage in tests::

        broken = PatchedDatabase(mock_db, "assets", "update_one", _raise)
        main.app.dependency_overrides[get_db] = lambda: broken
    """

    def __init__(self, database, collection, method, replacement):
        self._database = database
        self._collection = collection
        self._method = method
        self._replacement = replacement

    def __getitem__(self, name):
        collection = self._database[name]
        if name != self._collection:
            return collection
        return _PatchedCollection(collection, self._method, self._replacement)

    def __getattr__(self, name):
        return getattr(self._database, name)


class _PatchedCollection:
    def __init__(self, collection, method, replacement):
        self._collection = collection
        self._method = method
        self._replacement = replacement

    def __getattr__(self, name):
        if name == self._method:
            return self._replacement
        return getattr(self._collection, name)


@pytest.fixture
def mock_db():
    return mongomock.MongoClient()["assetflow_test"]


@pytest.fixture
def client(mock_db):  # pylint: disable=redefined-outer-name
    """
    Provide a test client bound to the mock database.

    Usage in tests::

        def test_root(client):
            assert client.get("/").status_code == 200
    """
    main.app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def manager(mock_db):  # pylint: disable=redefined-outer-name
    doc = {
        "email": HR_EMAIL,
        "name": "Hana Rahman",
        "role": "hr-manager",
        "company": "Acme",
        "selectedPackage": 5,
        "hasPaid": True,
    }
    mock_db[USERS].insert_one(doc)
    return doc


@pytest.fixture
def manager_headers(manager):  # pylint: disable=redefined-outer-name
    return bearer(HR_EMAIL)


@pytest.fixture
def employee_headers(mock_db):  # pylint: disable=redefined-outer-name
    mock_db[USERS].insert_one({"email": EMPLOYEE_EMAIL, "name": "Wes Orr", "role": "employee"})
    return bearer(EMPLOYEE_EMAIL, name="Wes Orr")


@pytest.fixture
def make_asset(mock_db):  # pylint: disable=redefined-outer-name
    """Insert an asset owned by the HR manager and return it with a string id."""

    def _make(name="Laptop", type="returnable", quantity=5, requests=0, hr_email=HR_EMAIL):
        doc = {
            "HrEmail": hr_email,
            "name": name,
            "type": type,
            "image": "https://img.example.com/a.png",
            "quantity": quantity,
            "availability": "available" if quantity > 0 else "out-of-stock",
            "requests": requests,
        }
        result = mock_db[ASSETS].insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    return _make
