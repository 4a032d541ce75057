"""Test configuration and fixtures for the photo catalog.

This module provides isolated test environments:
- A small sample catalog (users, albums, photos)
- The same catalog in memory, in flat JSON files and in the document store
- A FastAPI test client over a temporary JSON catalog
"""
import copy
import json
import sys
from pathlib import Path
from typing import Dict

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Ensure photo_catalog and tests.fakes are importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from photo_catalog.infrastructure.storage import DocumentStore, JsonFileStore, StoreConfig
from tests.fakes import InMemoryStore


SAMPLE_CATALOG = {
    "users": [
        {"id": 7, "username": "alice", "password": "alice-pass"},
        {"id": 9, "username": "bob", "password": "bob-pass"},
    ],
    "albums": [
        {"id": 1, "name": "Vacation"},
        {"id": 3, "name": "Nature"},
        {"id": 4, "name": "NATURE"},
        {"id": 5, "name": "Empty"},
    ],
    "photos": [
        {
            "id": 54781,
            "filename": "sunset.jpg",
            "title": "Old",
            "description": "Evening sky",
            "date": "2025-01-05T19:45:00",
            "albums": [3],
            "tags": ["sunset"],
            "owner": 9,
            "resolution": [1920, 1080],
        },
        {
            "id": 10,
            "filename": "beach.jpg",
            "title": "Beach",
            "description": "Sand and sea",
            "date": "2024-07-04T10:00:00",
            "albums": [1, 99, 3],
            "tags": ["beach", "Family"],
            "owner": 7,
            "resolution": "640x480",
        },
        {
            # Legacy record: no owner, no resolution
            "id": 11,
            "filename": "legacy.jpg",
            "title": "Legacy",
            "description": "",
            "date": "2023-03-15T08:30:00",
            "albums": [4],
            "tags": [],
        },
        {
            # Owner id with no matching user
            "id": 12,
            "filename": "orphan.jpg",
            "title": "Orphan",
            "description": "Nobody's",
            "date": "2022-12-31T23:59:59",
            "albums": [1],
            "tags": ["night"],
            "owner": 404,
            "resolution": [800, 600],
        },
    ],
}


def write_catalog(data_dir: Path, catalog: Dict) -> Path:
    """Write a catalog as photos.json / albums.json / users.json."""
    data_dir.mkdir(parents=True, exist_ok=True)
    for name in ("photos", "albums", "users"):
        (data_dir / f"{name}.json").write_text(json.dumps(catalog[name], indent=4))
    return data_dir


@pytest.fixture(scope="function")
def catalog() -> Dict:
    """Fresh copy of the sample catalog documents."""
    return copy.deepcopy(SAMPLE_CATALOG)


@pytest.fixture(scope="function")
def memory_store(catalog: Dict) -> InMemoryStore:
    """In-memory store holding the sample catalog."""
    return InMemoryStore(catalog["photos"], catalog["albums"], catalog["users"])


@pytest.fixture(scope="function")
def data_dir(tmp_path: Path, catalog: Dict) -> Path:
    """Temporary directory with the sample catalog as JSON files."""
    return write_catalog(tmp_path / "data", catalog)


@pytest_asyncio.fixture
async def json_store(data_dir: Path):
    """Opened flat-file store over the sample catalog."""
    store = JsonFileStore(StoreConfig(backend="json", data_dir=data_dir))
    async with store:
        yield store


@pytest_asyncio.fixture
async def document_store(tmp_path: Path, catalog: Dict):
    """Opened document store loaded with the sample catalog."""
    store = DocumentStore(StoreConfig(backend="document", database_path=tmp_path / "catalog.db"))
    async with store:
        for collection in ("users", "albums", "photos"):
            await store.import_documents(collection, catalog[collection])
        yield store


@pytest_asyncio.fixture(params=["memory", "json", "document"])
async def any_store(request, tmp_path: Path, catalog: Dict):
    """Each storage implementation in turn, holding the sample catalog.

    Usage:
        @pytest.mark.asyncio
        async def test_something(any_store):
            photo = await any_store.find_photo_by_id(54781)
    """
    if request.param == "memory":
        yield InMemoryStore(catalog["photos"], catalog["albums"], catalog["users"])
        return

    if request.param == "json":
        store = JsonFileStore(
            StoreConfig(backend="json", data_dir=write_catalog(tmp_path / "data", catalog))
        )
        async with store:
            yield store
        return

    store = DocumentStore(StoreConfig(backend="document", database_path=tmp_path / "catalog.db"))
    async with store:
        for collection in ("users", "albums", "photos"):
            await store.import_documents(collection, catalog[collection])
        yield store


@pytest.fixture(scope="function")
def client(data_dir: Path):
    """Create test client over a temporary JSON catalog.

    Usage:
        def test_something(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    from photo_catalog.main import create_app

    app = create_app(StoreConfig(backend="json", data_dir=data_dir))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def authenticated_client(client: TestClient) -> TestClient:
    """Client logged in as bob (user 9, owner of photo 54781)."""
    response = client.post("/login", json={"username": "bob", "password": "bob-pass"})

    assert response.status_code == 200, "Login should succeed"
    assert "photo_catalog_session" in response.cookies, "Session cookie should be set"

    return client
