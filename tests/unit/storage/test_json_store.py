"""Unit tests for JsonFileStore backend."""
import asyncio
import json
import pytest
from pathlib import Path

from photo_catalog.application.services import CatalogService
from photo_catalog.domain import Album, Photo, User
from photo_catalog.infrastructure.storage import (
    JsonFileStore,
    StorageError,
    StorageReadError,
    StoreConfig,
)
from tests.conftest import write_catalog


@pytest.fixture
def store(data_dir):
    """Create a JsonFileStore over the sample catalog."""
    return JsonFileStore(StoreConfig(backend="json", data_dir=data_dir))


@pytest.fixture
def run_async():
    """Helper to run async functions in sync context."""
    def _run(coro):
        return asyncio.run(coro)
    return _run


def read_photos(data_dir: Path):
    return json.loads((data_dir / "photos.json").read_text())


class TestJsonStoreReads:
    """Test lookups over the flat files."""

    def test_get_all_photos_in_file_order(self, store, run_async):
        photos = run_async(store.get_all_photos())
        assert [p.id for p in photos] == [54781, 10, 11, 12]

    def test_find_photo_by_id(self, store, run_async):
        photo = run_async(store.find_photo_by_id(54781))

        assert photo.title == "Old"
        assert photo.resolution == [1920, 1080]

    def test_find_missing_photo_returns_none(self, store, run_async):
        assert run_async(store.find_photo_by_id(1)) is None

    def test_find_user_by_id(self, store, run_async):
        assert run_async(store.find_user_by_id(9)).username == "bob"
        assert run_async(store.find_user_by_id(404)) is None

    def test_get_albums_by_ids_ignores_unknown(self, store, run_async):
        albums = run_async(store.get_albums_by_ids([99, 3, 1]))
        assert [a.id for a in albums] == [1, 3]

    def test_find_albums_by_name(self, store, run_async):
        insensitive = run_async(store.find_albums_by_name("nature"))
        exact = run_async(store.find_albums_by_name("Nature", case_insensitive=False))

        assert [a.id for a in insensitive] == [3, 4]
        assert [a.id for a in exact] == [3]

    def test_get_photos_by_album_ids(self, store, run_async):
        photos = run_async(store.get_photos_by_album_ids({3, 4}))
        assert [p.id for p in photos] == [54781, 10, 11]

    def test_reads_pick_up_external_edits(self, store, data_dir, run_async):
        docs = read_photos(data_dir)
        docs[0]["title"] = "Edited elsewhere"
        (data_dir / "photos.json").write_text(json.dumps(docs))

        assert run_async(store.find_photo_by_id(54781)).title == "Edited elsewhere"


class TestJsonStoreErrors:
    """Test failures surface as StorageReadError."""

    def test_missing_file(self, tmp_path, run_async):
        store = JsonFileStore(StoreConfig(backend="json", data_dir=tmp_path / "empty"))

        with pytest.raises(StorageReadError, match="photos.json"):
            run_async(store.get_all_photos())

    def test_malformed_json(self, store, data_dir, run_async):
        (data_dir / "albums.json").write_text("[{not json")

        with pytest.raises(StorageReadError, match="albums.json"):
            run_async(store.get_all_albums())

    def test_invalid_utf8(self, store, data_dir, run_async):
        (data_dir / "albums.json").write_bytes(b'[{"id": 3, "name": "Na\xffture"}]')

        with pytest.raises(StorageReadError, match="albums.json"):
            run_async(store.find_albums_by_name("Nature"))

    def test_invalid_utf8_surfaces_as_storage_error_from_service(self, store, data_dir, run_async):
        (data_dir / "albums.json").write_bytes(b'[{"id": 3, "name": "Na\xffture"}]')

        with pytest.raises(StorageError):
            run_async(CatalogService(store).list_photos_by_album_name("Nature"))

    def test_scalar_document_rejected(self, store, data_dir, run_async):
        (data_dir / "users.json").write_text("42")

        with pytest.raises(StorageReadError):
            run_async(store.get_all_users())

    def test_wrong_backend_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileStore(StoreConfig(backend="document", database_path=tmp_path / "x.db"))


class TestJsonStoreSingleObject:
    """Test photos.json holding one bare object."""

    @pytest.fixture
    def single(self, tmp_path, catalog):
        catalog["photos"] = catalog["photos"][0]
        data_dir = write_catalog(tmp_path / "single", catalog)
        return data_dir, JsonFileStore(StoreConfig(backend="json", data_dir=data_dir))

    def test_read_as_one_item_collection(self, single, run_async):
        _, store = single
        photos = run_async(store.get_all_photos())
        assert [p.id for p in photos] == [54781]

    def test_write_keeps_object_shape(self, single, run_async):
        data_dir, store = single

        run_async(store.add_tag_set_wise(54781, "sky"))

        saved = read_photos(data_dir)
        assert isinstance(saved, dict)
        assert saved["tags"] == ["sunset", "sky"]


class TestJsonStoreWrites:
    """Test partial updates and set-wise tag addition."""

    def test_update_changes_only_given_field(self, store, data_dir, run_async):
        result = run_async(store.update_photo_fields(54781, {"title": "New"}))

        assert result.matched and result.modified
        saved = read_photos(data_dir)[0]
        assert saved["title"] == "New"
        assert saved["description"] == "Evening sky"
        assert saved["owner"] == 9

    def test_update_keeps_unknown_keys(self, store, data_dir, run_async):
        docs = read_photos(data_dir)
        docs[0]["camera"] = "X100V"
        (data_dir / "photos.json").write_text(json.dumps(docs))

        run_async(store.update_photo_fields(54781, {"description": "d"}))

        assert read_photos(data_dir)[0]["camera"] == "X100V"

    def test_empty_update_matches_without_writing(self, store, data_dir, run_async):
        before = (data_dir / "photos.json").stat().st_mtime_ns

        result = run_async(store.update_photo_fields(54781, {}))

        assert result.matched
        assert not result.modified
        assert (data_dir / "photos.json").stat().st_mtime_ns == before

    def test_update_missing_photo(self, store, run_async):
        result = run_async(store.update_photo_fields(1, {"title": "x"}))
        assert not result.matched

    def test_update_rejects_other_fields(self, store, run_async):
        with pytest.raises(ValueError, match="owner"):
            run_async(store.update_photo_fields(54781, {"owner": 7}))

    def test_add_tag_appends(self, store, data_dir, run_async):
        result = run_async(store.add_tag_set_wise(10, "Summer"))

        assert result.modified
        assert read_photos(data_dir)[1]["tags"] == ["beach", "Family", "Summer"]

    def test_add_tag_ignores_case_duplicate(self, store, data_dir, run_async):
        result = run_async(store.add_tag_set_wise(10, "FAMILY"))

        assert result.matched
        assert not result.modified
        assert read_photos(data_dir)[1]["tags"] == ["beach", "Family"]

    def test_add_tag_creates_missing_tag_list(self, store, data_dir, run_async):
        docs = read_photos(data_dir)
        del docs[2]["tags"]
        (data_dir / "photos.json").write_text(json.dumps(docs))

        run_async(store.add_tag_set_wise(11, "old"))

        assert read_photos(data_dir)[2]["tags"] == ["old"]

    def test_add_tag_missing_photo(self, store, run_async):
        assert not run_async(store.add_tag_set_wise(1, "x")).matched

    def test_concurrent_tag_adds_are_not_lost(self, store, data_dir):
        async def add_many():
            await asyncio.gather(*(store.add_tag_set_wise(54781, f"t{i}") for i in range(10)))

        asyncio.run(add_many())

        tags = read_photos(data_dir)[0]["tags"]
        assert sorted(tags) == sorted(["sunset"] + [f"t{i}" for i in range(10)])

    def test_no_temp_file_left_behind(self, store, data_dir, run_async):
        run_async(store.update_photo_fields(54781, {"title": "New"}))
        assert not (data_dir / "photos.json.tmp").exists()

    def test_replace_collections(self, tmp_path, run_async):
        store = JsonFileStore(StoreConfig(backend="json", data_dir=tmp_path / "seed"))

        run_async(store.replace_collections(
            photos=[Photo(id=1, filename="a.jpg", albums=[2])],
            albums=[Album(id=2, name="Seed")],
            users=[User(id=3, username="u", password="p")],
        ))

        assert [p.id for p in run_async(store.get_photos_by_album_ids([2]))] == [1]
        assert run_async(store.find_user_by_id(3)).username == "u"
