"""Behaviour every CatalogStore implementation must share."""
import asyncio

import pytest

from photo_catalog.application.services import CatalogService
from photo_catalog.domain import ErrorKind


@pytest.mark.asyncio
async def test_album_lookup_is_case_insensitive(any_store):
    for name in ("Nature", "nature", "NATURE"):
        albums = await any_store.find_albums_by_name(name)
        assert [a.id for a in albums] == [3, 4]


@pytest.mark.asyncio
async def test_unknown_album_ids_ignored(any_store):
    albums = await any_store.get_albums_by_ids([1, 99, 3])
    assert [a.name for a in albums] == ["Vacation", "Nature"]


@pytest.mark.asyncio
async def test_tag_set_semantics(any_store):
    first = await any_store.add_tag_set_wise(10, "summer")
    again = await any_store.add_tag_set_wise(10, "Summer")

    assert (first.matched, first.modified) == (True, True)
    assert (again.matched, again.modified) == (True, False)
    assert (await any_store.find_photo_by_id(10)).tags == ["beach", "Family", "summer"]


@pytest.mark.asyncio
async def test_missing_photo_writes_do_not_match(any_store):
    assert not (await any_store.update_photo_fields(1, {"title": "x"})).matched
    assert not (await any_store.add_tag_set_wise(1, "x")).matched


@pytest.mark.asyncio
async def test_concurrent_adds_of_same_tag_store_it_once(any_store):
    results = await asyncio.gather(
        any_store.add_tag_set_wise(10, "x"),
        any_store.add_tag_set_wise(10, "X"),
        any_store.add_tag_set_wise(10, "x"),
    )

    assert sum(result.modified for result in results) == 1
    tags = (await any_store.find_photo_by_id(10)).tags
    assert [tag.casefold() for tag in tags].count("x") == 1


@pytest.mark.asyncio
async def test_photo_view_is_backend_independent(any_store):
    result = await CatalogService(any_store).resolve_photo_view(10)

    assert result.view.to_dict() == {
        "id": 10,
        "filename": "beach.jpg",
        "title": "Beach",
        "description": "Sand and sea",
        "date": "July 4, 2024",
        "album_names": ["Vacation", "Nature"],
        "tags": ["beach", "Family"],
        "resolution": "640x480",
        "owner_name": "alice",
    }


@pytest.mark.asyncio
async def test_update_then_tag_scenario(any_store):
    service = CatalogService(any_store)

    updated = await service.update_photo_fields(54781, "New title", "", user_id=9)
    tagged = await service.add_tag_to_photo(54781, "Sunset", user_id=9)
    denied = await service.add_tag_to_photo(54781, "mine", user_id=7)

    assert updated.success
    assert tagged.error == ErrorKind.ALREADY_EXISTS
    assert denied.error == ErrorKind.FORBIDDEN
    photo = await any_store.find_photo_by_id(54781)
    assert photo.title == "New title"
    assert photo.description == "Evening sky"
    assert photo.tags == ["sunset"]


@pytest.mark.asyncio
async def test_album_csv_is_backend_independent(any_store):
    result = await CatalogService(any_store).album_csv("NATURE")

    assert result.csv.split("\n") == [
        "filename,resolution,tags",
        "sunset.jpg,1920x1080,sunset",
        "beach.jpg,640x480,beach:Family",
        "legacy.jpg,,",
    ]
