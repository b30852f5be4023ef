"""
Tests for AssetService.

Uploads go through a real FileSystemStore in a temp directory.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from samankhojo.adapters.clock import FixedClock
from samankhojo.adapters.fs.filestore import FileSystemStore
from samankhojo.components.assets import (
    AssetService,
    SearchAssetsInput,
    UpdateAssetInput,
    UploadAssetInput,
    run_assign_festival,
    run_delete,
    run_unassign_festival,
    run_update,
    run_upload,
    sanitize_filename,
    storage_path_for,
    validate_upload,
)
from samankhojo.domain.entities import Asset
from samankhojo.rules.models import UploadRules


class MockAssetRepo:
    def __init__(self) -> None:
        self.assets: dict[UUID, Asset] = {}

    def save(self, asset: Asset) -> Asset:
        self.assets[asset.id] = asset
        return asset

    def get_by_id(self, asset_id: UUID) -> Asset | None:
        return self.assets.get(asset_id)

    def get_all(self) -> list[Asset]:
        return sorted(self.assets.values(), key=lambda a: a.created_at, reverse=True)

    def delete(self, asset_id: UUID) -> None:
        self.assets.pop(asset_id, None)


@pytest.fixture
def upload_rules() -> UploadRules:
    return UploadRules(max_upload_bytes=64, allowed_mime_prefixes=["image/", "video/", "audio/"])


@pytest.fixture
def repo() -> MockAssetRepo:
    return MockAssetRepo()


@pytest.fixture
def store(tmp_path) -> FileSystemStore:
    return FileSystemStore(str(tmp_path / "assets"))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 11, 1, 6, 30, tzinfo=UTC))


@pytest.fixture
def service(repo, store, clock, upload_rules) -> AssetService:
    return AssetService(repo=repo, store=store, clock=clock, rules=upload_rules)


def _upload(**kw) -> UploadAssetInput:
    return UploadAssetInput(
        filename=kw.pop("filename", "Diwali Banner.PNG"),
        mime_type=kw.pop("mime_type", "image/png"),
        data=kw.pop("data", b"\x89PNG fake"),
        type=kw.pop("type", "banner"),
        **kw,
    )


# --- Helpers ---


def test_sanitize_filename():
    assert sanitize_filename("Diwali Banner (1).PNG") == "diwali_banner_1_.png"
    assert sanitize_filename("!!!") == "file"


def test_storage_path_for():
    assert storage_path_for("festival-assets", "template", "x.png") == "festival-assets/templates/x.png"
    assert storage_path_for("festival-assets", "other", "x.png") == "festival-assets/misc/x.png"


def test_validate_upload(upload_rules):
    assert validate_upload("image/png", 10, upload_rules) == []
    assert validate_upload("application/pdf", 10, upload_rules)[0].code == "mime_type_not_allowed"
    assert validate_upload("image/png", 0, upload_rules)[0].code == "file_empty"
    assert validate_upload("image/png", 65, upload_rules)[0].code == "file_too_large"


# --- Upload ---


def test_upload_stores_file_and_metadata(service: AssetService, store: FileSystemStore):
    asset, errors = service.upload(_upload(tags=("lamp", "gold"), festival_ids=("f1", "f1")))

    assert errors == []
    assert asset.storage_path.startswith("festival-assets/festivals/banner_")
    assert asset.storage_path.endswith("_diwali_banner.png")
    assert asset.original_name == "Diwali Banner.PNG"
    assert asset.festival_ids == ["f1"]
    assert asset.usage_count == 1
    assert store.get(asset.storage_path) == b"\x89PNG fake"


def test_upload_rejects_bad_type(service: AssetService, repo: MockAssetRepo):
    output = run_upload(_upload(mime_type="text/plain"), service)

    assert output.success is False
    assert output.errors[0].code == "mime_type_not_allowed"
    assert repo.assets == {}


# --- Search & stats ---


def test_search_filters_and_pages(service: AssetService, clock: FixedClock):
    for i in range(5):
        service.upload(_upload(filename=f"banner{i}.png", tags=("diwali",) if i % 2 == 0 else ()))
        clock.advance(timedelta(seconds=1))
    service.upload(_upload(filename="song.mp3", mime_type="audio/mpeg", type="audio"))

    banners = service.search(SearchAssetsInput(type="banner", limit=2, page=2))
    tagged = service.search(SearchAssetsInput(text="DIWALI"))

    assert banners.total == 5
    assert banners.total_pages == 3
    assert len(banners.assets) == 2
    assert banners.has_more is True
    assert tagged.total == 3


def test_search_excludes_archived_by_default(service: AssetService):
    asset, _ = service.upload(_upload())
    service.update(asset.id, {"status": "archived"})

    assert service.search(SearchAssetsInput()).total == 0
    assert service.search(SearchAssetsInput(status=None)).total == 1


def test_stats(service: AssetService):
    service.upload(_upload())
    service.upload(_upload(filename="a.mp3", mime_type="audio/mpeg", type="audio", category="common"))

    stats = service.stats()

    assert stats.total_assets == 2
    assert stats.by_type == {"banner": 1, "audio": 1}
    assert stats.by_category == {"festival": 1, "common": 1}
    assert stats.total_size == 2 * len(b"\x89PNG fake")


# --- Update / Delete ---


def test_update_only_allowed_fields(service: AssetService):
    asset, _ = service.upload(_upload())

    output = run_update(
        UpdateAssetInput(asset_id=str(asset.id), updates={"description": "Hero", "size": 1}), service
    )

    assert output.success is True
    assert output.asset.description == "Hero"
    assert output.asset.size == asset.size


def test_update_rejects_bad_literal(service: AssetService):
    asset, _ = service.upload(_upload())
    updated, errors = service.update(asset.id, {"type": "hologram"})
    assert updated is None
    assert errors[0].code == "type_invalid"


@pytest.mark.parametrize(
    "updates, code",
    [
        ({"name": None}, "name_required"),
        ({"is_public": None}, "is_public_required"),
        ({"tags": "hero"}, "tags_invalid"),
    ],
)
def test_update_rejects_bad_values(service: AssetService, updates, code):
    asset, _ = service.upload(_upload())

    updated, errors = service.update(asset.id, updates)

    assert updated is None
    assert errors[0].code == code
    assert service.get_by_id(asset.id).name == asset.name


def test_update_clears_layout_position(service: AssetService):
    asset, _ = service.upload(_upload())
    service.update(asset.id, {"layout_position": "sidebar"})

    updated, errors = service.update(asset.id, {"layout_position": None})

    assert errors == []
    assert updated.layout_position is None

def test_update_blank_name(service: AssetService):
    asset, _ = service.upload(_upload())
    updated, errors = service.update(asset.id, {"name": "  "})
    assert updated is None
    assert errors[0].code == "name_required"


def test_delete_in_use_is_refused(service: AssetService):
    asset, _ = service.upload(_upload(festival_ids=("f1",)))

    output = run_delete(str(asset.id), service)

    assert output.success is False
    assert output.errors[0].code == "asset_in_use"


def test_delete_removes_file(service: AssetService, store: FileSystemStore, repo: MockAssetRepo):
    asset, _ = service.upload(_upload())

    output = run_delete(str(asset.id), service)

    assert output.success is True
    assert repo.assets == {}
    assert store.exists(asset.storage_path) is False


def test_delete_invalid_id(service: AssetService):
    output = run_delete("not-a-uuid", service)
    assert output.errors[0].code == "asset_not_found"


# --- Festival links ---


def test_link_is_idempotent(service: AssetService):
    asset, _ = service.upload(_upload())

    run_assign_festival(str(asset.id), "f1", service)
    output = run_assign_festival(str(asset.id), "f1", service)

    assert output.asset.festival_ids == ["f1"]
    assert output.asset.usage_count == 1


def test_unlink_never_goes_negative(service: AssetService, repo: MockAssetRepo):
    asset, _ = service.upload(_upload(festival_ids=("f1",)))
    asset.usage_count = 0
    repo.save(asset)

    output = run_unassign_festival(str(asset.id), "f1", service)

    assert output.asset.festival_ids == []
    assert output.asset.usage_count == 0


def test_for_festival_only_active(service: AssetService):
    a, _ = service.upload(_upload(festival_ids=("f1",)))
    b, _ = service.upload(_upload(festival_ids=("f1",)))
    service.update(b.id, {"status": "archived"})

    assert [x.id for x in service.for_festival("f1")] == [a.id]


# --- File access ---


def test_read_file(service: AssetService, store: FileSystemStore):
    asset, _ = service.upload(_upload())

    found, data = service.read_file(asset.id)
    assert found.id == asset.id
    assert data == b"\x89PNG fake"

    store.delete(asset.storage_path)
    assert service.read_file(asset.id) == (None, None)
    assert service.read_file(uuid4()) == (None, None)
