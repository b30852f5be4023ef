"""
Festival campaigns with linked assets over the real SQLite schema.
"""

from datetime import date, timedelta

import pytest

from samankhojo.adapters.fs.filestore import FileSystemStore
from samankhojo.adapters.sqlite.repos import SQLiteAssetRepo, SQLiteFestivalRepo
from samankhojo.components.assets import AssetService, UploadAssetInput
from samankhojo.components.festivals import CreateFestivalInput, FestivalService


@pytest.fixture
def assets(db_path, tmp_path, clock, rules) -> AssetService:
    return AssetService(
        repo=SQLiteAssetRepo(db_path),
        store=FileSystemStore(str(tmp_path / "assets")),
        clock=clock,
        rules=rules.uploads,
        festivals=SQLiteFestivalRepo(db_path),
    )


@pytest.fixture
def festivals(db_path, assets, clock, rules) -> FestivalService:
    return FestivalService(repo=SQLiteFestivalRepo(db_path), linker=assets, clock=clock, rules=rules.festivals)


def _upload(assets: AssetService, filename: str, layout_position: str | None = None):
    asset, errors = assets.upload(
        UploadAssetInput(
            filename=filename,
            mime_type="image/png",
            data=b"\x89PNG",
            type="banner",
            layout_position=layout_position,
        )
    )
    assert errors == []
    return asset


def test_festival_lifecycle(festivals: FestivalService, assets: AssetService, clock):
    hero = _upload(assets, "hero.png", "hero")
    background = _upload(assets, "bg.png", "background")
    today = clock.today_utc()

    diwali, errors = festivals.create(
        CreateFestivalInput(
            name="diwali",
            display_name="Diwali",
            start_date=today - timedelta(days=2),
            end_date=today + timedelta(days=3),
            asset_ids=(str(hero.id), str(background.id)),
        )
    )
    assert errors == []
    assert assets.get_by_id(hero.id).festival_ids == [str(diwali.id)]

    banners, _ = festivals.banners(diwali.id)
    assert banners.top.id == hero.id
    assert banners.center.id == background.id

    tihar, _ = festivals.create(
        CreateFestivalInput(
            name="tihar",
            display_name="Tihar",
            start_date=today,
            end_date=today + timedelta(days=5),
        )
    )
    assert festivals.get_by_id(diwali.id).is_active is False
    assert festivals.get_active().id == tihar.id

    success, _ = festivals.delete(diwali.id)
    assert success is True
    assert assets.get_by_id(hero.id).festival_ids == []
    assert assets.get_by_id(hero.id).usage_count == 0


def test_expired_festival_is_switched_off(festivals: FestivalService, clock):
    festival, _ = festivals.create(
        CreateFestivalInput(
            name="losar",
            display_name="Losar",
            start_date=date(2025, 10, 1),
            end_date=date(2025, 10, 10),
        )
    )
    assert festival.is_active is True

    assert festivals.get_active() is None
    assert festivals.get_by_id(festival.id).is_active is False
    assert festivals.deactivate_expired() == 0


def test_delete_festival_releases_upload_links(festivals: FestivalService, assets: AssetService, clock):
    today = clock.today_utc()
    losar, _ = festivals.create(
        CreateFestivalInput(name="losar", display_name="Losar", start_date=today, end_date=today)
    )
    asset, errors = assets.upload(
        UploadAssetInput(
            filename="losar.png",
            mime_type="image/png",
            data=b"\x89PNG",
            type="banner",
            festival_ids=(str(losar.id),),
        )
    )
    assert errors == []
    assert asset.usage_count == 1

    festivals.delete(losar.id)

    assert assets.get_by_id(asset.id).usage_count == 0
    assert assets.delete(asset.id) == (True, [])


def test_upload_rejects_unknown_festival(assets: AssetService):
    asset, errors = assets.upload(
        UploadAssetInput(
            filename="x.png",
            mime_type="image/png",
            data=b"\x89PNG",
            type="banner",
            festival_ids=("not-a-festival",),
        )
    )

    assert asset is None
    assert errors[0].code == "festival_ids_invalid"
