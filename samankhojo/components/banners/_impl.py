"""
BannerService - Standalone promotional banners.

Unlike festivals, any number of banners may be active at once; the
active list is ordered by priority, highest first.
"""

from __future__ import annotations

from typing import Any, get_args
from uuid import UUID, uuid4

from pydantic import ValidationError

from samankhojo.domain.entities import Banner, BannerPosition

from .models import BannerValidationError
from .ports import BannerRepoPort, ClockPort

POSITIONS: tuple[str, ...] = get_args(BannerPosition)

UPDATABLE_FIELDS = (
    "name",
    "description",
    "banner_asset_id",
    "video_asset_id",
    "sticker_asset_ids",
    "is_active",
    "style",
    "position",
    "priority",
)


def validate_banner_data(data: dict[str, Any], require_name: bool = False) -> list[BannerValidationError]:
    errors: list[BannerValidationError] = []
    if "name" in data or require_name:
        if not data.get("name") or not str(data["name"]).strip():
            errors.append(
                BannerValidationError(code="name_required", message="Banner name is required", field="name")
            )
    position = data.get("position")
    if position is not None and position not in POSITIONS:
        errors.append(
            BannerValidationError(
                code="position_invalid",
                message=f"Position must be one of {', '.join(POSITIONS)}",
                field="position",
            )
        )
    return errors


def model_errors(exc: ValidationError) -> list[BannerValidationError]:
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else None
        errors.append(
            BannerValidationError(code=f"{field or 'banner'}_invalid", message=err["msg"], field=field)
        )
    return errors


def _not_found(banner_id: UUID) -> BannerValidationError:
    return BannerValidationError(code="banner_not_found", message=f"Banner with ID {banner_id} not found")


class BannerService:
    def __init__(self, repo: BannerRepoPort, clock: ClockPort) -> None:
        self._repo = repo
        self._clock = clock

    def get_all(self) -> list[Banner]:
        return self._repo.get_all()

    def get_by_id(self, banner_id: UUID) -> Banner | None:
        return self._repo.get_by_id(banner_id)

    def active(self, position: str | None = None) -> list[Banner]:
        banners = [b for b in self._repo.get_all() if b.is_active]
        if position:
            banners = [b for b in banners if b.position == position]
        return sorted(banners, key=lambda b: b.priority, reverse=True)

    def create(self, data: dict[str, Any]) -> tuple[Banner | None, list[BannerValidationError]]:
        errors = validate_banner_data(data, require_name=True)
        if errors:
            return None, errors

        now = self._clock.now_utc()
        fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        fields["name"] = str(fields["name"]).strip()
        try:
            banner = Banner(id=uuid4(), created_at=now, updated_at=now, **fields)
        except ValidationError as e:
            return None, model_errors(e)
        return self._repo.save(banner), []

    def update(
        self, banner_id: UUID, updates: dict[str, Any]
    ) -> tuple[Banner | None, list[BannerValidationError]]:
        banner = self._repo.get_by_id(banner_id)
        if not banner:
            return None, [_not_found(banner_id)]

        errors = validate_banner_data(updates)
        if errors:
            return None, errors

        merged = {
            **banner.model_dump(),
            **{k: v for k, v in updates.items() if k in UPDATABLE_FIELDS},
            "updated_at": self._clock.now_utc(),
        }
        try:
            updated = Banner.model_validate(merged)
        except ValidationError as e:
            return None, model_errors(e)
        return self._repo.save(updated), []

    def toggle(self, banner_id: UUID) -> tuple[Banner | None, list[BannerValidationError]]:
        banner = self._repo.get_by_id(banner_id)
        if not banner:
            return None, [_not_found(banner_id)]
        banner.is_active = not banner.is_active
        banner.updated_at = self._clock.now_utc()
        return self._repo.save(banner), []

    def delete(self, banner_id: UUID) -> tuple[bool, list[BannerValidationError]]:
        if not self._repo.get_by_id(banner_id):
            return False, [_not_found(banner_id)]
        self._repo.delete(banner_id)
        return True, []
