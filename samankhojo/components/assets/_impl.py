"""
AssetService - Festival asset library.

Handles uploads, metadata search, statistics and festival linking.
Linking keeps `festival_ids` and `usage_count` in step: a festival is
recorded once per asset, and the usage count never drops below zero.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from samankhojo.domain.entities import Asset
from samankhojo.rules.models import UploadRules

from .models import (
    AssetSearchOutput,
    AssetStats,
    AssetValidationError,
    SearchAssetsInput,
    UploadAssetInput,
)
from .ports import AssetRepoPort, ClockPort, FestivalLookupPort, FileStorePort

logger = logging.getLogger(__name__)

CATEGORY_DIRS = {
    "festival": "festivals",
    "template": "templates",
    "common": "common",
    "seasonal": "seasonal",
}

UPDATABLE_FIELDS = (
    "name",
    "description",
    "tags",
    "category",
    "type",
    "is_public",
    "status",
    "layout_position",
)
NULLABLE_FIELDS = ("layout_position",)

_UNSAFE_CHARS = re.compile(r"[^a-z0-9.-]")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def sanitize_filename(filename: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", filename.lower())
    cleaned = _REPEATED_UNDERSCORES.sub("_", cleaned)
    return cleaned.strip("_") or "file"


def storage_path_for(root: str, category: str, filename: str) -> str:
    return f"{root}/{CATEGORY_DIRS.get(category, 'misc')}/{filename}"


def validate_upload(
    mime_type: str, size: int, rules: UploadRules
) -> list[AssetValidationError]:
    """Validate file type and size against upload rules."""
    errors: list[AssetValidationError] = []

    if not mime_type.startswith(tuple(rules.allowed_mime_prefixes)):
        errors.append(
            AssetValidationError(
                code="mime_type_not_allowed",
                message=f"File type {mime_type} is not allowed",
                field="file",
            )
        )

    if size == 0:
        errors.append(
            AssetValidationError(code="file_empty", message="File is empty", field="file")
        )
    elif size > rules.max_upload_bytes:
        errors.append(
            AssetValidationError(
                code="file_too_large",
                message=f"File exceeds {rules.max_upload_bytes} bytes",
                field="file",
            )
        )

    return errors


def _not_found(asset_id: UUID) -> AssetValidationError:
    return AssetValidationError(
        code="asset_not_found",
        message=f"Asset with ID {asset_id} not found",
    )


def _festival_not_found(festival_id: str) -> AssetValidationError:
    return AssetValidationError(
        code="festival_not_found",
        message=f"Festival with ID {festival_id} not found",
    )


def model_errors(exc: ValidationError) -> list[AssetValidationError]:
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else None
        errors.append(
            AssetValidationError(code=f"{field or 'asset'}_invalid", message=err["msg"], field=field)
        )
    return errors


class AssetService:
    """
    Asset service.

    Stores files through the file store and metadata through the repo.
    """

    def __init__(
        self,
        repo: AssetRepoPort,
        store: FileStorePort,
        clock: ClockPort,
        rules: UploadRules,
        festivals: FestivalLookupPort | None = None,
    ) -> None:
        self._repo = repo
        self._store = store
        self._clock = clock
        self._rules = rules
        self._festivals = festivals

    def get_by_id(self, asset_id: UUID) -> Asset | None:
        return self._repo.get_by_id(asset_id)

    def upload(self, inp: UploadAssetInput) -> tuple[Asset | None, list[AssetValidationError]]:
        """
        Store a file and its metadata.

        Returns:
            Tuple of (asset, errors). Asset is None if validation fails.
        """
        errors = validate_upload(inp.mime_type, len(inp.data), self._rules)
        unknown = [f for f in dict.fromkeys(inp.festival_ids) if not self._festival_exists(f)]
        if unknown:
            errors.append(
                AssetValidationError(
                    code="festival_ids_invalid",
                    message=f"Unknown festival(s): {', '.join(unknown)}",
                    field="festival_ids",
                )
            )
        if errors:
            return None, errors

        now = self._clock.now_utc()
        millis = int(now.timestamp() * 1000)
        filename = f"{inp.type}_{millis}_{sanitize_filename(inp.filename)}"
        path = storage_path_for(self._rules.storage_root, inp.category, filename)
        self._store.save(path, inp.data)

        asset = Asset(
            id=uuid4(),
            name=inp.filename,
            original_name=inp.filename,
            type=inp.type,
            category=inp.category,
            mime_type=inp.mime_type,
            size=len(inp.data),
            storage_path=path,
            description=inp.description,
            tags=list(inp.tags),
            festival_ids=list(dict.fromkeys(inp.festival_ids)),
            usage_count=len(set(inp.festival_ids)),
            is_public=inp.is_public,
            status="active",
            layout_position=inp.layout_position,
            created_by=inp.created_by,
            created_at=now,
            updated_at=now,
        )
        saved = self._repo.save(asset)
        logger.info("Uploaded asset %s (%s, %d bytes)", saved.id, path, saved.size)
        return saved, []

    def search(self, inp: SearchAssetsInput) -> AssetSearchOutput:
        assets = self._repo.get_all()

        if inp.type:
            assets = [a for a in assets if a.type == inp.type]
        if inp.category:
            assets = [a for a in assets if a.category == inp.category]
        if inp.festival_id:
            assets = [a for a in assets if inp.festival_id in a.festival_ids]
        if inp.status:
            assets = [a for a in assets if a.status == inp.status]
        if inp.text:
            term = inp.text.lower()
            assets = [
                a
                for a in assets
                if term in a.name.lower()
                or term in a.description.lower()
                or any(term in tag.lower() for tag in a.tags)
            ]

        limit = max(1, inp.limit)
        page = max(1, inp.page)
        total = len(assets)
        total_pages = math.ceil(total / limit)
        start = (page - 1) * limit

        return AssetSearchOutput(
            assets=tuple(assets[start : start + limit]),
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_more=page < total_pages,
        )

    def update(
        self, asset_id: UUID, updates: dict[str, Any]
    ) -> tuple[Asset | None, list[AssetValidationError]]:
        asset = self._repo.get_by_id(asset_id)
        if not asset:
            return None, [_not_found(asset_id)]

        allowed = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        errors = [
            AssetValidationError(code=f"{key}_required", message=f"{key} cannot be null", field=key)
            for key, value in allowed.items()
            if value is None and key not in NULLABLE_FIELDS
        ]
        if "name" in allowed and isinstance(allowed["name"], str) and not allowed["name"].strip():
            errors.append(
                AssetValidationError(code="name_required", message="Name is required", field="name")
            )
        if errors:
            return None, errors

        try:
            updated = Asset.model_validate(
                {**asset.model_dump(), **allowed, "updated_at": self._clock.now_utc()}
            )
        except ValidationError as e:
            return None, model_errors(e)
        return self._repo.save(updated), []

    def delete(self, asset_id: UUID) -> tuple[bool, list[AssetValidationError]]:
        asset = self._repo.get_by_id(asset_id)
        if not asset:
            return False, [_not_found(asset_id)]

        if asset.usage_count > 0:
            return False, [
                AssetValidationError(
                    code="asset_in_use",
                    message=f"Asset is used by {asset.usage_count} festival(s)",
                )
            ]

        self._store.delete(asset.storage_path)
        self._repo.delete(asset_id)
        logger.info("Deleted asset %s", asset_id)
        return True, []

    def stats(self) -> AssetStats:
        assets = self._repo.get_all()
        by_type: dict[str, int] = {}
        by_category: dict[str, int] = {}
        by_status: dict[str, int] = {}
        total_size = 0

        for asset in assets:
            total_size += asset.size
            by_type[asset.type] = by_type.get(asset.type, 0) + 1
            by_category[asset.category] = by_category.get(asset.category, 0) + 1
            by_status[asset.status] = by_status.get(asset.status, 0) + 1

        recent = sorted(assets, key=lambda a: a.created_at, reverse=True)[:10]
        return AssetStats(
            total_assets=len(assets),
            total_size=total_size,
            by_type=by_type,
            by_category=by_category,
            by_status=by_status,
            recent_uploads=tuple(recent),
        )

    # --- Festival links ---

    def link(self, asset_id: UUID, festival_id: str) -> tuple[Asset | None, list[AssetValidationError]]:
        """Record a festival on the asset. Usage grows only for a new link."""
        asset = self._repo.get_by_id(asset_id)
        if not asset:
            return None, [_not_found(asset_id)]
        if not self._festival_exists(festival_id):
            return None, [_festival_not_found(festival_id)]

        if festival_id in asset.festival_ids:
            return asset, []

        asset.festival_ids = [*asset.festival_ids, festival_id]
        asset.usage_count += 1
        asset.updated_at = self._clock.now_utc()
        return self._repo.save(asset), []

    def unlink(self, asset_id: UUID, festival_id: str) -> tuple[Asset | None, list[AssetValidationError]]:
        asset = self._repo.get_by_id(asset_id)
        if not asset:
            return None, [_not_found(asset_id)]

        if festival_id not in asset.festival_ids:
            return asset, []

        asset.festival_ids = [f for f in asset.festival_ids if f != festival_id]
        asset.usage_count = max(0, asset.usage_count - 1)
        asset.updated_at = self._clock.now_utc()
        return self._repo.save(asset), []

    def for_festival(self, festival_id: str) -> list[Asset]:
        return [
            a
            for a in self._repo.get_all()
            if festival_id in a.festival_ids and a.status == "active"
        ]

    def linked_to(self, festival_id: str) -> list[Asset]:
        """Every asset that records festival_id, archived ones included."""
        return [a for a in self._repo.get_all() if festival_id in a.festival_ids]

    def _festival_exists(self, festival_id: str) -> bool:
        if self._festivals is None:
            return True
        try:
            parsed = UUID(festival_id)
        except ValueError:
            return False
        return self._festivals.get_by_id(parsed) is not None

    def read_file(self, asset_id: UUID) -> tuple[Asset | None, bytes | None]:
        """Return the asset and its bytes, or (None, None) for missing/inactive assets."""
        asset = self._repo.get_by_id(asset_id)
        if not asset or asset.status != "active":
            return None, None
        try:
            return asset, self._store.get(asset.storage_path)
        except FileNotFoundError:
            logger.warning("Asset %s metadata exists but file %s is missing", asset_id, asset.storage_path)
            return None, None
