"""Festival asset library routes. Everything except raw file download is admin-only."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from pydantic import BaseModel

from samankhojo.api.deps import (
    get_asset_service,
    get_current_admin,
    require_admin_budget,
    require_admin_heavy_budget,
)
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.assets import (
    AssetService,
    SearchAssetsInput,
    UpdateAssetInput,
    UploadAssetInput,
    run_assign_festival,
    run_delete,
    run_search,
    run_stats,
    run_unassign_festival,
    run_update,
    run_upload,
)
from samankhojo.domain.entities import (
    Asset,
    AssetCategory,
    AssetStatus,
    AssetType,
    LayoutPosition,
    User,
)

router = APIRouter()


class AssetUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    type: AssetType | None = None
    category: AssetCategory | None = None
    is_public: bool | None = None
    status: AssetStatus | None = None
    layout_position: LayoutPosition | None = None


class AssetSearchResponse(BaseModel):
    assets: list[Asset]
    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool


class AssetStatsResponse(BaseModel):
    total_assets: int
    total_size: int
    by_type: dict[str, int]
    by_category: dict[str, int]
    by_status: dict[str, int]
    recent_uploads: list[Asset]


def _split(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@router.post("", response_model=Asset, status_code=201)
def upload_asset(
    file: UploadFile = File(...),
    type: AssetType = Form(...),
    category: AssetCategory = Form("festival"),
    description: str = Form(""),
    tags: str | None = Form(None),
    festival_ids: str | None = Form(None),
    is_public: bool = Form(False),
    layout_position: LayoutPosition | None = Form(None),
    admin: User = Depends(require_admin_heavy_budget),
    service: AssetService = Depends(get_asset_service),
) -> Asset:
    """Upload a new asset. Tags and festival_ids are comma-separated."""
    content = file.file.read()
    mime_type = file.content_type or "application/octet-stream"

    inp = UploadAssetInput(
        filename=file.filename or "unnamed",
        mime_type=mime_type,
        data=content,
        type=type,
        category=category,
        description=description,
        tags=_split(tags),
        festival_ids=_split(festival_ids),
        is_public=is_public,
        layout_position=layout_position,
        created_by=str(admin.id),
    )
    result = run_upload(inp, service)
    if not result.success:
        raise_for_errors(result.errors)

    asset = result.asset
    assert asset is not None
    return asset


@router.get("", response_model=AssetSearchResponse)
def search_assets(
    type: AssetType | None = None,
    category: AssetCategory | None = None,
    festival_id: str | None = None,
    status: AssetStatus | None = "active",
    q: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(get_current_admin),
    service: AssetService = Depends(get_asset_service),
) -> AssetSearchResponse:
    result = run_search(
        SearchAssetsInput(
            type=type,
            category=category,
            festival_id=festival_id,
            status=status,
            text=q,
            page=page,
            limit=limit,
        ),
        service,
    )
    return AssetSearchResponse(
        assets=list(result.assets),
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )


@router.get("/stats", response_model=AssetStatsResponse)
def asset_stats(
    admin: User = Depends(get_current_admin),
    service: AssetService = Depends(get_asset_service),
) -> AssetStatsResponse:
    stats = run_stats(service)
    return AssetStatsResponse(
        total_assets=stats.total_assets,
        total_size=stats.total_size,
        by_type=stats.by_type,
        by_category=stats.by_category,
        by_status=stats.by_status,
        recent_uploads=list(stats.recent_uploads),
    )


@router.patch("/{asset_id}", response_model=Asset)
def update_asset(
    asset_id: str,
    data: AssetUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: AssetService = Depends(get_asset_service),
) -> Asset:
    result = run_update(
        UpdateAssetInput(asset_id=asset_id, updates=data.model_dump(exclude_unset=True)), service
    )
    if not result.success:
        raise_for_errors(result.errors)

    asset = result.asset
    assert asset is not None
    return asset


@router.delete("/{asset_id}")
def delete_asset(
    asset_id: str,
    admin: User = Depends(require_admin_budget),
    service: AssetService = Depends(get_asset_service),
) -> dict[str, str]:
    """Delete an asset. Refused with 409 while festivals still use it."""
    result = run_delete(asset_id, service)
    if not result.success:
        raise_for_errors(result.errors)
    return {"status": "deleted"}


@router.post("/{asset_id}/festivals/{festival_id}", response_model=Asset)
def assign_to_festival(
    asset_id: str,
    festival_id: str,
    admin: User = Depends(require_admin_budget),
    service: AssetService = Depends(get_asset_service),
) -> Asset:
    result = run_assign_festival(asset_id, festival_id, service)
    if not result.success:
        raise_for_errors(result.errors)

    asset = result.asset
    assert asset is not None
    return asset


@router.delete("/{asset_id}/festivals/{festival_id}", response_model=Asset)
def unassign_from_festival(
    asset_id: str,
    festival_id: str,
    admin: User = Depends(require_admin_budget),
    service: AssetService = Depends(get_asset_service),
) -> Asset:
    result = run_unassign_festival(asset_id, festival_id, service)
    if not result.success:
        raise_for_errors(result.errors)

    asset = result.asset
    assert asset is not None
    return asset


@router.get("/{asset_id}/file")
def get_asset_file(
    asset_id: UUID,
    service: AssetService = Depends(get_asset_service),
) -> Response:
    """Raw bytes of an active asset."""
    asset, data = service.read_file(asset_id)
    if asset is None or data is None:
        raise HTTPException(status_code=404, detail="Asset not found")

    headers: dict[str, Any] = {"Cache-Control": "public, max-age=3600"}
    return Response(content=data, media_type=asset.mime_type, headers=headers)
