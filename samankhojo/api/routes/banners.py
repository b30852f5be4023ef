from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from samankhojo.api.deps import get_banner_service, get_current_admin, require_admin_budget
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.banners import BannerService
from samankhojo.domain.entities import Banner, BannerPosition, User

router = APIRouter()


class BannerCreateRequest(BaseModel):
    name: str
    description: str = ""
    banner_asset_id: str | None = None
    video_asset_id: str | None = None
    sticker_asset_ids: list[str] = []
    is_active: bool = False
    style: dict[str, Any] = {}
    position: BannerPosition = "hero"
    priority: int = 0


class BannerUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    banner_asset_id: str | None = None
    video_asset_id: str | None = None
    sticker_asset_ids: list[str] | None = None
    is_active: bool | None = None
    style: dict[str, Any] | None = None
    position: BannerPosition | None = None
    priority: int | None = None


@router.get("/active", response_model=list[Banner])
def active_banners(
    position: BannerPosition | None = None,
    service: BannerService = Depends(get_banner_service),
) -> list[Banner]:
    """Active banners, highest priority first."""
    return service.active(position)


@router.get("", response_model=list[Banner])
def list_banners(
    admin: User = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service),
) -> list[Banner]:
    return service.get_all()


@router.get("/{banner_id}", response_model=Banner)
def get_banner(
    banner_id: UUID,
    admin: User = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service),
) -> Banner:
    banner = service.get_by_id(banner_id)
    if banner is None:
        raise HTTPException(status_code=404, detail="Banner not found")
    return banner


@router.post("", response_model=Banner, status_code=201)
def create_banner(
    data: BannerCreateRequest,
    admin: User = Depends(require_admin_budget),
    service: BannerService = Depends(get_banner_service),
) -> Banner:
    banner, errors = service.create(data.model_dump())
    if banner is None:
        raise_for_errors(errors)
    return banner


@router.patch("/{banner_id}", response_model=Banner)
def update_banner(
    banner_id: UUID,
    data: BannerUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: BannerService = Depends(get_banner_service),
) -> Banner:
    banner, errors = service.update(banner_id, data.model_dump(exclude_unset=True))
    if banner is None:
        raise_for_errors(errors)
    return banner


@router.post("/{banner_id}/toggle", response_model=Banner)
def toggle_banner(
    banner_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: BannerService = Depends(get_banner_service),
) -> Banner:
    banner, errors = service.toggle(banner_id)
    if banner is None:
        raise_for_errors(errors)
    return banner


@router.delete("/{banner_id}")
def delete_banner(
    banner_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: BannerService = Depends(get_banner_service),
) -> dict[str, str]:
    success, errors = service.delete(banner_id)
    if not success:
        raise_for_errors(errors)
    return {"status": "deleted"}
