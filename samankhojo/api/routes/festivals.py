"""Festival campaign routes. At most one festival is active at a time."""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from samankhojo.adapters.clock import SystemClock
from samankhojo.api.deps import get_clock, get_current_admin, get_festival_service, require_admin_budget
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.festivals import (
    CreateFestivalInput,
    FestivalService,
    UpdateFestivalInput,
    run_create,
    run_deactivate_expired,
    run_delete,
    run_get,
    run_list,
    run_toggle,
    run_update,
)
from samankhojo.domain.entities import Asset, Festival, FestivalStatus, User

router = APIRouter()


# --- Request/Response Models ---


class FestivalCreateRequest(BaseModel):
    name: str
    display_name: str
    start_date: date | None = None
    end_date: date | None = None
    description: str = ""
    is_active: bool = True
    style: dict[str, Any] | None = None
    asset_ids: list[str] = []
    priority: int = 1


class FestivalUpdateRequest(BaseModel):
    name: str | None = None
    display_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None
    is_active: bool | None = None
    style: dict[str, Any] | None = None
    asset_ids: list[str] | None = None
    priority: int | None = None


class FestivalResponse(Festival):
    status: FestivalStatus


class FestivalListResponse(BaseModel):
    festivals: list[FestivalResponse]
    total: int


class FestivalBannersResponse(BaseModel):
    top: Asset | None
    center: Asset | None


def _to_response(festival: Festival, today: date) -> FestivalResponse:
    return FestivalResponse(**festival.model_dump(), status=festival.status_on(today))


# --- Routes ---


@router.get("/active", response_model=FestivalResponse | None)
def get_active_festival(
    service: FestivalService = Depends(get_festival_service),
    clock: SystemClock = Depends(get_clock),
) -> FestivalResponse | None:
    """The festival to theme the site with right now, or null."""
    festival = service.get_active()
    return _to_response(festival, clock.today_utc()) if festival else None


@router.post("/deactivate-expired")
def deactivate_expired(
    admin: User = Depends(require_admin_budget),
    service: FestivalService = Depends(get_festival_service),
) -> dict[str, int]:
    return {"deactivated": run_deactivate_expired(service)}


@router.get("", response_model=FestivalListResponse)
def list_festivals(
    admin: User = Depends(get_current_admin),
    service: FestivalService = Depends(get_festival_service),
    clock: SystemClock = Depends(get_clock),
) -> FestivalListResponse:
    """All festivals, newest first."""
    result = run_list(service)
    today = clock.today_utc()
    return FestivalListResponse(
        festivals=[_to_response(f, today) for f in result.festivals],
        total=result.total,
    )


@router.post("", response_model=FestivalResponse, status_code=201)
def create_festival(
    data: FestivalCreateRequest,
    admin: User = Depends(require_admin_budget),
    service: FestivalService = Depends(get_festival_service),
    clock: SystemClock = Depends(get_clock),
) -> FestivalResponse:
    input_data = CreateFestivalInput(
        name=data.name,
        display_name=data.display_name,
        start_date=data.start_date,
        end_date=data.end_date,
        description=data.description,
        is_active=data.is_active,
        style=data.style,
        asset_ids=tuple(data.asset_ids),
        priority=data.priority,
        created_by=str(admin.id),
    )
    result = run_create(input_data, service)
    if not result.success:
        raise_for_errors(result.errors)

    festival = result.festival
    assert festival is not None
    return _to_response(festival, clock.today_utc())


@router.get("/{festival_id}", response_model=FestivalResponse)
def get_festival(
    festival_id: str,
    service: FestivalService = Depends(get_festival_service),
    clock: SystemClock = Depends(get_clock),
) -> FestivalResponse:
    result = run_get(festival_id, service)
    if not result.success:
        raise_for_errors(result.errors)

    festival = result.festival
    assert festival is not None
    return _to_response(festival, clock.today_utc())


@router.patch("/{festival_id}", response_model=FestivalResponse)
def update_festival(
    festival_id: str,
    data: FestivalUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: FestivalService = Depends(get_festival_service),
    clock: SystemClock = Depends(get_clock),
) -> FestivalResponse:
    """Partial update. Changing asset_ids re-links the difference."""
    result = run_update(
        UpdateFestivalInput(festival_id=festival_id, updates=data.model_dump(exclude_unset=True)),
        service,
    )
    if not result.success:
        raise_for_errors(result.errors)

    festival = result.festival
    assert festival is not None
    return _to_response(festival, clock.today_utc())


@router.delete("/{festival_id}")
def delete_festival(
    festival_id: str,
    admin: User = Depends(require_admin_budget),
    service: FestivalService = Depends(get_festival_service),
) -> dict[str, str]:
    result = run_delete(festival_id, service)
    if not result.success:
        raise_for_errors(result.errors)
    return {"status": "deleted"}


@router.post("/{festival_id}/toggle", response_model=FestivalResponse)
def toggle_festival(
    festival_id: str,
    admin: User = Depends(require_admin_budget),
    service: FestivalService = Depends(get_festival_service),
    clock: SystemClock = Depends(get_clock),
) -> FestivalResponse:
    result = run_toggle(festival_id, service)
    if not result.success:
        raise_for_errors(result.errors)

    festival = result.festival
    assert festival is not None
    return _to_response(festival, clock.today_utc())


@router.get("/{festival_id}/banners", response_model=FestivalBannersResponse)
def get_festival_banners(
    festival_id: str,
    service: FestivalService = Depends(get_festival_service),
) -> FestivalBannersResponse:
    result = run_get(festival_id, service)
    if not result.success or result.festival is None:
        raise_for_errors(result.errors)

    banners, errors = service.banners(result.festival.id)
    if banners is None:
        raise_for_errors(errors)
    return FestivalBannersResponse(top=banners.top, center=banners.center)


@router.get("/{festival_id}/assets", response_model=list[Asset])
def get_festival_assets(
    festival_id: str,
    service: FestivalService = Depends(get_festival_service),
) -> list[Asset]:
    result = run_get(festival_id, service)
    if not result.success or result.festival is None:
        raise_for_errors(result.errors)
    return service.assets(result.festival.id)
