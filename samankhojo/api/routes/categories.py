from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from samankhojo.api.deps import get_category_service, get_current_admin, require_admin_budget
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.categories import CategoryService
from samankhojo.domain.entities import Category, User

router = APIRouter()


class CategoryCreateRequest(BaseModel):
    name: Any = None
    hindi_name: str = ""
    icon: str = ""
    description: str = ""
    is_active: bool = True
    sort_order: int | None = None


class CategoryUpdateRequest(BaseModel):
    name: Any = None
    hindi_name: str | None = None
    icon: str | None = None
    description: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class CategoryUsageResponse(BaseModel):
    category: Category
    shop_count: int


class UsageReportResponse(BaseModel):
    usage: list[CategoryUsageResponse]
    unmatched_types: list[str]


class DefaultsResponse(BaseModel):
    created: list[Category]
    count: int


@router.get("", response_model=list[Category])
def list_categories(
    search: str | None = None,
    service: CategoryService = Depends(get_category_service),
) -> list[Category]:
    """Active categories in display order."""
    if search and search.strip():
        return service.search(search)
    return service.get_all(active_only=True)


@router.get("/all", response_model=list[Category])
def list_all_categories(
    admin: User = Depends(get_current_admin),
    service: CategoryService = Depends(get_category_service),
) -> list[Category]:
    return service.get_all()


@router.get("/usage", response_model=UsageReportResponse)
def category_usage(
    admin: User = Depends(get_current_admin),
    service: CategoryService = Depends(get_category_service),
) -> UsageReportResponse:
    report = service.usage_report()
    return UsageReportResponse(
        usage=[CategoryUsageResponse(category=u.category, shop_count=u.shop_count) for u in report.usage],
        unmatched_types=list(report.unmatched_types),
    )


@router.get("/{category_id}", response_model=Category)
def get_category(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),
) -> Category:
    category = service.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("", response_model=Category, status_code=201)
def create_category(
    data: CategoryCreateRequest,
    admin: User = Depends(require_admin_budget),
    service: CategoryService = Depends(get_category_service),
) -> Category:
    category, errors = service.create(data.model_dump(exclude_none=True))
    if category is None:
        raise_for_errors(errors)
    return category


@router.post("/defaults", response_model=DefaultsResponse)
def init_default_categories(
    admin: User = Depends(require_admin_budget),
    service: CategoryService = Depends(get_category_service),
) -> DefaultsResponse:
    """Seed the default categories. Does nothing once any category exists."""
    created = service.init_defaults()
    return DefaultsResponse(created=created, count=len(created))


@router.patch("/{category_id}", response_model=Category)
def update_category(
    category_id: UUID,
    data: CategoryUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: CategoryService = Depends(get_category_service),
) -> Category:
    category, errors = service.update(category_id, data.model_dump(exclude_unset=True))
    if category is None:
        raise_for_errors(errors)
    return category


@router.post("/{category_id}/toggle", response_model=Category)
def toggle_category(
    category_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: CategoryService = Depends(get_category_service),
) -> Category:
    category, errors = service.toggle(category_id)
    if category is None:
        raise_for_errors(errors)
    return category


@router.post("/{category_id}/move", response_model=list[Category])
def move_category(
    category_id: UUID,
    direction: str,
    admin: User = Depends(require_admin_budget),
    service: CategoryService = Depends(get_category_service),
) -> list[Category]:
    categories, errors = service.move(category_id, direction)
    if categories is None:
        raise_for_errors(errors)
    return categories


@router.delete("/{category_id}")
def delete_category(
    category_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: CategoryService = Depends(get_category_service),
) -> dict[str, str]:
    success, errors = service.delete(category_id)
    if not success:
        raise_for_errors(errors)
    return {"status": "deleted"}
