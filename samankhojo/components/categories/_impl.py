"""
CategoryService - The admin-managed list of shop categories.

Category names are unique ignoring case. The list is ordered by
sort_order, then name; moving a category renumbers the whole list.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from samankhojo.domain.entities import Category
from samankhojo.rules.models import CategoryRules

from .models import CategoryUsage, CategoryUsageReport, CategoryValidationError
from .ports import CategoryRepoPort, ClockPort, ShopListPort

logger = logging.getLogger(__name__)

DIRECTIONS = ("up", "down")

UPDATABLE_FIELDS = ("name", "hindi_name", "icon", "description", "is_active", "sort_order")


def validate_category_data(
    data: dict[str, Any], rules: CategoryRules, require_name: bool = False
) -> list[CategoryValidationError]:
    errors: list[CategoryValidationError] = []

    if "name" in data or require_name:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append(
                CategoryValidationError(code="name_required", message="Category name is required", field="name")
            )
        elif len(name.strip()) > rules.name_max:
            errors.append(
                CategoryValidationError(
                    code="name_too_long",
                    message=f"Category name must be {rules.name_max} characters or less",
                    field="name",
                )
            )

    hindi_name = data.get("hindi_name")
    if isinstance(hindi_name, str) and len(hindi_name) > rules.name_max:
        errors.append(
            CategoryValidationError(
                code="hindi_name_too_long",
                message=f"Hindi name must be {rules.name_max} characters or less",
                field="hindi_name",
            )
        )

    description = data.get("description")
    if isinstance(description, str) and len(description) > rules.description_max:
        errors.append(
            CategoryValidationError(
                code="description_too_long",
                message=f"Description must be {rules.description_max} characters or less",
                field="description",
            )
        )

    if "sort_order" in data:
        sort_order = data["sort_order"]
        if isinstance(sort_order, bool) or not isinstance(sort_order, int) or sort_order < 0:
            errors.append(
                CategoryValidationError(
                    code="sort_order_invalid",
                    message="Sort order must be a non-negative integer",
                    field="sort_order",
                )
            )

    if "is_active" in data and not isinstance(data["is_active"], bool):
        errors.append(
            CategoryValidationError(
                code="is_active_invalid", message="is_active must be true or false", field="is_active"
            )
        )

    return errors


def model_errors(exc: ValidationError) -> list[CategoryValidationError]:
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else None
        errors.append(
            CategoryValidationError(code=f"{field or 'category'}_invalid", message=err["msg"], field=field)
        )
    return errors


def _not_found(category_id: UUID) -> CategoryValidationError:
    return CategoryValidationError(
        code="category_not_found", message=f"Category with ID {category_id} not found"
    )


def _duplicate(name: str) -> CategoryValidationError:
    return CategoryValidationError(
        code="name_duplicate", message=f"Category '{name}' already exists", field="name"
    )


class CategoryService:
    def __init__(
        self,
        repo: CategoryRepoPort,
        shops: ShopListPort,
        clock: ClockPort,
        rules: CategoryRules,
    ) -> None:
        self._repo = repo
        self._shops = shops
        self._clock = clock
        self._rules = rules

    def get_all(self, active_only: bool = False) -> list[Category]:
        categories = self._repo.get_all()
        if active_only:
            categories = [c for c in categories if c.is_active]
        return categories

    def get_by_id(self, category_id: UUID) -> Category | None:
        return self._repo.get_by_id(category_id)

    def search(self, query: str) -> list[Category]:
        q = query.strip().lower()
        return [
            c
            for c in self.get_all(active_only=True)
            if q in c.name.lower() or q in c.hindi_name.lower() or q in c.description.lower()
        ]

    def create(self, data: dict[str, Any]) -> tuple[Category | None, list[CategoryValidationError]]:
        errors = validate_category_data(data, self._rules, require_name=True)
        if errors:
            return None, errors

        name = data["name"].strip()
        if self._repo.get_by_name(name):
            return None, [_duplicate(name)]

        fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS and v is not None}
        fields["name"] = name
        if "sort_order" not in fields:
            existing = self._repo.get_all()
            fields["sort_order"] = max((c.sort_order for c in existing), default=0) + 1

        now = self._clock.now_utc()
        try:
            category = Category(id=uuid4(), created_at=now, updated_at=now, **fields)
        except ValidationError as e:
            return None, model_errors(e)
        saved = self._repo.save(category)
        logger.info("Created category %s", saved.name)
        return saved, []

    def update(
        self, category_id: UUID, updates: dict[str, Any]
    ) -> tuple[Category | None, list[CategoryValidationError]]:
        category = self._repo.get_by_id(category_id)
        if not category:
            return None, [_not_found(category_id)]

        errors = [
            CategoryValidationError(code=f"{key}_required", message=f"{key} cannot be null", field=key)
            for key in UPDATABLE_FIELDS
            if key in updates and updates[key] is None
        ]
        if errors:
            return None, errors
        errors = validate_category_data(updates, self._rules)
        if errors:
            return None, errors

        changes = {k: updates[k] for k in UPDATABLE_FIELDS if k in updates}
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            existing = self._repo.get_by_name(changes["name"])
            if existing and existing.id != category_id:
                return None, [_duplicate(changes["name"])]

        try:
            updated = Category.model_validate(
                {**category.model_dump(), **changes, "updated_at": self._clock.now_utc()}
            )
        except ValidationError as e:
            return None, model_errors(e)
        return self._repo.save(updated), []

    def toggle(self, category_id: UUID) -> tuple[Category | None, list[CategoryValidationError]]:
        category = self._repo.get_by_id(category_id)
        if not category:
            return None, [_not_found(category_id)]
        toggled = category.model_copy(
            update={"is_active": not category.is_active, "updated_at": self._clock.now_utc()}
        )
        return self._repo.save(toggled), []

    def delete(self, category_id: UUID) -> tuple[bool, list[CategoryValidationError]]:
        if not self._repo.get_by_id(category_id):
            return False, [_not_found(category_id)]
        self._repo.delete(category_id)
        return True, []

    def move(
        self, category_id: UUID, direction: str
    ) -> tuple[list[Category] | None, list[CategoryValidationError]]:
        """Swap a category with its neighbour and return the renumbered list."""
        if direction not in DIRECTIONS:
            return None, [
                CategoryValidationError(
                    code="direction_invalid", message="Direction must be up or down", field="direction"
                )
            ]

        categories = self._repo.get_all()
        index = next((i for i, c in enumerate(categories) if c.id == category_id), None)
        if index is None:
            return None, [_not_found(category_id)]

        target = index - 1 if direction == "up" else index + 1
        if 0 <= target < len(categories):
            categories[index], categories[target] = categories[target], categories[index]
            self._repo.reorder([c.id for c in categories], self._clock.now_utc())
        return self._repo.get_all(), []

    def init_defaults(self) -> list[Category]:
        """Add the configured default categories when none exist yet. Returns those created."""
        if self._repo.get_all():
            return []

        now = self._clock.now_utc()
        created = []
        for position, default in enumerate(self._rules.defaults, start=1):
            created.append(
                self._repo.save(
                    Category(
                        name=default.name,
                        hindi_name=default.hindi_name,
                        icon=default.icon,
                        sort_order=position,
                        created_at=now,
                        updated_at=now,
                    )
                )
            )
        logger.info("Initialized %d default categories", len(created))
        return created

    def is_valid_shop_category(self, name: str) -> bool:
        wanted = name.strip().lower()
        return bool(wanted) and any(c.name.lower() == wanted for c in self.get_all(active_only=True))

    def usage_report(self) -> CategoryUsageReport:
        categories = self.get_all()
        counts = {c.name.lower(): 0 for c in categories}
        active = {c.name.lower() for c in categories if c.is_active}
        unmatched: set[str] = set()

        for shop in self._shops.get_all():
            shop_type = shop.type.strip()
            if not shop_type:
                continue
            key = shop_type.lower()
            if key in counts:
                counts[key] += 1
            if key not in active:
                unmatched.add(shop_type)

        return CategoryUsageReport(
            usage=tuple(CategoryUsage(category=c, shop_count=counts[c.name.lower()]) for c in categories),
            unmatched_types=tuple(sorted(unmatched)),
        )
