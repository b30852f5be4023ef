"""
FestivalService - Festival campaign activation.

Handles festival CRUD, the single-active rule, date windows and expiry.

Invariants:
- At most one festival is active at a time. Switching a festival on
  switches every other festival off in the same transaction.
- is_active only changes through the repo's activate, deactivate and
  deactivate_expired statements; save() never writes it for an existing row.
- Festival dates are inclusive and compared against the UTC day.
- Asset links follow `asset_ids`: adding an ID links the asset, removing
  it unlinks, deleting the festival unlinks every asset that references it.
"""

from __future__ import annotations

import copy
import logging
import re
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from samankhojo.domain.entities import Asset, Festival
from samankhojo.rules.models import FestivalRules

from .models import CreateFestivalInput, FestivalBanners, FestivalValidationError
from .ports import AssetLinkerPort, ClockPort, FestivalRepoPort

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "display_name",
    "description",
    "start_date",
    "end_date",
    "style",
    "asset_ids",
    "priority",
)
NON_NULLABLE_FIELDS = (*UPDATABLE_FIELDS, "is_active")

# --- Default styles ---

_PALETTES: dict[str, dict[str, Any]] = {
    "diwali": {
        "colors": {
            "primary": "#FF9933",
            "secondary": "#FFCC00",
            "accent": "#FF6B35",
            "background": "linear-gradient(135deg, #FF9933 0%, #FFCC00 50%, #FF6B35 100%)",
            "text": "#8B4513",
        },
        "effects": {
            "confetti": True,
            "sparkles": True,
            "glow": True,
            "snow": False,
            "color_splash": False,
            "particles": True,
        },
    },
    "christmas": {
        "colors": {
            "primary": "#C41E3A",
            "secondary": "#228B22",
            "accent": "#FFD700",
            "background": "linear-gradient(135deg, #C41E3A 0%, #228B22 50%, #FFD700 100%)",
            "text": "#2F4F4F",
        },
        "effects": {
            "confetti": False,
            "sparkles": True,
            "glow": False,
            "snow": True,
            "color_splash": False,
            "particles": False,
        },
    },
    "holi": {
        "colors": {
            "primary": "#FF1493",
            "secondary": "#00CED1",
            "accent": "#FFD700",
            "background": "linear-gradient(135deg, #FF1493 0%, #00CED1 50%, #FFD700 100%)",
            "text": "#4B0082",
        },
        "effects": {
            "confetti": True,
            "sparkles": False,
            "glow": False,
            "snow": False,
            "color_splash": True,
            "particles": True,
        },
    },
}


def default_style(name: str) -> dict[str, Any]:
    """Build the default style for a festival; unknown names get the diwali palette."""
    palette = _PALETTES.get(name.lower(), _PALETTES["diwali"])
    return {
        "name": name,
        "display_name": name[:1].upper() + name[1:],
        **copy.deepcopy(palette),
        "animations": {"float": True, "pulse": True, "rotate": False, "bounce": False, "fade": True},
        "layout": {
            "banner_position": "hero",
            "overlay_position": "fullscreen",
            "show_decorations": True,
            "decoration_density": "medium",
        },
        "sounds": {"enabled": False, "background_asset_id": None, "volume": 0.5},
    }


# --- Validation Functions ---


def validate_festival_data(
    rules: FestivalRules,
    name: str | None = None,
    display_name: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    require_all: bool = False,
) -> list[FestivalValidationError]:
    """Validate festival fields. With require_all, missing fields are errors."""
    errors: list[FestivalValidationError] = []

    if name is not None or require_all:
        if not name or not name.strip():
            errors.append(
                FestivalValidationError(code="name_required", message="Name is required", field="name")
            )
        elif not re.match(rules.name_pattern, name):
            errors.append(
                FestivalValidationError(
                    code="name_invalid",
                    message="Name may only contain lowercase letters, digits and hyphens",
                    field="name",
                )
            )

    if display_name is not None or require_all:
        if not display_name or not display_name.strip():
            errors.append(
                FestivalValidationError(
                    code="display_name_required",
                    message="Display name is required",
                    field="display_name",
                )
            )

    if require_all:
        if start_date is None:
            errors.append(
                FestivalValidationError(
                    code="start_date_required", message="Start date is required", field="start_date"
                )
            )
        if end_date is None:
            errors.append(
                FestivalValidationError(
                    code="end_date_required", message="End date is required", field="end_date"
                )
            )

    if start_date is not None and end_date is not None:
        if start_date > end_date:
            errors.append(
                FestivalValidationError(
                    code="date_range_invalid",
                    message="Start date must be on or before end date",
                    field="end_date",
                )
            )
        elif (end_date - start_date).days > rules.max_duration_days:
            errors.append(
                FestivalValidationError(
                    code="duration_too_long",
                    message=f"Festivals may run at most {rules.max_duration_days} days",
                    field="end_date",
                )
            )

    return errors


def _not_found(festival_id: UUID) -> FestivalValidationError:
    return FestivalValidationError(
        code="festival_not_found",
        message=f"Festival with ID {festival_id} not found",
    )


def model_errors(exc: ValidationError) -> list[FestivalValidationError]:
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else None
        errors.append(
            FestivalValidationError(code=f"{field or 'festival'}_invalid", message=err["msg"], field=field)
        )
    return errors


def _as_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


# --- Festival Service ---


class FestivalService:
    """
    Festival service.

    Owns activation state; asset bookkeeping is delegated to the linker.
    """

    def __init__(
        self,
        repo: FestivalRepoPort,
        linker: AssetLinkerPort,
        clock: ClockPort,
        rules: FestivalRules,
    ) -> None:
        self._repo = repo
        self._linker = linker
        self._clock = clock
        self._rules = rules

    def get_by_id(self, festival_id: UUID) -> Festival | None:
        return self._repo.get_by_id(festival_id)

    def get_all(self) -> list[Festival]:
        return sorted(self._repo.get_all(), key=lambda f: f.created_at, reverse=True)

    def create(
        self, inp: CreateFestivalInput
    ) -> tuple[Festival | None, list[FestivalValidationError]]:
        """
        Create a festival.

        Returns:
            Tuple of (festival, errors). Festival is None if validation fails.
        """
        errors = validate_festival_data(
            self._rules,
            name=inp.name,
            display_name=inp.display_name,
            start_date=inp.start_date,
            end_date=inp.end_date,
            require_all=True,
        )
        if errors:
            return None, errors
        assert inp.start_date is not None and inp.end_date is not None

        if self._repo.get_by_name(inp.name):
            return None, [
                FestivalValidationError(
                    code="name_duplicate",
                    message=f"Festival '{inp.name}' already exists",
                    field="name",
                )
            ]

        now = self._clock.now_utc()
        try:
            festival = Festival(
                id=uuid4(),
                name=inp.name,
                display_name=inp.display_name.strip(),
                description=inp.description,
                start_date=inp.start_date,
                end_date=inp.end_date,
                is_active=False,
                style=inp.style or default_style(inp.name),
                asset_ids=list(dict.fromkeys(inp.asset_ids)),
                priority=inp.priority,
                created_by=inp.created_by,
                created_at=now,
                updated_at=now,
            )
        except ValidationError as e:
            return None, model_errors(e)

        saved = self._repo.save(festival)
        if inp.is_active:
            saved = self._activate(saved.id)
        self._link_assets(saved, saved.asset_ids)
        logger.info("Created festival %s (%s)", saved.name, saved.id)
        return saved, []

    def update(
        self, festival_id: UUID, updates: dict[str, Any]
    ) -> tuple[Festival | None, list[FestivalValidationError]]:
        festival = self._repo.get_by_id(festival_id)
        if not festival:
            return None, [_not_found(festival_id)]

        errors = [
            FestivalValidationError(
                code=f"{key}_required", message=f"{key} cannot be null", field=key
            )
            for key in NON_NULLABLE_FIELDS
            if key in updates and updates[key] is None
        ]
        if "is_active" in updates and not isinstance(updates["is_active"], (bool, type(None))):
            errors.append(
                FestivalValidationError(
                    code="is_active_invalid", message="is_active must be true or false", field="is_active"
                )
            )
        if errors:
            return None, errors

        start = updates.get("start_date", festival.start_date)
        end = updates.get("end_date", festival.end_date)
        errors = validate_festival_data(
            self._rules,
            name=updates.get("name"),
            display_name=updates.get("display_name"),
            start_date=start,
            end_date=end,
        )
        if errors:
            return None, errors

        new_name = updates.get("name")
        if new_name and new_name != festival.name:
            existing = self._repo.get_by_name(new_name)
            if existing and existing.id != festival_id:
                return None, [
                    FestivalValidationError(
                        code="name_duplicate",
                        message=f"Festival '{new_name}' already exists",
                        field="name",
                    )
                ]

        old_asset_ids = list(festival.asset_ids)
        merged = {
            **festival.model_dump(),
            **{k: updates[k] for k in UPDATABLE_FIELDS if k in updates},
            "updated_at": self._clock.now_utc(),
        }
        if isinstance(updates.get("asset_ids"), list):
            merged["asset_ids"] = list(dict.fromkeys(updates["asset_ids"]))
        try:
            updated = Festival.model_validate(merged)
        except ValidationError as e:
            return None, model_errors(e)

        saved = self._repo.save(updated)
        if "is_active" in updates:
            saved = self._activate(saved.id) if updates["is_active"] else self._deactivate(saved.id)

        if "asset_ids" in updates:
            added = [a for a in saved.asset_ids if a not in old_asset_ids]
            removed = [a for a in old_asset_ids if a not in saved.asset_ids]
            self._link_assets(saved, added)
            self._unlink_assets(saved, removed)

        return saved, []

    def delete(self, festival_id: UUID) -> tuple[bool, list[FestivalValidationError]]:
        """Delete a festival and unlink every asset that references it."""
        festival = self._repo.get_by_id(festival_id)
        if not festival:
            return False, [_not_found(festival_id)]

        linked = {a.id for a in self._linker.linked_to(str(festival_id))}
        linked.update(a for a in map(_as_uuid, festival.asset_ids) if a is not None)
        for asset_id in linked:
            self._linker.unlink(asset_id, str(festival_id))
        self._repo.delete(festival_id)
        logger.info("Deleted festival %s (%s), unlinked %d asset(s)", festival.name, festival_id, len(linked))
        return True, []

    def toggle(self, festival_id: UUID) -> tuple[Festival | None, list[FestivalValidationError]]:
        """Flip is_active. Switching on deactivates every other festival."""
        festival = self._repo.get_by_id(festival_id)
        if not festival:
            return None, [_not_found(festival_id)]

        if festival.is_active:
            return self._deactivate(festival_id), []
        return self._activate(festival_id), []

    def get_active(self) -> Festival | None:
        """
        The festival to show right now: active and inside its date window.

        When nothing qualifies, expired festivals are switched off.
        """
        today = self._clock.today_utc()
        candidates = [f for f in self._repo.get_all() if f.is_active and f.in_window(today)]
        if candidates:
            return max(candidates, key=lambda f: f.priority)

        self.deactivate_expired()
        return None

    def deactivate_expired(self) -> int:
        """Switch off every active festival whose end date has passed."""
        count = self._repo.deactivate_expired(self._clock.today_utc(), self._clock.now_utc())
        if count:
            logger.info("Deactivated %d expired festival(s)", count)
        return count

    def banners(self, festival_id: UUID) -> tuple[FestivalBanners | None, list[FestivalValidationError]]:
        if not self._repo.get_by_id(festival_id):
            return None, [_not_found(festival_id)]

        top = None
        center = None
        for asset in self._linker.for_festival(str(festival_id)):
            if asset.type != "banner":
                continue
            if asset.layout_position in (None, "hero") and top is None:
                top = asset
            elif asset.layout_position == "background" and center is None:
                center = asset

        return FestivalBanners(top=top, center=center), []

    def assets(self, festival_id: UUID) -> list[Asset]:
        return self._linker.for_festival(str(festival_id))

    # --- Helpers ---

    def _activate(self, festival_id: UUID) -> Festival:
        changed = self._repo.activate(festival_id, self._clock.now_utc())
        if changed:
            logger.info("Deactivated %d other festival(s) for %s", changed, festival_id)
        festival = self._repo.get_by_id(festival_id)
        assert festival is not None
        return festival

    def _deactivate(self, festival_id: UUID) -> Festival:
        self._repo.deactivate(festival_id, self._clock.now_utc())
        festival = self._repo.get_by_id(festival_id)
        assert festival is not None
        return festival

    def _link_assets(self, festival: Festival, asset_ids: list[str]) -> None:
        for raw_id in asset_ids:
            asset_id = _as_uuid(raw_id)
            asset = None
            if asset_id is not None:
                asset, _ = self._linker.link(asset_id, str(festival.id))
            if asset is None:
                logger.warning("Festival %s references unknown asset %s", festival.id, raw_id)

    def _unlink_assets(self, festival: Festival, asset_ids: list[str]) -> None:
        for raw_id in asset_ids:
            asset_id = _as_uuid(raw_id)
            if asset_id is not None:
                self._linker.unlink(asset_id, str(festival.id))
