"""
Festivals component - Shell layer.

Parses identifiers and wraps service results for the API and CLI.
"""

from __future__ import annotations

from uuid import UUID

from ._impl import FestivalService
from .models import (
    CreateFestivalInput,
    FestivalListOutput,
    FestivalOperationOutput,
    FestivalValidationError,
    UpdateFestivalInput,
)


def _parse_id(festival_id: str) -> UUID | None:
    try:
        return UUID(festival_id)
    except ValueError:
        return None


def _not_found(festival_id: str) -> FestivalOperationOutput:
    return FestivalOperationOutput(
        festival=None,
        errors=(
            FestivalValidationError(
                code="festival_not_found",
                message=f"Festival with ID {festival_id} not found",
            ),
        ),
        success=False,
    )


def run_create(input_data: CreateFestivalInput, service: FestivalService) -> FestivalOperationOutput:
    """Create a new festival."""
    festival, errors = service.create(input_data)
    return FestivalOperationOutput(
        festival=festival, errors=tuple(errors), success=festival is not None
    )


def run_update(input_data: UpdateFestivalInput, service: FestivalService) -> FestivalOperationOutput:
    """Apply a partial update."""
    festival_id = _parse_id(input_data.festival_id)
    if festival_id is None:
        return _not_found(input_data.festival_id)
    festival, errors = service.update(festival_id, input_data.updates)
    return FestivalOperationOutput(
        festival=festival, errors=tuple(errors), success=festival is not None
    )


def run_delete(festival_id: str, service: FestivalService) -> FestivalOperationOutput:
    parsed = _parse_id(festival_id)
    if parsed is None:
        return _not_found(festival_id)
    success, errors = service.delete(parsed)
    return FestivalOperationOutput(festival=None, errors=tuple(errors), success=success)


def run_toggle(festival_id: str, service: FestivalService) -> FestivalOperationOutput:
    parsed = _parse_id(festival_id)
    if parsed is None:
        return _not_found(festival_id)
    festival, errors = service.toggle(parsed)
    return FestivalOperationOutput(
        festival=festival, errors=tuple(errors), success=festival is not None
    )


def run_get(festival_id: str, service: FestivalService) -> FestivalOperationOutput:
    parsed = _parse_id(festival_id)
    festival = service.get_by_id(parsed) if parsed else None
    if festival is None:
        return _not_found(festival_id)
    return FestivalOperationOutput(festival=festival, errors=(), success=True)


def run_list(service: FestivalService) -> FestivalListOutput:
    festivals = service.get_all()
    return FestivalListOutput(festivals=tuple(festivals), total=len(festivals))


def run_deactivate_expired(service: FestivalService) -> int:
    """Run one expiry pass. Returns the number of festivals switched off."""
    return service.deactivate_expired()
