"""
Assets component - Shell layer.

Wraps AssetService results into operation outputs for the API.
"""

from __future__ import annotations

from uuid import UUID

from ._impl import AssetService
from .models import (
    AssetOperationOutput,
    AssetSearchOutput,
    AssetStats,
    AssetValidationError,
    SearchAssetsInput,
    UpdateAssetInput,
    UploadAssetInput,
)


def _invalid_id(asset_id: str) -> AssetOperationOutput:
    return AssetOperationOutput(
        asset=None,
        errors=(
            AssetValidationError(
                code="asset_not_found", message=f"Asset with ID {asset_id} not found"
            ),
        ),
        success=False,
    )


def _parse_id(asset_id: str) -> UUID | None:
    try:
        return UUID(asset_id)
    except ValueError:
        return None


def run_upload(input_data: UploadAssetInput, service: AssetService) -> AssetOperationOutput:
    """Upload a new asset."""
    asset, errors = service.upload(input_data)
    return AssetOperationOutput(asset=asset, errors=tuple(errors), success=asset is not None)


def run_search(input_data: SearchAssetsInput, service: AssetService) -> AssetSearchOutput:
    return service.search(input_data)


def run_update(input_data: UpdateAssetInput, service: AssetService) -> AssetOperationOutput:
    asset_id = _parse_id(input_data.asset_id)
    if asset_id is None:
        return _invalid_id(input_data.asset_id)
    asset, errors = service.update(asset_id, input_data.updates)
    return AssetOperationOutput(asset=asset, errors=tuple(errors), success=asset is not None)


def run_delete(asset_id: str, service: AssetService) -> AssetOperationOutput:
    parsed = _parse_id(asset_id)
    if parsed is None:
        return _invalid_id(asset_id)
    success, errors = service.delete(parsed)
    return AssetOperationOutput(asset=None, errors=tuple(errors), success=success)


def run_stats(service: AssetService) -> AssetStats:
    return service.stats()


def run_assign_festival(
    asset_id: str, festival_id: str, service: AssetService
) -> AssetOperationOutput:
    """Link an asset to a festival."""
    parsed = _parse_id(asset_id)
    if parsed is None:
        return _invalid_id(asset_id)
    asset, errors = service.link(parsed, festival_id)
    return AssetOperationOutput(asset=asset, errors=tuple(errors), success=asset is not None)


def run_unassign_festival(
    asset_id: str, festival_id: str, service: AssetService
) -> AssetOperationOutput:
    """Remove an asset's link to a festival."""
    parsed = _parse_id(asset_id)
    if parsed is None:
        return _invalid_id(asset_id)
    asset, errors = service.unlink(parsed, festival_id)
    return AssetOperationOutput(asset=asset, errors=tuple(errors), success=asset is not None)
