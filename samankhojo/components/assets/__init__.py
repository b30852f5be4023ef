"""
Assets component - Festival asset library.
"""

from ._impl import AssetService, sanitize_filename, storage_path_for, validate_upload
from .component import (
    run_assign_festival,
    run_delete,
    run_search,
    run_stats,
    run_unassign_festival,
    run_update,
    run_upload,
)
from .models import (
    AssetOperationOutput,
    AssetSearchOutput,
    AssetStats,
    AssetValidationError,
    SearchAssetsInput,
    UpdateAssetInput,
    UploadAssetInput,
)
from .ports import AssetRepoPort, FileStorePort

__all__ = [
    # Entry points
    "run_upload",
    "run_search",
    "run_update",
    "run_delete",
    "run_stats",
    "run_assign_festival",
    "run_unassign_festival",
    # Models
    "UploadAssetInput",
    "SearchAssetsInput",
    "UpdateAssetInput",
    "AssetOperationOutput",
    "AssetSearchOutput",
    "AssetStats",
    "AssetValidationError",
    # Ports
    "AssetRepoPort",
    "FileStorePort",
    # Service
    "AssetService",
    "sanitize_filename",
    "storage_path_for",
    "validate_upload",
]
