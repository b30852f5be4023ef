"""
Festivals component - Festival campaign activation and expiry.
"""

from ._impl import FestivalService, default_style, validate_festival_data
from .component import (
    run_create,
    run_deactivate_expired,
    run_delete,
    run_get,
    run_list,
    run_toggle,
    run_update,
)
from .models import (
    CreateFestivalInput,
    FestivalBanners,
    FestivalListOutput,
    FestivalOperationOutput,
    FestivalValidationError,
    UpdateFestivalInput,
)
from .ports import AssetLinkerPort, FestivalRepoPort

__all__ = [
    # Entry points
    "run_create",
    "run_update",
    "run_delete",
    "run_toggle",
    "run_get",
    "run_list",
    "run_deactivate_expired",
    # Models
    "CreateFestivalInput",
    "UpdateFestivalInput",
    "FestivalOperationOutput",
    "FestivalListOutput",
    "FestivalBanners",
    "FestivalValidationError",
    # Ports
    "FestivalRepoPort",
    "AssetLinkerPort",
    # Service
    "FestivalService",
    "default_style",
    "validate_festival_data",
]
