"""Admin dashboard route."""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, Query

from samankhojo.api.deps import get_analytics_service, get_current_admin
from samankhojo.components.analytics import AnalyticsService
from samankhojo.domain.entities import User

router = APIRouter()


@router.get("/dashboard")
def dashboard(
    days: int = Query(30, ge=1, le=365),
    admin: User = Depends(get_current_admin),
    service: AnalyticsService = Depends(get_analytics_service),
) -> dict[str, Any]:
    """Totals, daily activity and top lists for the last `days` days."""
    return asdict(service.dashboard(days))
