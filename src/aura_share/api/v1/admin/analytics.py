# src/aura_share/api/v1/admin/analytics.py
"""Dashboard metrics and analytics time series."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query

from aura_share.api.v1.dependencies import AnalyticsServiceDep, require_permission
from aura_share.models.admin import PERMISSION_ANALYTICS

router = APIRouter(
    tags=["admin"],
    dependencies=[Depends(require_permission(PERMISSION_ANALYTICS))],
)


@router.get("/dashboard/metrics")
async def dashboard_metrics(analytics: AnalyticsServiceDep) -> dict[str, Any]:
    """Return platform-wide counts and the derived health status."""
    return analytics.dashboard_metrics()


@router.get("/analytics/{kind}")
async def analytics_series(
    kind: Literal["users", "content", "moderation"],
    analytics: AnalyticsServiceDep,
    days: Annotated[int, Query(ge=1, le=365)] = 30,
) -> list[dict[str, Any]]:
    if kind == "users":
        return analytics.user_growth(days)
    if kind == "content":
        return analytics.content_stats(days)
    return analytics.moderation_stats(days)
