from fastapi import APIRouter, Depends, Query

from focusflow.config import get_settings
from focusflow.core.deps import get_activity_service, get_current_user
from focusflow.models.user import User
from focusflow.schemas.activity import ActivityResponse, HeatmapResponse
from focusflow.services.activity_service import ActivityService
from focusflow.utils.dates import today

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=ActivityResponse)
async def get_activity(
    current_user: User = Depends(get_current_user),
    activity: ActivityService = Depends(get_activity_service),
):
    """Streaks and totals for the current user."""
    return activity.get_tracker(current_user.id).to_dict()


@router.get("/heatmap", response_model=HeatmapResponse)
async def get_heatmap(
    days: int | None = Query(None, ge=1, le=366),
    current_user: User = Depends(get_current_user),
    activity: ActivityService = Depends(get_activity_service),
):
    """Consistency heatmap ending today, zero-filled."""
    cells = activity.heatmap(current_user.id, today(), days or get_settings().heatmap_days)
    return HeatmapResponse(start=cells[0]["date"], end=cells[-1]["date"], cells=cells)
