from fastapi import APIRouter, Depends, HTTPException, Query, status

from focusflow.core.deps import get_checklist_service, get_current_user
from focusflow.models.user import User
from focusflow.schemas.checklist import (
    CarryOverRequest,
    CarryOverResponse,
    DayResponse,
    PreviousDaysResponse,
    StatsResponse,
    TaskCompleteRequest,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from focusflow.services.checklist_service import ChecklistService
from focusflow.utils.dates import is_valid_date, previous_day, today

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("/day", response_model=DayResponse)
async def get_day(
    date: str | None = Query(None, description="YYYY-MM-DD, defaults to today"),
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Get the tasks of one date."""
    date = date or today()
    if not is_valid_date(date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date format. Use YYYY-MM-DD",
        )

    bucket = checklist.get_day(current_user.id, date)
    if bucket is None:
        return DayResponse(date=date)
    return DayResponse(date=date, day=bucket.day, tasks=bucket.tasks)


@router.get("/days/previous", response_model=PreviousDaysResponse)
async def get_previous_days(
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """List every day before today, most recent first."""
    return PreviousDaysResponse(days=checklist.previous_days(current_user.id, today()))


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Completion statistics across all days."""
    return checklist.stats(current_user.id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_create: TaskCreate,
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Add a task to today's checklist."""
    on_date = today()
    try:
        task = checklist.add_task(
            current_user.id,
            on_date,
            task_create.title,
            link=task_create.link,
            difficulty=task_create.difficulty,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return TaskResponse(task=task, date=on_date)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Edit a task on any day."""
    try:
        bucket, task = checklist.update_task(
            current_user.id,
            task_id,
            title=task_update.title,
            link=task_update.link,
            difficulty=task_update.difficulty,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return TaskResponse(task=task, date=bucket.date)


@router.delete("/{task_id}", response_model=TaskResponse)
async def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Delete a task on any day."""
    bucket, task = checklist.delete_task(current_user.id, task_id)
    return TaskResponse(task=task, date=bucket.date)


@router.post("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: str,
    body: TaskCompleteRequest,
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Set or toggle completion."""
    bucket, task = checklist.set_completed(current_user.id, task_id, body.completed, today())
    return TaskResponse(task=task, date=bucket.date)


@router.post("/carry-over", response_model=CarryOverResponse)
async def carry_over(
    body: CarryOverRequest,
    current_user: User = Depends(get_current_user),
    checklist: ChecklistService = Depends(get_checklist_service),
):
    """Carry pending tasks forward, yesterday to today by default."""
    to_date = body.to_date or today()
    from_date = body.from_date or previous_day(to_date)
    carried = checklist.carry_over(current_user.id, from_date, to_date)
    return CarryOverResponse(
        carried_count=carried,
        from_date=from_date,
        to_date=to_date,
        message=f"Carried over {carried} tasks from {from_date} to {to_date}",
    )
