from datetime import datetime

from pydantic import BaseModel, Field

from focusflow.models.focus_session import FocusSessionStatus
from focusflow.schemas.sandclock import CompletionResult, DetachResult


class FocusSessionCreate(BaseModel):
    """Focus session start schema."""
    duration_minutes: int | None = Field(default=None, ge=1)
    task_id: str | None = None  # 开始时直接绑定的任务


class FocusSessionResponse(BaseModel):
    """Focus session response schema."""
    id: str
    duration_minutes: int
    status: FocusSessionStatus
    started_at: datetime
    ended_at: datetime | None = None

    class Config:
        from_attributes = True


class FocusSessionEndResponse(BaseModel):
    session: FocusSessionResponse
    completion: CompletionResult


class FocusSessionResetResponse(BaseModel):
    session: FocusSessionResponse
    detach: DetachResult
