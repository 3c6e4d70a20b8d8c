from fastapi import APIRouter, Depends, HTTPException, status

from focusflow.config import get_settings
from focusflow.core.deps import get_current_user, get_focus_session_service
from focusflow.models.focus_session import FocusSession
from focusflow.models.user import User
from focusflow.schemas.focus_session import (
    FocusSessionCreate,
    FocusSessionEndResponse,
    FocusSessionResetResponse,
    FocusSessionResponse,
)
from focusflow.services.focus_session_service import FocusSessionService

router = APIRouter(prefix="/api/focus-sessions", tags=["focus-sessions"])


def _get_owned_session(
    service: FocusSessionService, user: User, session_id: str
) -> FocusSession:
    session = service.get(user.id, session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
    return session


@router.get("", response_model=list[FocusSessionResponse])
async def list_focus_sessions(
    current_user: User = Depends(get_current_user),
    service: FocusSessionService = Depends(get_focus_session_service),
):
    """List the user's most recent focus sessions."""
    return service.list_sessions(current_user.id)


@router.post("", response_model=FocusSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_focus_session(
    session_create: FocusSessionCreate,
    current_user: User = Depends(get_current_user),
    service: FocusSessionService = Depends(get_focus_session_service),
):
    """Start a sandclock session, optionally attaching a task."""
    settings = get_settings()
    duration = session_create.duration_minutes or settings.default_focus_minutes
    if duration > settings.max_focus_minutes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Sessions are limited to {settings.max_focus_minutes} minutes",
        )
    return service.start(current_user.id, duration, task_id=session_create.task_id)


@router.post("/{session_id}/end", response_model=FocusSessionEndResponse)
async def end_focus_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
    service: FocusSessionService = Depends(get_focus_session_service),
):
    """End a session and complete the task bound to it."""
    session = _get_owned_session(service, current_user, session_id)
    completion = service.end(session)
    return FocusSessionEndResponse(
        session=FocusSessionResponse.model_validate(session), completion=completion
    )


@router.post("/{session_id}/reset", response_model=FocusSessionResetResponse)
async def reset_focus_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
    service: FocusSessionService = Depends(get_focus_session_service),
):
    """Cancel a running session and release the bindings it owns."""
    session = _get_owned_session(service, current_user, session_id)
    detach = service.reset(session)
    return FocusSessionResetResponse(
        session=FocusSessionResponse.model_validate(session), detach=detach
    )
