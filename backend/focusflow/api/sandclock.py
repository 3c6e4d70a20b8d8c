from fastapi import APIRouter, Depends

from focusflow.core.deps import get_binding_resolver, get_current_user
from focusflow.models.user import User
from focusflow.schemas.sandclock import (
    AttachedTaskResponse,
    AttachRequest,
    AttachResult,
    CompletionResult,
    DetachResult,
    SessionEndedEvent,
)
from focusflow.services.binding_service import BindingResolver

router = APIRouter(prefix="/api/sandclock", tags=["sandclock"])


@router.get("/attached", response_model=AttachedTaskResponse)
async def get_attached(
    current_user: User = Depends(get_current_user),
    resolver: BindingResolver = Depends(get_binding_resolver),
):
    """Task currently linked to the user's timer."""
    task = resolver.get_attached_task(current_user.id)
    return AttachedTaskResponse(attached=task is not None, task=task)


@router.post("/attach", response_model=AttachResult)
async def attach(
    body: AttachRequest,
    current_user: User = Depends(get_current_user),
    resolver: BindingResolver = Depends(get_binding_resolver),
):
    """Link a pending task to a running session."""
    return resolver.attach(current_user.id, body.task_id, body.session_id)


@router.post("/complete", response_model=CompletionResult)
async def complete(
    event: SessionEndedEvent,
    current_user: User = Depends(get_current_user),
    resolver: BindingResolver = Depends(get_binding_resolver),
):
    """Session-ended hook. A session with nothing bound is not an error."""
    return resolver.complete_bound_task(event.session_id, current_user.id)


@router.post("/detach", response_model=DetachResult)
async def detach(
    current_user: User = Depends(get_current_user),
    resolver: BindingResolver = Depends(get_binding_resolver),
):
    """Drop every binding, e.g. when the timer is reset."""
    return resolver.detach_all(current_user.id)
