from pydantic import BaseModel

from focusflow.schemas.task import Task


class CompletionResult(BaseModel):
    """Outcome of completing the task bound to an ended session."""
    success: bool
    task: Task | None = None
    reason: str | None = None  # "NoMatchingTask" when nothing was bound
    message: str


class DetachResult(BaseModel):
    """Outcome of clearing all bindings."""
    success: bool = True
    detached_count: int
    message: str


class AttachResult(BaseModel):
    """Outcome of binding a task to a session."""
    success: bool = True
    task: Task
    replaced_task_id: str | None = None  # 被顶替的任务


class AttachedTaskResponse(BaseModel):
    """Task currently linked to the visible timer."""
    attached: bool
    task: Task | None = None


class AttachRequest(BaseModel):
    task_id: str
    session_id: str


class SessionEndedEvent(BaseModel):
    """Session-ended notification from the timer."""
    session_id: str
