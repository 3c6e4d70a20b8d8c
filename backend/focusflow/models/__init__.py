from focusflow.models.activity import ActivityTracker
from focusflow.models.focus_session import FocusSession, FocusSessionStatus
from focusflow.models.task_store import TaskStoreSnapshot
from focusflow.models.user import User

__all__ = [
    "User",
    "TaskStoreSnapshot",
    "ActivityTracker",
    "FocusSession",
    "FocusSessionStatus",
]
