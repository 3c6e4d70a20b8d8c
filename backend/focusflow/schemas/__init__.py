from focusflow.schemas.checklist import TaskCreate, TaskResponse, TaskUpdate
from focusflow.schemas.sandclock import AttachResult, CompletionResult, DetachResult
from focusflow.schemas.task import Binding, DayBucket, Task, TaskStatus, TaskStore
from focusflow.schemas.user import Token, UserCreate, UserLogin, UserResponse

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "Token",
    "Task", "TaskStatus", "Binding", "DayBucket", "TaskStore",
    "TaskCreate", "TaskUpdate", "TaskResponse",
    "CompletionResult", "DetachResult", "AttachResult",
]
