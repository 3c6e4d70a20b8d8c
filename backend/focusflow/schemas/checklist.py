from pydantic import BaseModel, Field, field_validator

from focusflow.schemas.task import DayBucket, Difficulty, Task
from focusflow.utils.dates import is_valid_date


class TaskCreate(BaseModel):
    """Task creation schema."""
    title: str = Field(min_length=1, max_length=500)
    link: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Task title is required")
        return value


class TaskUpdate(BaseModel):
    """Task update schema."""
    title: str | None = Field(default=None, max_length=500)
    link: str | None = None
    difficulty: Difficulty | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Task title cannot be empty")
        return value


class TaskCompleteRequest(BaseModel):
    """Omit ``completed`` to toggle."""
    completed: bool | None = None


class TaskResponse(BaseModel):
    task: Task
    date: str


class DayResponse(BaseModel):
    date: str
    day: int | None = None
    tasks: list[Task] = []


class PreviousDaysResponse(BaseModel):
    days: list[DayBucket]


class StatsResponse(BaseModel):
    total_tasks: int
    completed_tasks: int
    completion_rate: float
    by_difficulty: dict[str, int]
    days_tracked: int


class CarryOverRequest(BaseModel):
    """Defaults to yesterday -> today."""
    from_date: str | None = None
    to_date: str | None = None

    @field_validator("from_date", "to_date")
    @classmethod
    def check_date(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_date(value):
            raise ValueError("Invalid date format. Use YYYY-MM-DD")
        return value


class CarryOverResponse(BaseModel):
    carried_count: int
    from_date: str
    to_date: str
    message: str
