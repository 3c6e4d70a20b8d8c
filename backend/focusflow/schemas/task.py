"""Task Store documents.

A user's whole checklist is a single ``TaskStore`` document: day buckets in
``day`` order, each holding an ordered list of tasks. It is loaded, mutated
and persisted as one unit by ``TaskStoreRepository``.
"""
import enum
import uuid
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, enum.Enum):
    """Task status enum."""
    PENDING = "pending"
    DONE = "done"


class Difficulty(str, enum.Enum):
    """Task difficulty enum."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Binding(BaseModel):
    """Link between a task and a running focus session."""
    active: bool = False
    session_id: str | None = None


class Task(BaseModel):
    """One actionable item on a day."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    link: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    completed: bool = False  # 兼容旧客户端，始终与 status 一致
    binding: Binding = Field(default_factory=Binding)
    carried_from: str | None = None
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="before")
    @classmethod
    def derive_status(cls, data: Any) -> Any:
        """Older documents only carry ``completed``; derive ``status`` from it."""
        if isinstance(data, dict) and "status" not in data and "completed" in data:
            data = dict(data)
            data["status"] = TaskStatus.DONE if data["completed"] else TaskStatus.PENDING
        return data

    @model_validator(mode="after")
    def sync_completed(self) -> "Task":
        self.completed = self.status == TaskStatus.DONE
        return self

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def bind(self, session_id: str, now: datetime | None = None) -> None:
        self.binding = Binding(active=True, session_id=session_id)
        self.updated_at = now or utcnow()

    def detach(self, now: datetime | None = None) -> None:
        self.binding = Binding(active=False, session_id=None)
        self.updated_at = now or utcnow()

    def mark_done(self, now: datetime | None = None) -> None:
        """Complete the task. Completion always detaches."""
        self.status = TaskStatus.DONE
        self.completed = True
        self.detach(now)

    def mark_pending(self, now: datetime | None = None) -> None:
        self.status = TaskStatus.PENDING
        self.completed = False
        self.updated_at = now or utcnow()


class DayBucket(BaseModel):
    """Tasks grouped under one calendar day."""
    day: int
    date: str  # YYYY-MM-DD
    tasks: list[Task] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class TaskStore(BaseModel):
    """All day buckets of one user."""

    user_id: int
    days: list[DayBucket] = Field(default_factory=list)
    version: int = 0  # 0 表示尚未持久化
    updated_at: datetime | None = None

    def ordered_days(self) -> list[DayBucket]:
        return sorted(self.days, key=lambda bucket: bucket.day)

    def iter_tasks(self) -> Iterator[tuple[DayBucket, Task]]:
        """Yield ``(bucket, task)`` pairs in day order, then list order."""
        for bucket in self.ordered_days():
            for task in bucket.tasks:
                yield bucket, task

    def find_task(self, task_id: str) -> tuple[DayBucket, Task] | None:
        for bucket, task in self.iter_tasks():
            if task.id == task_id:
                return bucket, task
        return None

    def active_bindings(self) -> list[Task]:
        return [task for _, task in self.iter_tasks() if task.binding.active]

    def get_day(self, date: str) -> DayBucket | None:
        for bucket in self.days:
            if bucket.date == date:
                return bucket
        return None

    def ensure_day(self, date: str) -> DayBucket:
        """Return the bucket for ``date``, creating it lazily."""
        bucket = self.get_day(date)
        if bucket is None:
            last_day = max((b.day for b in self.days), default=0)
            bucket = DayBucket(day=last_day + 1, date=date)
            self.days.append(bucket)
        return bucket

    def remove_task(self, task_id: str) -> tuple[DayBucket, Task] | None:
        found = self.find_task(task_id)
        if found is None:
            return None
        bucket, task = found
        bucket.tasks = [t for t in bucket.tasks if t.id != task_id]
        return bucket, task
