import logging

from focusflow.core.errors import TaskNotFound
from focusflow.schemas.task import DayBucket, Difficulty, Task, TaskStatus, utcnow
from focusflow.services.activity_service import ActivityService
from focusflow.services.task_store_service import TaskStoreRepository, user_lock

logger = logging.getLogger(__name__)


class ChecklistService:
    """Day-grouped task editing on top of the task store."""

    def __init__(self, repository: TaskStoreRepository, activity: ActivityService | None = None):
        self.repository = repository
        self.activity = activity

    def add_task(
        self,
        user_id: int,
        on_date: str,
        title: str,
        link: str = "",
        difficulty: Difficulty = Difficulty.MEDIUM,
    ) -> Task:
        """Append a task to the bucket for ``on_date``, creating it if needed."""
        title = title.strip()
        if not title:
            raise ValueError("Task title is required")

        with user_lock(user_id):
            store = self.repository.load_user_tasks(user_id)
            bucket = store.ensure_day(on_date)
            task = Task(title=title, link=link or "", difficulty=difficulty)
            bucket.tasks.append(task)
            self.repository.save_user_tasks(store)

        logger.info(f"[Checklist] user={user_id} added task {task.id} on {on_date}")
        return task

    def update_task(
        self,
        user_id: int,
        task_id: str,
        title: str | None = None,
        link: str | None = None,
        difficulty: Difficulty | None = None,
    ) -> tuple[DayBucket, Task]:
        """Edit a task found on any day."""
        if title is not None and not title.strip():
            raise ValueError("Task title cannot be empty")

        with user_lock(user_id):
            store = self.repository.load_user_tasks(user_id)
            found = store.find_task(task_id)
            if found is None:
                raise TaskNotFound(task_id)
            bucket, task = found

            if title is not None:
                task.title = title.strip()
            if link is not None:
                task.link = link
            if difficulty is not None:
                task.difficulty = difficulty
            task.updated_at = utcnow()
            self.repository.save_user_tasks(store)

        return bucket, task

    def delete_task(self, user_id: int, task_id: str) -> tuple[DayBucket, Task]:
        with user_lock(user_id):
            store = self.repository.load_user_tasks(user_id)
            removed = store.remove_task(task_id)
            if removed is None:
                raise TaskNotFound(task_id)
            self.repository.save_user_tasks(store)

        logger.info(f"[Checklist] user={user_id} deleted task {task_id}")
        return removed

    def set_completed(
        self, user_id: int, task_id: str, completed: bool | None, on_date: str
    ) -> tuple[DayBucket, Task]:
        """Set or toggle completion. Completing a task also detaches it."""
        with user_lock(user_id):
            store = self.repository.load_user_tasks(user_id)
            found = store.find_task(task_id)
            if found is None:
                raise TaskNotFound(task_id)
            bucket, task = found

            target = (not task.completed) if completed is None else completed
            newly_done = target and task.is_pending
            now = utcnow()
            if target:
                task.mark_done(now)
            else:
                task.mark_pending(now)

            if newly_done and self.activity is not None:
                self.activity.record_completion(user_id, on_date, commit=False)
            self.repository.save_user_tasks(store)

        return bucket, task

    def get_day(self, user_id: int, on_date: str) -> DayBucket | None:
        return self.repository.load_user_tasks(user_id).get_day(on_date)

    def previous_days(self, user_id: int, before: str) -> list[DayBucket]:
        """Buckets strictly before ``before``, most recent first."""
        store = self.repository.load_user_tasks(user_id)
        days = [bucket for bucket in store.days if bucket.date < before]
        days.sort(key=lambda bucket: bucket.date, reverse=True)
        return days

    def stats(self, user_id: int) -> dict:
        store = self.repository.load_user_tasks(user_id)
        total = 0
        completed = 0
        by_difficulty = {d.value: 0 for d in Difficulty}

        for _, task in store.iter_tasks():
            total += 1
            if task.status == TaskStatus.DONE:
                completed += 1
                by_difficulty[task.difficulty.value] += 1

        completion_rate = round(completed / total * 100, 2) if total else 0
        return {
            "total_tasks": total,
            "completed_tasks": completed,
            "completion_rate": completion_rate,
            "by_difficulty": by_difficulty,
            "days_tracked": len(store.days),
        }

    def carry_over(self, user_id: int, from_date: str, to_date: str) -> int:
        """Copy pending tasks of one day into another.

        Copies get fresh ids and no binding; titles already present on the
        target day are skipped.
        """
        with user_lock(user_id):
            store = self.repository.load_user_tasks(user_id)
            source = store.get_day(from_date)
            if source is None:
                return 0

            pending = [task for task in source.tasks if task.is_pending]
            if not pending:
                return 0

            target = store.ensure_day(to_date)
            existing = {task.title for task in target.tasks}
            carried = 0
            for task in pending:
                if task.title in existing:
                    continue
                target.tasks.append(
                    Task(
                        title=task.title,
                        link=task.link,
                        difficulty=task.difficulty,
                        carried_from=from_date,
                    )
                )
                existing.add(task.title)
                carried += 1

            if carried:
                self.repository.save_user_tasks(store)

        logger.info(f"[Checklist] user={user_id} carried {carried} tasks {from_date} -> {to_date}")
        return carried
