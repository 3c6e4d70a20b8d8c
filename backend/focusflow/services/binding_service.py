"""Sandclock binding between focus sessions and tasks.

Every operation loads the user's whole task store under the per-user lock,
scans it in day order and persists it at most once.
"""
import logging

from focusflow.core.errors import (
    NO_MATCHING_TASK,
    BindingConflict,
    InvariantViolation,
    TaskAlreadyCompleted,
    TaskNotFound,
)
from focusflow.schemas.sandclock import AttachResult, CompletionResult, DetachResult
from focusflow.schemas.task import Task, TaskStore, utcnow
from focusflow.services.activity_service import ActivityService
from focusflow.services.task_store_service import TaskStoreRepository, user_lock
from focusflow.utils.dates import today

logger = logging.getLogger(__name__)


class BindingResolver:
    """Attach, complete and detach sandclock bindings."""

    def __init__(self, repository: TaskStoreRepository, activity: ActivityService | None = None):
        self.repository = repository
        self.activity = activity

    def _load(self, user_id: int) -> TaskStore:
        """Load the store and report more than one active binding."""
        store = self.repository.load_user_tasks(user_id)
        active = store.active_bindings()
        if len(active) > 1:
            violation = InvariantViolation(store.user_id, [t.id for t in active])
            logger.warning(f"[Sandclock] InvariantViolation: {violation}")
        return store

    def complete_bound_task(self, session_id: str, user_id: int) -> CompletionResult:
        """Complete the pending task bound to a session that just ended."""
        with user_lock(user_id):
            store = self._load(user_id)

            task = next(
                (
                    task
                    for _, task in store.iter_tasks()
                    if task.binding.active
                    and task.binding.session_id == session_id
                    and task.is_pending
                ),
                None,
            )
            if task is None:
                return CompletionResult(
                    success=False,
                    reason=NO_MATCHING_TASK,
                    message="No active task found for this sandclock session",
                )

            task.mark_done(utcnow())
            if self.activity is not None:
                self.activity.record_completion(user_id, today(), commit=False)
            self.repository.save_user_tasks(store)

        logger.info(f"[Sandclock] Task '{task.title}' completed via session {session_id}")
        return CompletionResult(
            success=True,
            task=task,
            message="Task automatically completed from sandclock session",
        )

    def get_attached_task(self, user_id: int) -> Task | None:
        """Return the task currently bound to a session, if any."""
        active = self._load(user_id).active_bindings()
        return active[0] if active else None

    def detach_all(self, user_id: int) -> DetachResult:
        """Clear every active binding. Writes only when something changed."""
        return self._detach(user_id, session_id=None)

    def detach_session(self, user_id: int, session_id: str) -> DetachResult:
        """Clear only the bindings that point at ``session_id``."""
        return self._detach(user_id, session_id=session_id)

    def _detach(self, user_id: int, session_id: str | None) -> DetachResult:
        with user_lock(user_id):
            store = self._load(user_id)
            active = [
                task
                for task in store.active_bindings()
                if session_id is None or task.binding.session_id == session_id
            ]
            if active:
                now = utcnow()
                for task in active:
                    task.detach(now)
                self.repository.save_user_tasks(store)

        if active:
            logger.info(f"[Sandclock] Detached {len(active)} tasks for user {user_id}")
        return DetachResult(detached_count=len(active), message=f"Detached {len(active)} tasks")

    def attach(self, user_id: int, task_id: str, session_id: str) -> AttachResult:
        """Bind a pending task to a running session.

        A task already bound to another session is rejected. Any other task
        holding a binding is detached in the same write.
        """
        with user_lock(user_id):
            store = self._load(user_id)
            found = store.find_task(task_id)
            if found is None:
                raise TaskNotFound(task_id)
            _, task = found

            if not task.is_pending:
                raise TaskAlreadyCompleted(task_id)
            if task.binding.active:
                if task.binding.session_id != session_id:
                    raise BindingConflict(task_id, task.binding.session_id)
                return AttachResult(task=task, replaced_task_id=None)

            now = utcnow()
            replaced = [other for other in store.active_bindings() if other.id != task.id]
            for other in replaced:
                other.detach(now)
            task.bind(session_id, now)
            self.repository.save_user_tasks(store)

        replaced_id = replaced[0].id if replaced else None
        logger.info(
            f"[Sandclock] Task {task_id} attached to session {session_id}"
            + (f" (replaced {replaced_id})" if replaced_id else "")
        )
        return AttachResult(task=task, replaced_task_id=replaced_id)
