"""Error taxonomy for task and binding operations."""

# Result reason for complete_bound_task; never raised.
NO_MATCHING_TASK = "NoMatchingTask"


class FocusFlowError(Exception):
    """Base class for domain errors."""


class StorageUnavailable(FocusFlowError):
    """The task store could not be loaded or saved. Safe to retry."""


class StaleTaskStore(StorageUnavailable):
    """Another writer saved the task store after it was loaded."""


class InvariantViolation(FocusFlowError):
    """More than one task carries an active binding for the same user."""

    def __init__(self, user_id: int, task_ids: list[str]):
        self.user_id = user_id
        self.task_ids = task_ids
        super().__init__(
            f"User {user_id} has {len(task_ids)} active bindings: {', '.join(task_ids)}"
        )


class TaskNotFound(FocusFlowError):
    """No task with the given id exists in the user's store."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class BindingConflict(FocusFlowError):
    """The task is already bound to a different focus session."""

    def __init__(self, task_id: str, session_id: str):
        self.task_id = task_id
        self.session_id = session_id
        super().__init__(f"Task {task_id} is already attached to session {session_id}")


class TaskAlreadyCompleted(FocusFlowError):
    """A completed task cannot be attached to a session."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} is already completed")
