import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from focusflow.core.errors import NO_MATCHING_TASK, StorageUnavailable
from focusflow.models.focus_session import FocusSession, FocusSessionStatus
from focusflow.schemas.sandclock import CompletionResult, DetachResult
from focusflow.services.binding_service import BindingResolver

logger = logging.getLogger(__name__)


class FocusSessionService:
    """Starts and ends sandclock sessions and forwards their lifecycle events."""

    def __init__(self, db: Session, resolver: BindingResolver):
        self.db = db
        self.resolver = resolver

    def _commit(self, session: FocusSession) -> None:
        try:
            self.db.commit()
            self.db.refresh(session)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageUnavailable("Could not save focus session") from e

    def get(self, user_id: int, session_id: str) -> FocusSession | None:
        return (
            self.db.query(FocusSession)
            .filter(FocusSession.id == session_id, FocusSession.user_id == user_id)
            .first()
        )

    def list_sessions(self, user_id: int, limit: int = 20) -> list[FocusSession]:
        return (
            self.db.query(FocusSession)
            .filter(FocusSession.user_id == user_id)
            .order_by(FocusSession.started_at.desc())
            .limit(limit)
            .all()
        )

    def start(self, user_id: int, duration_minutes: int, task_id: str | None = None) -> FocusSession:
        """Create a running session, optionally attaching a task to it."""
        session = FocusSession(
            user_id=user_id,
            duration_minutes=duration_minutes,
            status=FocusSessionStatus.RUNNING,
        )
        self.db.add(session)
        self._commit(session)
        logger.info(f"[FocusSession] Started {session.id} ({duration_minutes} min) for user {user_id}")

        if task_id:
            try:
                self.resolver.attach(user_id, task_id, session.id)
            except Exception:
                # 绑定失败时不保留孤立的运行中会话
                session.status = FocusSessionStatus.CANCELLED
                session.ended_at = datetime.utcnow()
                self._commit(session)
                raise
        return session

    def end(self, session: FocusSession) -> CompletionResult:
        """Mark the session completed and complete its bound task.

        Ending a completed session again re-runs the completion, which is a
        no-op once the task is done, so a failed save can be retried.
        """
        if session.status == FocusSessionStatus.CANCELLED:
            return CompletionResult(
                success=False,
                reason=NO_MATCHING_TASK,
                message="Session already cancelled",
            )

        if session.status == FocusSessionStatus.RUNNING:
            session.status = FocusSessionStatus.COMPLETED
            session.ended_at = datetime.utcnow()
            self._commit(session)
        return self.resolver.complete_bound_task(session.id, session.user_id)

    def reset(self, session: FocusSession) -> DetachResult:
        """Cancel a running session and drop every binding of its owner.

        A session that already ended only releases bindings still pointing
        at it; tasks attached to other sessions are left alone.
        """
        if session.status == FocusSessionStatus.RUNNING:
            session.status = FocusSessionStatus.CANCELLED
            session.ended_at = datetime.utcnow()
            self._commit(session)
            return self.resolver.detach_all(session.user_id)
        return self.resolver.detach_session(session.user_id, session.id)
