import json
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from focusflow.core.errors import StorageUnavailable
from focusflow.models.activity import ActivityTracker
from focusflow.utils.dates import date_range, previous_day

logger = logging.getLogger(__name__)


class ActivityService:
    """Streaks, totals and the consistency heatmap."""

    def __init__(self, db: Session):
        self.db = db

    def get_tracker(self, user_id: int) -> ActivityTracker:
        """Get the user's tracker, creating an empty one on first use."""
        try:
            tracker = (
                self.db.query(ActivityTracker).filter(ActivityTracker.user_id == user_id).first()
            )
            if tracker is None:
                tracker = ActivityTracker(
                    user_id=user_id,
                    current_streak=0,
                    max_streak=0,
                    total_solved=0,
                    heatmap_json="{}",
                )
                self.db.add(tracker)
                self.db.commit()
                self.db.refresh(tracker)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageUnavailable("Could not load activity tracker") from e
        return tracker

    def record_completion(self, user_id: int, on_date: str, commit: bool = True) -> ActivityTracker:
        """Count one completed task on ``on_date``.

        With ``commit=False`` the change is only staged on the session so the
        caller can commit it together with the task store.
        """
        try:
            tracker = (
                self.db.query(ActivityTracker).filter(ActivityTracker.user_id == user_id).first()
            )
            if tracker is None:
                tracker = ActivityTracker(
                    user_id=user_id, current_streak=0, max_streak=0, total_solved=0
                )
                self.db.add(tracker)

            heatmap = tracker.heatmap
            heatmap[on_date] = heatmap.get(on_date, 0) + 1
            tracker.heatmap_json = json.dumps(heatmap, sort_keys=True)
            tracker.total_solved = (tracker.total_solved or 0) + 1

            # 同一天多次完成不影响连续天数
            if tracker.last_active_date != on_date:
                if tracker.last_active_date == previous_day(on_date):
                    tracker.current_streak = (tracker.current_streak or 0) + 1
                else:
                    tracker.current_streak = 1
                tracker.last_active_date = on_date
            tracker.max_streak = max(tracker.max_streak or 0, tracker.current_streak)

            if commit:
                self.db.commit()
                self.db.refresh(tracker)
            else:
                self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[Activity] Failed to record completion for user {user_id}: {e}")
            raise StorageUnavailable("Could not update activity tracker") from e

        logger.info(
            f"[Activity] user={user_id} date={on_date} streak={tracker.current_streak} "
            f"total={tracker.total_solved}"
        )
        return tracker

    def heatmap(self, user_id: int, end: str, days: int) -> list[dict]:
        """Zero-filled counts for the ``days`` dates ending at ``end``."""
        counts = self.get_tracker(user_id).heatmap
        return [{"date": d, "count": counts.get(d, 0)} for d in date_range(end, days)]
