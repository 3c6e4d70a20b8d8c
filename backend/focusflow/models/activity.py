import json

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from focusflow.database import Base


class ActivityTracker(Base):
    """Per-user streaks, totals and the consistency heatmap."""

    __tablename__ = "activity_trackers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False)
    current_streak = Column(Integer, nullable=False, default=0)
    max_streak = Column(Integer, nullable=False, default=0)
    total_solved = Column(Integer, nullable=False, default=0)
    last_active_date = Column(Text, nullable=True)  # YYYY-MM-DD
    heatmap_json = Column(Text, nullable=False, default="{}")  # {"YYYY-MM-DD": count}
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def heatmap(self) -> dict[str, int]:
        """自动解析 heatmap_json 为字典。"""
        if not self.heatmap_json:
            return {}
        try:
            return json.loads(self.heatmap_json)
        except (json.JSONDecodeError, TypeError):
            return {}

    def to_dict(self):
        return {
            "current_streak": self.current_streak,
            "max_streak": self.max_streak,
            "total_solved": self.total_solved,
            "last_active_date": self.last_active_date,
            "heatmap": self.heatmap,
        }

    def __repr__(self):
        return (
            f"<ActivityTracker(user_id={self.user_id}, streak={self.current_streak}, "
            f"total={self.total_solved})>"
        )
