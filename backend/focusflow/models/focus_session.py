import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from focusflow.database import Base


class FocusSessionStatus(str, enum.Enum):
    """Focus session status enum."""
    RUNNING = "running"
    COMPLETED = "completed"  # 计时结束
    CANCELLED = "cancelled"  # 用户重置


class FocusSession(Base):
    """A timed sandclock interval owned by one user."""

    __tablename__ = "focus_sessions"

    id = Column(String, primary_key=True, index=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)
    status = Column(Enum(FocusSessionStatus), nullable=False, default=FocusSessionStatus.RUNNING)
    started_at = Column(DateTime, server_default=func.now(), nullable=False)
    ended_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="focus_sessions")

    def __repr__(self):
        return f"<FocusSession(id={self.id}, status={self.status})>"


# Add back_populates to User model
from focusflow.models.user import User  # noqa: E402

User.focus_sessions = relationship("FocusSession", back_populates="user")
