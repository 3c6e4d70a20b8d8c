from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from focusflow.database import Base


class TaskStoreSnapshot(Base):
    """任务快照模型 - 每个用户只保留一行，整体读写"""

    __tablename__ = "task_store_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False)
    days_json = Column(Text, nullable=False, default="[]")  # JSON 字符串存储完整 DayBucket 列表
    version = Column(Integer, nullable=False, default=1)  # 乐观锁版本号
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<TaskStoreSnapshot(user_id={self.user_id}, version={self.version})>"
