import json
import logging
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from focusflow.core.errors import StaleTaskStore, StorageUnavailable
from focusflow.models.task_store import TaskStoreSnapshot
from focusflow.schemas.task import DayBucket, TaskStore, utcnow

logger = logging.getLogger(__name__)

# 每个用户一把锁，保证 load -> 修改 -> save 不会交错
# 结构: {user_id: threading.Lock}，没有持有者时条目自动回收
_user_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
_registry_lock = threading.Lock()


def get_user_lock(user_id: int) -> threading.Lock:
    """获取或创建用户的写锁（调用方需持有返回值直到释放）"""
    with _registry_lock:
        lock = _user_locks.get(user_id)
        if lock is None:
            lock = _user_locks[user_id] = threading.Lock()
        return lock


@contextmanager
def user_lock(user_id: int) -> Iterator[None]:
    """Serialize read-modify-write cycles on one user's task store."""
    lock = get_user_lock(user_id)
    with lock:
        yield


class TaskStoreRepository:
    """Loads and saves a user's whole task store as one JSON snapshot row."""

    def __init__(self, db: Session):
        self.db = db

    def load_user_tasks(self, user_id: int) -> TaskStore:
        """Load the store, or an empty unsaved one on first use."""
        try:
            snapshot = (
                self.db.query(TaskStoreSnapshot)
                .filter(TaskStoreSnapshot.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[TaskStore] Load failed for user {user_id}: {e}")
            raise StorageUnavailable("Could not load task store") from e

        if snapshot is None:
            return TaskStore(user_id=user_id)

        try:
            days = [DayBucket.model_validate(d) for d in json.loads(snapshot.days_json or "[]")]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.error(f"[TaskStore] Snapshot for user {user_id} is unreadable: {e}")
            raise StorageUnavailable("Task store snapshot is unreadable") from e

        return TaskStore(
            user_id=user_id,
            days=days,
            version=snapshot.version,
            updated_at=snapshot.updated_at,
        )

    def save_user_tasks(self, store: TaskStore) -> None:
        """Commit the whole store, guarded by its loaded version.

        Anything else staged on the same database session (activity counters)
        is committed in the same transaction.
        """
        days_json = json.dumps(
            [bucket.model_dump(mode="json") for bucket in store.days], ensure_ascii=False
        )

        try:
            if store.version == 0:
                self.db.add(
                    TaskStoreSnapshot(user_id=store.user_id, days_json=days_json, version=1)
                )
            else:
                updated = (
                    self.db.query(TaskStoreSnapshot)
                    .filter(
                        TaskStoreSnapshot.user_id == store.user_id,
                        TaskStoreSnapshot.version == store.version,
                    )
                    .update(
                        {
                            TaskStoreSnapshot.days_json: days_json,
                            TaskStoreSnapshot.version: store.version + 1,
                            TaskStoreSnapshot.updated_at: func.now(),
                        },
                        synchronize_session=False,
                    )
                )
                if updated == 0:
                    self.db.rollback()
                    logger.warning(
                        f"[TaskStore] Version {store.version} for user {store.user_id} is stale"
                    )
                    raise StaleTaskStore("Task store was modified concurrently")
            self.db.commit()
        except IntegrityError as e:
            # 首次保存时另一请求已插入
            self.db.rollback()
            raise StaleTaskStore("Task store was created concurrently") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[TaskStore] Save failed for user {store.user_id}: {e}")
            raise StorageUnavailable("Could not save task store") from e

        store.version += 1
        store.updated_at = utcnow()
