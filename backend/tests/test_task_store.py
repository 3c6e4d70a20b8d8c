"""Task Store documents and their snapshot persistence."""
import gc
import json

import pytest

from conftest import make_task, seed_store
from focusflow.core.errors import StaleTaskStore, StorageUnavailable
from focusflow.models.task_store import TaskStoreSnapshot
from focusflow.schemas.task import DayBucket, Task, TaskStatus, TaskStore
from focusflow.services.task_store_service import _user_locks, get_user_lock, user_lock


class TestTaskModel:

    def test_completed_mirrors_status(self):
        task = Task(title="Two Sum", status=TaskStatus.DONE, completed=False)
        assert task.completed is True

    def test_legacy_document_without_status(self):
        task = Task.model_validate({"title": "Binary Search", "completed": True})
        assert task.status == TaskStatus.DONE

    def test_mark_done_detaches(self):
        task = make_task("t1", session_id="s1")
        before = task.updated_at

        task.mark_done()

        assert task.completed is True
        assert task.binding.active is False
        assert task.binding.session_id is None
        assert task.updated_at >= before

    def test_ids_are_unique(self):
        assert Task(title="a").id != Task(title="a").id


class TestTaskStoreModel:

    def test_ensure_day_numbers_lazily(self):
        store = TaskStore(user_id=1)
        first = store.ensure_day("2024-05-01")
        second = store.ensure_day("2024-05-02")

        assert (first.day, second.day) == (1, 2)
        assert store.ensure_day("2024-05-01") is first
        assert len(store.days) == 2

    def test_iter_tasks_follows_day_order(self):
        store = TaskStore(
            user_id=1,
            days=[
                DayBucket(day=3, date="2024-05-03", tasks=[make_task("c")]),
                DayBucket(day=1, date="2024-05-01", tasks=[make_task("a1"), make_task("a2")]),
            ],
        )
        assert [task.id for _, task in store.iter_tasks()] == ["a1", "a2", "c"]

    def test_remove_task(self):
        store = TaskStore(
            user_id=1,
            days=[DayBucket(day=1, date="2024-05-01", tasks=[make_task("a"), make_task("b")])],
        )
        bucket, task = store.remove_task("a")

        assert task.id == "a"
        assert [t.id for t in bucket.tasks] == ["b"]
        assert store.remove_task("a") is None


class TestTaskStoreRepository:

    def test_first_load_is_empty_and_unsaved(self, repository, alice):
        store = repository.load_user_tasks(alice.id)
        assert store.days == []
        assert store.version == 0

    def test_round_trip(self, repository, alice):
        seed_store(
            repository,
            alice.id,
            [DayBucket(day=1, date="2024-05-01", tags=["dp"],
                       tasks=[make_task("t1", session_id="s1", link="https://x")])],
        )

        store = repository.load_user_tasks(alice.id)
        _, task = store.find_task("t1")
        assert store.version == 1
        assert store.days[0].tags == ["dp"]
        assert task.binding.session_id == "s1"
        assert task.link == "https://x"

    def test_one_row_per_user(self, repository, db, alice):
        store = seed_store(repository, alice.id, [DayBucket(day=1, date="2024-05-01")])
        store.ensure_day("2024-05-02")
        repository.save_user_tasks(store)

        rows = db.query(TaskStoreSnapshot).filter(TaskStoreSnapshot.user_id == alice.id).all()
        assert len(rows) == 1
        assert rows[0].version == 2
        assert len(json.loads(rows[0].days_json)) == 2

    def test_stale_version_is_rejected(self, repository, alice):
        seed_store(repository, alice.id, [DayBucket(day=1, date="2024-05-01")])
        first = repository.load_user_tasks(alice.id)
        second = repository.load_user_tasks(alice.id)

        first.ensure_day("2024-05-02")
        repository.save_user_tasks(first)

        second.ensure_day("2024-05-03")
        with pytest.raises(StaleTaskStore):
            repository.save_user_tasks(second)

        # The loser wrote nothing
        dates = [b.date for b in repository.load_user_tasks(alice.id).days]
        assert dates == ["2024-05-01", "2024-05-02"]

    def test_stale_is_retryable_storage_error(self):
        assert issubclass(StaleTaskStore, StorageUnavailable)

    def test_unreadable_snapshot(self, repository, db, alice):
        db.add(TaskStoreSnapshot(user_id=alice.id, days_json="{not json", version=1))
        db.commit()

        with pytest.raises(StorageUnavailable):
            repository.load_user_tasks(alice.id)


class TestUserLocks:

    def test_same_lock_while_held(self):
        lock = get_user_lock(424242)
        assert get_user_lock(424242) is lock

    def test_idle_locks_are_released(self):
        lock = get_user_lock(424243)
        assert 424243 in _user_locks

        del lock
        gc.collect()
        assert 424243 not in _user_locks

    def test_lock_is_held_inside_block(self):
        with user_lock(424244):
            assert get_user_lock(424244).locked()
