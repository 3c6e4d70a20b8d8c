import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import focusflow.models  # noqa: F401
from focusflow.core.security import create_access_token, hash_password
from focusflow.database import Base, get_db
from focusflow.models.user import User
from focusflow.schemas.task import Binding, DayBucket, Task, TaskStatus
from focusflow.services.activity_service import ActivityService
from focusflow.services.binding_service import BindingResolver
from focusflow.services.checklist_service import ChecklistService
from focusflow.services.task_store_service import TaskStoreRepository


@pytest.fixture
def engine():
    """In-memory database shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def make_user(db, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password("secret123"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def alice(db):
    return make_user(db, "alice")


@pytest.fixture
def repository(db):
    return TaskStoreRepository(db)


@pytest.fixture
def activity(db):
    return ActivityService(db)


@pytest.fixture
def resolver(repository, activity):
    return BindingResolver(repository, activity)


@pytest.fixture
def checklist(repository, activity):
    return ChecklistService(repository, activity)


def make_task(task_id: str, session_id: str | None = None, status=TaskStatus.PENDING, **kwargs) -> Task:
    binding = Binding(active=session_id is not None, session_id=session_id)
    return Task(id=task_id, title=kwargs.pop("title", f"Task {task_id}"), status=status,
                binding=binding, **kwargs)


def seed_store(repository: TaskStoreRepository, user_id: int, buckets: list[DayBucket]):
    """Persist a store with the given buckets and return it."""
    store = repository.load_user_tasks(user_id)
    store.days = buckets
    repository.save_user_tasks(store)
    return store


@pytest.fixture
def client(session_factory):
    from focusflow.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(alice):
    return {"Authorization": f"Bearer {create_access_token(alice.id)}"}
