from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from focusflow.config import get_settings

settings = get_settings()

# SQLite 需要关闭线程检查，FastAPI 会在线程池中使用连接
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session for a single request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables."""
    # Import models so they register with Base.metadata
    import focusflow.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
