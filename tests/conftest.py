import os

# must be set before shopfloor.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shopfloor.main import app
from shopfloor.db.base import Base
from shopfloor.db.session import enable_sqlite_foreign_keys, get_db

# one shared in-memory connection; TestClient runs handlers in worker threads
engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(autouse=True)
def create_test_schema():
    """
    Fresh schema per test: SQLite in memory is cheap to rebuild and avoids
    savepoint tricks that pysqlite does not support well.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(create_test_schema):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_metrics():
    app.state.metrics.clear()
    yield
