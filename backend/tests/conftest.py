import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.db import Base, build_session_factory, create_db_engine
from app.main import create_app
from app.models import company  # noqa: F401
from app.services.company_repository import SQLCompanyRepository

from tests.fixtures.company_fixtures import InMemoryCompanyRepository


@pytest.fixture
def settings():
    return Settings(_env_file=None, ENV="test", DATABASE_URL="sqlite://")


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    db = build_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sql_repo(db_session):
    return SQLCompanyRepository(db_session)


@pytest.fixture
def memory_repo():
    return InMemoryCompanyRepository()


@pytest.fixture
def app(settings):
    app = create_app(settings)
    Base.metadata.create_all(app.state.engine)
    yield app
    app.dependency_overrides.clear()
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)
