import pytest
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.database import Base, build_engine, build_session_factory
from catalog.main import create_app
from catalog.models.product import Product


# Test database (SQLite in-memory, one per test)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def settings():
    """Settings for an isolated in-memory database."""
    return Settings(
        DATABASE_URL=SQLALCHEMY_DATABASE_URL,
        ENV="testing",
        LOG_LEVEL="WARNING",
        SEED_SAMPLE_DATA=False,
    )


@pytest.fixture(scope="function")
def app(settings):
    return create_app(settings)


@pytest.fixture(scope="function")
def client(app):
    """Create test client; the app lifespan creates the tables."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def product_count(app):
    """Count rows in the products table of the app under test."""
    def count():
        db = app.state.session_factory()
        try:
            return db.query(Product).count()
        finally:
            db.close()
    return count


@pytest.fixture(scope="function")
def db_session(settings):
    """Create database session for direct database access in tests."""
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
