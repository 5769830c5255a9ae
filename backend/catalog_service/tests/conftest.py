# backend/catalog_service/tests/conftest.py

import logging
import os

# Must be set before the catalog package creates its engine.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DB_CONNECT_MAX_RETRIES", "1")

import pytest
from sqlalchemy.exc import OperationalError

from catalog.db import Base, SessionLocal, engine, get_db
from catalog.main import app

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
logging.getLogger("fastapi").setLevel(logging.WARNING)
logging.getLogger("catalog.main").setLevel(logging.WARNING)


# --- Pytest Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def setup_database_for_tests():
    try:
        # Explicitly drop all tables first to ensure a clean slate for the session
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        logging.info("Catalog Service Tests: Created all tables for test setup.")
    except OperationalError as e:
        pytest.fail(f"Could not prepare the Catalog Service test database: {e}")

    yield


@pytest.fixture(scope="function", autouse=True)
def db_session_for_test():
    """
    Runs each test inside an outer transaction that is rolled back afterwards,
    so commits made by the application never leak between tests.
    """
    connection = engine.connect()
    transaction = connection.begin()
    db = SessionLocal(bind=connection)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    try:
        yield db
    finally:
        db.close()
        transaction.rollback()
        connection.close()
        app.dependency_overrides.pop(get_db, None)
