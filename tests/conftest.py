import os

# Configure the app for an isolated in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-notesrole"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.models import Plan
from main import app
from tests.utils import make_tenant


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def acme(db):
    """FREE tenant: (tenant, admin, member)."""
    return make_tenant(db, "acme", Plan.FREE)


@pytest.fixture
def globex(db):
    """PRO tenant: (tenant, admin, member)."""
    return make_tenant(db, "globex", Plan.PRO)
