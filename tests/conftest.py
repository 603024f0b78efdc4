"""Shared fixtures: an isolated SQLite database per test, accounts per role."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import shelfstore.models  # noqa: F401
from shelfstore.database import Base, get_db, make_engine
from shelfstore.main import app
from shelfstore.models.users import UserRole
from shelfstore.services import products as catalog
from shelfstore.services import shelves as shelf_store
from shelfstore.services import users as user_service
from shelfstore.utils.tokenJWT import token_for

PASSWORD = "password123"


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'shelfstore-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def accounts(db):
    return {
        role.value: user_service.create_user(db, f"{role.value}@example.com", PASSWORD, role)
        for role in UserRole
    }


@pytest.fixture
def headers(accounts):
    return {
        role: {"Authorization": f"Bearer {token_for(user)}"}
        for role, user in accounts.items()
    }


@pytest.fixture
def make_product(db):
    def _make(sku="SKU-BOX", name="Cardboard box", volume=5.0, weight=1.5):
        return catalog.create_product(db, sku, name, volume, weight)
    return _make


@pytest.fixture
def make_shelf(db):
    def _make(name="Shelf A1", row_index=0, col_index=0, max_volume=100.0):
        return shelf_store.create_shelf(db, name, row_index, col_index, max_volume)
    return _make
