"""
Shared fixtures: every test gets its own file-backed SQLite database in
tmp_path, so the store runs real SQL (upserts, FK checks) without Postgres.
"""
import pytest
from fastapi.testclient import TestClient

from cart_service.api import create_app
from cart_service.data.database import Base, create_db_engine, create_session_factory
from cart_service.data.models import ProductModel
from cart_service.repos.cart_repo import CartRepo
from cart_service.services.cart_service import CartService
from cart_service.utils.settings import Settings

CATALOG = [
    {"id": "p1", "name": "Keyboard", "price_cents": 19999},
    {"id": "p2", "name": "Mouse", "price_cents": 4950},
    {"id": "p3", "name": "Monitor", "price_cents": 89900},
]


def seed_catalog(session_factory):
    db = session_factory()
    try:
        db.add_all(ProductModel(**p) for p in CATALOG)
        db.commit()
    finally:
        db.close()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'carts.db'}",
        db_connect_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def bare_db(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def db(session_factory):
    seed_catalog(session_factory)
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def repo(db) -> CartRepo:
    return CartRepo(db)


@pytest.fixture
def service(repo) -> CartService:
    return CartService(repo)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    seed_catalog(app.state.session_factory)
    with TestClient(app) as c:
        yield c
    app.state.engine.dispose()
