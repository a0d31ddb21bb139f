import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from powerup_economy.database import Base, create_tables, get_db, get_session_factory
from powerup_economy.main import app
from powerup_economy.models import Player
from powerup_economy.sessions import session_registry


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def make_player(session_factory):
    def _make_player(username="player", coins=0):
        db = session_factory()
        try:
            player = Player(username=username, coins=coins)
            db.add(player)
            db.commit()
            return player.id
        finally:
            db.close()
    return _make_player


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()
    session_registry.clear()
