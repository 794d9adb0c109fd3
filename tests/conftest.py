import os
import tempfile

# Point the application at a throwaway database before it is imported
db_fd, db_path = tempfile.mkstemp(suffix=".db")
os.environ["DATABASE_URL"] = f"sqlite:///{db_path}"
os.environ["DEBUG"] = "False"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db
from app.core.catalog import seed_games
from app.core.database import Base, engine
from app.models.achievement import Achievement
from app.models.friendship import Friendship
from app.models.game import Game
from app.models.password_reset_token import PasswordResetToken
from app.models.score import Score
from app.models.user import User
from app.models.user_stats import UserStats
from app.services.user_service import user_service_obj
from main import app


@pytest.fixture(scope="session")
def test_db():
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with TestingSessionLocal() as db:
        seed_games(db)
    yield TestingSessionLocal
    engine.dispose()
    os.close(db_fd)
    os.unlink(db_path)

@pytest.fixture
def db_session(test_db):
    session = test_db()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

@pytest.fixture(autouse=True)
def db_cleanup(db_session):
    for model in [Achievement, UserStats, Score, Friendship, PasswordResetToken, User]:
        db_session.query(model).delete()
    db_session.commit()

@pytest.fixture
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def make_user(db_session):
    def _make_user(username, password="secret123"):
        return user_service_obj.register(db_session, username, f"{username}@example.com", password)
    return _make_user

@pytest.fixture
def game_named(db_session):
    def _game_named(name):
        return db_session.query(Game).filter(Game.name == name).one()
    return _game_named
